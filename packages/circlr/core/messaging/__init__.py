"""UI message contract."""

from circlr.core.layout.errors import ERROR_MESSAGES, PluginErrorCode
from circlr.core.messaging.boundary import MessageValidationError, encode_message, parse_message
from circlr.core.messaging.models import (
    ApplyMessage,
    ErrorMessage,
    InputMessage,
    Message,
    PreviewToggleMessage,
    SelectionChangeMessage,
)

__all__ = [
    "ERROR_MESSAGES",
    "ApplyMessage",
    "ErrorMessage",
    "InputMessage",
    "Message",
    "MessageValidationError",
    "PluginErrorCode",
    "PreviewToggleMessage",
    "SelectionChangeMessage",
    "encode_message",
    "parse_message",
]
