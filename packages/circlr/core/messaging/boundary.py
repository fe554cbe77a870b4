"""Validation of messages crossing the UI boundary."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from circlr.core.messaging.models import Message

logger = logging.getLogger(__name__)

_MESSAGE_ADAPTER: TypeAdapter[Message] = TypeAdapter(Message)


class MessageValidationError(ValueError):
    """Raised when a payload is not one of the known messages."""

    def __init__(self, detail: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(f"Invalid message: {detail}")
        self.errors = errors or []


def parse_message(raw: str | bytes | Mapping[str, Any]) -> Message:
    """Validate a raw payload (JSON text or mapping) into a message.

    Raises:
        MessageValidationError: for malformed JSON, unknown ``type`` tags or
            invalid fields.

    Example:
        >>> parse_message({"type": "APPLY_TRANSFORMATION"})
        ApplyMessage(type='APPLY_TRANSFORMATION')
    """
    try:
        if isinstance(raw, (str, bytes)):
            return _MESSAGE_ADAPTER.validate_json(raw)
        return _MESSAGE_ADAPTER.validate_python(dict(raw))
    except ValidationError as e:
        logger.warning(f"Rejected message: {e.error_count()} validation error(s)")
        raise MessageValidationError(str(e), e.errors(include_url=False)) from e


def encode_message(message: Message) -> str:
    """Serialize a message to JSON text."""
    return _MESSAGE_ADAPTER.dump_json(message).decode("utf-8")
