"""Error taxonomy for radial layout computation."""

from __future__ import annotations

from enum import Enum
from typing import Any


class PluginErrorCode(str, Enum):
    """User-facing error codes sent to the UI as transient notifications."""

    CANT_SKIP_FIRST_INDEX = "CANT_SKIP_FIRST_INDEX"
    CANT_SKIP_ALL = "CANT_SKIP_ALL"


ERROR_MESSAGES: dict[PluginErrorCode, str] = {
    PluginErrorCode.CANT_SKIP_FIRST_INDEX: "You can't skip the first instance.",
    PluginErrorCode.CANT_SKIP_ALL: "You can't skip all elements.",
}


class InvalidParameterError(ValueError):
    """Layout parameter outside the engine's preconditions.

    Programmer/caller error: input validation at the UI boundary should
    reject these values before they reach the engine.

    Attributes:
        field: Name of the offending LayoutParameters field.
        value: The rejected value.
    """

    def __init__(self, field: str, value: Any = None, reason: str | None = None) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Invalid layout parameter {field!r}"
        if value is not None:
            message += f" (got {value!r})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SkipPolicyViolation(Exception):
    """Skip policy would hide the anchor or leave too few instances visible."""

    def __init__(self, code: PluginErrorCode) -> None:
        self.code = code
        super().__init__(ERROR_MESSAGES[code])


class UnsupportedSelectionError(Exception):
    """Selection cannot be turned into a radial pattern."""

    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(f"Unsupported selection: {getattr(state, 'value', state)}")
