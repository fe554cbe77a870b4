"""Tests for UI boundary message validation."""

from __future__ import annotations

import json

import pytest

from circlr.core.layout.errors import PluginErrorCode
from circlr.core.layout.models import EveryNthSkip, LayoutParameters, SpecificSkip
from circlr.core.messaging import (
    ApplyMessage,
    ErrorMessage,
    InputMessage,
    MessageValidationError,
    PreviewToggleMessage,
    SelectionChangeMessage,
    encode_message,
    parse_message,
)
from circlr.core.selection.classifier import SelectionProperties, SelectionState


class TestParseMessage:
    """Test inbound message validation."""

    def test_apply(self):
        """Messages without payload."""
        assert isinstance(parse_message({"type": "APPLY_TRANSFORMATION"}), ApplyMessage)

    def test_input_from_json(self):
        """JSON text from the UI is validated into a patch."""
        raw = json.dumps(
            {
                "type": "EMIT_INPUT_TO_PLUGIN",
                "patch": {"radius": 120, "skip_policy": {"kind": "every", "n": 2}},
            }
        )
        message = parse_message(raw)
        assert isinstance(message, InputMessage)
        assert message.patch.updates() == {"radius": 120, "skip_policy": EveryNthSkip(n=2)}

    def test_bytes(self):
        """Byte payloads are accepted."""
        message = parse_message(b'{"type": "EMIT_PREVIEW_CHANGE_TO_PLUGIN", "enabled": true}')
        assert message == PreviewToggleMessage(enabled=True)

    def test_unknown_type(self):
        """Unknown tags are rejected."""
        with pytest.raises(MessageValidationError) as exc_info:
            parse_message({"type": "DELETE_EVERYTHING"})
        assert exc_info.value.errors

    def test_missing_type(self):
        """Untagged payloads are rejected."""
        with pytest.raises(MessageValidationError):
            parse_message({"enabled": True})

    def test_invalid_field(self):
        """Fields are validated."""
        with pytest.raises(MessageValidationError):
            parse_message({"type": "EMIT_INPUT_TO_PLUGIN", "patch": {"count": "many"}})

    def test_extra_field(self):
        """Unknown fields are rejected."""
        with pytest.raises(MessageValidationError):
            parse_message({"type": "APPLY_TRANSFORMATION", "force": True})

    def test_malformed_json(self, caplog):
        """Broken JSON is a validation error, and is logged."""
        with caplog.at_level("WARNING"):
            with pytest.raises(MessageValidationError):
                parse_message("{not json")
        assert "Rejected message" in caplog.text

    def test_validation_error_is_value_error(self):
        """Callers can catch it as a ValueError."""
        with pytest.raises(ValueError):
            parse_message({})


class TestEncodeMessage:
    """Test outbound serialization."""

    def test_error_message(self):
        """Error messages carry the code; the text is looked up locally."""
        message = ErrorMessage(code=PluginErrorCode.CANT_SKIP_ALL)
        assert json.loads(encode_message(message)) == {
            "type": "UI_ERROR",
            "code": "CANT_SKIP_ALL",
        }
        assert message.text == "You can't skip all elements."

    def test_selection_change(self):
        """Selection updates carry state, properties and stored settings."""
        settings = LayoutParameters(
            count=5, radius=20, sweep_angle_deg=180, skip_policy=SpecificSkip(indices={3, 2})
        )
        message = SelectionChangeMessage(
            state=SelectionState.VALID,
            properties=SelectionProperties(width=10, height=20, rotation=0, type="RECTANGLE"),
            updateable=True,
            settings=settings,
        )
        data = json.loads(encode_message(message))

        assert data["type"] == "EMIT_SELECTION_CHANGE_TO_UI"
        assert data["state"] == "VALID"
        assert data["properties"]["type"] == "RECTANGLE"
        assert sorted(data["settings"]["skip_policy"]["indices"]) == [2, 3]
        assert parse_message(encode_message(message)) == message
