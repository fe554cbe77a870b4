"""Messages exchanged between the UI and the plugin core.

The set of messages is closed: every payload carries a ``type`` tag and is
validated into exactly one of the models below.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from circlr.core.layout.errors import ERROR_MESSAGES, PluginErrorCode
from circlr.core.layout.models import LayoutParameters, LayoutPatch
from circlr.core.selection.classifier import SelectionProperties, SelectionState


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SelectionChangeMessage(_Message):
    """Plugin → UI: the selection changed."""

    type: Literal["EMIT_SELECTION_CHANGE_TO_UI"] = "EMIT_SELECTION_CHANGE_TO_UI"
    state: SelectionState
    properties: SelectionProperties = Field(default_factory=SelectionProperties)
    updateable: bool = False
    adaptive_radius: bool = True
    settings: LayoutParameters | None = Field(
        default=None, description="Parameters stored on a previously generated pattern"
    )


class InputMessage(_Message):
    """UI → plugin: the user edited one or more parameters."""

    type: Literal["EMIT_INPUT_TO_PLUGIN"] = "EMIT_INPUT_TO_PLUGIN"
    patch: LayoutPatch


class ApplyMessage(_Message):
    """UI → plugin: commit the pattern."""

    type: Literal["APPLY_TRANSFORMATION"] = "APPLY_TRANSFORMATION"


class PreviewToggleMessage(_Message):
    """UI → plugin: live in-scene preview switched on or off."""

    type: Literal["EMIT_PREVIEW_CHANGE_TO_PLUGIN"] = "EMIT_PREVIEW_CHANGE_TO_PLUGIN"
    enabled: bool


class ErrorMessage(_Message):
    """Plugin → UI: a user-facing error."""

    type: Literal["UI_ERROR"] = "UI_ERROR"
    code: PluginErrorCode

    @property
    def text(self) -> str:
        return ERROR_MESSAGES[self.code]


Message = Annotated[
    SelectionChangeMessage | InputMessage | ApplyMessage | PreviewToggleMessage | ErrorMessage,
    Field(discriminator="type"),
]
