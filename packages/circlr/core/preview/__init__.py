"""On-screen preview of the radial pattern."""

from circlr.core.preview.projector import (
    DEFAULT_PREVIEW_PADDING,
    DEFAULT_UI_WIDTH,
    PreviewFrame,
    PreviewItem,
    PreviewProjector,
    RadiusHelper,
)

__all__ = [
    "DEFAULT_PREVIEW_PADDING",
    "DEFAULT_UI_WIDTH",
    "PreviewFrame",
    "PreviewItem",
    "PreviewProjector",
    "RadiusHelper",
]
