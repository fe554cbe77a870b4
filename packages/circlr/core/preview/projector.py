"""Preview projector - maps the radial layout into a square UI viewport.

The preview is drawn relative to a fixed viewport, not a live scene, so the
anchor re-basing steps of the engine are skipped. The angle, shape and
radius corrections come straight from the engine module so the preview cannot
drift away from what gets materialized.
"""

from __future__ import annotations

import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from circlr.core.layout.engine import (
    BASE_DEG,
    initial_rotation_deg,
    instance_angle_deg,
    radius_correction,
    shape_correction,
    validate_parameters,
)
from circlr.core.layout.models import BoundingBox, LayoutParameters
from circlr.core.layout.skip import resolve_skipped
from circlr.core.utils.math import normalize_deg

logger = logging.getLogger(__name__)

DEFAULT_UI_WIDTH = 280.0
DEFAULT_PREVIEW_PADDING = 60.0


class PreviewItem(BaseModel):
    """One instance as drawn in the preview.

    ``x``/``y`` locate the unrotated item box inside the preview container;
    the item is then rotated by ``rotation_deg`` (clockwise on screen) about
    its own center.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    x: float
    y: float
    width: float
    height: float
    angle_deg: float = Field(description="Angle of the instance on the circle")
    rotation_deg: float = Field(description="Visual self-rotation, clockwise")
    badge_rotation_deg: float = Field(description="Counter-rotation keeping the number upright")
    skipped: bool = False

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def is_anchor(self) -> bool:
        return self.index == 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


class RadiusHelper(BaseModel):
    """Radius indicator drawn from the circle center while editing the radius."""

    model_config = ConfigDict(frozen=True)

    length: float
    label: str


class PreviewFrame(BaseModel):
    """Everything the UI needs to draw one preview."""

    model_config = ConfigDict(frozen=True)

    ui_width: float
    scale_factor: float
    container_width: float
    container_height: float
    container_x: float
    container_y: float
    circumference: float
    radius_helper: RadiusHelper
    items: list[PreviewItem]

    @property
    def visible_items(self) -> list[PreviewItem]:
        return [item for item in self.items if not item.skipped]


class PreviewProjector:
    """Projects layout parameters into a ``ui_width`` x ``ui_width`` viewport.

    Args:
        ui_width: Side of the square preview viewport.
        padding: Space kept free around the circle.

    Example:
        >>> projector = PreviewProjector()
        >>> frame = projector.project(
        ...     BoundingBox(width=100, height=100),
        ...     0.0,
        ...     LayoutParameters(count=8, radius=50),
        ... )
        >>> len(frame.items)
        8
    """

    def __init__(
        self,
        ui_width: float = DEFAULT_UI_WIDTH,
        padding: float = DEFAULT_PREVIEW_PADDING,
    ) -> None:
        if ui_width - padding <= 0:
            raise ValueError(f"Preview padding {padding} leaves no room in width {ui_width}")
        self.ui_width = float(ui_width)
        self.padding = float(padding)

    @property
    def available(self) -> float:
        return self.ui_width - self.padding

    def scale_factor(self, box: BoundingBox, radius: float) -> float:
        """Uniform factor that fits the circle plus the item into the viewport.

        Returns 1.0 when there is nothing to scale (zero-size item and radius).
        """
        extent = 2 * box.longest_side + 2 * radius
        if extent <= 0:
            return 1.0
        return extent / self.available

    def project(
        self,
        box: BoundingBox,
        rotation_deg: float,
        params: LayoutParameters,
    ) -> PreviewFrame:
        """Compute the preview for the current selection and parameters.

        Args:
            box: Dimensions of the selected element.
            rotation_deg: Host rotation of the selected element.
            params: Layout parameters.

        Raises:
            InvalidParameterError: if the parameters are outside the engine's
                preconditions.
        """
        validate_parameters(params)

        factor = self.scale_factor(box, params.radius)
        scaled = BoundingBox(width=box.width / factor, height=box.height / factor)
        radius = params.radius / factor
        diameter = radius * 2

        half_w = scaled.half_width
        half_h = scaled.half_height
        rc = radius_correction(scaled, rotation_deg)
        init_deg = initial_rotation_deg(rotation_deg)
        skipped = resolve_skipped(params)

        items: list[PreviewItem] = []
        for i in range(params.count):
            deg = instance_angle_deg(i, params.count, params.sweep_angle_deg)
            rad = math.radians(deg)
            sc = shape_correction(scaled, deg)

            x = (radius + half_w - rc) * math.cos(rad) + radius + sc
            y = (radius + half_h - rc) * math.sin(rad) + radius

            if params.align_radially:
                rotation = normalize_deg(deg + init_deg - BASE_DEG)
            else:
                rotation = normalize_deg(init_deg)

            items.append(
                PreviewItem(
                    index=i,
                    x=x,
                    y=y,
                    width=scaled.width,
                    height=scaled.height,
                    angle_deg=deg,
                    rotation_deg=rotation,
                    badge_rotation_deg=normalize_deg(-rotation),
                    skipped=(i + 1) in skipped,
                )
            )

        container_width = diameter + scaled.width
        container_height = diameter + scaled.height

        logger.debug(f"Projected {len(items)} preview items (scale factor {factor:.4f})")

        return PreviewFrame(
            ui_width=self.ui_width,
            scale_factor=factor,
            container_width=container_width,
            container_height=container_height,
            container_x=(self.ui_width - container_width) / 2,
            container_y=(self.ui_width - container_height) / 2,
            circumference=diameter + scaled.longest_side,
            radius_helper=RadiusHelper(length=radius, label=f"{params.radius:g}"),
            items=items,
        )
