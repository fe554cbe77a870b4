"""Data models for radial layout computation.

All geometry uses the host's top-left-origin, y-down coordinate system.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from circlr.core.utils.math import normalize_deg


class BoundingBox(BaseModel):
    """Dimensions of the element being replicated.

    Zero is permitted for line/point-like shapes; squaring those up is the
    componentizing collaborator's job, not the engine's.
    """

    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0.0, description="Element width")
    height: float = Field(ge=0.0, description="Element height")

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_height(self) -> float:
        return self.height / 2

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    @property
    def is_hairline(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def longest_side(self) -> float:
        return max(self.width, self.height)


class Pose(BaseModel):
    """Position (top-left corner) and self-rotation of an element.

    ``rotation_deg`` follows the host convention and is normalized to
    (-180, 180] on construction.
    """

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    rotation_deg: float = 0.0

    @field_validator("rotation_deg")
    @classmethod
    def _normalize_rotation(cls, v: float) -> float:
        return normalize_deg(v)


class NoSkip(BaseModel):
    """Every instance stays visible."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["none"] = "none"


class SpecificSkip(BaseModel):
    """Skip an explicit set of 1-based instance numbers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["specific"] = "specific"
    indices: frozenset[int] = Field(default_factory=frozenset)


class EveryNthSkip(BaseModel):
    """Skip every instance whose 1-based number is a multiple of ``n``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["every"] = "every"
    n: int = Field(ge=1)


SkipPolicy = Annotated[
    NoSkip | SpecificSkip | EveryNthSkip,
    Field(discriminator="kind"),
]


class LayoutParameters(BaseModel):
    """Full configuration driving one placement computation.

    Only types are checked here. Range preconditions (count >= 2,
    radius >= 0, sweep in (0, 360]) belong to the engine, which reports the
    offending field through ``InvalidParameterError``.

    When ``sweep_angle_deg`` is omitted it defaults to the full-circle sweep
    for ``count``, i.e. ``360 - 360 / count``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(description="Number of instances, anchor included")
    radius: float = Field(description="Circle radius")
    sweep_angle_deg: float = Field(description="Angle between first and last instance")
    align_radially: bool = Field(default=True, description="Rotate instances along the radius")
    skip_policy: SkipPolicy = Field(default_factory=NoSkip)

    @model_validator(mode="before")
    @classmethod
    def _default_sweep(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("sweep_angle_deg") is None:
            count = data.get("count")
            data = dict(data)
            if isinstance(count, int) and count >= 2:
                data["sweep_angle_deg"] = 360.0 - 360.0 / count
            else:
                data["sweep_angle_deg"] = 360.0
        return data

    def with_patch(self, patch: LayoutPatch) -> LayoutParameters:
        """Return a copy with the fields set on ``patch`` replaced."""
        data = self.model_dump()
        data.update(patch.updates())
        return LayoutParameters.model_validate(data)


class LayoutPatch(BaseModel):
    """Incremental update sent by the UI; unset fields are left untouched."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int | None = None
    radius: float | None = None
    sweep_angle_deg: float | None = None
    align_radially: bool | None = None
    skip_policy: SkipPolicy | None = None

    def updates(self) -> dict[str, Any]:
        """Fields explicitly carried by this patch."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }

    def is_empty(self) -> bool:
        return not self.updates()

    def merged(self, newer: LayoutPatch) -> LayoutPatch:
        """Combine with a newer patch; the newer value wins per field."""
        data = self.updates()
        data.update(newer.updates())
        return LayoutPatch(**data)


class Affine(BaseModel):
    """2D affine transform ``[[a, b, tx], [c, d, ty]]`` (Mat2x3)."""

    model_config = ConfigDict(frozen=True)

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    @classmethod
    def rotation(cls, rad: float, tx: float = 0.0, ty: float = 0.0) -> Affine:
        """Rotation by ``rad`` (visually clockwise in y-down space) plus translation."""
        cos = math.cos(rad)
        sin = math.sin(rad)
        return cls(a=cos, b=-sin, c=sin, d=cos, tx=tx, ty=ty)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Affine:
        m = np.asarray(arr, dtype=float)
        if m.shape not in ((2, 3), (3, 3)):
            raise ValueError(f"Expected a 2x3 or 3x3 matrix, got shape {m.shape}")
        return cls(
            a=float(m[0, 0]),
            b=float(m[0, 1]),
            tx=float(m[0, 2]),
            c=float(m[1, 0]),
            d=float(m[1, 1]),
            ty=float(m[1, 2]),
        )

    def as_array(self) -> np.ndarray:
        return np.array([[self.a, self.b, self.tx], [self.c, self.d, self.ty]], dtype=float)

    def as_rows(self) -> list[list[float]]:
        """Nested-list form expected by host transform setters."""
        return [[self.a, self.b, self.tx], [self.c, self.d, self.ty]]

    def _homogeneous(self) -> np.ndarray:
        return np.vstack([self.as_array(), [0.0, 0.0, 1.0]])

    def compose(self, other: Affine) -> Affine:
        """Return ``self ∘ other`` (``other`` is applied first)."""
        return Affine.from_array(self._homogeneous() @ other._homogeneous())

    def translated(self, dx: float, dy: float) -> Affine:
        return self.model_copy(update={"tx": self.tx + dx, "ty": self.ty + dy})

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.b * y + self.tx, self.c * x + self.d * y + self.ty)

    @property
    def angle_rad(self) -> float:
        """Visual rotation angle of the linear part."""
        return math.atan2(self.c, self.a)

    @property
    def rotation_deg(self) -> float:
        """Rotation in host convention (negated visual angle), in (-180, 180]."""
        return normalize_deg(-math.degrees(self.angle_rad))


class InstancePlacement(BaseModel):
    """Placement of one instance on the circle.

    ``index`` is 0-based; skip policies and UI badges use ``number``
    (1-based).
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    affine: Affine

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def x(self) -> float:
        return self.affine.tx

    @property
    def y(self) -> float:
        return self.affine.ty

    @property
    def rotation_deg(self) -> float:
        return self.affine.rotation_deg

    def center(self, box: BoundingBox) -> tuple[float, float]:
        """Visual center of ``box`` under this placement."""
        return self.affine.apply(box.half_width, box.half_height)
