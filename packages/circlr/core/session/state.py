"""Session state machine.

``Idle`` → ``Previewing`` when an in-scene preview is materialized,
``Idle``/``Previewing`` → ``Committing`` while a pattern is being generated
for good, then back to ``Idle``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from circlr.core.layout.models import LayoutParameters


class Idle(BaseModel):
    """Nothing generated by the session lives in the scene."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"


class Previewing(BaseModel):
    """A preview pattern is in the scene and must be dissolved before the next one.

    ``committed`` holds the parameters of a pattern generated earlier from the
    same selection, which the preview replaced. Leaving the preview without
    applying regenerates that pattern.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["previewing"] = "previewing"
    anchor_ref: str = Field(description="Id of the originally selected node")
    group_ref: str = Field(description="Id of the preview group")
    template_ref: str = Field(description="Id of the component the instances come from")
    committed: LayoutParameters | None = Field(
        default=None, description="Parameters of the pattern the preview replaced"
    )


class Committing(BaseModel):
    """A pattern is being generated for good."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["committing"] = "committing"


SessionState = Annotated[Idle | Previewing | Committing, Field(discriminator="kind")]
