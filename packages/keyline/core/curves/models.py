"""Easing models for timeline curves.

This module defines the timing-function primitives shared by the extractor,
the text-patch engine and the playback layer:
- JumpTerm: Step position keyword of a ``steps()`` timing function
- CubicBezierEasing: A curve defined by two control points in the unit square
- StepsEasing: A discrete step function
- TimelineEasing: Discriminated union of the two

All models are immutable and validate on construction.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

ControlPoint = tuple[float, float]
ControlPoints = tuple[ControlPoint, ControlPoint]


class JumpTerm(str, Enum):
    """Where the jumps of a ``steps()`` function happen."""

    START = "jump-start"
    END = "jump-end"
    NONE = "jump-none"
    BOTH = "jump-both"


class CubicBezierEasing(BaseModel):
    """Easing defined by the two inner control points of a cubic Bezier.

    The outer points are fixed at (0, 0) and (1, 1), as in CSS.

    Attributes:
        kind: Discriminator field, always "curve".
        control_points: ((x1, y1), (x2, y2)) in unit-square coordinates.

    Example:
        >>> easing = CubicBezierEasing(control_points=((0.42, 0.0), (1.0, 1.0)))
        >>> easing.kind
        'curve'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["curve"] = "curve"
    control_points: ControlPoints

    @property
    def flat(self) -> tuple[float, float, float, float]:
        """Control points as ``(x1, y1, x2, y2)``."""
        (x1, y1), (x2, y2) = self.control_points
        return (x1, y1, x2, y2)


class StepsEasing(BaseModel):
    """Easing defined by a step count and a jump term.

    Attributes:
        kind: Discriminator field, always "steps".
        count: Number of steps (>= 1).
        jump_term: Where the jumps happen (default: jump-end).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["steps"] = "steps"
    count: int = Field(..., ge=1)
    jump_term: JumpTerm = JumpTerm.END


# Union type for any timing function.
# Use this when accepting either easing shape.
TimelineEasing = Annotated[CubicBezierEasing | StepsEasing, Field(discriminator="kind")]
