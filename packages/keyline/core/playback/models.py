"""Playback state and animation timing models."""

from __future__ import annotations

from enum import Enum
import math

from pydantic import BaseModel, ConfigDict, Field

from keyline.core.stylesheet.models import StyleRule


class PlayStatus(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"


class PlayState(BaseModel):
    """Snapshot of the session's play state.

    Attributes:
        status: Whether animations are advancing
        offset_time: Timeline position in ms when the state was entered
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: PlayStatus = PlayStatus.RUNNING
    offset_time: float = 0.0


class AnimationTiming(BaseModel):
    """Timing applied to a bound host animation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    duration: float = Field(..., ge=0.0)
    delay: float = 0.0
    fill: str = "none"
    iterations: float = Field(default=1.0, ge=0.0, description="math.inf repeats forever")
    direction: str = "normal"

    @classmethod
    def from_rule(cls, rule: StyleRule) -> AnimationTiming:
        return cls(
            duration=rule.duration,
            delay=rule.delay,
            fill=rule.fill_mode.value,
            iterations=math.inf if rule.iteration_count is None else float(rule.iteration_count),
            direction=rule.direction.value,
        )


class AnimationOptions(AnimationTiming):
    """Timing plus the binding identity, passed when creating an animation."""

    id: str
    pseudo_element: str | None = None
