"""Timeline models produced by rule extraction.

- TimelineKeyframe: One @keyframes stop with its easing and property snapshot
- StyleRule: One selector's animation or transition slot
- RuleExtraction: The ordered rule list plus the timeline bound
- ViewState: Extracted rules plus UI selection
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from keyline.core.curves.models import TimelineEasing
from keyline.core.curves.timing import serialize_easing


class RuleType(str, Enum):
    """Where a timeline rule comes from."""

    ANIMATION = "animation"
    TRANSITION = "transition"


class PlaybackDirection(str, Enum):
    NORMAL = "normal"
    REVERSE = "reverse"
    ALTERNATE = "alternate"
    ALTERNATE_REVERSE = "alternate-reverse"


class FillMode(str, Enum):
    NONE = "none"
    FORWARDS = "forwards"
    BACKWARDS = "backwards"
    BOTH = "both"


class TimelineKeyframe(BaseModel):
    """One keyframe stop of an animation.

    Attributes:
        progress: Position within one iteration, in [0, 1]
        curve: Easing from this stop to the next
        frame: camelCased property name -> CSS value
        source_index: Ordinal of the keyframe selector in the source
            ``@keyframes`` block, None for synthesized stops
        synthetic: True for the 0/1 stops added during normalization
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    progress: float = Field(..., ge=0.0, le=1.0)
    curve: TimelineEasing
    frame: dict[str, str] = Field(default_factory=dict)
    source_index: int | None = None
    synthetic: bool = False


class StyleRule(BaseModel):
    """One (selector, animation-or-transition slot) pair on the timeline.

    ``id`` is derived from the animation or property name, the selector and
    the slot index, so recomputing rules from unchanged source yields the
    same ids.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    selector: str
    selector_occurrence: int = Field(
        default=0, ge=0, description="Index among top-level rules with the same selector"
    )
    animation_name: str
    animation_index: int = Field(..., ge=0)
    type: RuleType
    delay: float
    duration: float = Field(..., ge=0.0)
    iteration_count: int | None = Field(default=1, description="None means infinite")
    direction: PlaybackDirection = PlaybackDirection.NORMAL
    fill_mode: FillMode = FillMode.NONE
    curve: TimelineEasing
    easing: str = Field(..., description="Timing-function text the curve was parsed from")
    keyframes: list[TimelineKeyframe] = Field(default_factory=list)
    color: str = ""

    @property
    def end_time_ms(self) -> float:
        """Timeline position where the last iteration ends."""
        return self.delay + self.duration * (self.iteration_count or 1)

    def host_keyframes(self) -> list[dict[str, Any]]:
        """Keyframes in the shape a Web Animations host accepts.

        Each frame carries its properties plus ``offset`` and ``easing``.
        """
        return [
            {**keyframe.frame, "offset": keyframe.progress, "easing": serialize_easing(keyframe.curve)}
            for keyframe in self.keyframes
        ]


class RuleExtraction(BaseModel):
    """Result of one extraction pass."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    style_rules: list[StyleRule] = Field(default_factory=list)
    total_length_ms: float = 5.0

    def get(self, rule_id: str) -> StyleRule | None:
        return next((rule for rule in self.style_rules if rule.id == rule_id), None)


class ViewState(BaseModel):
    """Rules shown on the timeline and the ids the user has selected.

    ``selected_rule_ids`` is UI state and is not derived from the source.
    """

    style_rules: list[StyleRule] = Field(default_factory=list)
    selected_rule_ids: set[str] = Field(default_factory=set)
