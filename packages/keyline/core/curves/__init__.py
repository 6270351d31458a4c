"""Timing-function models and parsing."""

from keyline.core.curves.models import (
    ControlPoints,
    CubicBezierEasing,
    JumpTerm,
    StepsEasing,
    TimelineEasing,
)
from keyline.core.curves.timing import (
    DEFAULT_EASING,
    NAMED_BEZIER_CURVES,
    NAMED_CURVES,
    NAMED_STEP_CURVES,
    bezier_control_points_text,
    format_ms,
    format_number,
    parse_duration_ms,
    parse_easing,
    serialize_easing,
    split_comma_list,
)

__all__ = [
    "ControlPoints",
    "CubicBezierEasing",
    "DEFAULT_EASING",
    "JumpTerm",
    "NAMED_BEZIER_CURVES",
    "NAMED_CURVES",
    "NAMED_STEP_CURVES",
    "StepsEasing",
    "TimelineEasing",
    "bezier_control_points_text",
    "format_ms",
    "format_number",
    "parse_duration_ms",
    "parse_easing",
    "serialize_easing",
    "split_comma_list",
]
