"""Parsing and serialization of CSS timing functions and time values.

Everything in here is total: malformed input (the user is usually mid-way
through typing it) degrades to a default instead of raising.
"""

from __future__ import annotations

from decimal import Decimal
import logging
import math
import re

from keyline.core.curves.models import (
    ControlPoints,
    CubicBezierEasing,
    JumpTerm,
    StepsEasing,
    TimelineEasing,
)

logger = logging.getLogger(__name__)

NAMED_BEZIER_CURVES: dict[str, CubicBezierEasing] = {
    "ease": CubicBezierEasing(control_points=((0.25, 0.1), (0.25, 1.0))),
    "linear": CubicBezierEasing(control_points=((0.25, 0.25), (0.75, 0.75))),
    "ease-in": CubicBezierEasing(control_points=((0.42, 0.0), (1.0, 1.0))),
    "ease-out": CubicBezierEasing(control_points=((0.0, 0.0), (0.58, 1.0))),
    "ease-in-out": CubicBezierEasing(control_points=((0.42, 0.0), (0.58, 1.0))),
}

NAMED_STEP_CURVES: dict[str, StepsEasing] = {
    "step-start": StepsEasing(count=1, jump_term=JumpTerm.START),
    "step-end": StepsEasing(count=1, jump_term=JumpTerm.END),
}

NAMED_CURVES: dict[str, TimelineEasing] = {**NAMED_BEZIER_CURVES, **NAMED_STEP_CURVES}

DEFAULT_EASING: TimelineEasing = NAMED_CURVES["ease"]

_JUMP_TERMS: dict[str, JumpTerm] = {
    "jump-start": JumpTerm.START,
    "jump-end": JumpTerm.END,
    "jump-none": JumpTerm.NONE,
    "jump-both": JumpTerm.BOTH,
    "start": JumpTerm.START,
    "end": JumpTerm.END,
}

_STEPS_RE = re.compile(r"^steps\(\s*(\d+)\s*(?:,\s*([a-zA-Z-]*)\s*)?\)$")
_CUBIC_BEZIER_RE = re.compile(r"^cubic-bezier\(([^()]*)\)$")
_DURATION_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_OPENERS = {"(": ")", "[": "]"}
_CLOSERS = {")", "]"}


def parse_easing(timing_function: str | None) -> TimelineEasing:
    """Parse a CSS timing-function string into an easing value.

    Args:
        timing_function: Timing function text, e.g. ``ease-in``,
            ``cubic-bezier(.1,.7,1,.1)`` or ``steps(4, jump-start)``.

    Returns:
        The parsed easing, or the ``ease`` curve when the text is missing or
        cannot be parsed.

    Example:
        >>> parse_easing("steps(3)")
        StepsEasing(kind='steps', count=3, jump_term=<JumpTerm.END: 'jump-end'>)
    """
    if timing_function is None:
        return DEFAULT_EASING
    text = timing_function.strip()

    named = NAMED_CURVES.get(text)
    if named is not None:
        return named

    steps = _STEPS_RE.match(text)
    if steps:
        count = int(steps.group(1))
        if count >= 1:
            jump_term = _JUMP_TERMS.get((steps.group(2) or "").lower(), JumpTerm.END)
            return StepsEasing(count=count, jump_term=jump_term)
        return DEFAULT_EASING

    bezier = _CUBIC_BEZIER_RE.match(text)
    if bezier:
        values = _parse_numbers(bezier.group(1).split(","))
        if values is not None and len(values) == 4:
            return CubicBezierEasing(control_points=((values[0], values[1]), (values[2], values[3])))
        logger.debug(f"Could not parse curve {text!r}")

    return DEFAULT_EASING


def _parse_numbers(parts: list[str]) -> list[float] | None:
    values: list[float] = []
    for part in parts:
        try:
            value = float(part.strip())
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        values.append(value)
    return values


def format_number(value: float, decimals: int | None = 4) -> str:
    """Format a number the way CSS authors write it (``1`` not ``1.0``).

    Args:
        value: Number to format
        decimals: Decimals to round to; None keeps full float precision

    Returns:
        Compact text without exponent notation
    """
    number = float(value) if decimals is None else round(float(value), decimals)
    if number == 0:
        return "0"
    if number.is_integer():
        return str(int(number))
    # shortest text that reads back as the same float, never in exponent form
    return format(Decimal(repr(number)), "f").rstrip("0").rstrip(".")


def bezier_control_points_text(control_points: ControlPoints) -> str:
    """Serialize control points as a ``cubic-bezier()`` call, without rounding."""
    (x1, y1), (x2, y2) = control_points
    return f"cubic-bezier({','.join(format_number(v, decimals=None) for v in (x1, y1, x2, y2))})"


def serialize_easing(easing: TimelineEasing) -> str:
    """Serialize an easing value back to CSS timing-function text.

    Args:
        easing: Easing to serialize

    Returns:
        ``cubic-bezier(x1,y1,x2,y2)`` or ``steps(n, jump-term)``
    """
    match easing:
        case CubicBezierEasing(control_points=control_points):
            return bezier_control_points_text(control_points)
        case StepsEasing(count=count, jump_term=jump_term):
            return f"steps({count}, {jump_term.value})"
    raise TypeError(f"Unsupported easing type: {type(easing).__name__}")


def split_comma_list(text: str | None) -> list[str]:
    """Split a comma-separated CSS value list, ignoring nested commas.

    Commas inside parentheses or brackets (``cubic-bezier(.1,.2,.3,.4)``)
    do not split. Items are trimmed and empty items dropped.

    Args:
        text: Comma-separated value list

    Returns:
        List of items

    Example:
        >>> split_comma_list("ease, cubic-bezier(0.1,0.2,0.3,0.4), linear")
        ['ease', 'cubic-bezier(0.1,0.2,0.3,0.4)', 'linear']
    """
    if not text:
        return []

    items: list[str] = []
    current: list[str] = []
    depth = 0

    for char in text:
        if char == "," and depth == 0:
            items.append("".join(current))
            current = []
            continue
        current.append(char)
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and depth > 0:
            depth -= 1

    items.append("".join(current))
    return [item.strip() for item in items if item.strip()]


def parse_duration_ms(duration: str | None) -> float:
    """Parse a CSS time value into milliseconds.

    Values ending in ``ms`` are taken as-is, everything else as seconds.

    Args:
        duration: Time text such as ``250ms`` or ``1.5s``

    Returns:
        Milliseconds, or 0 when no leading number is present
    """
    if not duration:
        return 0.0
    match = _DURATION_RE.match(duration)
    if match is None:
        return 0.0
    value = float(match.group(1))
    if not math.isfinite(value):
        return 0.0
    return value * (1 if "ms" in duration.lower() else 1000)


def format_ms(value: float) -> str:
    """Format milliseconds as CSS time text, e.g. ``format_ms(250.0) == "250ms"``."""
    return f"{format_number(value)}ms"
