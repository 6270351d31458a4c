"""Rule extraction: CSS rule list -> ordered timeline rules.

Each style rule that declares an animation or a transition produces one
StyleRule per comma-separated slot. Every sub-property list is split on its
own; a slot beyond the end of a shorter list reads that list's last item.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import re

from keyline.core.config.models import PaletteConfig
from keyline.core.curves.models import TimelineEasing
from keyline.core.curves.timing import (
    parse_duration_ms,
    parse_easing,
    split_comma_list,
)
from keyline.core.stylesheet.colors import color_for
from keyline.core.stylesheet.cssom import (
    CssKeyframesRule,
    CssRule,
    CssStyleRule,
    parse_stylesheet,
)
from keyline.core.stylesheet.models import (
    FillMode,
    PlaybackDirection,
    RuleExtraction,
    RuleType,
    StyleRule,
    TimelineKeyframe,
)
from keyline.core.utils.formatting import camel_case
from keyline.core.utils.logging import log_performance

logger = logging.getLogger(__name__)

MIN_TIMELINE_LENGTH_MS = 5.0

_ITERATIONS_RE = re.compile(r"^\s*\+?(\d+)")


@dataclass(frozen=True)
class KeyframeStop:
    """A keyframe stop before the slot's easing is merged in."""

    progress: float
    curve: TimelineEasing | None
    frame: dict[str, str]
    source_index: int


def _parse_progress(key: str) -> float | None:
    key = key.strip().lower()
    if key == "from":
        return 0.0
    if key == "to":
        return 1.0
    if not key.endswith("%"):
        return None
    try:
        return float(key[:-1]) / 100
    except ValueError:
        return None


def _collect_keyframes(rules: Sequence[CssRule]) -> dict[str, list[KeyframeStop]]:
    """Parse every @keyframes rule into stops sorted by progress.

    A later @keyframes block with the same name replaces an earlier one.
    """
    animations: dict[str, list[KeyframeStop]] = {}
    for rule in rules:
        if not isinstance(rule, CssKeyframesRule):
            continue

        stops: list[KeyframeStop] = []
        ordinal = 0
        for keyframe in rule.css_rules:
            frame = {
                camel_case(name): value
                for name, value in keyframe.declarations
                if name != "animation-timing-function" and value
            }
            timing_function = keyframe.style.animation_timing_function
            curve = parse_easing(timing_function) if timing_function else None

            for key in split_comma_list(keyframe.key_text):
                progress = _parse_progress(key)
                if progress is None or not 0.0 <= progress <= 1.0:
                    logger.debug(f"Dropping keyframe selector {key!r} in @keyframes {rule.name}")
                else:
                    stops.append(KeyframeStop(progress, curve, frame, ordinal))
                ordinal += 1

        if rule.name in animations:
            logger.debug(f"@keyframes {rule.name} redefined; using the later block")
        animations[rule.name] = sorted(stops, key=lambda stop: stop.progress)
    return animations


def _slot(values: list[str], index: int, default: str) -> str:
    if not values:
        return default
    return values[min(index, len(values) - 1)]


def _parse_iterations(text: str) -> int | None:
    if text.strip().lower() == "infinite":
        return None
    match = _ITERATIONS_RE.match(text)
    if match is None:
        return 1
    return int(match.group(1)) or 1


def _parse_direction(text: str) -> PlaybackDirection:
    try:
        return PlaybackDirection(text.strip().lower())
    except ValueError:
        return PlaybackDirection.NORMAL


def _parse_fill_mode(text: str) -> FillMode:
    try:
        return FillMode(text.strip().lower())
    except ValueError:
        return FillMode.NONE


def normalize_keyframes(stops: Sequence[KeyframeStop], curve: TimelineEasing) -> list[TimelineKeyframe]:
    """Merge the slot curve into the stops and add missing 0/1 stops.

    Stops with their own timing function keep it; the rest take ``curve``.
    """
    keyframes = [
        TimelineKeyframe(
            progress=stop.progress,
            curve=stop.curve or curve,
            frame=dict(stop.frame),
            source_index=stop.source_index,
        )
        for stop in stops
    ]
    if not keyframes or keyframes[0].progress > 0.0:
        keyframes.insert(0, TimelineKeyframe(progress=0.0, curve=curve, synthetic=True))
    if keyframes[-1].progress < 1.0:
        keyframes.append(TimelineKeyframe(progress=1.0, curve=curve, synthetic=True))
    return keyframes


def _animation_rules(
    rule: CssStyleRule, keyframes: dict[str, list[KeyframeStop]]
) -> list[dict]:
    style = rule.style
    names = split_comma_list(style.animation_name)
    durations = split_comma_list(style.animation_duration)
    delays = split_comma_list(style.animation_delay)
    directions = split_comma_list(style.animation_direction)
    fill_modes = split_comma_list(style.animation_fill_mode)
    curves = split_comma_list(style.animation_timing_function)
    iterations = split_comma_list(style.animation_iteration_count)

    fields = []
    for j, name in enumerate(names):
        if name.lower() == "none":
            continue
        easing = _slot(curves, j, "ease")
        curve = parse_easing(easing)
        fields.append(
            {
                "id": f"{name} {rule.selector_text} {j}",
                "selector": rule.selector_text,
                "selector_occurrence": rule.occurrence,
                "animation_name": name,
                "animation_index": j,
                "type": RuleType.ANIMATION,
                # a zero duration would collapse the bar on the timeline
                "duration": max(0.0, parse_duration_ms(_slot(durations, j, "0s"))) or 1.0,
                "delay": parse_duration_ms(_slot(delays, j, "0s")),
                "iteration_count": _parse_iterations(_slot(iterations, j, "1")),
                "direction": _parse_direction(_slot(directions, j, "normal")),
                "fill_mode": _parse_fill_mode(_slot(fill_modes, j, "none")),
                "curve": curve,
                "easing": easing,
                "keyframes": normalize_keyframes(keyframes.get(name, []), curve),
            }
        )
    return fields


def _transition_rules(rule: CssStyleRule) -> list[dict]:
    style = rule.style
    properties = split_comma_list(style.transition_property)
    durations = split_comma_list(style.transition_duration)
    delays = split_comma_list(style.transition_delay)
    curves = split_comma_list(style.transition_timing_function)

    fields = []
    for j, property_name in enumerate(properties):
        if property_name.lower() == "none":
            continue
        easing = _slot(curves, j, "ease")
        curve = parse_easing(easing)
        fields.append(
            {
                "id": f"{rule.selector_text} {property_name} {j}",
                "selector": rule.selector_text,
                "selector_occurrence": rule.occurrence,
                "animation_name": f"t {property_name}",
                "animation_index": j,
                "type": RuleType.TRANSITION,
                "duration": max(0.0, parse_duration_ms(_slot(durations, j, "0s"))),
                "delay": parse_duration_ms(_slot(delays, j, "0s")),
                "iteration_count": 1,
                "direction": PlaybackDirection.NORMAL,
                "fill_mode": FillMode.BOTH,
                "curve": curve,
                "easing": easing,
                "keyframes": normalize_keyframes([], curve),
            }
        )
    return fields


@log_performance
def compute_rules(rules: Sequence[CssRule], palette: PaletteConfig | None = None) -> RuleExtraction:
    """Build the ordered timeline rule list from a CSS rule list.

    Args:
        rules: Top-level rules as produced by ``parse_stylesheet``
        palette: Palette used for rule colors (defaults to PaletteConfig())

    Returns:
        Extracted rules in source order plus the timeline length

    Example:
        >>> css = ".a{animation:fade 1s 2s ease-in;}"
        >>> extraction = compute_rules(parse_stylesheet(css))
        >>> extraction.style_rules[0].delay, extraction.total_length_ms
        (2000.0, 3000.0)
    """
    palette = palette or PaletteConfig()
    keyframes = _collect_keyframes(rules)

    style_rules: list[StyleRule] = []
    seen_ids: set[str] = set()

    for rule in rules:
        if not isinstance(rule, CssStyleRule):
            continue
        candidates: list[dict] = []
        if rule.style.animation_name:
            candidates.extend(_animation_rules(rule, keyframes))
        if rule.style.transition_property:
            candidates.extend(_transition_rules(rule))

        for fields in candidates:
            if fields["id"] in seen_ids:
                logger.warning(f"Duplicate animation id {fields['id']!r}; keeping the first")
                continue
            seen_ids.add(fields["id"])
            style_rules.append(StyleRule(**fields, color=color_for(len(style_rules), palette)))

    return RuleExtraction(style_rules=style_rules, total_length_ms=get_max_rule_length(style_rules))


def extract_rules(css_text: str, palette: PaletteConfig | None = None) -> RuleExtraction:
    """Parse CSS text and extract its timeline rules."""
    return compute_rules(parse_stylesheet(css_text), palette)


def get_max_rule_length(rules: Sequence[StyleRule]) -> float:
    """Timeline length needed to show every rule, at least 5ms."""
    return max([MIN_TIMELINE_LENGTH_MS, *(rule.end_time_ms for rule in rules)])
