"""Tests for timeline rule extraction."""

from __future__ import annotations

import logging

import pytest

from keyline.core.curves.models import CubicBezierEasing
from keyline.core.curves.timing import NAMED_CURVES
from keyline.core.stylesheet.extractor import (
    KeyframeStop,
    extract_rules,
    get_max_rule_length,
    normalize_keyframes,
)
from keyline.core.stylesheet.models import FillMode, PlaybackDirection, RuleType


class TestExtractRules:
    """End-to-end extraction from CSS text."""

    def test_fade_scenario(self, fade_css: str) -> None:
        """One animation slot becomes one rule with two keyframes."""
        extraction = extract_rules(fade_css)

        assert len(extraction.style_rules) == 1
        rule = extraction.style_rules[0]
        assert rule.id == "fade .a 0"
        assert rule.type is RuleType.ANIMATION
        assert rule.duration == 1000.0
        assert rule.delay == 2000.0
        assert rule.curve == CubicBezierEasing(control_points=((0.42, 0.0), (1.0, 1.0)))
        assert [keyframe.progress for keyframe in rule.keyframes] == [0.0, 1.0]
        assert [keyframe.frame for keyframe in rule.keyframes] == [{"opacity": "0"}, {"opacity": "1"}]
        assert extraction.total_length_ms == 3000.0

    def test_ids_are_stable(self, multi_slot_css: str) -> None:
        first = [rule.id for rule in extract_rules(multi_slot_css).style_rules]
        second = [rule.id for rule in extract_rules(multi_slot_css).style_rules]
        assert first == second == ["slide .card 0", "pulse .card 1", ".card color 0"]

    def test_shorter_lists_clamp_to_last_item(self) -> None:
        css = ".x { animation-name: a, b, c; animation-duration: 200ms, 400ms; animation-delay: 0ms; }"
        rules = extract_rules(css).style_rules

        assert [rule.duration for rule in rules] == [200.0, 400.0, 400.0]
        assert [rule.delay for rule in rules] == [0.0, 0.0, 0.0]
        assert [rule.animation_index for rule in rules] == [0, 1, 2]

    def test_multi_slot_rule_fields(self, multi_slot_css: str) -> None:
        slide, pulse, color = extract_rules(multi_slot_css).style_rules

        assert slide.curve == NAMED_CURVES["ease-out"]
        assert slide.iteration_count == 1
        assert pulse.delay == 200.0
        assert pulse.iteration_count is None
        assert pulse.direction is PlaybackDirection.ALTERNATE
        assert pulse.easing == "ease"
        assert color.type is RuleType.TRANSITION
        assert color.animation_name == "t color"
        assert color.duration == 150.0
        assert color.fill_mode is FillMode.BOTH

    def test_keyframe_timing_function_overrides_slot_curve(self, multi_slot_css: str) -> None:
        slide = extract_rules(multi_slot_css).style_rules[0]

        assert [keyframe.progress for keyframe in slide.keyframes] == [0.0, 0.6, 1.0]
        assert [keyframe.source_index for keyframe in slide.keyframes] == [0, 1, 2]
        assert slide.keyframes[0].curve == NAMED_CURVES["ease-out"]
        assert slide.keyframes[1].curve == NAMED_CURVES["ease-in"]
        assert slide.keyframes[1].frame == {"transform": "translateX(4px)"}

    def test_missing_end_stops_are_synthesized(self, multi_slot_css: str) -> None:
        pulse = extract_rules(multi_slot_css).style_rules[1]

        assert [keyframe.progress for keyframe in pulse.keyframes] == [0.0, 0.5, 1.0]
        assert [keyframe.synthetic for keyframe in pulse.keyframes] == [True, False, True]
        assert pulse.keyframes[1].source_index == 0

    def test_total_length_counts_one_iteration_of_infinite_rules(self, multi_slot_css: str) -> None:
        assert extract_rules(multi_slot_css).total_length_ms == 1200.0

    def test_duplicate_ids_keep_first(self, caplog: pytest.LogCaptureFixture) -> None:
        css = ".a { animation: fade 1s; } .a { animation: fade 2s; }"
        with caplog.at_level(logging.WARNING):
            rules = extract_rules(css).style_rules

        assert len(rules) == 1
        assert rules[0].duration == 1000.0
        assert "Duplicate animation id" in caplog.text

    def test_none_slots_are_skipped(self) -> None:
        assert extract_rules(".a { animation: none; }").style_rules == []
        rules = extract_rules(".a { animation-name: none, spin; animation-duration: 1s; }").style_rules
        assert [rule.id for rule in rules] == ["spin .a 1"]

    def test_duplicate_selectors_record_their_rule_set(self) -> None:
        rules = extract_rules(".a { animation: spin 1s } .a { transition: color 1s }").style_rules
        assert [(rule.id, rule.selector_occurrence) for rule in rules] == [
            ("spin .a 0", 0),
            (".a color 0", 1),
        ]

    def test_non_positive_duration_gets_minimum_width(self) -> None:
        rules = extract_rules(".a { animation: f -1s; } .b { animation-name: g; }").style_rules
        assert [rule.duration for rule in rules] == [1.0, 1.0]

    def test_transition_zero_duration_is_kept(self) -> None:
        rule = extract_rules(".a { transition: opacity; }").style_rules[0]
        assert rule.duration == 0.0

    def test_later_keyframes_block_wins(self) -> None:
        css = ".a { animation: f 1s; } @keyframes f { from { opacity: 0 } } @keyframes f { to { opacity: 1 } }"
        keyframes = extract_rules(css).style_rules[0].keyframes

        assert [keyframe.synthetic for keyframe in keyframes] == [True, False]
        assert keyframes[1].frame == {"opacity": "1"}

    def test_out_of_range_keyframes_keep_their_ordinal(self) -> None:
        css = ".a { animation: f 1s; } @keyframes f { 150% { opacity: 1 } 50% { opacity: .5 } }"
        keyframes = extract_rules(css).style_rules[0].keyframes

        assert [keyframe.progress for keyframe in keyframes] == [0.0, 0.5, 1.0]
        assert keyframes[1].source_index == 1

    def test_malformed_easing_falls_back(self) -> None:
        rule = extract_rules(".a { animation: f 1s cubic-bezier(0.1, 0.2); }").style_rules[0]
        assert rule.curve == NAMED_CURVES["ease"]

    def test_iteration_counts(self) -> None:
        css = ".a { animation-name: a, b, c; animation-iteration-count: 3, 0, infinite; }"
        rules = extract_rules(css).style_rules
        assert [rule.iteration_count for rule in rules] == [3, 1, None]

    def test_colors_follow_output_position(self) -> None:
        rules = extract_rules(".a { animation: a 1s, b 1s; }").style_rules
        assert rules[0].color != rules[1].color
        assert all(rule.color.startswith("hsl(") for rule in rules)


class TestHelpers:
    """Tests for keyframe normalization and timeline length."""

    def test_normalize_empty_stops(self) -> None:
        curve = NAMED_CURVES["linear"]
        keyframes = normalize_keyframes([], curve)

        assert [keyframe.progress for keyframe in keyframes] == [0.0, 1.0]
        assert all(keyframe.curve == curve for keyframe in keyframes)
        assert all(keyframe.source_index is None for keyframe in keyframes)

    def test_normalize_keeps_complete_stops(self) -> None:
        stops = [
            KeyframeStop(0.0, None, {"opacity": "0"}, 0),
            KeyframeStop(1.0, None, {"opacity": "1"}, 1),
        ]
        keyframes = normalize_keyframes(stops, NAMED_CURVES["ease"])
        assert [keyframe.synthetic for keyframe in keyframes] == [False, False]

    def test_max_rule_length_has_floor(self) -> None:
        assert get_max_rule_length([]) == 5.0
