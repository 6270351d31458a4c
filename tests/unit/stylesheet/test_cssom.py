"""Tests for the tinycss2-backed CSS object model."""

from __future__ import annotations

from keyline.core.stylesheet.cssom import CssKeyframesRule, CssStyleRule, parse_stylesheet


def _style(css: str):
    rules = parse_stylesheet(css)
    assert isinstance(rules[0], CssStyleRule)
    return rules[0].style


class TestShorthandExpansion:
    """Tests for animation/transition shorthand expansion."""

    def test_animation_shorthand(self) -> None:
        style = _style(".a { animation: fade 1s 2s ease-in; }")
        assert style.animation_name == "fade"
        assert style.animation_duration == "1s"
        assert style.animation_delay == "2s"
        assert style.animation_timing_function == "ease-in"
        assert style.animation_iteration_count == "1"
        assert style.animation_direction == "normal"
        assert style.animation_fill_mode == "none"

    def test_missing_slot_values_use_initial_values(self) -> None:
        """Every slot is filled, so lists stay aligned."""
        style = _style(".a { animation: slide 400ms ease-out, pulse 1s 200ms infinite alternate; }")
        assert style.animation_name == "slide, pulse"
        assert style.animation_duration == "400ms, 1s"
        assert style.animation_delay == "0s, 200ms"
        assert style.animation_timing_function == "ease-out, ease"
        assert style.animation_iteration_count == "1, infinite"
        assert style.animation_direction == "normal, alternate"

    def test_timing_function_call_is_kept_whole(self) -> None:
        style = _style(".a { animation: f 1s cubic-bezier(0.1, 0.7, 1, 0.1) both; }")
        assert style.animation_timing_function == "cubic-bezier(0.1, 0.7, 1, 0.1)"
        assert style.animation_fill_mode == "both"

    def test_transition_shorthand(self) -> None:
        style = _style(".a { transition: opacity 200ms ease-in 50ms, transform 1s; }")
        assert style.transition_property == "opacity, transform"
        assert style.transition_duration == "200ms, 1s"
        assert style.transition_delay == "50ms, 0s"
        assert style.transition_timing_function == "ease-in, ease"

    def test_transition_without_property_means_all(self) -> None:
        assert _style(".a { transition: 1s; }").transition_property == "all"


class TestCascade:
    """Tests for declaration order and !important."""

    def test_later_longhand_overrides_shorthand(self) -> None:
        style = _style(".a { animation: fade 1s; animation-delay: 500ms; }")
        assert style.animation_delay == "500ms"
        assert style.animation_duration == "1s"

    def test_later_shorthand_resets_longhands(self) -> None:
        style = _style(".a { animation-delay: 500ms; animation: fade 1s; }")
        assert style.animation_delay == "0s"

    def test_important_wins_over_later_declaration(self) -> None:
        style = _style(".a { animation: fade 1s !important; animation-duration: 3s; }")
        assert style.animation_duration == "1s"

    def test_longhand_lists_are_normalized(self) -> None:
        style = _style(".a { animation-name: a,b ,  c; }")
        assert style.animation_name == "a, b, c"

    def test_missing_property_reads_empty(self) -> None:
        style = _style(".a { color: red; }")
        assert style.get_property_value("animation-name") == ""
        assert style.get_property_value("COLOR") == "red"


class TestParseStylesheet:
    """Tests for parse_stylesheet."""

    def test_selector_text_is_normalized(self) -> None:
        rules = parse_stylesheet(".a ,\n  .b   > .c { color: red }")
        assert rules[0].selector_text == ".a, .b > .c"

    def test_duplicate_selectors_count_occurrences(self) -> None:
        rules = parse_stylesheet(".a { color: red } .b { color: red } .a{color:blue} .a > .b {} .a>.b {}")
        assert [(rule.selector_text, rule.occurrence) for rule in rules] == [
            (".a", 0),
            (".b", 0),
            (".a", 1),
            (".a > .b", 0),
            (".a>.b", 1),
        ]

    def test_keyframes_rule(self) -> None:
        rules = parse_stylesheet("@keyframes fade { from { opacity: 0 } 50%, 75% { opacity: .5 } }")
        keyframes = rules[0]
        assert isinstance(keyframes, CssKeyframesRule)
        assert keyframes.name == "fade"
        assert [rule.key_text for rule in keyframes.css_rules] == ["from", "50%, 75%"]
        assert keyframes.css_rules[1].declarations == [("opacity", ".5")]

    def test_vendor_keyframes(self) -> None:
        rules = parse_stylesheet("@-webkit-keyframes spin { to { transform: rotate(1turn) } }")
        assert isinstance(rules[0], CssKeyframesRule)
        assert rules[0].css_rules[0].declarations == [("transform", "rotate(1turn)")]

    def test_conditional_rules_are_not_modeled(self) -> None:
        """Only the top-level rule list is returned."""
        rules = parse_stylesheet("@media (min-width: 1px) { .a { animation: f 1s } } .b { color: red }")
        assert [rule.selector_text for rule in rules] == [".b"]

    def test_malformed_css_does_not_raise(self) -> None:
        rules = parse_stylesheet("}}} .a { animation: ; : ; } @keyframes { } .b { animation")
        assert all(isinstance(rule, (CssStyleRule, CssKeyframesRule)) for rule in rules)
