"""A small CSS object model built on tinycss2.

The extractor consumes rules the way a browser exposes them through its CSS
object model: style rules with resolved longhand values (shorthands expanded,
later declarations winning) and keyframes rules with their keyframe children.
This module produces that shape from raw CSS text.

Only the top-level rule list is modeled; rules nested in conditional at-rules
(@media, @supports) are not part of it, as in a browser's ``cssRules``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
import logging

import tinycss2
from tinycss2.ast import Declaration, Node

from keyline.core.curves.timing import split_comma_list
from keyline.core.syntax.locator import normalize_selector
from keyline.core.utils.formatting import collapse_whitespace

logger = logging.getLogger(__name__)

ANIMATION_INITIAL_VALUES: dict[str, str] = {
    "animation-name": "none",
    "animation-duration": "0s",
    "animation-timing-function": "ease",
    "animation-delay": "0s",
    "animation-iteration-count": "1",
    "animation-direction": "normal",
    "animation-fill-mode": "none",
    "animation-play-state": "running",
}

TRANSITION_INITIAL_VALUES: dict[str, str] = {
    "transition-property": "all",
    "transition-duration": "0s",
    "transition-timing-function": "ease",
    "transition-delay": "0s",
}

TIMING_KEYWORDS = frozenset(
    {"ease", "linear", "ease-in", "ease-out", "ease-in-out", "step-start", "step-end"}
)
TIMING_FUNCTIONS = frozenset({"cubic-bezier", "steps", "linear"})
DIRECTION_KEYWORDS = frozenset({"normal", "reverse", "alternate", "alternate-reverse"})
FILL_MODE_KEYWORDS = frozenset({"none", "forwards", "backwards", "both"})
PLAY_STATE_KEYWORDS = frozenset({"running", "paused"})
TIME_UNITS = frozenset({"s", "ms"})

KEYFRAMES_AT_RULES = frozenset({"keyframes", "-webkit-keyframes", "-moz-keyframes"})

_SKIPPED_TOKEN_TYPES = frozenset({"whitespace", "comment"})


def _significant(tokens: Iterable[Node]) -> list[Node]:
    return [token for token in tokens if token.type not in _SKIPPED_TOKEN_TYPES]


def _split_on_commas(tokens: Sequence[Node]) -> list[list[Node]]:
    items: list[list[Node]] = [[]]
    for token in tokens:
        if token.type == "literal" and token.value == ",":
            items.append([])
        else:
            items[-1].append(token)
    return items


def _serialize(tokens: Iterable[Node]) -> str:
    return collapse_whitespace(tinycss2.serialize(_significant_or_space(tokens)))


def _significant_or_space(tokens: Iterable[Node]) -> list[Node]:
    # Comments are dropped; whitespace is kept so tokens stay separated.
    return [token for token in tokens if token.type != "comment"]


def _is_time(token: Node) -> bool:
    return token.type == "dimension" and token.lower_unit in TIME_UNITS


def _is_timing_function(token: Node) -> bool:
    if token.type == "function":
        return token.lower_name in TIMING_FUNCTIONS
    return token.type == "ident" and token.lower_value in TIMING_KEYWORDS


def _expand_animation(value: Sequence[Node]) -> dict[str, str]:
    """Expand an ``animation`` shorthand value into its longhands."""
    slots: list[dict[str, str]] = []
    for item in _split_on_commas(value):
        parts: dict[str, str] = {}
        for token in _significant(item):
            if _is_time(token):
                key = "animation-duration" if "animation-duration" not in parts else "animation-delay"
                parts.setdefault(key, tinycss2.serialize([token]))
            elif _is_timing_function(token) and "animation-timing-function" not in parts:
                parts["animation-timing-function"] = _serialize([token])
            elif token.type == "number" and "animation-iteration-count" not in parts:
                parts["animation-iteration-count"] = token.representation
            elif token.type == "ident":
                keyword = token.lower_value
                if keyword == "infinite" and "animation-iteration-count" not in parts:
                    parts["animation-iteration-count"] = "infinite"
                elif keyword in DIRECTION_KEYWORDS and "animation-direction" not in parts:
                    parts["animation-direction"] = keyword
                elif keyword in FILL_MODE_KEYWORDS and "animation-fill-mode" not in parts:
                    parts["animation-fill-mode"] = keyword
                elif keyword in PLAY_STATE_KEYWORDS and "animation-play-state" not in parts:
                    parts["animation-play-state"] = keyword
                elif "animation-name" not in parts:
                    parts["animation-name"] = token.value
            elif token.type == "string" and "animation-name" not in parts:
                parts["animation-name"] = token.value
        slots.append(parts)
    return _join_slots(slots, ANIMATION_INITIAL_VALUES)


def _expand_transition(value: Sequence[Node]) -> dict[str, str]:
    """Expand a ``transition`` shorthand value into its longhands."""
    slots: list[dict[str, str]] = []
    for item in _split_on_commas(value):
        parts: dict[str, str] = {}
        for token in _significant(item):
            if _is_time(token):
                key = (
                    "transition-duration"
                    if "transition-duration" not in parts
                    else "transition-delay"
                )
                parts.setdefault(key, tinycss2.serialize([token]))
            elif _is_timing_function(token) and "transition-timing-function" not in parts:
                parts["transition-timing-function"] = _serialize([token])
            elif token.type == "ident" and "transition-property" not in parts:
                parts["transition-property"] = token.lower_value
        slots.append(parts)
    return _join_slots(slots, TRANSITION_INITIAL_VALUES)


def _join_slots(slots: list[dict[str, str]], initial_values: dict[str, str]) -> dict[str, str]:
    return {
        longhand: ", ".join(slot.get(longhand, initial) for slot in slots)
        for longhand, initial in initial_values.items()
    }


def _normalize_list_value(value: Sequence[Node]) -> str:
    return ", ".join(split_comma_list(_serialize(value)))


@dataclass
class CssStyleDeclaration:
    """Resolved declarations of one rule, keyed by lowercase property name.

    Shorthands (``animation``, ``transition``) are stored as their longhands.
    Missing properties read as an empty string, like ``CSSStyleDeclaration``.
    """

    values: dict[str, str] = field(default_factory=dict)
    important: set[str] = field(default_factory=set)

    @classmethod
    def from_declarations(cls, declarations: Iterable[Declaration]) -> CssStyleDeclaration:
        style = cls()
        for declaration in declarations:
            style.apply(declaration)
        return style

    def apply(self, declaration: Declaration) -> None:
        """Apply one declaration on top of the current values."""
        name = declaration.lower_name
        if name == "animation":
            updates = _expand_animation(declaration.value)
        elif name == "transition":
            updates = _expand_transition(declaration.value)
        else:
            updates = {name: _normalize_list_value(declaration.value)}

        for longhand, text in updates.items():
            if longhand in self.important and not declaration.important:
                continue
            self.values[longhand] = text
            if declaration.important:
                self.important.add(longhand)

    def get_property_value(self, name: str) -> str:
        return self.values.get(name.lower(), "")

    @property
    def animation_name(self) -> str:
        return self.get_property_value("animation-name")

    @property
    def animation_duration(self) -> str:
        return self.get_property_value("animation-duration")

    @property
    def animation_delay(self) -> str:
        return self.get_property_value("animation-delay")

    @property
    def animation_direction(self) -> str:
        return self.get_property_value("animation-direction")

    @property
    def animation_fill_mode(self) -> str:
        return self.get_property_value("animation-fill-mode")

    @property
    def animation_timing_function(self) -> str:
        return self.get_property_value("animation-timing-function")

    @property
    def animation_iteration_count(self) -> str:
        return self.get_property_value("animation-iteration-count")

    @property
    def transition_property(self) -> str:
        return self.get_property_value("transition-property")

    @property
    def transition_duration(self) -> str:
        return self.get_property_value("transition-duration")

    @property
    def transition_delay(self) -> str:
        return self.get_property_value("transition-delay")

    @property
    def transition_timing_function(self) -> str:
        return self.get_property_value("transition-timing-function")


@dataclass
class CssStyleRule:
    """A selector with its resolved declarations.

    ``occurrence`` counts earlier top-level rules with the same selector, so
    duplicate selectors with different bodies can be told apart.
    """

    selector_text: str
    style: CssStyleDeclaration
    occurrence: int = 0


@dataclass
class CssKeyframeRule:
    """One keyframe of a ``@keyframes`` block.

    Attributes:
        key_text: Normalized selector list, e.g. ``"0%, 50%"`` or ``"from"``
        style: Resolved declarations
        declarations: Raw ``(property, value)`` pairs in source order
    """

    key_text: str
    style: CssStyleDeclaration
    declarations: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class CssKeyframesRule:
    """A ``@keyframes`` block."""

    name: str
    css_rules: list[CssKeyframeRule] = field(default_factory=list)


CssRule = CssStyleRule | CssKeyframesRule
CssRuleList = list[CssRule]


def _declarations(content: Sequence[Node] | None) -> list[Declaration]:
    if not content:
        return []
    nodes = tinycss2.parse_declaration_list(content, skip_comments=True, skip_whitespace=True)
    parsed: list[Declaration] = []
    for node in nodes:
        if node.type == "declaration":
            parsed.append(node)
        elif node.type == "error":
            logger.debug(f"Skipping malformed declaration: {node.message}")
    return parsed


def _selector_text(prelude: Sequence[Node]) -> str:
    return ", ".join(
        selector for selector in (_serialize(item) for item in _split_on_commas(prelude)) if selector
    )


def _key_text(prelude: Sequence[Node]) -> str:
    keys: list[str] = []
    for item in _split_on_commas(prelude):
        tokens = _significant(item)
        if len(tokens) != 1:
            continue
        token = tokens[0]
        if token.type == "percentage":
            keys.append(f"{token.representation}%")
        elif token.type == "ident" and token.lower_value in ("from", "to"):
            keys.append(token.lower_value)
    return ", ".join(keys)


def _keyframes_name(prelude: Sequence[Node]) -> str | None:
    tokens = _significant(prelude)
    if len(tokens) != 1:
        return None
    token = tokens[0]
    if token.type in ("ident", "string"):
        return token.value
    return None


def _parse_keyframes(rule: Node) -> CssKeyframesRule | None:
    name = _keyframes_name(rule.prelude)
    if name is None or rule.content is None:
        logger.debug("Skipping @keyframes rule without a usable name or body")
        return None

    keyframes = CssKeyframesRule(name=name)
    for child in tinycss2.parse_rule_list(rule.content, skip_comments=True, skip_whitespace=True):
        if child.type != "qualified-rule":
            continue
        key_text = _key_text(child.prelude)
        if not key_text:
            continue
        declarations = _declarations(child.content)
        keyframes.css_rules.append(
            CssKeyframeRule(
                key_text=key_text,
                style=CssStyleDeclaration.from_declarations(declarations),
                declarations=[(d.lower_name, _serialize(d.value)) for d in declarations],
            )
        )
    return keyframes


def parse_stylesheet(css_text: str) -> CssRuleList:
    """Parse CSS text into a top-level rule list.

    Malformed rules and declarations are skipped; this function does not
    raise on bad CSS.

    Args:
        css_text: Stylesheet source

    Returns:
        Style rules and keyframes rules in source order

    Example:
        >>> rules = parse_stylesheet(".a { animation: fade 1s 2s ease-in; }")
        >>> rules[0].style.animation_delay
        '2s'
    """
    rules: CssRuleList = []
    occurrences: dict[str, int] = {}
    for node in tinycss2.parse_stylesheet(css_text, skip_comments=True, skip_whitespace=True):
        if node.type == "qualified-rule":
            selector = _selector_text(node.prelude)
            if not selector:
                continue
            style = CssStyleDeclaration.from_declarations(_declarations(node.content))
            key = normalize_selector(selector)
            occurrence = occurrences.get(key, 0)
            occurrences[key] = occurrence + 1
            rules.append(CssStyleRule(selector_text=selector, style=style, occurrence=occurrence))
        elif node.type == "at-rule" and node.lower_at_keyword in KEYFRAMES_AT_RULES:
            keyframes = _parse_keyframes(node)
            if keyframes is not None:
                rules.append(keyframes)
        elif node.type == "error":
            logger.debug(f"Skipping malformed rule: {node.message}")
    return rules
