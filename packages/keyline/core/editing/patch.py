"""Text-patch engine: timeline edits -> minimal source edits.

Each function locates the single value token a timeline edit affects and
returns a transaction that replaces (or inserts) only that token. Text
outside the returned range is never touched, so manual formatting and
comments survive continuous drag edits.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import logging
import re

from keyline.core.curves.timing import NAMED_CURVES
from keyline.core.editing.models import Selection, TextChange, TransactionSpec
from keyline.core.syntax.locator import (
    DeclarationMatch,
    KeyframesMatch,
    declarations,
    find_keyframe_block,
)
from keyline.core.syntax.protocols import SyntaxNode, TextSource

logger = logging.getLogger(__name__)

EASING_FUNCTIONS = frozenset({"cubic-bezier", "steps", "linear"})

_TIME_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?m?s$", re.IGNORECASE)
_IGNORED_VALUE_NODES = frozenset({"Comment", "Important"})


class TimelineProperty(str, Enum):
    """Sub-property of an animation or transition slot the timeline edits."""

    DELAY = "delay"
    DURATION = "duration"
    EASING = "easing"

    def longhand(self, prefix: str) -> str:
        """Longhand property name, e.g. ``animation-timing-function``."""
        suffix = "timing-function" if self is TimelineProperty.EASING else self.value
        return f"{prefix}-{suffix}"

    @property
    def initial_value(self) -> str:
        return "ease" if self is TimelineProperty.EASING else "0s"


def is_time_value(node: SyntaxNode, source: TextSource) -> bool:
    """True for a number with an ``s`` or ``ms`` unit."""
    return node.name == "NumberLiteral" and bool(_TIME_RE.match(source.slice_doc(node.start, node.end)))


def is_easing_value(node: SyntaxNode, source: TextSource) -> bool:
    """True for a timing-function call or a named curve."""
    if node.name == "CallExpression":
        callee = node.get_child("Callee")
        return callee is not None and source.slice_doc(callee.start, callee.end).lower() in EASING_FUNCTIONS
    if node.name == "ValueName":
        return source.slice_doc(node.start, node.end).lower() in NAMED_CURVES
    return False


def split_slots(values: Sequence[SyntaxNode]) -> list[list[SyntaxNode]]:
    """Split declaration value nodes into comma-separated slots.

    Comments and ``!important`` are left out of the slots.
    """
    slots: list[list[SyntaxNode]] = [[]]
    for node in values:
        if node.name == ",":
            slots.append([])
        elif node.name not in _IGNORED_VALUE_NODES:
            slots[-1].append(node)
    return slots


def replace_node(node: SyntaxNode, text: str) -> TransactionSpec:
    """Replace one node's range, selecting the new text."""
    return replace_range(node.start, node.end, text)


def replace_range(start: int, end: int, text: str) -> TransactionSpec:
    return TransactionSpec(
        changes=[TextChange(start=start, end=end, insert=text)],
        selection=Selection(anchor=start, head=start + len(text)),
    )


def insert_at(position: int, text: str, select_from: int = 0) -> TransactionSpec:
    """Insert text, selecting it from ``select_from`` characters in."""
    return TransactionSpec(
        changes=[TextChange(start=position, insert=text)],
        selection=Selection(anchor=position + select_from, head=position + len(text)),
    )


def _patch_longhand(declaration: DeclarationMatch, animation_index: int, value: str) -> TransactionSpec | None:
    slots = split_slots(declaration.values)
    # a slot past the end of the list reads the last item, so edit that one
    slot = slots[min(animation_index, len(slots) - 1)]
    if not slot:
        return None
    return replace_range(slot[0].start, slot[-1].end, value)


def _patch_shorthand(
    declaration: DeclarationMatch,
    source: TextSource,
    prop: TimelineProperty,
    animation_index: int,
    value: str,
) -> TransactionSpec | None:
    slots = split_slots(declaration.values)
    if animation_index >= len(slots) or not slots[animation_index]:
        return None
    slot = slots[animation_index]
    times = [node for node in slot if is_time_value(node, source)]

    if prop is TimelineProperty.DURATION:
        if times:
            return replace_node(times[0], value)
        return insert_at(slot[-1].end, f" {value}", select_from=1)

    if prop is TimelineProperty.DELAY:
        if len(times) >= 2:
            return replace_node(times[1], value)
        if times:
            return insert_at(times[0].end, f" {value}", select_from=1)
        return insert_at(slot[-1].end, f" 0s {value}", select_from=4)

    easing = next((node for node in slot if is_easing_value(node, source)), None)
    if easing is not None:
        return replace_node(easing, value)
    return insert_at(slot[-1].end, f" {value}", select_from=1)


def _declaration_prefix(block: SyntaxNode, source: TextSource, indent: str) -> str:
    if "\n" in source.slice_doc(block.start, block.end):
        return f"\n{indent}"
    return " "


def _insert_declaration(
    block: SyntaxNode, lead: str, property_name: str, value: str
) -> TransactionSpec | None:
    open_brace = block.get_child("{")
    if open_brace is None:
        return None
    head = f"{lead}{property_name}: "
    text = f"{head}{value};"
    return TransactionSpec(
        changes=[TextChange(start=open_brace.end, insert=text)],
        selection=Selection(anchor=open_brace.end + len(head), head=open_brace.end + len(head) + len(value)),
    )


def set_property(
    block: SyntaxNode,
    source: TextSource,
    prefix: str,
    prop: TimelineProperty,
    value: str,
    animation_index: int,
    slot_count: int = 1,
    indent: str = "  ",
) -> TransactionSpec | None:
    """Compute the edit that sets one slot's delay, duration or easing.

    Declarations are searched last to first, so the declaration that wins
    the cascade is the one edited:

    - ``<prefix>-<prop>`` longhand: the slot's value is replaced.
    - ``<prefix>`` shorthand: the slot's first time value (duration), second
      time value (delay) or timing function (easing) is replaced, or inserted
      when the slot has none.
    - neither: a longhand is inserted right after the block's ``{``, with
      initial values for the other ``slot_count`` slots.

    Args:
        block: Rule body node (``Block``)
        source: Text the tree was built from
        prefix: ``animation`` or ``transition``
        prop: Sub-property to set
        value: New CSS value text, e.g. ``250ms``
        animation_index: Slot position in the comma-separated lists
        slot_count: Number of slots the rule declares
        indent: Indentation for a declaration inserted into a multi-line block

    Returns:
        The transaction, or None when the block offers no place to edit

    Example:
        For ``.a { animation: spin 2s 100ms linear; }`` and
        ``prop=DELAY, value="250ms"`` the edit replaces exactly ``100ms``.
    """
    longhand = prop.longhand(prefix)
    for declaration in reversed(declarations(block, source)):
        if declaration.property_name == longhand:
            return _patch_longhand(declaration, animation_index, value)
        if declaration.property_name == prefix:
            spec = _patch_shorthand(declaration, source, prop, animation_index, value)
            if spec is not None:
                return spec
            logger.debug(f"Shorthand {prefix} has no slot {animation_index}")

    slots = [value if j == animation_index else prop.initial_value for j in range(max(slot_count, animation_index + 1))]
    lead = _declaration_prefix(block, source, indent)
    return _insert_declaration(block, lead, longhand, ", ".join(slots))


def set_keyframe_easing(
    match: KeyframesMatch,
    source: TextSource,
    ordinal: int,
    easing: str,
    indent: str = "    ",
) -> TransactionSpec | None:
    """Set ``animation-timing-function`` inside one keyframe block.

    Args:
        match: The ``@keyframes`` statement
        source: Text the tree was built from
        ordinal: Position of the keyframe selector among all selectors of the
            statement (``from``, ``to`` and percentages, in source order)
        easing: Timing-function text
        indent: Indentation for an inserted declaration

    Returns:
        The transaction, or None when the keyframe block cannot be found
    """
    block = find_keyframe_block(match, ordinal)
    if block is None:
        logger.debug(f"No keyframe block at position {ordinal}")
        return None

    for declaration in reversed(declarations(block, source)):
        if declaration.property_name != "animation-timing-function":
            continue
        values = [node for node in declaration.values if node.name not in _IGNORED_VALUE_NODES]
        if values:
            return replace_range(values[0].start, values[-1].end, easing)

    return _insert_declaration(block, f"\n{indent}", "animation-timing-function", easing)
