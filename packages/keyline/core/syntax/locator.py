"""Queries that map timeline rules back to their source nodes.

Every lookup returns None when nothing matches: the source is often
transiently invalid while the user types, so a miss is not an error.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging

import tinycss2

from keyline.core.syntax.protocols import SyntaxNode, TextSource
from keyline.core.utils.formatting import strip_whitespace

logger = logging.getLogger(__name__)

KEYFRAME_SELECTOR_NODES = frozenset({"NumberLiteral", "from", "to"})


@dataclass(frozen=True)
class RuleMatch:
    """A rule set and the block holding its declarations."""

    rule_set: SyntaxNode
    block: SyntaxNode


@dataclass(frozen=True)
class KeyframesMatch:
    """A ``@keyframes`` statement and its keyframe list."""

    statement: SyntaxNode
    keyframe_list: SyntaxNode | None


@dataclass(frozen=True)
class DeclarationMatch:
    """One declaration split into its property name and value nodes."""

    node: SyntaxNode
    property_name: str
    values: list[SyntaxNode]


def normalize_selector(text: str) -> str:
    """Canonical form of selector text for comparisons.

    Comments and whitespace are dropped and tokens are re-serialized, so
    ``[x='a']`` and ``[x = "a"]`` compare equal.
    """
    tokens = tinycss2.parse_component_value_list(text, skip_comments=True)
    return strip_whitespace(tinycss2.serialize(tokens))


def iter_children(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Iterate the direct children of a node."""
    child = node.first_child
    while child is not None:
        yield child
        child = child.next_sibling


def iter_tree(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Iterate a node and its descendants, depth first, without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


def find_rule_body(
    tree: SyntaxNode, source: TextSource, selector: str, occurrence: int = 0
) -> RuleMatch | None:
    """Find a top-level rule set whose selector text matches ``selector``.

    The header is the source between the rule set's start and its block's
    start, compared through ``normalize_selector`` so ``.a>.b`` matches
    ``.a > .b``. A selector can head several rule sets with different
    bodies; ``occurrence`` picks one of them by document order. Rule sets
    nested in at-rules are not searched.

    Args:
        tree: Root of the syntax tree
        source: Text the tree was built from
        selector: Selector as reported by the extractor
        occurrence: Zero-based position among rule sets with this selector

    Returns:
        The matching rule set and block, or None
    """
    target = normalize_selector(selector)
    seen = 0
    for node in iter_children(tree):
        if node.name != "RuleSet":
            continue
        block = node.get_child("Block")
        if block is None:
            continue
        if normalize_selector(source.slice_doc(node.start, block.start)) != target:
            continue
        if seen == occurrence:
            return RuleMatch(rule_set=node, block=block)
        seen += 1
    logger.debug(f"No rule set found for selector {selector!r} (occurrence {occurrence})")
    return None


def find_keyframes_body(tree: SyntaxNode, source: TextSource, name: str) -> KeyframesMatch | None:
    """Find the ``@keyframes`` statement declaring ``name``; the last one wins."""
    found = None
    for node in iter_tree(tree):
        if node.name != "KeyframesStatement":
            continue
        name_node = node.get_child("KeyframeName")
        if name_node is None:
            continue
        declared = source.slice_doc(name_node.start, name_node.end).strip().strip("\"'")
        if declared == name:
            found = KeyframesMatch(statement=node, keyframe_list=node.get_child("KeyframeList"))
    if found is None:
        logger.debug(f"No @keyframes found for {name!r}")
    return found


def find_keyframe_block(match: KeyframesMatch, ordinal: int) -> SyntaxNode | None:
    """Find the block of the keyframe selector at ``ordinal``.

    Selectors (``NumberLiteral``, ``from``, ``to``) are counted in source
    order; ``0%, 50% { ... }`` holds ordinals 0 and 1 in one block.

    Args:
        match: Keyframes statement to search
        ordinal: Zero-based position of the keyframe selector

    Returns:
        The block owning that selector, or None
    """
    if match.keyframe_list is None or ordinal < 0:
        return None
    seen = 0
    for child in iter_children(match.keyframe_list):
        if child.name in KEYFRAME_SELECTOR_NODES:
            seen += 1
        elif child.name == "Block" and seen > ordinal:
            return child
    return None


def declarations(block: SyntaxNode, source: TextSource) -> list[DeclarationMatch]:
    """Split a block's declarations into names and value nodes, in source order."""
    found = []
    for node in block.get_children("Declaration"):
        name_node = node.first_child
        if name_node is None or name_node.name != "PropertyName":
            continue
        colon = name_node.next_sibling
        values = list(iter_children(node))[2:] if colon is not None and colon.name == ":" else []
        found.append(
            DeclarationMatch(
                node=node,
                property_name=source.slice_doc(name_node.start, name_node.end).strip().lower(),
                values=values,
            )
        )
    return found
