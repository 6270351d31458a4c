"""CSS syntax tree and the queries the editing layer runs over it."""

from keyline.core.syntax.locator import (
    DeclarationMatch,
    KeyframesMatch,
    RuleMatch,
    declarations,
    find_keyframe_block,
    find_keyframes_body,
    find_rule_body,
    iter_children,
    iter_tree,
    normalize_selector,
)
from keyline.core.syntax.protocols import SyntaxNode, TextSource
from keyline.core.syntax.tree import Node, build_syntax_tree, normalize_newlines

__all__ = [
    "DeclarationMatch",
    "KeyframesMatch",
    "Node",
    "RuleMatch",
    "SyntaxNode",
    "TextSource",
    "build_syntax_tree",
    "declarations",
    "find_keyframe_block",
    "find_keyframes_body",
    "find_rule_body",
    "iter_children",
    "iter_tree",
    "normalize_newlines",
    "normalize_selector",
]
