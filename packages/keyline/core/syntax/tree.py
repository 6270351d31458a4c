"""CSS syntax tree with exact source offsets.

tinycss2 tokenizes the source (comments kept) and reports the line and
column of every token. This module turns those tokens into a navigable tree
whose nodes carry ``[start, end)`` offsets into the text, shaped after the
grammar of a code editor's CSS language:

    StyleSheet
      RuleSet            selector tokens, then Block
        Block            "{", Declaration, ";", ..., "}"
          Declaration    PropertyName, ":", value nodes, Important?
      KeyframesStatement
        keyframes, KeyframeName, KeyframeList
          KeyframeList   "{", NumberLiteral | from | to, ",", Block, ..., "}"
      AtStatement

Value nodes are NumberLiteral, ValueName, CallExpression (Callee, ArgList),
StringLiteral, ColorLiteral and punctuation. Unterminated blocks and strings
end where the text ends. Text is expected with ``\\n`` line endings.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Any

import tinycss2

KEYFRAMES_KEYWORDS = frozenset({"keyframes", "-webkit-keyframes", "-moz-keyframes"})

ERROR_NODE = "⚠"

_IDENT_RE = re.compile(r"(?:[-\w\u0080-\U0010ffff]|\\[^\n])+")
_UNICODE_RANGE_RE = re.compile(r"[uU]\+[0-9a-fA-F?]+(?:-[0-9a-fA-F]+)?")

_CLOSING = {"{} block": "}", "() block": ")", "[] block": "]"}


def normalize_newlines(text: str) -> str:
    """Convert CRLF and CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class Node:
    """A syntax tree node with parent and sibling navigation."""

    __slots__ = ("name", "start", "end", "children", "_parent", "_index")

    def __init__(self, name: str, start: int, end: int, children: Sequence[Node] = ()):
        self.name = name
        self.start = start
        self.end = end
        self.children = list(children)
        self._parent: Node | None = None
        self._index = 0
        for index, child in enumerate(self.children):
            child._parent = self
            child._index = index

    @property
    def parent(self) -> Node | None:
        return self._parent

    @property
    def first_child(self) -> Node | None:
        return self.children[0] if self.children else None

    @property
    def next_sibling(self) -> Node | None:
        if self._parent is None:
            return None
        siblings = self._parent.children
        index = self._index + 1
        return siblings[index] if index < len(siblings) else None

    def get_child(self, name: str) -> Node | None:
        return next((child for child in self.children if child.name == name), None)

    def get_children(self, name: str) -> list[Node]:
        return [child for child in self.children if child.name == name]

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"Node({self.name!r}, {self.start}, {self.end})"


@dataclass(frozen=True)
class _Span:
    token: Any
    start: int
    end: int

    @property
    def type(self) -> str:
        return self.token.type

    def is_literal(self, value: str) -> bool:
        return self.token.type == "literal" and self.token.value == value


def _significant(spans: Sequence[_Span]) -> list[_Span]:
    return [span for span in spans if span.type not in ("whitespace", "comment")]


class _TreeBuilder:
    """Maps tinycss2 tokens to offset-carrying nodes for one text."""

    def __init__(self, text: str):
        self.text = text
        # tinycss2 also counts form feeds as newlines
        scan_text = text.replace("\f", "\n")
        self.line_starts = [0] + [i + 1 for i, char in enumerate(scan_text) if char == "\n"]

    # offsets

    def offset(self, token: Any) -> int:
        return self.line_starts[token.source_line - 1] + token.source_column - 1

    def spans(self, tokens: Sequence[Any]) -> list[_Span]:
        starts = [self.offset(token) for token in tokens]
        spans = []
        for index, token in enumerate(tokens):
            if index + 1 < len(tokens):
                end = starts[index + 1]
            else:
                end = self._end(token, starts[index])
            spans.append(_Span(token, starts[index], end))
        return spans

    def _content_end(self, tokens: Sequence[Any], default: int) -> int:
        if not tokens:
            return default
        last = tokens[-1]
        return self._end(last, self.offset(last))

    def _closed_end(self, inner_end: int, closing: str) -> int:
        if inner_end < len(self.text) and self.text[inner_end] == closing:
            return inner_end + 1
        return inner_end

    def _callee_end(self, start: int) -> int:
        match = _IDENT_RE.match(self.text, start)
        return match.end() if match else start

    def _end(self, token: Any, start: int) -> int:
        text = self.text
        kind = token.type
        if kind in _CLOSING:
            return self._closed_end(self._content_end(token.content, start + 1), _CLOSING[kind])
        if kind == "function":
            args_start = self._callee_end(start) + 1
            return self._closed_end(self._content_end(token.arguments, args_start), ")")
        if kind == "whitespace":
            return start + len(token.value)
        if kind == "comment":
            close = text.find("*/", start + 2)
            return len(text) if close < 0 else close + 2
        if kind == "literal":
            return start + len(token.value)
        if kind == "string":
            return self._string_end(start)
        if kind in ("number", "percentage"):
            return start + len(token.representation) + (1 if kind == "percentage" else 0)
        if kind == "dimension":
            unit_start = start + len(token.representation)
            match = _IDENT_RE.match(text, unit_start)
            return match.end() if match else unit_start
        if kind == "ident":
            return self._callee_end(start)
        if kind in ("at-keyword", "hash"):
            return self._callee_end(start + 1)
        if kind == "url":
            close = text.find(")", start)
            return len(text) if close < 0 else close + 1
        if kind == "unicode-range":
            match = _UNICODE_RANGE_RE.match(text, start)
            return match.end() if match else start + 1
        return min(start + 1, len(text))

    def _string_end(self, start: int) -> int:
        text = self.text
        quote = text[start]
        index = start + 1
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
            elif char == quote:
                return index + 1
            elif char == "\n":
                return index
            else:
                index += 1
        return len(text)

    # top level

    def statements(self, spans: Sequence[_Span]) -> list[Node]:
        nodes: list[Node] = []
        pending: list[_Span] = []
        for span in spans:
            if not pending:
                if span.type == "comment":
                    nodes.append(Node("Comment", span.start, span.end))
                    continue
                if span.type == "whitespace" or span.is_literal(";"):
                    continue
            pending.append(span)
            if pending[0].type == "at-keyword":
                if span.is_literal(";") or span.type == "{} block":
                    nodes.append(self.at_statement(pending))
                    pending = []
            elif span.type == "{} block":
                nodes.append(self.rule_set(pending))
                pending = []
        if pending:
            if pending[0].type == "at-keyword":
                nodes.append(self.at_statement(pending))
            else:
                nodes.append(self.rule_set(pending))
        return nodes

    def rule_set(self, spans: Sequence[_Span]) -> Node:
        children = [self.value_node(span) for span in spans if span.type not in ("whitespace", "{} block")]
        if spans[-1].type == "{} block":
            children.append(self.block(spans[-1]))
        significant = _significant(spans)
        start = significant[0].start if significant else spans[0].start
        return Node("RuleSet", start, spans[-1].end, children)

    def at_statement(self, spans: Sequence[_Span]) -> Node:
        keyword = spans[0]
        last = spans[-1]
        middle = spans[1:-1] if len(spans) > 1 and (last.type == "{} block" or last.is_literal(";")) else spans[1:]

        if keyword.token.lower_value in KEYFRAMES_KEYWORDS:
            children = [Node("keyframes", keyword.start, keyword.end)]
            names = _significant(middle)
            if names:
                children.append(Node("KeyframeName", names[0].start, names[-1].end))
            if last.type == "{} block":
                children.append(self.keyframe_list(last))
            return Node("KeyframesStatement", keyword.start, children[-1].end, children)

        children = [Node("AtKeyword", keyword.start, keyword.end)]
        children.extend(self.value_node(span) for span in middle if span.type != "whitespace")
        if last is not keyword:
            if last.type == "{} block":
                children.append(self.block(last))
            elif last.is_literal(";"):
                children.append(Node(";", last.start, last.end))
        return Node("AtStatement", keyword.start, children[-1].end, children)

    # blocks

    def _bracketed(self, span: _Span, open_char: str, items: list[Node], inner_end: int) -> list[Node]:
        children = [Node(open_char, span.start, span.start + 1), *items]
        if span.end > inner_end:
            children.append(Node(_CLOSING[span.type], span.end - 1, span.end))
        return children

    def block(self, span: _Span) -> Node:
        content = self.spans(span.token.content)
        inner_end = content[-1].end if content else span.start + 1
        children = self._bracketed(span, "{", self.block_items(content), inner_end)
        return Node("Block", span.start, span.end, children)

    def keyframe_list(self, span: _Span) -> Node:
        content = self.spans(span.token.content)
        inner_end = content[-1].end if content else span.start + 1
        items: list[Node] = []
        for child in content:
            token = child.token
            if child.type == "whitespace":
                continue
            if child.type == "percentage":
                items.append(Node("NumberLiteral", child.start, child.end))
            elif child.type == "ident" and token.lower_value in ("from", "to"):
                items.append(Node(token.lower_value, child.start, child.end))
            elif child.type == "{} block":
                items.append(self.block(child))
            else:
                items.append(self.value_node(child))
        children = self._bracketed(span, "{", items, inner_end)
        return Node("KeyframeList", span.start, span.end, children)

    def block_items(self, spans: Sequence[_Span]) -> list[Node]:
        items: list[Node] = []
        pending: list[_Span] = []

        def flush() -> None:
            if _significant(pending):
                items.append(self.declaration_or_statement(pending))
            pending.clear()

        for span in spans:
            if not pending:
                if span.type == "whitespace":
                    continue
                if span.type == "comment":
                    items.append(Node("Comment", span.start, span.end))
                    continue
            if span.is_literal(";"):
                flush()
                items.append(Node(";", span.start, span.end))
                continue
            pending.append(span)
            if span.type == "{} block" and not _is_declaration(pending):
                items.append(self.rule_set(list(pending)))
                pending.clear()
        flush()
        return items

    def declaration_or_statement(self, spans: Sequence[_Span]) -> Node:
        if _is_declaration(spans):
            return self.declaration(spans)
        significant = _significant(spans)
        if significant[0].type == "at-keyword":
            return self.at_statement(significant)
        return Node(ERROR_NODE, significant[0].start, significant[-1].end)

    def declaration(self, spans: Sequence[_Span]) -> Node:
        significant = _significant(spans)
        name, colon = significant[0], significant[1]
        children = [
            Node("PropertyName", name.start, name.end),
            Node(":", colon.start, colon.end),
        ]
        rest = spans[spans.index(colon) + 1 :]
        children.extend(self.value_nodes(rest))
        return Node("Declaration", name.start, children[-1].end, children)

    # values

    def value_nodes(self, spans: Sequence[_Span]) -> list[Node]:
        nodes: list[Node] = []
        significant = [span for span in spans if span.type != "whitespace"]
        index = 0
        while index < len(significant):
            span = significant[index]
            following = significant[index + 1] if index + 1 < len(significant) else None
            if (
                span.is_literal("!")
                and following is not None
                and following.type == "ident"
                and following.token.lower_value == "important"
            ):
                nodes.append(Node("Important", span.start, following.end))
                index += 2
                continue
            nodes.append(self.value_node(span))
            index += 1
        return nodes

    def value_node(self, span: _Span) -> Node:
        kind = span.type
        token = span.token
        if kind in ("number", "percentage", "dimension"):
            return Node("NumberLiteral", span.start, span.end)
        if kind == "ident":
            return Node("ValueName", span.start, span.end)
        if kind == "string":
            return Node("StringLiteral", span.start, span.end)
        if kind == "hash":
            return Node("ColorLiteral", span.start, span.end)
        if kind == "comment":
            return Node("Comment", span.start, span.end)
        if kind == "literal":
            return Node(token.value, span.start, span.end)
        if kind == "function":
            return self.call_expression(span)
        if kind == "{} block":
            return self.block(span)
        if kind in ("() block", "[] block"):
            content = self.spans(token.content)
            inner_end = content[-1].end if content else span.start + 1
            name = "ParenthesizedContent" if kind == "() block" else "BracketedContent"
            open_char = "(" if kind == "() block" else "["
            children = self._bracketed(span, open_char, self.value_nodes(content), inner_end)
            return Node(name, span.start, span.end, children)
        if kind == "url":
            return Node("CallLiteral", span.start, span.end)
        if kind == "at-keyword":
            return Node("AtKeyword", span.start, span.end)
        if kind == "unicode-range":
            return Node("UnicodeRange", span.start, span.end)
        return Node(ERROR_NODE, span.start, span.end)

    def call_expression(self, span: _Span) -> Node:
        callee_end = self._callee_end(span.start)
        arguments = self.spans(span.token.arguments)
        inner_end = arguments[-1].end if arguments else callee_end + 1
        arg_children = [Node("(", callee_end, callee_end + 1), *self.value_nodes(arguments)]
        if span.end > inner_end:
            arg_children.append(Node(")", span.end - 1, span.end))
        return Node(
            "CallExpression",
            span.start,
            span.end,
            [Node("Callee", span.start, callee_end), Node("ArgList", callee_end, span.end, arg_children)],
        )


def _is_declaration(spans: Sequence[_Span]) -> bool:
    significant = _significant(spans)
    return len(significant) >= 2 and significant[0].type == "ident" and significant[1].is_literal(":")


def build_syntax_tree(text: str) -> Node:
    """Build the syntax tree of a CSS text.

    Args:
        text: CSS source with ``\\n`` line endings

    Returns:
        The ``StyleSheet`` root node

    Example:
        >>> tree = build_syntax_tree(".a { color: red; }")
        >>> [child.name for child in tree.first_child.children]
        ['.', 'ValueName', 'Block']
    """
    builder = _TreeBuilder(text)
    tokens = tinycss2.parse_component_value_list(text, skip_comments=False)
    return Node("StyleSheet", 0, len(text), builder.statements(builder.spans(tokens)))
