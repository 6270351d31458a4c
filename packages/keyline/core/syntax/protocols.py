"""Protocol definitions for syntax-tree access.

The locator and the text-patch engine only read the tree through these
interfaces, so any tree provider with the same node names can back them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SyntaxNode(Protocol):
    """Read-only handle on one node of a CSS syntax tree.

    Attributes:
        name: Node kind, e.g. ``RuleSet``, ``Block`` or ``NumberLiteral``
        start: Offset of the first character
        end: Offset one past the last character
    """

    name: str
    start: int
    end: int

    @property
    def first_child(self) -> SyntaxNode | None:
        """First child node, or None for leaves."""
        ...

    @property
    def next_sibling(self) -> SyntaxNode | None:
        """Next node under the same parent, or None."""
        ...

    def get_child(self, name: str) -> SyntaxNode | None:
        """First direct child with the given kind."""
        ...

    def get_children(self, name: str) -> list[SyntaxNode]:
        """All direct children with the given kind, in order."""
        ...


@runtime_checkable
class TextSource(Protocol):
    """Anything that can slice the document a tree was built from."""

    def slice_doc(self, start: int, end: int) -> str:
        """Return the document text in ``[start, end)``."""
        ...
