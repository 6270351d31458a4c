"""Protocol for the source editor the session edits through."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from keyline.core.editing.models import TransactionSpec
from keyline.core.syntax.protocols import SyntaxNode


@runtime_checkable
class SourceEditor(Protocol):
    """An editable CSS document with a syntax tree.

    Implementations notify ``on_change`` subscribers synchronously from
    ``dispatch`` whenever the text changes.
    """

    @property
    def text(self) -> str:
        """Current document text."""
        ...

    def syntax_tree(self) -> SyntaxNode:
        """Syntax tree of the current text."""
        ...

    def slice_doc(self, start: int, end: int) -> str:
        """Document text in ``[start, end)``."""
        ...

    def dispatch(self, spec: TransactionSpec) -> None:
        """Apply a transaction."""
        ...

    def on_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Subscribe to text changes; returns an unsubscribe callable."""
        ...
