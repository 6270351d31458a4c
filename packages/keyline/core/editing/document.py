"""In-memory source editor backing sessions, the CLI and tests."""

from __future__ import annotations

from collections.abc import Callable
import logging

from keyline.core.editing.models import (
    EditorEffect,
    EffectKind,
    Selection,
    TextChange,
    TransactionSpec,
)
from keyline.core.syntax.tree import Node, build_syntax_tree, normalize_newlines

logger = logging.getLogger(__name__)


class SourceDocument:
    """A CSS text buffer implementing the SourceEditor protocol.

    The syntax tree is rebuilt lazily, once per text version. Transactions
    are applied atomically against the text they were computed from, and
    change subscribers are notified synchronously before ``dispatch``
    returns.

    Example:
        doc = SourceDocument(".a { animation: spin 2s 100ms; }")
        unsubscribe = doc.on_change(lambda text: print(len(text)))
        doc.dispatch(TransactionSpec(changes=[TextChange(start=24, end=29, insert="1s")]))
    """

    def __init__(self, text: str = ""):
        self._text = normalize_newlines(text)
        self.version = 0
        self.selection = Selection(anchor=0, head=0)
        self.spotlight: tuple[int, int] | None = None
        self.scrolled_to: tuple[int, int] | None = None
        self.effects: list[EditorEffect] = []
        self._tree: Node | None = None
        self._tree_version = -1
        self._callbacks: list[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    def syntax_tree(self) -> Node:
        if self._tree is None or self._tree_version != self.version:
            self._tree = build_syntax_tree(self._text)
            self._tree_version = self.version
        return self._tree

    def slice_doc(self, start: int, end: int) -> str:
        return self._text[start:end]

    def set_text(self, text: str) -> None:
        """Replace the whole document, as when the user pastes new source."""
        self.dispatch(
            TransactionSpec(
                changes=[TextChange(start=0, end=len(self._text), insert=normalize_newlines(text))],
                selection=Selection(anchor=0, head=0),
            )
        )

    def dispatch(self, spec: TransactionSpec) -> None:
        """Apply a transaction's changes, selection and effects.

        Args:
            spec: Changes against the current text plus optional selection
                (against the new text) and effects
        """
        text = self._text
        for change in sorted(spec.changes, key=lambda change: change.start, reverse=True):
            end = min(change.stop, len(text))
            start = min(change.start, end)
            text = text[:start] + change.insert + text[end:]

        changed = text != self._text
        self._text = text

        if spec.selection is not None:
            self.selection = Selection(
                anchor=min(spec.selection.anchor, len(text)),
                head=min(spec.selection.head, len(text)),
            )

        for effect in spec.effects:
            self._apply_effect(effect)

        if changed:
            self.version += 1
            logger.debug(f"Document changed (version {self.version}, {len(spec.changes)} change(s))")
            for callback in list(self._callbacks):
                callback(self._text)

    def _apply_effect(self, effect: EditorEffect) -> None:
        self.effects.append(effect)
        match effect.kind:
            case EffectKind.SPOTLIGHT:
                self.spotlight = (effect.start, effect.end)
            case EffectKind.CLEAR_SPOTLIGHT:
                self.spotlight = None
            case EffectKind.SCROLL_INTO_VIEW:
                self.scrolled_to = (effect.start, effect.end)

    def on_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe
