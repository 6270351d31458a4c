"""Text-edit models exchanged with the source editor."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextChange(BaseModel):
    """Replace ``[start, end)`` of the pre-transaction text with ``insert``.

    ``end`` defaults to ``start`` (a pure insertion).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = Field(..., ge=0)
    end: int | None = None
    insert: str = ""

    @model_validator(mode="after")
    def _validate_range(self) -> TextChange:
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Change end {self.end} precedes start {self.start}")
        return self

    @property
    def stop(self) -> int:
        return self.start if self.end is None else self.end


class Selection(BaseModel):
    """Editor selection; ``anchor == head`` is a caret."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    anchor: int = Field(..., ge=0)
    head: int = Field(..., ge=0)


class EffectKind(str, Enum):
    SPOTLIGHT = "spotlight"
    CLEAR_SPOTLIGHT = "clear_spotlight"
    SCROLL_INTO_VIEW = "scroll_into_view"


class EditorEffect(BaseModel):
    """A presentational side effect requested from the editor.

    Spotlight and scroll effects carry the range they apply to; clearing the
    spotlight carries none.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: EffectKind
    start: int | None = None
    end: int | None = None

    @classmethod
    def spotlight(cls, start: int, end: int) -> EditorEffect:
        return cls(kind=EffectKind.SPOTLIGHT, start=start, end=end)

    @classmethod
    def clear_spotlight(cls) -> EditorEffect:
        return cls(kind=EffectKind.CLEAR_SPOTLIGHT)

    @classmethod
    def scroll_into_view(cls, start: int, end: int) -> EditorEffect:
        return cls(kind=EffectKind.SCROLL_INTO_VIEW, start=start, end=end)


class TransactionSpec(BaseModel):
    """A batch of changes dispatched to the editor as one transaction.

    All change ranges refer to the text before the transaction and must not
    overlap. ``selection`` refers to the text after it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    changes: list[TextChange] = Field(default_factory=list)
    selection: Selection | None = None
    effects: list[EditorEffect] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_changes(self) -> TransactionSpec:
        ordered = sorted(self.changes, key=lambda change: change.start)
        for previous, current in zip(ordered, ordered[1:]):
            if current.start < previous.stop:
                raise ValueError("Transaction changes overlap")
        return self
