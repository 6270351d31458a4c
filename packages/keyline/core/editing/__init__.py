"""Source editing: edit models, the text-patch engine and the document."""

from keyline.core.editing.document import SourceDocument
from keyline.core.editing.models import (
    EditorEffect,
    EffectKind,
    Selection,
    TextChange,
    TransactionSpec,
)
from keyline.core.editing.patch import (
    TimelineProperty,
    is_easing_value,
    is_time_value,
    set_keyframe_easing,
    set_property,
    split_slots,
)
from keyline.core.editing.protocols import SourceEditor

__all__ = [
    "EditorEffect",
    "EffectKind",
    "Selection",
    "SourceDocument",
    "SourceEditor",
    "TextChange",
    "TimelineProperty",
    "TransactionSpec",
    "is_easing_value",
    "is_time_value",
    "set_keyframe_easing",
    "set_property",
    "split_slots",
]
