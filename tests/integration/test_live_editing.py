"""End-to-end editing: typing, dragging and playback against one document."""

from __future__ import annotations

from keyline.core.config.models import KeylineConfig
from keyline.core.editing.document import SourceDocument
from keyline.core.editing.models import TextChange, TransactionSpec
from keyline.core.session import TimelineSession
from tests.fakes import FakeClock, FakeHost

FINAL = """\
.card {
  /* entrance */
  animation: slide 400ms ease-out;
}

@keyframes slide {
  from { transform: translateX(-20px); }
  to { transform: translateX(0); }
}
"""


def test_typing_character_by_character_never_fails() -> None:
    """Every prefix of a stylesheet is extracted without raising."""
    doc = SourceDocument("")
    session = TimelineSession(doc, host=FakeHost({".card": 1}), config=KeylineConfig(), clock=FakeClock())

    for position, char in enumerate(FINAL):
        doc.dispatch(TransactionSpec(changes=[TextChange(start=position, insert=char)]))

    assert doc.text == FINAL
    assert [rule.id for rule in session.view_state.style_rules] == ["slide .card 0"]
    assert list(session.playback.bindings) == ["slide .card 0...0"]


def test_drag_sequence_preserves_formatting() -> None:
    """Repeated drags touch only the dragged values."""
    doc = SourceDocument(FINAL)
    clock = FakeClock()
    host = FakeHost({".card": 1})
    session = TimelineSession(doc, host=host, config=KeylineConfig(), clock=clock)
    animation = session.playback.bindings["slide .card 0...0"]

    for delay in (10, 20, 35, 50):
        session.on_change_delay("slide .card 0", delay)
    session.on_change_duration("slide .card 0", 600)
    session.update_easing("slide .card 0", 1, ((0.2, 0.0), (0.2, 1.0)))

    assert doc.text == FINAL.replace("400ms ease-out", "600ms 50ms ease-out").replace(
        "to { transform",
        "to {\n    animation-timing-function: cubic-bezier(0.2,0,0.2,1); transform",
    )
    rule = session.get_rule("slide .card 0")
    assert (rule.delay, rule.duration) == (50.0, 600.0)
    assert session.playback.bindings["slide .card 0...0"] is animation
    assert len(host.animations) == 1
