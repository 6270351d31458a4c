"""Timeline session - the dispatch surface for a visual timeline editor.

The session ties together the three views of one animated document:
- the CSS source, owned by a SourceEditor
- the extracted timeline rules (ViewState)
- live playback on an AnimationHost

Timeline gestures come in as named operations (change delay, change
duration, edit easing, highlight, select). Each computes a minimal text
edit and dispatches it synchronously; the editor's change notification
re-extracts the rules and re-binds playback before the operation returns.
Only the rebuild of rendered markup is debounced.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any
from uuid import uuid4

from keyline.core.config.models import KeylineConfig
from keyline.core.curves.models import ControlPoints, TimelineEasing
from keyline.core.curves.timing import bezier_control_points_text, format_ms, serialize_easing
from keyline.core.editing.models import EditorEffect, TransactionSpec
from keyline.core.editing.patch import TimelineProperty, set_keyframe_easing, set_property
from keyline.core.editing.protocols import SourceEditor
from keyline.core.errors import EditorUnavailableError
from keyline.core.playback.controller import NullPlaybackController, PlaybackController
from keyline.core.playback.protocols import AnimationHost, PlaybackControls
from keyline.core.stylesheet.extractor import extract_rules
from keyline.core.stylesheet.models import RuleExtraction, RuleType, StyleRule, ViewState
from keyline.core.syntax.locator import find_keyframes_body, find_rule_body
from keyline.core.utils.debounce import Debouncer, monotonic_ms
from keyline.core.utils.logging import get_logger


class TimelineSession:
    """Editing session for one CSS document and its timeline.

    Example:
        doc = SourceDocument(".a { animation: fade 1s; } @keyframes fade { to { opacity: 0 } }")
        session = TimelineSession(doc)
        rule = session.view_state.style_rules[0]
        session.toggle_select_rules([rule.id])
        session.on_change_delay(rule.id, 250)
        # doc.text now contains "animation: fade 1s 250ms;"
    """

    def __init__(
        self,
        editor: SourceEditor,
        *,
        host: AnimationHost | None = None,
        config: KeylineConfig | Path | str | None = None,
        clock: Callable[[], float] | None = None,
        session_id: str | None = None,
    ):
        """Initialize the session and run the first extraction.

        Args:
            editor: Editor owning the CSS source
            host: Rendering surface for playback; without one, playback
                controls are no-ops
            config: KeylineConfig instance, path, or None (uses default path)
            clock: Millisecond clock shared by playback and debouncing
            session_id: Optional session id, generated when omitted

        Raises:
            FileNotFoundError: If an explicit config path does not exist
            ValidationError: If the config is invalid
        """
        self.config = self._resolve_config(config)
        self.session_id = session_id or str(uuid4())
        self.logger = get_logger(__name__, session_id=self.session_id)
        self.editor = editor
        self.host = host

        clock = clock or monotonic_ms
        self.playback: PlaybackControls = (
            PlaybackController(host, clock=clock) if host is not None else NullPlaybackController()
        )
        self.view_state = ViewState()
        self._extraction = RuleExtraction()
        self._markup: str | None = None
        self._markup_debouncer = Debouncer(self.config.markup_debounce_ms, clock=clock)
        self._closed = False
        self._unsubscribe = editor.on_change(self._on_source_change)

        self.refresh_rules()
        self.logger.debug(
            f"Session started with {len(self.view_state.style_rules)} rule(s)"
        )

    @staticmethod
    def _resolve_config(value: Any) -> KeylineConfig:
        if value is None:
            return KeylineConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return KeylineConfig.load_or_default(Path(value))
        elif isinstance(value, KeylineConfig):
            return value
        else:
            raise TypeError(f"Expected KeylineConfig, Path, str, or None; got {type(value).__name__}")

    # state

    @property
    def total_length_ms(self) -> float:
        """Timeline length; the configured default when there are no rules."""
        if not self.view_state.style_rules:
            return self.config.default_timeline_ms
        return self._extraction.total_length_ms

    def get_rule(self, rule_id: str) -> StyleRule | None:
        return next((rule for rule in self.view_state.style_rules if rule.id == rule_id), None)

    def _ensure_open(self) -> None:
        if self._closed:
            raise EditorUnavailableError(f"Session {self.session_id} is closed")

    def _on_source_change(self, text: str) -> None:
        self.refresh_rules()

    def refresh_rules(self) -> list[StyleRule]:
        """Re-extract rules from the editor text and rebind playback.

        Returns:
            The new rule list
        """
        self._ensure_open()
        self._extraction = extract_rules(self.editor.text, self.config.palette)
        self.view_state.style_rules = self._extraction.style_rules
        self.playback.update_rules(self._extraction.style_rules)
        return self.view_state.style_rules

    # editing

    def _slot_count(self, rule: StyleRule) -> int:
        indexes = [
            other.animation_index
            for other in self.view_state.style_rules
            if other.selector == rule.selector
            and other.selector_occurrence == rule.selector_occurrence
            and other.type is rule.type
        ]
        return max(indexes, default=rule.animation_index) + 1

    def _dispatch(self, spec: TransactionSpec) -> None:
        self._ensure_open()
        self.editor.dispatch(spec)

    def update_rule_property_value(self, rule: StyleRule, prop: TimelineProperty, value: str) -> bool:
        """Set one sub-property of a rule's slot in the source.

        Args:
            rule: Rule to edit
            prop: Delay, duration or easing
            value: New CSS value text

        Returns:
            True if an edit was dispatched, False if the rule's source could
            not be located
        """
        self._ensure_open()
        match = find_rule_body(
            self.editor.syntax_tree(), self.editor, rule.selector, rule.selector_occurrence
        )
        if match is None:
            self.logger.debug(f"No rule set for {rule.id!r} at {rule.selector!r}")
            return False
        spec = set_property(
            match.block,
            self.editor,
            rule.type.value,
            prop,
            value,
            rule.animation_index,
            slot_count=self._slot_count(rule),
        )
        if spec is None:
            return False
        self._dispatch(spec)
        return True

    def _drag_targets(self, dragged: StyleRule) -> list[StyleRule]:
        selected = self.view_state.selected_rule_ids
        if dragged.id not in selected:
            return [dragged]
        return [rule for rule in self.view_state.style_rules if rule.id in selected]

    def on_change_delay(self, rule_id: str, delay_ms: float) -> None:
        """Move a rule (and the rest of the selection) to a new delay.

        Every selected rule keeps its distance to the dragged rule.
        """
        dragged = self.get_rule(rule_id)
        if dragged is None:
            return
        for rule in self._drag_targets(dragged):
            offset_delay = delay_ms - (dragged.delay - rule.delay)
            self.update_rule_property_value(rule, TimelineProperty.DELAY, format_ms(offset_delay))

    def on_change_duration(self, rule_id: str, duration_ms: float) -> None:
        """Resize a rule (and the rest of the selection) by the same amount."""
        dragged = self.get_rule(rule_id)
        if dragged is None:
            return
        for rule in self._drag_targets(dragged):
            offset_duration = max(0.0, duration_ms - (dragged.duration - rule.duration))
            self.update_rule_property_value(rule, TimelineProperty.DURATION, format_ms(offset_duration))

    def update_easing(self, rule_id: str, keyframe_index: int, control_points: ControlPoints) -> bool:
        """Set the curve leading out of one keyframe of a rule.

        Keyframes present in the source get an ``animation-timing-function``
        in their keyframe block. Synthesized keyframes and transitions have
        no block of their own, so the rule-level timing function is set.

        Args:
            rule_id: Rule id
            keyframe_index: Index into ``rule.keyframes``
            control_points: ((x1, y1), (x2, y2)) of the new curve

        Returns:
            True if an edit was dispatched
        """
        rule = self.get_rule(rule_id)
        if rule is None or not 0 <= keyframe_index < len(rule.keyframes):
            return False
        keyframe = rule.keyframes[keyframe_index]
        easing = bezier_control_points_text(control_points)

        if rule.type is RuleType.TRANSITION or keyframe.source_index is None:
            return self.update_rule_property_value(rule, TimelineProperty.EASING, easing)

        match = find_keyframes_body(self.editor.syntax_tree(), self.editor, rule.animation_name)
        if match is None:
            return False
        spec = set_keyframe_easing(
            match, self.editor, keyframe.source_index, easing, indent=self.config.keyframe_indent
        )
        if spec is None:
            return False
        self._dispatch(spec)
        return True

    def set_rule_easing(self, rule_id: str, easing: TimelineEasing | str) -> bool:
        """Set a rule's own timing function (not a keyframe's)."""
        rule = self.get_rule(rule_id)
        if rule is None:
            return False
        text = easing if isinstance(easing, str) else serialize_easing(easing)
        return self.update_rule_property_value(rule, TimelineProperty.EASING, text)

    # highlighting and selection

    def highlight_rule(self, rule: StyleRule) -> None:
        """Spotlight the rule set a timeline rule comes from."""
        self._ensure_open()
        match = find_rule_body(
            self.editor.syntax_tree(), self.editor, rule.selector, rule.selector_occurrence
        )
        if match is None:
            return
        start, end = match.rule_set.start, match.rule_set.end
        self._dispatch(
            TransactionSpec(
                effects=[EditorEffect.spotlight(start, end), EditorEffect.scroll_into_view(start, end)]
            )
        )

    def highlight_animation_source(self, rule: StyleRule) -> None:
        """Spotlight the ``@keyframes`` block a rule animates with."""
        self._ensure_open()
        match = find_keyframes_body(self.editor.syntax_tree(), self.editor, rule.animation_name)
        if match is None:
            return
        start, end = match.statement.start, match.statement.end
        self._dispatch(
            TransactionSpec(
                effects=[EditorEffect.spotlight(start, end), EditorEffect.scroll_into_view(start, end)]
            )
        )

    def remove_highlight(self) -> None:
        self._dispatch(TransactionSpec(effects=[EditorEffect.clear_spotlight()]))

    def toggle_select_rules(self, rule_ids: Iterable[str]) -> None:
        """Replace the selection; selecting the current selection is a no-op."""
        selected = set(rule_ids)
        if selected == self.view_state.selected_rule_ids:
            return
        self.view_state.selected_rule_ids = selected

    # markup

    def update_markup(self, html: str) -> None:
        """Schedule a rebuild of the rendered markup.

        The rebuild runs from ``tick`` once the markup has been stable for
        ``markup_debounce_ms``.
        """
        self._ensure_open()
        self._markup = html
        self._markup_debouncer.call(self._render_markup, html)

    def refresh_markup(self) -> None:
        """Rebuild the rendered markup now."""
        self._ensure_open()
        self._markup_debouncer.cancel()
        if self._markup is not None:
            self._render_markup(self._markup)

    def tick(self) -> bool:
        """Run due deferred work; call from the host's frame loop.

        Returns:
            True if a markup rebuild ran
        """
        if self._closed:
            return False
        return self._markup_debouncer.poll()

    def _render_markup(self, html: str) -> None:
        if self.host is None:
            return
        self.host.render_markup(html)
        self.playback.reset()
        pruned = self.playback.prune_native_animations()
        self.logger.debug(f"Rendered markup ({len(html)} chars), pruned {pruned} native animation(s)")

    def close(self) -> None:
        """Detach from the editor; later operations raise EditorUnavailableError."""
        if self._closed:
            return
        self._unsubscribe()
        self._markup_debouncer.cancel()
        self._closed = True
