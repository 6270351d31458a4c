"""Playback reconciliation controller.

Owns the play state of one session and keeps the host's native animations
bound to the current rule list. Rule changes are applied as a set diff
keyed by binding id: existing animations are updated in place so that
editing one rule does not restart every other running animation.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import re

from keyline.core.errors import InvalidSelectorError
from keyline.core.playback.models import (
    AnimationOptions,
    AnimationTiming,
    PlayState,
    PlayStatus,
)
from keyline.core.playback.protocols import AnimationHost, HostAnimation
from keyline.core.stylesheet.models import RuleType, StyleRule
from keyline.core.utils.debounce import monotonic_ms

logger = logging.getLogger(__name__)

_PSEUDO_ELEMENT_RE = re.compile(r"(.*)(::[a-zA-Z-]+)$")

StateCallback = Callable[[PlayState], None]


def split_pseudo_element(selector: str) -> tuple[str, str | None]:
    """Split a trailing pseudo-element off a selector.

    Example:
        >>> split_pseudo_element(".a::before")
        ('.a', '::before')
    """
    match = _PSEUDO_ELEMENT_RE.match(selector)
    if match is None:
        return selector, None
    return match.group(1), match.group(2)


def binding_id(rule_id: str, element_index: int) -> str:
    """Id of the animation binding one rule to one matched element."""
    return f"{rule_id}...{element_index}"


class PlaybackController:
    """Two-state (running/paused) controller over a host's animations.

    Args:
        host: Rendering surface the animations are bound to
        clock: Millisecond wall clock (defaults to a monotonic clock)
    """

    def __init__(self, host: AnimationHost, clock: Callable[[], float] | None = None):
        self._host = host
        self._clock = clock or monotonic_ms
        self._state = PlayState(status=PlayStatus.RUNNING, offset_time=0.0)
        self._last_played_at: float | None = self._clock()
        self._callbacks: list[StateCallback] = []
        self._bindings: dict[str, HostAnimation] = {}
        self._rules: list[StyleRule] = []

    @property
    def bindings(self) -> dict[str, HostAnimation]:
        """Currently bound animations by binding id."""
        return dict(self._bindings)

    def get_state(self) -> PlayState:
        return self._state

    def current_offset(self) -> float:
        """Live timeline position: the stored offset plus time spent running."""
        if self._state.status is PlayStatus.RUNNING and self._last_played_at is not None:
            return self._state.offset_time + self._clock() - self._last_played_at
        return self._state.offset_time

    def on_change(self, callback: StateCallback) -> Callable[[], None]:
        """Subscribe to play state changes.

        Returns:
            Callable that removes the subscription
        """
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _set_state(self, state: PlayState) -> None:
        self._state = state
        for callback in list(self._callbacks):
            callback(state)

    def play(self, offset: float | None = None) -> None:
        """Resume playback, optionally seeking every animation first.

        Animations already past their end time are left finished unless an
        explicit offset moves them back.
        """
        for animation in self._bindings.values():
            if offset is not None:
                animation.current_time = offset
            if (animation.current_time or 0.0) < animation.end_time:
                animation.play()

        start = offset if offset is not None else self.current_offset()
        self._last_played_at = self._clock()
        self._set_state(PlayState(status=PlayStatus.RUNNING, offset_time=start))

    def pause(self, offset: float | None = None) -> None:
        """Pause every animation, optionally seeking first."""
        for animation in self._bindings.values():
            if offset is not None:
                animation.current_time = offset
            animation.pause()

        elapsed = offset if offset is not None else self.current_offset()
        self._last_played_at = None
        self._set_state(PlayState(status=PlayStatus.PAUSED, offset_time=elapsed))

    def toggle(self) -> None:
        if self._state.status is PlayStatus.PAUSED:
            self.play()
        else:
            self.pause()

    def update_rules(self, rules: Sequence[StyleRule]) -> None:
        """Reconcile bound animations with a new rule list.

        For every animation rule and every element its selector matches, the
        binding ``"{rule.id}...{element index}"`` is updated in place when it
        exists, or created, seeded with the current offset and play status.
        Bindings absent from the new set are cancelled. Transitions are not
        bound. Calling this twice with the same rules changes nothing.

        Args:
            rules: Extracted rules, in timeline order
        """
        self._rules = list(rules)
        desired: dict[str, HostAnimation] = {}
        offset = self.current_offset()
        paused = self._state.status is PlayStatus.PAUSED
        created = 0

        for rule in self._rules:
            if rule.type is RuleType.TRANSITION:
                continue
            selector, pseudo_element = split_pseudo_element(rule.selector)
            try:
                elements = self._host.query_selector_all(selector)
            except InvalidSelectorError as e:
                logger.debug(f"Skipping rule {rule.id!r}: {e}")
                continue

            keyframes = rule.host_keyframes()
            timing = AnimationTiming.from_rule(rule)

            for index, element in enumerate(elements):
                animation_id = binding_id(rule.id, index)
                existing = self._bindings.get(animation_id)
                if existing is not None:
                    existing.set_keyframes(keyframes)
                    existing.update_timing(timing)
                    desired[animation_id] = existing
                    continue

                options = AnimationOptions(
                    **timing.model_dump(), id=animation_id, pseudo_element=pseudo_element
                )
                animation = element.animate(keyframes, options)
                animation.current_time = offset
                if paused:
                    animation.pause()
                else:
                    animation.play()
                desired[animation_id] = animation
                created += 1

        cancelled = 0
        for animation_id, animation in self._bindings.items():
            if animation_id not in desired:
                animation.cancel()
                cancelled += 1

        self._bindings = desired
        logger.debug(
            f"Reconciled {len(desired)} animation(s): {created} created, {cancelled} cancelled"
        )

    def reset(self) -> None:
        """Drop every binding, rewind to 0 and rebind the last rule list.

        Used after the rendered markup has been replaced.
        """
        for animation in self._bindings.values():
            animation.cancel()
        self._bindings = {}
        self._last_played_at = self._clock()
        self._set_state(PlayState(status=PlayStatus.RUNNING, offset_time=0.0))
        self.update_rules(self._rules)

    def prune_native_animations(self) -> int:
        """Cancel host animations that were not created by this controller.

        Returns:
            Number of animations cancelled
        """
        pruned = 0
        for animation in self._host.get_animations():
            if not animation.id:
                animation.cancel()
                pruned += 1
        return pruned


class NullPlaybackController:
    """Playback controls for a session without a host.

    Every operation is a no-op and the state reads as paused at 0.
    """

    _STATE = PlayState(status=PlayStatus.PAUSED, offset_time=0.0)

    def play(self, offset: float | None = None) -> None:
        pass

    def pause(self, offset: float | None = None) -> None:
        pass

    def toggle(self) -> None:
        pass

    def reset(self) -> None:
        pass

    def update_rules(self, rules: Sequence[StyleRule]) -> None:
        pass

    def get_state(self) -> PlayState:
        return self._STATE

    def current_offset(self) -> float:
        return 0.0

    def on_change(self, callback: StateCallback) -> Callable[[], None]:
        return lambda: None

    def prune_native_animations(self) -> int:
        return 0
