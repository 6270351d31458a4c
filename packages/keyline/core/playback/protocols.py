"""Protocols for the host that renders markup and runs animations.

The host is an isolated document that executes the CSS and HTML being
edited and exposes a timeline-aware animation API, in the shape of the Web
Animations API.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from keyline.core.playback.models import AnimationOptions, AnimationTiming, PlayState
from keyline.core.stylesheet.models import StyleRule


@runtime_checkable
class HostAnimation(Protocol):
    """A native animation bound to one element."""

    @property
    def id(self) -> str:
        """Binding id; empty for animations the host started on its own."""
        ...

    current_time: float | None

    @property
    def end_time(self) -> float:
        """Computed end time (delay + active duration), may be ``math.inf``."""
        ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def cancel(self) -> None: ...

    def set_keyframes(self, keyframes: Sequence[dict[str, Any]]) -> None: ...

    def update_timing(self, timing: AnimationTiming) -> None: ...


@runtime_checkable
class HostElement(Protocol):
    """An element of the rendered markup."""

    def animate(self, keyframes: Sequence[dict[str, Any]], options: AnimationOptions) -> HostAnimation:
        """Start a new animation on this element."""
        ...


@runtime_checkable
class AnimationHost(Protocol):
    """The rendering surface animations are bound to."""

    def query_selector_all(self, selector: str) -> Sequence[HostElement]:
        """Elements matching a selector.

        Raises:
            InvalidSelectorError: If the selector cannot be parsed
        """
        ...

    def get_animations(self) -> Sequence[HostAnimation]:
        """Every animation currently alive in the document."""
        ...

    def render_markup(self, html: str) -> None:
        """Replace the rendered body markup."""
        ...


class PlaybackControls(Protocol):
    """Play/pause/offset control surface consumed by the session."""

    def play(self, offset: float | None = None) -> None: ...

    def pause(self, offset: float | None = None) -> None: ...

    def toggle(self) -> None: ...

    def reset(self) -> None: ...

    def update_rules(self, rules: Sequence[StyleRule]) -> None: ...

    def get_state(self) -> PlayState: ...

    def current_offset(self) -> float: ...

    def on_change(self, callback: Callable[[PlayState], None]) -> Callable[[], None]: ...

    def prune_native_animations(self) -> int: ...
