"""In-memory animation host for playback and session tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from keyline.core.errors import InvalidSelectorError
from keyline.core.playback.models import AnimationOptions, AnimationTiming


class FakeAnimation:
    """Records every call made on a bound animation."""

    def __init__(self, keyframes: Sequence[dict[str, Any]], options: AnimationOptions | None = None):
        self.id = options.id if options is not None else ""
        self.pseudo_element = options.pseudo_element if options is not None else None
        self.keyframes = list(keyframes)
        self.timing = (
            AnimationTiming(**options.model_dump(exclude={"id", "pseudo_element"}))
            if options is not None
            else AnimationTiming(duration=1000.0)
        )
        self.current_time: float | None = 0.0
        self.play_state = "idle"
        self.cancelled = False
        self.calls: list[str] = []

    @property
    def end_time(self) -> float:
        return self.timing.delay + self.timing.duration * self.timing.iterations

    def play(self) -> None:
        self.calls.append("play")
        self.play_state = "running"

    def pause(self) -> None:
        self.calls.append("pause")
        self.play_state = "paused"

    def cancel(self) -> None:
        self.calls.append("cancel")
        self.cancelled = True
        self.play_state = "idle"

    def set_keyframes(self, keyframes: Sequence[dict[str, Any]]) -> None:
        self.calls.append("set_keyframes")
        self.keyframes = list(keyframes)

    def update_timing(self, timing: AnimationTiming) -> None:
        self.calls.append("update_timing")
        self.timing = timing


class FakeElement:
    def __init__(self, host: FakeHost, name: str):
        self.host = host
        self.name = name
        self.animations: list[FakeAnimation] = []

    def animate(self, keyframes: Sequence[dict[str, Any]], options: AnimationOptions) -> FakeAnimation:
        animation = FakeAnimation(keyframes, options)
        self.animations.append(animation)
        self.host.animations.append(animation)
        return animation


class FakeHost:
    """Selector table plus a flat list of live animations.

    Selectors not in ``elements`` match nothing; selectors in ``invalid``
    raise InvalidSelectorError.
    """

    def __init__(self, elements: dict[str, int] | None = None, invalid: Sequence[str] = ()):
        self.animations: list[FakeAnimation] = []
        self.invalid = set(invalid)
        self.markup: list[str] = []
        self.native_on_render = 0
        self.elements = {
            selector: [FakeElement(self, f"{selector}[{i}]") for i in range(count)]
            for selector, count in (elements or {}).items()
        }

    def query_selector_all(self, selector: str) -> list[FakeElement]:
        if selector in self.invalid:
            raise InvalidSelectorError(selector, "unexpected token")
        return self.elements.get(selector, [])

    def get_animations(self) -> list[FakeAnimation]:
        return [animation for animation in self.animations if not animation.cancelled]

    def render_markup(self, html: str) -> None:
        self.markup.append(html)
        for _ in range(self.native_on_render):
            self.animations.append(FakeAnimation([]))

    def bound(self) -> list[FakeAnimation]:
        return [animation for animation in self.get_animations() if animation.id]


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

