"""Poll-driven debouncing for expensive side effects."""

from __future__ import annotations

from collections.abc import Callable
import logging
import time
from typing import Any

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


class Debouncer:
    """Trailing-edge debouncer driven by explicit polling.

    Each ``call`` replaces the pending invocation and restarts the wait.
    Nothing runs in the background: the owner calls ``poll`` from its event
    loop (a frame tick, an input event) and the pending call runs once the
    wait has elapsed since the last ``call``.

    Example:
        debouncer = Debouncer(wait_ms=500)
        debouncer.call(rebuild, html)
        ...
        debouncer.poll()  # runs rebuild(html) once 500ms have passed
    """

    def __init__(self, wait_ms: float, clock: Callable[[], float] | None = None):
        """Initialize the debouncer.

        Args:
            wait_ms: Quiet period required before the pending call runs
            clock: Millisecond clock (defaults to a monotonic clock)
        """
        self.wait_ms = wait_ms
        self._clock = clock or monotonic_ms
        self._pending: tuple[Callable[..., Any], tuple[Any, ...]] | None = None
        self._last_call_at = 0.0

    @property
    def pending(self) -> bool:
        """True while an invocation is waiting to run."""
        return self._pending is not None

    def call(self, func: Callable[..., Any], *args: Any) -> None:
        """Schedule ``func(*args)``, replacing any pending invocation."""
        self._pending = (func, args)
        self._last_call_at = self._clock()

    def poll(self) -> bool:
        """Run the pending invocation if the wait has elapsed.

        Returns:
            True if an invocation ran
        """
        if self._pending is None:
            return False
        if self._clock() - self._last_call_at < self.wait_ms:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Run the pending invocation now, regardless of the wait.

        Returns:
            True if an invocation ran
        """
        if self._pending is None:
            return False
        func, args = self._pending
        self._pending = None
        func(*args)
        return True

    def cancel(self) -> None:
        """Drop the pending invocation without running it."""
        if self._pending is not None:
            logger.debug("Cancelled pending debounced call")
        self._pending = None
