"""Exception types shared across keyline components.

Inside the core, lookups that can miss return ``None``/``False`` instead of
raising. These exceptions mark the seams where a collaborator reports a
failure.
"""

from __future__ import annotations


class KeylineError(Exception):
    """Base class for keyline errors."""

    pass


class InvalidSelectorError(KeylineError):
    """Raised by an animation host when a selector cannot be parsed."""

    def __init__(self, selector: str, reason: str | None = None):
        self.selector = selector
        self.reason = reason
        message = f"Invalid selector {selector!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EditorUnavailableError(KeylineError):
    """Raised when the source editor can no longer serve the session."""

    pass
