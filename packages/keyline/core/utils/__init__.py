"""Shared utilities for keyline."""

from keyline.core.utils.debounce import Debouncer, monotonic_ms
from keyline.core.utils.formatting import camel_case, collapse_whitespace, strip_whitespace
from keyline.core.utils.math import clamp

__all__ = [
    "Debouncer",
    "camel_case",
    "clamp",
    "collapse_whitespace",
    "monotonic_ms",
    "strip_whitespace",
]
