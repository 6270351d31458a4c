"""Shared pytest fixtures for keyline tests."""

from __future__ import annotations

import pytest

from keyline.core.config.models import KeylineConfig
from keyline.core.editing.document import SourceDocument
from tests.fakes import FakeClock, FakeHost

# ============================================================================
# Stylesheet Fixtures
# ============================================================================

FADE_CSS = ".a{animation:fade 1s 2s ease-in;}@keyframes fade{from{opacity:0}to{opacity:1}}"

MULTI_SLOT_CSS = """\
.card {
  animation: slide 400ms ease-out, pulse 1s 200ms infinite alternate;
  transition: color 150ms linear;
}

@keyframes slide {
  from { transform: translateX(-20px); }
  60% { transform: translateX(4px); animation-timing-function: ease-in; }
  to { transform: translateX(0); }
}

@keyframes pulse {
  50% { opacity: 0.5; }
}
"""


@pytest.fixture
def fade_css() -> str:
    """One animation with a 1s duration, a 2s delay and two keyframes."""
    return FADE_CSS


@pytest.fixture
def multi_slot_css() -> str:
    """Two animation slots plus one transition on the same selector."""
    return MULTI_SLOT_CSS


# ============================================================================
# Editor Fixtures
# ============================================================================


@pytest.fixture
def fade_document(fade_css: str) -> SourceDocument:
    return SourceDocument(fade_css)


@pytest.fixture
def multi_slot_document(multi_slot_css: str) -> SourceDocument:
    return SourceDocument(multi_slot_css)


# ============================================================================
# Playback Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock starting at 0ms."""
    return FakeClock()


@pytest.fixture
def host() -> FakeHost:
    """Host with one ``.a`` element and two ``.card`` elements."""
    return FakeHost({".a": 1, ".card": 2})


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def config() -> KeylineConfig:
    """Config with a short markup debounce."""
    return KeylineConfig(markup_debounce_ms=100.0)

