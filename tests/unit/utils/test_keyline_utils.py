"""Tests for shared utilities."""

from __future__ import annotations

import json
import logging

import pytest

from keyline.core.utils.debounce import Debouncer
from keyline.core.utils.formatting import camel_case, collapse_whitespace, strip_whitespace
from keyline.core.utils.logging import (
    StructuredJSONFormatter,
    get_logger,
    log_performance,
)
from keyline.core.utils.math import clamp
from tests.fakes import FakeClock


class TestFormatting:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("opacity", "opacity"),
            ("background-color", "backgroundColor"),
            ("Border-Top-Width", "borderTopWidth"),
            ("-webkit-transform", "webkitTransform"),
            ("--accent", "--accent"),
        ],
    )
    def test_camel_case(self, name: str, expected: str) -> None:
        assert camel_case(name) == expected

    def test_whitespace_helpers(self) -> None:
        assert collapse_whitespace("  .a \n\t >  .b ") == ".a > .b"
        assert strip_whitespace(" .a >\n.b ") == ".a>.b"


def test_clamp() -> None:
    assert clamp(5, 0, 3) == 3
    assert clamp(-1.5, 0.0, 1.0) == 0.0
    assert clamp(0.5, 0.0, 1.0) == 0.5


class TestDebouncer:
    """Tests for the poll-driven debouncer."""

    def test_runs_after_quiet_period(self) -> None:
        clock = FakeClock()
        calls: list[str] = []
        debouncer = Debouncer(100, clock=clock)

        debouncer.call(calls.append, "a")
        clock.advance(99)
        assert debouncer.poll() is False
        clock.advance(1)
        assert debouncer.poll() is True
        assert debouncer.poll() is False
        assert calls == ["a"]

    def test_call_replaces_pending_and_restarts_wait(self) -> None:
        clock = FakeClock()
        calls: list[str] = []
        debouncer = Debouncer(100, clock=clock)

        debouncer.call(calls.append, "a")
        clock.advance(80)
        debouncer.call(calls.append, "b")
        clock.advance(80)
        assert debouncer.poll() is False
        clock.advance(20)
        assert debouncer.poll() is True
        assert calls == ["b"]

    def test_cancel_and_flush(self) -> None:
        calls: list[str] = []
        debouncer = Debouncer(100, clock=FakeClock())

        debouncer.call(calls.append, "a")
        debouncer.cancel()
        assert debouncer.pending is False
        assert debouncer.flush() is False

        debouncer.call(calls.append, "b")
        assert debouncer.flush() is True
        assert calls == ["b"]


class TestLogging:
    """Tests for logging helpers."""

    def test_structured_formatter(self) -> None:
        record = logging.LogRecord(
            name="keyline.test",
            level=logging.WARNING,
            pathname="/path/to/file.py",
            lineno=7,
            msg="Duplicate animation id %r",
            args=("fade .a 0",),
            exc_info=None,
        )
        record.session_id = "abc"

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "Duplicate animation id 'fade .a 0'"
        assert data["context"]["logger_name"] == "keyline.test"
        assert data["context"]["session_id"] == "abc"

    def test_get_logger_with_context(self) -> None:
        adapter = get_logger("keyline.test", session_id="abc")
        assert isinstance(adapter, logging.LoggerAdapter)
        assert adapter.extra == {"session_id": "abc"}
        assert isinstance(get_logger("keyline.test"), logging.Logger)

    def test_log_performance(self, caplog: pytest.LogCaptureFixture) -> None:
        @log_performance
        def add(a: int, b: int) -> int:
            return a + b

        with caplog.at_level(logging.DEBUG):
            assert add(2, 3) == 5
        assert "'add' took" in caplog.text
