"""Tests for easing models."""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError
import pytest

from keyline.core.curves.models import CubicBezierEasing, JumpTerm, StepsEasing, TimelineEasing


def test_steps_count_must_be_positive() -> None:
    """A steps() easing needs at least one step."""
    with pytest.raises(ValidationError):
        StepsEasing(count=0)


def test_easing_is_immutable() -> None:
    easing = StepsEasing(count=2)
    with pytest.raises(ValidationError):
        easing.count = 3


def test_discriminated_union_picks_kind() -> None:
    """The ``kind`` field selects the easing shape."""
    adapter = TypeAdapter(TimelineEasing)

    curve = adapter.validate_python({"kind": "curve", "control_points": [[0, 0], [1, 1]]})
    steps = adapter.validate_python({"kind": "steps", "count": 3, "jump_term": "jump-none"})

    assert isinstance(curve, CubicBezierEasing)
    assert curve.control_points == ((0.0, 0.0), (1.0, 1.0))
    assert steps == StepsEasing(count=3, jump_term=JumpTerm.NONE)


def test_extra_fields_rejected() -> None:
    with pytest.raises(ValidationError):
        CubicBezierEasing(control_points=((0, 0), (1, 1)), label="x")
