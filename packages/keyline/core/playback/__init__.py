"""Playback state and reconciliation of host animations."""

from keyline.core.playback.controller import (
    NullPlaybackController,
    PlaybackController,
    binding_id,
    split_pseudo_element,
)
from keyline.core.playback.models import (
    AnimationOptions,
    AnimationTiming,
    PlayState,
    PlayStatus,
)
from keyline.core.playback.protocols import (
    AnimationHost,
    HostAnimation,
    HostElement,
    PlaybackControls,
)

__all__ = [
    "AnimationHost",
    "AnimationOptions",
    "AnimationTiming",
    "HostAnimation",
    "HostElement",
    "NullPlaybackController",
    "PlayState",
    "PlayStatus",
    "PlaybackController",
    "PlaybackControls",
    "binding_id",
    "split_pseudo_element",
]
