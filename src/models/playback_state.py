"""Playback state tags and policy flags (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from src.utils.config import DEFAULT_VOLUME


class PlaybackState(Enum):
    IDLE = "idle"
    AWAITING_LOAD = "awaiting_load"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"

    @property
    def has_target(self) -> bool:
        """True when a decoder target is installed (seek/pause make sense)."""
        return self in (PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.COMPLETED)


def _clamp_volume(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(slots=True)
class PlaybackPolicy:
    """Independently togglable flags read by the coordinator's transitions."""

    shuffle: bool = False
    loop: bool = False
    autoplay: bool = False
    mute: bool = False
    volume: float = field(default=DEFAULT_VOLUME)

    def __post_init__(self) -> None:
        self.volume = _clamp_volume(self.volume)

    def with_volume(self, value: float) -> PlaybackPolicy:
        return replace(self, volume=_clamp_volume(value))

