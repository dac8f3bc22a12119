"""Playback/cache error types (pure Python, no Qt dependency)."""

from __future__ import annotations


class PlaybackError(Exception):
    """Base class for all coordinator-level errors."""


class EmptyPlaylistError(PlaybackError):
    """Navigation was requested on a playlist with zero tracks."""

    def __init__(self) -> None:
        super().__init__("Playlist is empty")


class UnknownTrackError(PlaybackError, KeyError):
    """The track identifier is not part of the playlist."""

    def __init__(self, track_id: str) -> None:
        super().__init__(f"Playlist does not contain track: {track_id}")
        self.track_id = track_id

    def __str__(self) -> str:
        # KeyError는 repr()로 감싸므로 메시지를 그대로 노출
        return self.args[0]


class AlreadyLoadingError(PlaybackError):
    """Single-flight violation: ``mark_loading`` called on a busy entry."""

    def __init__(self, track_id: str, state: str) -> None:
        super().__init__(f"Track {track_id} is already {state}")
        self.track_id = track_id


class LoadFailedError(PlaybackError):
    """Fetch/prepare for a track failed. *cause* is opaque to the pipeline."""

    def __init__(self, track_id: str, cause: object) -> None:
        super().__init__(f"Failed to load {track_id}: {cause}")
        self.track_id = track_id
        self.cause = cause
