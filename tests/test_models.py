"""Tests for plain data models: playback state/policy, prepared clips, errors."""

import dataclasses

import pytest

from src.models.errors import (
    AlreadyLoadingError,
    EmptyPlaylistError,
    LoadFailedError,
    PlaybackError,
    UnknownTrackError,
)
from src.models.playback_state import PlaybackPolicy, PlaybackState
from src.models.prepared_clip import PreparedClip
from src.utils.config import DEFAULT_VOLUME


class TestPlaybackState:
    @pytest.mark.parametrize("state", [PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.COMPLETED])
    def test_has_target(self, state):
        assert state.has_target

    @pytest.mark.parametrize("state", [PlaybackState.IDLE, PlaybackState.AWAITING_LOAD])
    def test_no_target(self, state):
        assert not state.has_target


class TestPlaybackPolicy:
    def test_defaults(self):
        p = PlaybackPolicy()
        assert not (p.shuffle or p.loop or p.autoplay or p.mute)
        assert p.volume == DEFAULT_VOLUME

    def test_volume_clamped_on_construction(self):
        assert PlaybackPolicy(volume=5).volume == 1.0
        assert PlaybackPolicy(volume=-2).volume == 0.0

    def test_with_volume_returns_copy(self):
        p = PlaybackPolicy(shuffle=True)
        q = p.with_volume(0.3)
        assert q is not p
        assert q.volume == 0.3
        assert q.shuffle is True
        assert p.volume == DEFAULT_VOLUME


class TestPreparedClip:
    def test_file_name(self):
        assert PreparedClip("u", "/tmp/cache/abc.mp4").file_name == "abc.mp4"
        assert PreparedClip("u", "C:\\cache\\abc.mp4").file_name == "abc.mp4"

    def test_frozen(self):
        c = PreparedClip("u", "/tmp/a.mp4")
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.size_bytes = 10


class TestErrors:
    def test_hierarchy(self):
        for exc in (
            EmptyPlaylistError(),
            UnknownTrackError("x"),
            AlreadyLoadingError("x", "loading"),
            LoadFailedError("x", "boom"),
        ):
            assert isinstance(exc, PlaybackError)

    def test_load_failed_fields(self):
        err = LoadFailedError("u1", "HTTP 404")
        assert err.track_id == "u1"
        assert err.cause == "HTTP 404"
        assert "u1" in str(err)
