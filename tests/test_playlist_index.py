"""Tests for PlaylistIndex target computation and cursor bounds."""

from __future__ import annotations

import pytest

from conftest import SeqRandom
from src.models.errors import EmptyPlaylistError, UnknownTrackError
from src.models.playlist import NO_TRACK, PlaylistIndex, SystemRandomSource


TRACKS = ["a", "b", "c", "d"]


class TestConstruction:
    def test_starts_at_sentinel(self):
        pl = PlaylistIndex(TRACKS)
        assert pl.cursor == NO_TRACK
        assert pl.current_track is None
        assert len(pl) == 4

    def test_duplicates_rejected(self):
        with pytest.raises(ValueError):
            PlaylistIndex(["a", "b", "a"])

    def test_iteration_keeps_order(self):
        assert list(PlaylistIndex(TRACKS)) == TRACKS
        assert "c" in PlaylistIndex(TRACKS)


class TestNextPrevious:
    @pytest.mark.parametrize("start", range(4))
    def test_next_n_times_returns_to_start(self, start):
        pl = PlaylistIndex(TRACKS)
        idx = start
        for _ in range(len(TRACKS)):
            idx = pl.next(idx)
            assert 0 <= idx < len(TRACKS)
        assert idx == start

    @pytest.mark.parametrize("start", range(4))
    def test_previous_is_inverse_of_next(self, start):
        pl = PlaylistIndex(TRACKS)
        assert pl.previous(pl.next(start)) == start
        assert pl.next(pl.previous(start)) == start

    def test_next_from_sentinel_is_first(self):
        assert PlaylistIndex(TRACKS).next(NO_TRACK) == 0

    def test_previous_from_sentinel_is_last(self):
        assert PlaylistIndex(TRACKS).previous(NO_TRACK) == 3

    def test_wraps_at_edges(self):
        pl = PlaylistIndex(TRACKS)
        assert pl.next(3) == 0
        assert pl.previous(0) == 3

    def test_empty_playlist_fails(self):
        pl = PlaylistIndex([])
        with pytest.raises(EmptyPlaylistError):
            pl.next(NO_TRACK)
        with pytest.raises(EmptyPlaylistError):
            pl.previous(NO_TRACK)
        with pytest.raises(EmptyPlaylistError):
            pl.random(NO_TRACK)


class TestRandom:
    def test_single_track_returns_same(self):
        pl = PlaylistIndex(["only"])
        assert pl.random(excluding=0) == 0

    def test_never_returns_excluded(self):
        pl = PlaylistIndex(TRACKS, rng=SystemRandomSource(seed=1234))
        for current in range(len(TRACKS)):
            picks = {pl.random(current) for _ in range(200)}
            assert current not in picks
            assert picks == set(range(len(TRACKS))) - {current}

    def test_pick_after_excluded_is_shifted(self):
        rng = SeqRandom(0, 1, 2)
        pl = PlaylistIndex(TRACKS, rng=rng)
        assert pl.random(1) == 0
        assert pl.random(1) == 2
        assert pl.random(1) == 3
        # n-1개 후보에서만 뽑아야 함
        assert rng.calls == [3, 3, 3]

    def test_from_sentinel_samples_whole_range(self):
        rng = SeqRandom(3)
        pl = PlaylistIndex(TRACKS, rng=rng)
        assert pl.random(NO_TRACK) == 3
        assert rng.calls == [4]


class TestCursor:
    def test_move_to_updates_current_track(self):
        pl = PlaylistIndex(TRACKS)
        pl.move_to(2)
        assert pl.cursor == 2
        assert pl.current_track == "c"

    def test_move_to_out_of_range(self):
        pl = PlaylistIndex(TRACKS)
        with pytest.raises(IndexError):
            pl.move_to(4)
        with pytest.raises(IndexError):
            pl.move_to(-2)
        assert pl.cursor == NO_TRACK

    def test_move_back_to_sentinel(self):
        pl = PlaylistIndex(TRACKS)
        pl.move_to(1)
        pl.move_to(NO_TRACK)
        assert pl.current_track is None

    def test_index_of_unknown(self):
        pl = PlaylistIndex(TRACKS)
        assert pl.index_of("d") == 3
        with pytest.raises(UnknownTrackError) as exc:
            pl.index_of("zzz")
        assert isinstance(exc.value, KeyError)
        assert "zzz" in str(exc.value)

    def test_track_at_bounds(self):
        pl = PlaylistIndex(TRACKS)
        assert pl.track_at(0) == "a"
        with pytest.raises(IndexError):
            pl.track_at(-1)
