"""Playlist index: ordered track identifiers plus a cursor (pure Python, no Qt dependency)."""

from __future__ import annotations

import random
from typing import Iterator, Protocol, Sequence

from src.models.errors import EmptyPlaylistError, UnknownTrackError

# 아직 아무 트랙도 선택되지 않은 상태
NO_TRACK = -1


class RandomSource(Protocol):
    def uniform_index(self, n: int) -> int:
        """Return an int uniformly sampled from ``range(n)``."""
        ...


class SystemRandomSource:
    """RandomSource backed by :class:`random.Random`."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def uniform_index(self, n: int) -> int:
        return self._rng.randrange(n)


class PlaylistIndex:
    """Ordered, fixed sequence of track identifiers with a cursor.

    The cursor is either a valid index or ``NO_TRACK`` (-1). Only
    :meth:`move_to` mutates it; ``next``/``previous``/``random`` are pure
    target computations so the coordinator decides when to commit.
    """

    def __init__(self, track_ids: Sequence[str], rng: RandomSource | None = None) -> None:
        tracks = tuple(track_ids)
        seen: set[str] = set()
        for track_id in tracks:
            if track_id in seen:
                raise ValueError(f"Duplicate track in playlist: {track_id}")
            seen.add(track_id)
        self._tracks = tracks
        self._rng = rng or SystemRandomSource()
        self._cursor = NO_TRACK

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    @property
    def tracks(self) -> tuple[str, ...]:
        return self._tracks

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_track(self) -> str | None:
        if self._cursor == NO_TRACK:
            return None
        return self._tracks[self._cursor]

    def track_at(self, index: int) -> str:
        if not 0 <= index < len(self._tracks):
            raise IndexError(f"Playlist index out of range: {index}")
        return self._tracks[index]

    def index_of(self, track_id: str) -> int:
        try:
            return self._tracks.index(track_id)
        except ValueError:
            raise UnknownTrackError(track_id) from None

    def move_to(self, index: int) -> None:
        if index != NO_TRACK and not 0 <= index < len(self._tracks):
            raise IndexError(f"Playlist index out of range: {index}")
        self._cursor = index

    # ---- target computation ----

    def _require_tracks(self) -> int:
        n = len(self._tracks)
        if n == 0:
            raise EmptyPlaylistError()
        return n

    def next(self, current: int) -> int:
        n = self._require_tracks()
        return (current + 1) % n

    def previous(self, current: int) -> int:
        """Step back one track with wraparound.

        From the ``NO_TRACK`` sentinel this lands on the last track,
        the same as decrementing below zero from the first one.
        """
        n = self._require_tracks()
        if current < 0:
            return n - 1
        return (current - 1 + n) % n

    def random(self, excluding: int) -> int:
        """Pick a uniformly random index other than *excluding*.

        A one-track playlist has no alternative, so index 0 comes back
        and the caller replays the same track.
        """
        n = self._require_tracks()
        if n == 1:
            return 0
        if not 0 <= excluding < n:
            return self._rng.uniform_index(n)
        # n-1 후보 중에서 뽑고 excluding 이후는 한 칸 밀어낸다
        pick = self._rng.uniform_index(n - 1)
        if pick >= excluding:
            pick += 1
        return pick
