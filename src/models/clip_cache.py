"""URL-indexed clip cache with explicit Unloaded/Loading/Loaded states."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from src.models.errors import AlreadyLoadingError
from src.models.prepared_clip import PreparedClip

logger = logging.getLogger(__name__)


class CacheState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    state: CacheState
    handle: PreparedClip | None = None

    @property
    def is_loaded(self) -> bool:
        return self.state is CacheState.LOADED


_UNLOADED = CacheEntry(CacheState.UNLOADED)


class ClipCache:
    """Track identifier → :class:`CacheEntry`.

    Entries are never evicted; a session's playlist is expected to be small.
    Every transition happens under one lock, so a reader never observes a
    half-installed entry.
    """

    def __init__(self, track_ids: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}
        for track_id in track_ids:
            self._entries[track_id] = _UNLOADED

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, track_id: object) -> bool:
        with self._lock:
            return track_id in self._entries

    def get(self, track_id: str) -> CacheEntry:
        with self._lock:
            return self._entries.get(track_id, _UNLOADED)

    def loaded_ids(self) -> list[str]:
        with self._lock:
            return [k for k, e in self._entries.items() if e.is_loaded]

    def mark_loading(self, track_id: str) -> None:
        with self._lock:
            entry = self._entries.get(track_id, _UNLOADED)
            if entry.state is not CacheState.UNLOADED:
                raise AlreadyLoadingError(track_id, entry.state.value)
            self._entries[track_id] = CacheEntry(CacheState.LOADING)

    def install(self, track_id: str, handle: PreparedClip) -> bool:
        """Store *handle* as the Loaded value for *track_id*.

        Returns ``False`` (and keeps the first handle) when the entry is
        already Loaded; duplicate completions are expected, not errors.
        """
        with self._lock:
            entry = self._entries.get(track_id, _UNLOADED)
            if entry.is_loaded:
                logger.debug(f"Duplicate install ignored for {track_id}")
                return False
            self._entries[track_id] = CacheEntry(CacheState.LOADED, handle)
            return True

    def fail(self, track_id: str) -> None:
        """Loading → Unloaded so a later request can retry."""
        with self._lock:
            entry = self._entries.get(track_id, _UNLOADED)
            if entry.state is CacheState.LOADING:
                self._entries[track_id] = _UNLOADED
