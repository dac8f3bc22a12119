"""Single-flight clip loader in front of the ClipCache.

A request either completes synchronously from the cache, joins the load
already in flight for the same track, or starts exactly one fetch. Fetch
results arrive through the fetcher's ``loaded``/``failed`` signals, are
installed into the cache first and only then fan out to listeners.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from PySide6.QtCore import QObject, Signal, Slot

from src.models.clip_cache import CacheState, ClipCache
from src.models.errors import AlreadyLoadingError, LoadFailedError
from src.models.prepared_clip import PreparedClip

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadResult:
    track_id: str
    handle: PreparedClip | None = None
    error: LoadFailedError | None = None

    @property
    def ok(self) -> bool:
        return self.handle is not None


LoadListener = Callable[[LoadResult], None]


class PendingLoad:
    """Handle on one load operation; listeners fire exactly once each."""

    def __init__(self, track_id: str) -> None:
        self.track_id = track_id
        self._result: LoadResult | None = None
        self._listeners: list[LoadListener] = []

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> LoadResult | None:
        return self._result

    def add_listener(self, listener: LoadListener) -> None:
        """Attach *listener*; runs immediately if the load already finished."""
        if self._result is not None:
            listener(self._result)
            return
        self._listeners.append(listener)

    def complete(self, result: LoadResult) -> None:
        if self._result is not None:
            logger.warning(f"PendingLoad for {self.track_id} completed twice; ignoring")
            return
        self._result = result
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            try:
                listener(result)
            except Exception:
                # 한 리스너의 실패가 나머지 알림을 막지 않도록
                logger.exception(f"Load listener failed for {self.track_id}")


class ClipFetcherLike(Protocol):
    """What the pipeline needs from the FetchAndPrepare collaborator."""

    loaded: Signal  # (track_id: str, handle: PreparedClip)
    failed: Signal  # (track_id: str, message: str)

    def fetch(self, track_id: str) -> None:
        ...


class LoadPipeline(QObject):
    """Asynchronous single-flight loader.

    Signals:
        load_started(str): A fetch was issued for the track.
        load_finished(str, bool): The fetch for the track ended (ok flag).
    """

    load_started = Signal(str)
    load_finished = Signal(str, bool)

    def __init__(self, cache: ClipCache, fetcher: ClipFetcherLike, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cache = cache
        self._fetcher = fetcher
        self._pending: dict[str, PendingLoad] = {}
        fetcher.loaded.connect(self.on_fetch_succeeded)
        fetcher.failed.connect(self.on_fetch_failed)

    @property
    def cache(self) -> ClipCache:
        return self._cache

    def in_flight(self) -> list[str]:
        return list(self._pending)

    def request_load(self, track_id: str) -> PendingLoad:
        entry = self._cache.get(track_id)

        if entry.state is CacheState.LOADED:
            pending = PendingLoad(track_id)
            pending.complete(LoadResult(track_id, handle=entry.handle))
            logger.debug(f"Cache hit: {track_id}")
            return pending

        if entry.state is CacheState.LOADING:
            pending = self._pending.get(track_id)
            if pending is None:
                # 캐시는 LOADING인데 추적 중인 요청이 없음 → 누군가 파이프라인을 우회함
                raise AlreadyLoadingError(track_id, entry.state.value)
            logger.debug(f"Joining in-flight load: {track_id}")
            return pending

        self._cache.mark_loading(track_id)
        pending = PendingLoad(track_id)
        self._pending[track_id] = pending
        logger.info(f"Loading clip: {track_id}")
        self.load_started.emit(track_id)
        try:
            self._fetcher.fetch(track_id)
        except Exception as e:
            logger.exception(f"Fetcher refused {track_id}")
            self.on_fetch_failed(track_id, str(e))
        return pending

    # ---- fetcher completion (GUI thread) ----

    @Slot(str, object)
    def on_fetch_succeeded(self, track_id: str, handle: PreparedClip) -> None:
        pending = self._pending.pop(track_id, None)
        if pending is None:
            logger.warning(f"Unexpected load completion for {track_id}; ignoring")
            return
        self._cache.install(track_id, handle)
        logger.info(f"Clip ready: {track_id}")
        self.load_finished.emit(track_id, True)
        pending.complete(LoadResult(track_id, handle=handle))

    @Slot(str, str)
    def on_fetch_failed(self, track_id: str, cause: object) -> None:
        pending = self._pending.pop(track_id, None)
        if pending is None:
            logger.warning(f"Unexpected load failure for {track_id}; ignoring")
            return
        self._cache.fail(track_id)
        error = LoadFailedError(track_id, cause)
        logger.warning(str(error))
        self.load_finished.emit(track_id, False)
        pending.complete(LoadResult(track_id, error=error))
