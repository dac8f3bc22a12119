"""ClipFetcher — FetchAndPrepare collaborator backed by QThread workers."""

from __future__ import annotations

import itertools
import logging
import shutil
import tempfile
from pathlib import Path

from PySide6.QtCore import QObject, QThread, Signal, Slot

from src.utils.config import CACHE_DIR_PREFIX
from src.workers.clip_load_worker import ClipLoadWorker

logger = logging.getLogger(__name__)


class ClipFetcher(QObject):
    """Runs one :class:`ClipLoadWorker` per requested track.

    ClipFetcher는 GUI 스레드에 사는 QObject이므로 worker signal → slot 연결이
    QueuedConnection으로 해석되어 결과가 항상 GUI 스레드에서 다시 방출된다.

    Signals:
        loaded(str, PreparedClip): Fetch succeeded.
        failed(str, str): Fetch failed with an error message.
        progress(str): Worker status message.
    """

    loaded = Signal(str, object)
    failed = Signal(str, str)
    progress = Signal(str)

    def __init__(self, cache_dir: Path | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cache_dir = cache_dir
        self._owns_cache_dir = cache_dir is None
        self._threads: dict[int, tuple[QThread, ClipLoadWorker]] = {}
        self._in_progress: set[str] = set()
        self._keys = itertools.count()
        self._shut_down = False

    @property
    def cache_dir(self) -> Path | None:
        return self._cache_dir

    def initialize(self) -> Path:
        """Create a temp directory for this session's downloaded clips."""
        if self._cache_dir is None:
            self._cache_dir = Path(tempfile.mkdtemp(prefix=CACHE_DIR_PREFIX))
        return self._cache_dir

    def cleanup(self) -> None:
        """Remove the session cache directory if this fetcher created it."""
        if self._owns_cache_dir and self._cache_dir and self._cache_dir.exists():
            shutil.rmtree(self._cache_dir, ignore_errors=True)
            self._cache_dir = None

    def is_fetching(self, track_id: str) -> bool:
        return track_id in self._in_progress

    def fetch(self, track_id: str) -> None:
        if self._shut_down:
            raise RuntimeError("ClipFetcher has been shut down")
        if track_id in self._in_progress:
            logger.warning(f"Fetch already running for {track_id}; not starting another")
            return

        key = next(self._keys)
        thread = QThread()
        worker = ClipLoadWorker(track_id, self.initialize())
        worker.moveToThread(thread)

        worker.progress.connect(self.progress)
        worker.finished.connect(self._on_worker_finished)
        worker.error.connect(self._on_worker_error)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        thread.finished.connect(lambda k=key: self._on_thread_finished(k))
        thread.started.connect(worker.run)

        self._threads[key] = (thread, worker)
        self._in_progress.add(track_id)
        thread.start()

    @Slot(str, object)
    def _on_worker_finished(self, track_id: str, handle: object) -> None:
        self._in_progress.discard(track_id)
        if self._shut_down:
            return
        self.loaded.emit(track_id, handle)

    @Slot(str, str)
    def _on_worker_error(self, track_id: str, message: str) -> None:
        self._in_progress.discard(track_id)
        if self._shut_down:
            return
        self.failed.emit(track_id, message)

    def _on_thread_finished(self, key: int) -> None:
        entry = self._threads.pop(key, None)
        if entry is None:
            return
        thread, worker = entry
        worker.deleteLater()
        thread.deleteLater()

    def shutdown(self, timeout_ms: int = 5000) -> None:
        """Cancel outstanding workers, join their threads and drop the cache dir."""
        self._shut_down = True
        for thread, worker in list(self._threads.values()):
            worker.cancel()
            thread.quit()
        for thread, _worker in list(self._threads.values()):
            if thread.isRunning() and not thread.wait(timeout_ms):
                logger.warning("Clip load thread did not stop in time")
        self._threads.clear()
        self._in_progress.clear()
        self.cleanup()
