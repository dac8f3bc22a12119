"""ClipFetcher 수명주기, 결과 전달, 실제 QThread 워커 경로 테스트."""

from __future__ import annotations

import threading

import pytest
from PySide6.QtWidgets import QApplication

from conftest import clip, wait_until
from src.models.clip_cache import CacheState, ClipCache
from src.models.errors import LoadFailedError
from src.services.clip_fetcher import ClipFetcher
from src.services.load_pipeline import LoadPipeline
from src.utils.config import CACHE_DIR_PREFIX

# 큐 연결이 GUI 스레드로 돌아오려면 이벤트 루프가 필요
_app = QApplication.instance() or QApplication([])


def _collect(fetcher: ClipFetcher):
    loaded, failed = [], []
    fetcher.loaded.connect(lambda t, h: loaded.append((t, h)))
    fetcher.failed.connect(lambda t, m: failed.append((t, m)))
    return loaded, failed


class TestCacheDir:
    def test_initialize_creates_temp_dir(self):
        fetcher = ClipFetcher()
        path = fetcher.initialize()
        try:
            assert path.is_dir()
            assert path.name.startswith(CACHE_DIR_PREFIX)
            assert fetcher.initialize() == path
        finally:
            fetcher.cleanup()
        assert not path.exists()
        assert fetcher.cache_dir is None

    def test_cleanup_keeps_caller_dir(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        assert fetcher.initialize() == tmp_path
        fetcher.cleanup()
        assert tmp_path.exists()


class TestResults:
    def test_worker_success_forwarded(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        loaded, failed = _collect(fetcher)
        fetcher._in_progress.add("a")

        h = clip("a")
        fetcher._on_worker_finished("a", h)
        assert loaded == [("a", h)]
        assert failed == []
        assert not fetcher.is_fetching("a")

    def test_worker_error_forwarded(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        loaded, failed = _collect(fetcher)
        fetcher._in_progress.add("a")

        fetcher._on_worker_error("a", "HTTP 500")
        assert failed == [("a", "HTTP 500")]
        assert loaded == []
        assert not fetcher.is_fetching("a")

    def test_results_dropped_after_shutdown(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        loaded, failed = _collect(fetcher)
        fetcher.shutdown()

        fetcher._on_worker_finished("a", clip("a"))
        fetcher._on_worker_error("b", "boom")
        assert loaded == []
        assert failed == []


class TestShutdown:
    def test_fetch_after_shutdown_raises(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        fetcher.shutdown()
        with pytest.raises(RuntimeError):
            fetcher.fetch("a")

    def test_duplicate_fetch_is_ignored(self, tmp_path):
        fetcher = ClipFetcher(cache_dir=tmp_path)
        fetcher._in_progress.add("a")
        fetcher.fetch("a")
        assert fetcher._threads == {}
        assert fetcher.is_fetching("a")

    def test_shutdown_removes_owned_dir(self):
        fetcher = ClipFetcher()
        path = fetcher.initialize()
        fetcher.shutdown()
        assert not path.exists()


class TestWorkerThreads:
    """fetch()가 실제 QThread 워커를 돌리고 결과를 GUI 스레드로 넘기는지 검증."""

    def _load(self, tmp_path, track_id):
        cache = ClipCache([track_id])
        fetcher = ClipFetcher(cache_dir=tmp_path / "cache")
        pipeline = LoadPipeline(cache, fetcher)
        results, on_main = [], []

        def listener(result):
            results.append(result)
            on_main.append(threading.current_thread() is threading.main_thread())

        pipeline.request_load(track_id).add_listener(listener)
        try:
            assert wait_until(lambda: results and fetcher._threads == {})
        finally:
            fetcher.shutdown()
        return cache, fetcher, results, on_main

    def test_local_clip_loads_on_main_thread(self, tmp_path):
        src = tmp_path / "clip.mp4"
        src.write_bytes(b"x" * 64)
        cache, fetcher, results, on_main = self._load(tmp_path, str(src))

        (result,) = results
        assert result.ok
        assert result.handle.size_bytes == 64
        assert on_main == [True]
        assert cache.get(str(src)).state is CacheState.LOADED
        assert fetcher._threads == {}
        assert not fetcher.is_fetching(str(src))

    def test_missing_clip_fails(self, tmp_path):
        missing = str(tmp_path / "missing.mp4")
        cache, fetcher, results, on_main = self._load(tmp_path, missing)

        (result,) = results
        assert not result.ok
        assert isinstance(result.error, LoadFailedError)
        assert "not found" in str(result.error.cause)
        assert on_main == [True]
        assert cache.get(missing).state is CacheState.UNLOADED
        assert fetcher._threads == {}
