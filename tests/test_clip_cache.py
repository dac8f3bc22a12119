"""Tests for ClipCache state transitions."""

from __future__ import annotations

import pytest

from conftest import clip
from src.models.clip_cache import CacheState, ClipCache
from src.models.errors import AlreadyLoadingError


class TestClipCache:
    def test_seeded_ids_are_unloaded(self):
        cache = ClipCache(["u1", "u2"])
        assert len(cache) == 2
        assert "u1" in cache
        assert cache.get("u1").state is CacheState.UNLOADED
        assert cache.get("u1").handle is None

    def test_unknown_id_reads_as_unloaded(self):
        cache = ClipCache()
        assert cache.get("nope").state is CacheState.UNLOADED
        assert "nope" not in cache

    def test_mark_loading_twice_raises(self):
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        with pytest.raises(AlreadyLoadingError):
            cache.mark_loading("u1")

    def test_mark_loading_on_loaded_raises(self):
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        cache.install("u1", clip("u1"))
        with pytest.raises(AlreadyLoadingError):
            cache.mark_loading("u1")

    def test_install_transitions_to_loaded(self):
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        h = clip("u1")
        assert cache.install("u1", h) is True
        entry = cache.get("u1")
        assert entry.is_loaded
        assert entry.handle is h

    def test_install_is_idempotent(self):
        """두 번째 install은 에러 없이 무시되고 첫 핸들이 유지된다."""
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        first = clip("u1")
        second = clip("u1-other")
        cache.install("u1", first)
        assert cache.install("u1", second) is False
        assert cache.install("u1", first) is False
        assert cache.get("u1").handle is first

    def test_fail_allows_retry(self):
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        cache.fail("u1")
        assert cache.get("u1").state is CacheState.UNLOADED
        cache.mark_loading("u1")
        assert cache.get("u1").state is CacheState.LOADING

    def test_fail_on_loaded_is_noop(self):
        cache = ClipCache(["u1"])
        cache.mark_loading("u1")
        cache.install("u1", clip("u1"))
        cache.fail("u1")
        assert cache.get("u1").is_loaded

    def test_loaded_ids(self):
        cache = ClipCache(["u1", "u2", "u3"])
        for track_id in ("u1", "u3"):
            cache.mark_loading(track_id)
            cache.install(track_id, clip(track_id))
        cache.mark_loading("u2")
        assert sorted(cache.loaded_ids()) == ["u1", "u3"]
