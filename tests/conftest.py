"""Shared test helpers. Qt runs headless; fetchers are in-memory fakes."""

from __future__ import annotations

import os
import time

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication, QObject, Signal

from src.models.prepared_clip import PreparedClip
from src.services.settings_manager import SettingsManager


class FakeFetcher(QObject):
    """FetchAndPrepare stand-in: records fetch() calls, resolves on demand."""

    loaded = Signal(str, object)
    failed = Signal(str, str)

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.raise_on_fetch: Exception | None = None

    def fetch(self, track_id: str) -> None:
        self.calls.append(track_id)
        if self.raise_on_fetch is not None:
            raise self.raise_on_fetch

    def resolve(self, track_id: str, handle: PreparedClip | None = None) -> PreparedClip:
        handle = handle or clip(track_id)
        self.loaded.emit(track_id, handle)
        return handle

    def reject(self, track_id: str, message: str = "boom") -> None:
        self.failed.emit(track_id, message)


class SeqRandom:
    """RandomSource returning a fixed sequence of picks."""

    def __init__(self, *picks: int) -> None:
        self._picks = list(picks)
        self.calls: list[int] = []

    def uniform_index(self, n: int) -> int:
        self.calls.append(n)
        return self._picks.pop(0)


# QSettings를 in-memory dict로 모킹하는 헬퍼
class _FakeQSettings:
    def __init__(self):
        self._data: dict[str, object] = {}

    def value(self, key: str, default=None, type_=None):
        return self._data.get(key, default)

    def setValue(self, key: str, value) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def sync(self) -> None:
        pass


def make_settings() -> tuple[SettingsManager, _FakeQSettings]:
    """SettingsManager + FakeQSettings 쌍 반환."""
    fake = _FakeQSettings()
    mgr = SettingsManager.__new__(SettingsManager)
    mgr._settings = fake
    return mgr, fake


def wait_until(predicate, timeout: float = 5.0) -> bool:
    """Qt 이벤트를 돌리며 *predicate*가 참이 될 때까지 대기."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def clip(track_id: str) -> PreparedClip:
    return PreparedClip(track_id=track_id, local_path=f"/tmp/clips/{track_id}.mp4", size_bytes=1024)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
