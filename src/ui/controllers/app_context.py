"""AppContext — Controller 간 공유 상태 및 협력 객체 참조.

PlayerWindow가 초기화 후 이 객체를 생성하여 Controller에 주입한다.
Controller는 self.ctx 로 접근.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from src.models.playback_state import PlaybackPolicy

if TYPE_CHECKING:
    from PySide6.QtWidgets import QMainWindow

    from src.models.clip_cache import ClipCache
    from src.models.playlist import PlaylistIndex
    from src.services.clip_fetcher import ClipFetcher
    from src.services.load_pipeline import LoadPipeline
    from src.services.media_decoder import MediaDecoder
    from src.services.settings_manager import SettingsManager


class AppContext:
    """Controller들이 공유하는 상태 및 협력 객체 컨테이너.

    모든 필드는 PlayerWindow.__init__ 이후 설정됨.
    """

    def __init__(self) -> None:
        # ---- Core state ----
        self.playlist: PlaylistIndex = None  # type: ignore[assignment]
        self.cache: ClipCache = None  # type: ignore[assignment]
        self.policy: PlaybackPolicy = PlaybackPolicy()
        self.window: QMainWindow | None = None

        # ---- Services ----
        self.fetcher: ClipFetcher = None  # type: ignore[assignment]
        self.pipeline: LoadPipeline = None  # type: ignore[assignment]
        self.decoder: MediaDecoder = None  # type: ignore[assignment]
        self.settings: SettingsManager | None = None

        # ---- Controller 참조 (PlayerWindow가 설정) ----
        self.playback_ctrl: Any = None

    def persist_policy(self) -> None:
        """현재 정책을 설정 저장소에 기록 (설정이 없으면 무시)."""
        if self.settings is not None:
            self.settings.save_policy(self.policy)
