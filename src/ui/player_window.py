"""PlayerWindow — 비디오 표면 + 트랜스포트 바, 코디네이터 배선."""

from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent, QKeySequence, QShortcut
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QMainWindow, QVBoxLayout, QWidget

from src.models.clip_cache import ClipCache
from src.models.errors import EmptyPlaylistError
from src.models.playback_state import PlaybackState
from src.models.playlist import PlaylistIndex
from src.services.clip_fetcher import ClipFetcher
from src.services.load_pipeline import LoadPipeline
from src.services.media_decoder import MediaDecoder
from src.services.settings_manager import SettingsManager
from src.ui.controllers.app_context import AppContext
from src.ui.controllers.playback_coordinator import PlaybackCoordinator
from src.ui.playback_controls import PlaybackControls
from src.utils.config import APP_NAME, POSITION_POLL_MS, SKIP_SECONDS
from src.utils.i18n import tr

logger = logging.getLogger(__name__)

_STATE_LABELS = {
    PlaybackState.IDLE: "Ready",
    PlaybackState.AWAITING_LOAD: "Loading",
    PlaybackState.PLAYING: "Playing",
    PlaybackState.PAUSED: "Paused",
    PlaybackState.COMPLETED: "Completed",
}


class PlayerWindow(QMainWindow):
    """Top-level window. Owns the collaborators and forwards UI events to the coordinator."""

    def __init__(self, track_ids: Sequence[str], settings: SettingsManager | None = None,
                 decoder: MediaDecoder | None = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle(APP_NAME)
        self.resize(960, 600)

        self._settings = settings or SettingsManager()

        # ---- 협력 객체 구성 ----
        ctx = AppContext()
        ctx.window = self
        ctx.settings = self._settings
        ctx.policy = self._settings.load_policy()
        ctx.playlist = PlaylistIndex(track_ids)
        ctx.cache = ClipCache(ctx.playlist)
        ctx.fetcher = ClipFetcher(parent=self)
        ctx.pipeline = LoadPipeline(ctx.cache, ctx.fetcher, parent=self)
        ctx.decoder = decoder or MediaDecoder(parent=self)
        self.ctx = ctx

        # ---- 위젯 ----
        self._video_widget = QVideoWidget()
        self._video_widget.setMinimumSize(640, 360)
        ctx.decoder.player.setVideoOutput(self._video_widget)
        self._controls = PlaybackControls()
        self._controls.set_policy(ctx.policy)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._video_widget, 1)
        layout.addWidget(self._controls)
        self.setCentralWidget(central)

        # ---- Controller ----
        self._coordinator = PlaybackCoordinator(ctx)
        ctx.playback_ctrl = self._coordinator

        self._position_timer = QTimer(self)
        self._position_timer.setInterval(POSITION_POLL_MS)
        self._position_timer.timeout.connect(self._coordinator.refresh_position)

        self._connect_signals()
        self._setup_shortcuts()
        self.statusBar().showMessage(tr("Ready"))

    @property
    def coordinator(self) -> PlaybackCoordinator:
        return self._coordinator

    @property
    def controls(self) -> PlaybackControls:
        return self._controls

    def _connect_signals(self) -> None:
        controls = self._controls
        coord = self._coordinator

        controls.play_toggled.connect(lambda: self._guarded(coord.play_pause))
        controls.next_requested.connect(lambda: self._guarded(coord.next))
        controls.previous_requested.connect(lambda: self._guarded(coord.previous))
        controls.shuffle_toggled.connect(coord.select_shuffle)
        controls.loop_toggled.connect(coord.select_loop)
        controls.autoplay_toggled.connect(coord.select_autoplay)
        controls.mute_toggled.connect(coord.toggle_mute)
        controls.scrub_requested.connect(coord.scrub_to)
        controls.volume_changed.connect(coord.set_volume)

        coord.state_changed.connect(self._on_state_changed)
        coord.track_changed.connect(self._on_track_changed)
        coord.loading_changed.connect(controls.set_loading)
        coord.position_changed.connect(controls.set_position)
        coord.scrub_reset.connect(controls.reset_scrub)
        coord.mute_changed.connect(controls.set_muted)
        coord.load_failed.connect(self._on_load_failed)

        self.ctx.fetcher.progress.connect(lambda msg: self.statusBar().showMessage(msg, 3000))

    def _setup_shortcuts(self) -> None:
        coord = self._coordinator
        bindings = (
            ("Space", lambda: self._guarded(coord.play_pause)),
            ("N", lambda: self._guarded(coord.next)),
            ("P", lambda: self._guarded(coord.previous)),
            ("S", lambda: self._guarded(coord.play_random)),
            ("R", coord.restart),
            ("M", coord.toggle_mute),
            ("Right", lambda: coord.skip(SKIP_SECONDS)),
            ("Left", lambda: coord.skip(-SKIP_SECONDS)),
        )
        for key, slot in bindings:
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(slot)

    def _guarded(self, command) -> None:
        """Run a navigation command; an empty playlist is reported, not raised."""
        try:
            command()
        except EmptyPlaylistError:
            logger.warning("Navigation requested with an empty playlist")
            self.statusBar().showMessage(
                f"{tr('Playlist is empty')}. {tr('Add clip URLs on the command line or in settings.')}"
            )

    def start(self) -> None:
        """Kick off the first clip when autostart is enabled."""
        if len(self.ctx.playlist) == 0:
            self.statusBar().showMessage(tr("Playlist is empty"))
            return
        if self._settings.get_autostart():
            self._coordinator.play_pause()

    # ---- coordinator outputs ----

    def _on_state_changed(self, state: PlaybackState) -> None:
        self._controls.set_state(state)
        if state is PlaybackState.PLAYING:
            self._position_timer.start()
        else:
            self._position_timer.stop()
        track = self._coordinator.current_track or ""
        self.statusBar().showMessage(f"{tr(_STATE_LABELS[state])}: {track}" if track else tr(_STATE_LABELS[state]))

    def _on_track_changed(self, track_id: str) -> None:
        name = track_id.rstrip("/").rsplit("/", 1)[-1]
        self.setWindowTitle(f"{name} – {APP_NAME}")

    def _on_load_failed(self, track_id: str, cause: str) -> None:
        self.statusBar().showMessage(f"{tr('Failed to load')}: {track_id} ({cause})")

    def closeEvent(self, event: QCloseEvent) -> None:
        self._position_timer.stop()
        self._coordinator.shutdown()
        self.ctx.fetcher.shutdown()
        self._settings.sync()
        super().closeEvent(event)
