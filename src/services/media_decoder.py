"""MediaDecoder — QMediaPlayer/QAudioOutput adapter driven by the coordinator."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from src.models.prepared_clip import PreparedClip
from src.utils.config import DEFAULT_VOLUME
from src.utils.time_utils import ms_to_seconds, seconds_to_ms

logger = logging.getLogger(__name__)


class MediaDecoder(QObject):
    """Start/pause/resume/stop/seek on a single QMediaPlayer.

    Times are exposed in seconds. ``end_reached`` fires when the player
    reports EndOfMedia for the current clip; ``failed`` fires when the
    current clip cannot be decoded.
    """

    end_reached = Signal()
    failed = Signal(str)
    playing_changed = Signal(bool)

    def __init__(self, player: QMediaPlayer | None = None, audio_output: QAudioOutput | None = None,
                 parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._player = player or QMediaPlayer(self)
        self._audio_output = audio_output or QAudioOutput(self)
        self._player.setAudioOutput(self._audio_output)
        self._audio_output.setVolume(DEFAULT_VOLUME)
        self._handle: PreparedClip | None = None

        self._player.mediaStatusChanged.connect(self._on_media_status)
        self._player.playbackStateChanged.connect(self._on_state_changed)
        self._player.errorOccurred.connect(self._on_error)

    @property
    def player(self) -> QMediaPlayer:
        return self._player

    @property
    def handle(self) -> PreparedClip | None:
        return self._handle

    # ---- transport ----

    def start(self, handle: PreparedClip) -> None:
        """Install *handle* as the decoder target and play from 0."""
        self._handle = handle
        self._player.setSource(QUrl.fromLocalFile(handle.local_path))
        self._player.setPosition(0)
        self._player.play()
        logger.debug(f"Decoder start: {handle.track_id}")

    def pause(self) -> None:
        self._player.pause()

    def resume(self) -> None:
        if self._handle is None:
            return
        self._player.play()

    def stop(self) -> None:
        self._player.stop()

    def seek_to(self, seconds: float) -> None:
        self._player.setPosition(max(0, seconds_to_ms(seconds)))

    def is_playing(self) -> bool:
        return self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def current_time(self) -> float:
        return ms_to_seconds(self._player.position())

    def duration(self) -> float:
        return ms_to_seconds(max(0, self._player.duration()))

    # ---- audio ----

    def set_volume(self, volume: float) -> None:
        self._audio_output.setVolume(max(0.0, min(1.0, volume)))

    def set_muted(self, muted: bool) -> None:
        self._audio_output.setMuted(muted)

    # ---- player callbacks ----

    @Slot(QMediaPlayer.MediaStatus)
    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia and self._handle is not None:
            logger.debug(f"End of media: {self._handle.track_id}")
            self.end_reached.emit()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia and self._handle is not None:
            logger.error(f"Invalid media: {self._handle.track_id}")
            self.failed.emit("Invalid media")

    @Slot(QMediaPlayer.PlaybackState)
    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        self.playing_changed.emit(state == QMediaPlayer.PlaybackState.PlayingState)

    @Slot(QMediaPlayer.Error, str)
    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        logger.error(f"Decoder error ({error}): {message}")
        if self._handle is not None:
            self.failed.emit(message or str(error))
