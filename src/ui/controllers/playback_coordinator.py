"""PlaybackCoordinator — 재생/탐색 상태 머신.

Idle → AwaitingLoad(t) → Playing(t) ⇄ Paused(t) → Completed(t), cycling
until shutdown. Every command and every load completion runs on the GUI
thread; a generation counter marks which load request is current so that a
superseded completion only warms the cache and never starts the decoder.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal, Slot

from src.models.playback_state import PlaybackPolicy, PlaybackState
from src.models.playlist import NO_TRACK
from src.services.load_pipeline import LoadResult

if TYPE_CHECKING:
    from src.ui.controllers.app_context import AppContext

logger = logging.getLogger(__name__)


class PlaybackCoordinator(QObject):
    """재생, 탐색, 자동 재생 정책을 담당하는 Controller.

    Signals:
        state_changed(PlaybackState)
        track_changed(str): The current target changed.
        loading_changed(bool): Spinner visibility.
        position_changed(float, float): (current seconds, duration seconds).
        scrub_reset(): Scrub sliders should jump back to 0.
        load_failed(str, str): (track_id, cause) for the current target.
        policy_changed(PlaybackPolicy)
        mute_changed(bool)
    """

    state_changed = Signal(object)
    track_changed = Signal(str)
    loading_changed = Signal(bool)
    position_changed = Signal(float, float)
    scrub_reset = Signal()
    load_failed = Signal(str, str)
    policy_changed = Signal(object)
    mute_changed = Signal(bool)

    def __init__(self, ctx: AppContext) -> None:
        super().__init__(parent=ctx.window)
        self.ctx = ctx
        self._state = PlaybackState.IDLE
        self._target: str | None = None
        self._generation = 0
        self._loading = False

        ctx.decoder.end_reached.connect(self.on_natural_end)
        ctx.decoder.failed.connect(self.on_decoder_failed)
        ctx.decoder.set_volume(ctx.policy.volume)
        ctx.decoder.set_muted(ctx.policy.mute)

    # ---- observable outputs ----

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_track(self) -> str | None:
        return self._target

    @property
    def cursor(self) -> int:
        return self.ctx.playlist.cursor

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def policy(self) -> PlaybackPolicy:
        return self.ctx.policy

    @property
    def current_time(self) -> float:
        if not self._state.has_target:
            return 0.0
        return self.ctx.decoder.current_time()

    @property
    def duration(self) -> float:
        if not self._state.has_target:
            return 0.0
        return self.ctx.decoder.duration()

    # ---- transport ----

    def play_pause(self) -> None:
        ctx = self.ctx
        state = self._state

        if state is PlaybackState.PLAYING:
            ctx.decoder.pause()
            self._set_state(PlaybackState.PAUSED)
        elif state is PlaybackState.PAUSED:
            ctx.decoder.resume()
            self._set_state(PlaybackState.PLAYING)
        elif state is PlaybackState.COMPLETED:
            ctx.decoder.seek_to(0.0)
            ctx.decoder.resume()
            self.scrub_reset.emit()
            self._set_state(PlaybackState.PLAYING)
        elif state is PlaybackState.AWAITING_LOAD:
            logger.debug("play_pause ignored while loading")
        else:
            # 최초 재생(-1)이면 첫 트랙, 실패 후라면 같은 트랙 재시도
            cursor = ctx.playlist.cursor
            index = ctx.playlist.next(cursor) if cursor == NO_TRACK else cursor
            self._navigate_to(index)

    def next(self) -> None:
        playlist = self.ctx.playlist
        cursor = playlist.cursor
        if self.ctx.policy.shuffle:
            index = playlist.random(cursor)
        else:
            index = playlist.next(cursor)
        self._navigate_to(index)

    def previous(self) -> None:
        playlist = self.ctx.playlist
        cursor = playlist.cursor
        if self.ctx.policy.shuffle:
            index = playlist.random(cursor)
        else:
            index = playlist.previous(cursor)
        self._navigate_to(index)

    def play_random(self) -> None:
        playlist = self.ctx.playlist
        self._navigate_to(playlist.random(playlist.cursor))

    def select_track(self, track_id: str) -> None:
        """Jump to a user-chosen track. Raises UnknownTrackError if absent."""
        self._navigate_to(self.ctx.playlist.index_of(track_id))

    def restart(self) -> None:
        """Replay the current clip from the beginning."""
        if not self._state.has_target:
            return
        decoder = self.ctx.decoder
        decoder.stop()
        decoder.resume()
        self.scrub_reset.emit()
        self._set_state(PlaybackState.PLAYING)

    # ---- seeking ----

    def scrub_to(self, seconds: float) -> None:
        """Seek to *seconds*; a paused or finished clip starts playing."""
        if not self._state.has_target:
            logger.debug(f"scrub_to({seconds}) ignored in {self._state.value}")
            return
        decoder = self.ctx.decoder
        target = self._clamp_time(seconds)
        decoder.seek_to(target)
        if self._state is not PlaybackState.PLAYING:
            decoder.resume()
            self._set_state(PlaybackState.PLAYING)
        self.position_changed.emit(target, decoder.duration())

    def skip(self, seconds: float) -> None:
        """Seek relative to the playhead, clamped to the clip bounds."""
        if seconds == 0:
            raise ValueError("skip() needs a non-zero offset")
        if not self._state.has_target:
            return
        decoder = self.ctx.decoder
        target = self._clamp_time(decoder.current_time() + seconds)
        decoder.seek_to(target)
        self.position_changed.emit(target, decoder.duration())

    def _clamp_time(self, seconds: float) -> float:
        duration = self.ctx.decoder.duration()
        if duration > 0:
            seconds = min(seconds, duration)
        return max(0.0, seconds)

    def refresh_position(self) -> None:
        """Publish the playhead; polled by the window while playing."""
        if self._state is PlaybackState.PLAYING:
            decoder = self.ctx.decoder
            self.position_changed.emit(decoder.current_time(), decoder.duration())

    # ---- policy ----

    def select_shuffle(self, enabled: bool) -> None:
        self.ctx.policy.shuffle = bool(enabled)
        self._policy_updated()

    def select_loop(self, enabled: bool) -> None:
        self.ctx.policy.loop = bool(enabled)
        self._policy_updated()

    def select_autoplay(self, enabled: bool) -> None:
        self.ctx.policy.autoplay = bool(enabled)
        self._policy_updated()

    def set_volume(self, volume: float) -> None:
        ctx = self.ctx
        ctx.policy = ctx.policy.with_volume(volume)
        ctx.decoder.set_volume(ctx.policy.volume)
        self._policy_updated()

    def toggle_mute(self) -> None:
        ctx = self.ctx
        ctx.policy.mute = not ctx.policy.mute
        ctx.decoder.set_muted(ctx.policy.mute)
        self.mute_changed.emit(ctx.policy.mute)
        self._policy_updated()

    def _policy_updated(self) -> None:
        self.ctx.persist_policy()
        self.policy_changed.emit(self.ctx.policy)

    # ---- decoder callbacks ----

    @Slot()
    def on_natural_end(self) -> None:
        if self._state is not PlaybackState.PLAYING:
            logger.debug(f"End of clip ignored in {self._state.value}")
            return
        self._set_state(PlaybackState.COMPLETED)

        policy = self.ctx.policy
        if not policy.autoplay:
            return

        playlist = self.ctx.playlist
        cursor = playlist.cursor
        if policy.shuffle:
            index = playlist.random(cursor)
        elif cursor + 1 < len(playlist) or policy.loop:
            index = playlist.next(cursor)
        else:
            logger.info("Reached the end of the playlist")
            return
        self._navigate_to(index)

    @Slot(str)
    def on_decoder_failed(self, message: str) -> None:
        """A loaded clip could not be decoded; surface it like a failed load."""
        if not self._state.has_target:
            logger.debug(f"Decoder failure ignored in {self._state.value}: {message}")
            return
        logger.warning(f"Decoder failed on {self._target}: {message}")
        self.ctx.decoder.stop()
        self._set_state(PlaybackState.IDLE)
        self.load_failed.emit(self._target or "", message)

    # ---- load sequencing ----

    def _navigate_to(self, index: int) -> None:
        ctx = self.ctx
        track_id = ctx.playlist.track_at(index)

        ctx.decoder.stop()
        self.scrub_reset.emit()
        ctx.playlist.move_to(index)

        self._generation += 1
        generation = self._generation
        if track_id != self._target:
            self._target = track_id
            self.track_changed.emit(track_id)
        self._set_state(PlaybackState.AWAITING_LOAD)

        pending = ctx.pipeline.request_load(track_id)
        if not pending.done:
            self._set_loading(True)
        pending.add_listener(lambda result, g=generation: self._on_load_result(result, g))

    def _on_load_result(self, result: LoadResult, generation: int) -> None:
        if generation != self._generation:
            logger.info(f"Superseded load for {result.track_id} finished (current: {self._target})")
            return

        self._set_loading(False)
        ctx = self.ctx

        if not result.ok:
            cause = result.error.cause if result.error is not None else "unknown error"
            self._set_state(PlaybackState.IDLE)
            self.load_failed.emit(result.track_id, str(cause))
            return

        ctx.decoder.start(result.handle)
        self.scrub_reset.emit()
        self._set_state(PlaybackState.PLAYING)
        self.position_changed.emit(0.0, ctx.decoder.duration())

    def _set_state(self, state: PlaybackState) -> None:
        if state is self._state:
            return
        logger.debug(f"{self._state.value} → {state.value} ({self._target})")
        self._state = state
        self.state_changed.emit(state)

    def _set_loading(self, loading: bool) -> None:
        if loading == self._loading:
            return
        self._loading = loading
        self.loading_changed.emit(loading)

    def shutdown(self) -> None:
        """Stop playback and drop any outstanding completions."""
        self._generation += 1
        self._set_loading(False)
        self.ctx.decoder.stop()
        self._set_state(PlaybackState.IDLE)
