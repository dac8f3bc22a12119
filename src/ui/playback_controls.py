"""재생 컨트롤: 재생/일시정지, 이전/다음, 셔플/반복/자동재생, 스크럽 바, 시간 표시, 볼륨."""

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from src.models.playback_state import PlaybackPolicy, PlaybackState
from src.utils.config import DEFAULT_VOLUME, SCRUB_LABEL_COOLDOWN_MS
from src.utils.i18n import tr
from src.utils.time_utils import ms_to_display, ms_to_seconds, seconds_to_ms


class PlaybackControls(QWidget):
    """트랜스포트 바. 값만 표시하고 명령은 시그널로 내보낸다."""

    play_toggled = Signal()
    next_requested = Signal()
    previous_requested = Signal()
    shuffle_toggled = Signal(bool)
    loop_toggled = Signal(bool)
    autoplay_toggled = Signal(bool)
    mute_toggled = Signal()
    # 사용자가 스크럽 바를 놓았을 때 발생 (초)
    scrub_requested = Signal(float)
    volume_changed = Signal(float)  # 0.0 to 1.0

    def __init__(self, parent=None):
        super().__init__(parent)
        self._is_seeking = False

        # --- 위젯 구성 ---
        self._prev_btn = QPushButton("⏮")
        self._prev_btn.setFixedWidth(36)
        self._prev_btn.setToolTip(tr("Previous"))
        self._play_btn = QPushButton("▶")
        self._play_btn.setFixedWidth(36)
        self._play_btn.setToolTip(tr("Play"))
        self._next_btn = QPushButton("⏭")
        self._next_btn.setFixedWidth(36)
        self._next_btn.setToolTip(tr("Next"))

        self._shuffle_btn = self._make_toggle("🔀", tr("Shuffle"))
        self._loop_btn = self._make_toggle("🔁", tr("Loop"))
        self._autoplay_btn = self._make_toggle("⏩", tr("Autoplay"))

        self._time_label = QLabel("00:00")
        self._time_label.setFixedWidth(60)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._seek_slider = QSlider(Qt.Orientation.Horizontal)
        self._seek_slider.setRange(0, 0)

        self._duration_label = QLabel("00:00")
        self._duration_label.setFixedWidth(60)
        self._duration_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # 스크럽 중 표시되는 시간, 마지막 이동 후 쿨다운이 지나면 지운다
        self._scrub_label = QLabel("")
        self._scrub_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._scrub_clear_timer = QTimer(self)
        self._scrub_clear_timer.setSingleShot(True)
        self._scrub_clear_timer.setInterval(SCRUB_LABEL_COOLDOWN_MS)
        self._scrub_clear_timer.timeout.connect(self._scrub_label.clear)

        self._spinner = QProgressBar()
        self._spinner.setRange(0, 0)  # busy indicator
        self._spinner.setFixedWidth(60)
        self._spinner.setTextVisible(False)
        self._spinner.setVisible(False)

        self._mute_btn = QPushButton("🔊")
        self._mute_btn.setFixedWidth(36)
        self._mute_btn.setToolTip(tr("Mute"))
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setValue(int(DEFAULT_VOLUME * 100))
        self._vol_slider.setFixedWidth(80)
        self._vol_slider.setToolTip(tr("Volume"))

        # --- 레이아웃 ---
        top = QHBoxLayout()
        top.setContentsMargins(0, 0, 0, 0)
        top.addStretch(1)
        top.addWidget(self._scrub_label)
        top.addStretch(1)

        bar = QHBoxLayout()
        bar.setContentsMargins(0, 0, 0, 0)
        bar.addWidget(self._prev_btn)
        bar.addWidget(self._play_btn)
        bar.addWidget(self._next_btn)
        bar.addWidget(self._time_label)
        bar.addWidget(self._seek_slider, 1)
        bar.addWidget(self._duration_label)
        bar.addWidget(self._spinner)
        bar.addWidget(self._shuffle_btn)
        bar.addWidget(self._loop_btn)
        bar.addWidget(self._autoplay_btn)
        bar.addWidget(self._mute_btn)
        bar.addWidget(self._vol_slider)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.addLayout(top)
        layout.addLayout(bar)

        # --- 시그널 연결 ---
        self._play_btn.clicked.connect(self._on_play)
        self._next_btn.clicked.connect(self._on_next)
        self._prev_btn.clicked.connect(self._on_previous)
        self._shuffle_btn.toggled.connect(self.shuffle_toggled)
        self._loop_btn.toggled.connect(self.loop_toggled)
        self._autoplay_btn.toggled.connect(self.autoplay_toggled)
        self._mute_btn.clicked.connect(self._on_mute)

        self._seek_slider.sliderPressed.connect(self._on_seek_pressed)
        self._seek_slider.sliderReleased.connect(self._on_seek_released)
        self._seek_slider.sliderMoved.connect(self._on_seek_moved)

        self._vol_slider.valueChanged.connect(self._on_volume_changed)

    @staticmethod
    def _make_toggle(text: str, tooltip: str) -> QPushButton:
        btn = QPushButton(text)
        btn.setCheckable(True)
        btn.setFixedWidth(36)
        btn.setToolTip(tooltip)
        return btn

    # --- 사용자 입력 ---

    def _on_play(self) -> None:
        self.play_toggled.emit()

    def _on_next(self) -> None:
        self.next_requested.emit()

    def _on_previous(self) -> None:
        self.previous_requested.emit()

    def _on_mute(self) -> None:
        self.mute_toggled.emit()

    def _on_seek_pressed(self) -> None:
        self._is_seeking = True

    def _on_seek_released(self) -> None:
        self._is_seeking = False
        self.scrub_requested.emit(ms_to_seconds(self._seek_slider.value()))

    def _on_seek_moved(self, value: int) -> None:
        self._time_label.setText(ms_to_display(value))
        self._scrub_label.setText(ms_to_display(value))
        self._scrub_clear_timer.start()

    def _on_volume_changed(self, value: int) -> None:
        self.volume_changed.emit(value / 100.0)

    # --- 코디네이터 출력 반영 ---

    def set_position(self, current: float, duration: float) -> None:
        """Set slider range/position and both time labels (seconds)."""
        duration_ms = seconds_to_ms(duration)
        self._seek_slider.setRange(0, duration_ms)
        self._duration_label.setText(ms_to_display(duration_ms))
        if not self._is_seeking:
            position_ms = seconds_to_ms(current)
            self._seek_slider.setValue(position_ms)
            self._time_label.setText(ms_to_display(position_ms))

    def reset_scrub(self) -> None:
        self._seek_slider.setValue(0)
        self._time_label.setText(ms_to_display(0))

    def set_state(self, state: PlaybackState) -> None:
        if state is PlaybackState.PLAYING:
            self._play_btn.setText("⏸")
            self._play_btn.setToolTip(tr("Pause"))
        else:
            self._play_btn.setText("▶")
            self._play_btn.setToolTip(tr("Play"))

    def set_loading(self, loading: bool) -> None:
        self._spinner.setVisible(loading)

    def is_loading_visible(self) -> bool:
        return not self._spinner.isHidden()

    def set_policy(self, policy: PlaybackPolicy) -> None:
        """Sync toggle buttons and volume slider without re-emitting."""
        for btn, checked in (
            (self._shuffle_btn, policy.shuffle),
            (self._loop_btn, policy.loop),
            (self._autoplay_btn, policy.autoplay),
        ):
            btn.blockSignals(True)
            btn.setChecked(checked)
            btn.blockSignals(False)
        self._vol_slider.blockSignals(True)
        self._vol_slider.setValue(int(round(policy.volume * 100)))
        self._vol_slider.blockSignals(False)
        self.set_muted(policy.mute)

    def set_muted(self, muted: bool) -> None:
        self._mute_btn.setText("🔇" if muted else "🔊")

    def seek_position_ms(self) -> int:
        return self._seek_slider.value()
