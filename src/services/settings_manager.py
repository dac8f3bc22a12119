"""Settings manager for application preferences."""

from PySide6.QtCore import QSettings

from src.models.playback_state import PlaybackPolicy
from src.utils.config import DEFAULT_VOLUME


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self):
        self._settings = QSettings()

    # ---------------------------------------------------- Playback Settings

    def get_autoplay(self) -> bool:
        """Get whether the next clip starts automatically at end (default: False)."""
        return self._settings.value("playback/autoplay", False, bool)

    def set_autoplay(self, enabled: bool) -> None:
        self._settings.setValue("playback/autoplay", enabled)

    def get_loop(self) -> bool:
        """Get whether autoplay wraps from the last clip to the first (default: False)."""
        return self._settings.value("playback/loop", False, bool)

    def set_loop(self, enabled: bool) -> None:
        self._settings.setValue("playback/loop", enabled)

    def get_shuffle(self) -> bool:
        """Get whether navigation picks random clips (default: False)."""
        return self._settings.value("playback/shuffle", False, bool)

    def set_shuffle(self, enabled: bool) -> None:
        self._settings.setValue("playback/shuffle", enabled)

    def get_autostart(self) -> bool:
        """Get whether the first clip loads and plays on startup (default: True)."""
        return self._settings.value("playback/autostart", True, bool)

    def set_autostart(self, enabled: bool) -> None:
        self._settings.setValue("playback/autostart", enabled)

    # ---------------------------------------------------- Audio Settings

    def get_volume(self) -> float:
        """Get the output volume 0.0-1.0 (default: DEFAULT_VOLUME)."""
        value = self._settings.value("audio/volume", DEFAULT_VOLUME, float)
        return max(0.0, min(1.0, float(value)))

    def set_volume(self, volume: float) -> None:
        self._settings.setValue("audio/volume", max(0.0, min(1.0, float(volume))))

    def get_muted(self) -> bool:
        return self._settings.value("audio/muted", False, bool)

    def set_muted(self, muted: bool) -> None:
        self._settings.setValue("audio/muted", muted)

    # ---------------------------------------------------- Playlist

    def get_playlist(self) -> list[str]:
        """Get the saved playlist URLs (default: empty)."""
        value = self._settings.value("playlist/urls", [])
        # QSettings(INI)는 원소가 하나인 리스트를 str로 돌려줄 수 있다
        if isinstance(value, str):
            return [value] if value else []
        return [str(v) for v in (value or [])]

    def set_playlist(self, urls: list[str]) -> None:
        self._settings.setValue("playlist/urls", list(urls))

    # ---------------------------------------------------- Policy helpers

    def load_policy(self) -> PlaybackPolicy:
        """Build a PlaybackPolicy from the stored playback/audio settings."""
        return PlaybackPolicy(
            shuffle=self.get_shuffle(),
            loop=self.get_loop(),
            autoplay=self.get_autoplay(),
            mute=self.get_muted(),
            volume=self.get_volume(),
        )

    def save_policy(self, policy: PlaybackPolicy) -> None:
        self.set_shuffle(policy.shuffle)
        self.set_loop(policy.loop)
        self.set_autoplay(policy.autoplay)
        self.set_muted(policy.mute)
        self.set_volume(policy.volume)

    # ---------------------------------------------------- UI Settings

    def get_ui_language(self) -> str:
        """Get the UI language code (default: en)."""
        return self._settings.value("general/ui_language", "en", str)

    # ---------------------------------------------------- General Methods

    def sync(self) -> None:
        """Force synchronization of settings to disk."""
        self._settings.sync()

