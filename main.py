"""ClipDeck application entry point."""

import logging
import os
import sys

# Set platform-appropriate media backend
if sys.platform == "darwin":
    os.environ.setdefault("QT_MEDIA_BACKEND", "darwin")
elif sys.platform == "win32":
    os.environ.setdefault("QT_MEDIA_BACKEND", "windows")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QColor, QPalette

from src.utils.config import APP_NAME, APP_VERSION, ORG_NAME
from src.utils.i18n import init_language
from src.services.app_logger import setup_logging
from src.services.settings_manager import SettingsManager
from src.ui.player_window import PlayerWindow

logger = logging.getLogger("src.main")


def _apply_dark_theme(app: QApplication) -> None:
    """Apply a dark color palette using the Fusion style."""
    app.setStyle("Fusion")
    palette = QPalette()

    palette.setColor(QPalette.ColorRole.Window, QColor(45, 45, 45))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Base, QColor(30, 30, 30))
    palette.setColor(QPalette.ColorRole.Text, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Button, QColor(55, 55, 55))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(60, 140, 220))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))

    app.setPalette(palette)


def main() -> None:
    QApplication.setOrganizationName(ORG_NAME)
    QApplication.setApplicationName(APP_NAME)

    app = QApplication(sys.argv)
    setup_logging()
    _apply_dark_theme(app)

    settings = SettingsManager()
    init_language(settings.get_ui_language())

    # 명령줄 인자가 있으면 그 목록을 재생 목록으로 사용하고 저장
    track_ids = list(dict.fromkeys(arg for arg in app.arguments()[1:] if not arg.startswith("-")))
    if track_ids:
        settings.set_playlist(track_ids)
    else:
        track_ids = settings.get_playlist()
    logger.info(f"{APP_NAME} {APP_VERSION} starting with {len(track_ids)} clip(s)")

    window = PlayerWindow(track_ids, settings)
    window.show()
    window.start()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
