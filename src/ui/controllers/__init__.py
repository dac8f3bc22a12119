"""UI Controllers — PlayerWindow에서 분리된 재생 로직.

Controller는 QObject를 상속하여 시그널/슬롯을 사용하고,
AppContext를 통해 공유 상태에 접근한다.
"""

from src.ui.controllers.app_context import AppContext
from src.ui.controllers.playback_coordinator import PlaybackCoordinator

__all__ = ["AppContext", "PlaybackCoordinator"]
