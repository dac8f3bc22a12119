"""Korean UI strings."""

STRINGS: dict[str, str] = {
    "Play": "재생",
    "Pause": "일시정지",
    "Next": "다음",
    "Previous": "이전",
    "Shuffle": "셔플",
    "Loop": "반복",
    "Autoplay": "자동 재생",
    "Mute": "음소거",
    "Volume": "볼륨",
    "Loading": "불러오는 중",
    "Ready": "준비",
    "Playing": "재생 중",
    "Paused": "일시정지됨",
    "Completed": "재생 완료",
    "Error": "오류",
    "Failed to load": "불러오기 실패",
    "Playlist is empty": "재생 목록이 비어 있습니다",
    "Add clip URLs on the command line or in settings.": "명령줄 또는 설정에서 클립 URL을 추가하세요.",
}
