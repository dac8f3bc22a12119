"""Time conversion utilities."""

from functools import lru_cache


@lru_cache(maxsize=4096)
def ms_to_display(ms: int) -> str:
    """Convert milliseconds to display string 'MM:SS'."""
    if ms < 0:
        ms = 0
    total_seconds = ms // 1000
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    return f"{minutes:02d}:{seconds:02d}"


def seconds_to_display(seconds: float) -> str:
    """Convert seconds (float) to 'MM:SS', truncating fractions."""
    return ms_to_display(int(seconds * 1000))


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds (float) to integer milliseconds."""
    return int(round(seconds * 1000))


def ms_to_seconds(ms: int) -> float:
    """Convert integer milliseconds to seconds (float)."""
    return ms / 1000.0
