"""Application configuration constants."""

from __future__ import annotations

APP_NAME = "ClipDeck"
APP_VERSION = "0.1.0"
ORG_NAME = "ClipDeck"

# Audio
DEFAULT_VOLUME = 0.7  # 0.0 - 1.0

# Transport
SKIP_SECONDS = 5.0
POSITION_POLL_MS = 100  # playhead/label refresh while playing
SCRUB_LABEL_COOLDOWN_MS = 500  # scrub-time label clears after this idle time

# Clip fetching
DOWNLOAD_TIMEOUT_S = 30.0
DOWNLOAD_CHUNK_SIZE = 256 * 1024
CACHE_DIR_PREFIX = "clipdeck_cache_"
REMOTE_SCHEMES = ("http", "https")

# Logging
LOG_DIR_NAME = ".clipdeck"
LOG_FILE_NAME = "clipdeck.log"
