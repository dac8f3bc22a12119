"""Utility for logging application output to a file."""

import logging
import sys
from pathlib import Path

from src.utils.config import LOG_DIR_NAME, LOG_FILE_NAME

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_log_path() -> Path:
    """Return the path to the application log file."""
    log_dir = Path.home() / LOG_DIR_NAME / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILE_NAME


def setup_logging(level: int = logging.INFO, log_path: Path | None = None) -> logging.Logger:
    """Attach a file handler and a stderr handler to the ``src`` logger.

    Safe to call more than once; handlers are only added the first time.
    """
    root = logging.getLogger("src")
    root.setLevel(level)
    if root.handlers:
        return root

    formatter = logging.Formatter(_FORMAT)

    fh = logging.FileHandler(log_path or get_log_path(), encoding="utf-8")
    fh.setFormatter(formatter)
    fh.setLevel(logging.DEBUG)
    root.addHandler(fh)

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(formatter)
    sh.setLevel(logging.WARNING)
    root.addHandler(sh)

    return root
