"""Background worker that fetches and prepares one clip."""

from __future__ import annotations

import hashlib
import logging
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import unquote, urlparse

from PySide6.QtCore import QObject, Signal

from src.models.prepared_clip import PreparedClip
from src.utils.config import DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_S, REMOTE_SCHEMES

logger = logging.getLogger(__name__)


def is_remote(track_id: str) -> bool:
    return urlparse(track_id).scheme.lower() in REMOTE_SCHEMES


def local_path_for(track_id: str) -> Path:
    """Map a ``file://`` URL or a plain path to a filesystem path."""
    parsed = urlparse(track_id)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(track_id)


def cache_file_name(track_id: str) -> str:
    """Stable per-URL file name: ``<md5[:12]><suffix>``."""
    h = hashlib.md5(track_id.encode()).hexdigest()[:12]
    suffix = Path(urlparse(track_id).path).suffix.lower() or ".mp4"
    return f"{h}{suffix}"


class ClipLoadWorker(QObject):
    """Fetches a clip into the session cache directory in a background thread.

    Remote URLs are downloaded once; local paths are only validated.

    Signals:
        progress(str): Status message for UI display.
        finished(str, PreparedClip): Emitted on success with (track_id, handle).
        error(str, str): Emitted with (track_id, error message) on failure.
    """

    progress = Signal(str)
    finished = Signal(str, object)
    error = Signal(str, str)

    def __init__(self, track_id: str, cache_dir: Path, timeout: float = DOWNLOAD_TIMEOUT_S):
        super().__init__()
        self._track_id = track_id
        self._cache_dir = cache_dir
        self._timeout = timeout
        self._cancelled = False

    @property
    def track_id(self) -> str:
        return self._track_id

    def cancel(self) -> None:
        self._cancelled = True

    def run(self) -> None:
        """Execute fetch/prepare logic."""
        try:
            if is_remote(self._track_id):
                handle = self._download()
            else:
                handle = self._prepare_local()

            if self._cancelled or handle is None:
                return

            self.finished.emit(self._track_id, handle)

        except Exception as e:
            logger.exception(f"Error in ClipLoadWorker: {e}")
            if not self._cancelled:
                self.error.emit(self._track_id, str(e))

    def _prepare_local(self) -> PreparedClip:
        path = local_path_for(self._track_id)
        if not path.is_file():
            raise FileNotFoundError(f"Clip not found: {path}")
        return PreparedClip(
            track_id=self._track_id,
            local_path=str(path),
            size_bytes=path.stat().st_size,
            is_remote=False,
        )

    def _download(self) -> PreparedClip | None:
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        target = self._cache_dir / cache_file_name(self._track_id)
        partial = target.with_name(target.name + ".part")

        self.progress.emit(f"Downloading {self._track_id}")
        req = urllib.request.Request(self._track_id)
        written = 0
        try:
            try:
                with urllib.request.urlopen(req, timeout=self._timeout) as response, open(partial, "wb") as f:
                    while True:
                        if self._cancelled:
                            break
                        chunk = response.read(DOWNLOAD_CHUNK_SIZE)
                        if not chunk:
                            break
                        f.write(chunk)
                        written += len(chunk)
            except urllib.error.HTTPError as e:
                raise Exception(f"HTTP {e.code} while fetching {self._track_id}") from e
            except urllib.error.URLError as e:
                raise Exception(f"Cannot reach {self._track_id}: {e.reason}") from e

            if self._cancelled:
                return None
            if written == 0:
                raise Exception(f"Empty response for {self._track_id}")

            partial.replace(target)
        finally:
            # replace() 성공 전에 빠져나가면 .part 파일을 남기지 않는다
            partial.unlink(missing_ok=True)

        logger.info(f"Downloaded {self._track_id} → {target} ({written} bytes)")
        return PreparedClip(
            track_id=self._track_id,
            local_path=str(target),
            size_bytes=written,
            is_remote=True,
        )
