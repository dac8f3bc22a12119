"""Prepared clip handle data model (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PreparedClip:
    """A fetched clip ready to hand to the decoder.

    Owned by the clip cache for the whole session.
    """

    track_id: str
    local_path: str
    size_bytes: int = 0
    is_remote: bool = False

    @property
    def file_name(self) -> str:
        return self.local_path.replace("\\", "/").rsplit("/", 1)[-1]
