from pathlib import Path
from typing import List, Optional

from lyricdb.config.settings import DEFAULT_DOWNLOAD_FORMAT, DOWNLOAD_FORMATS
from lyricdb.exceptions import InvalidPlatform, LyricFileNotFound
from lyricdb.index.store import IndexStore


def list_formats() -> List[str]:
    return list(DOWNLOAD_FORMATS)


class FileStore:
    def __init__(self, store: IndexStore):
        self.store = store

    def resolve(self, platform: str, music_id: str, fmt: Optional[str] = None) -> Path:
        """Path of ``<source_dir>/<music_id>.<fmt>`` for a platform with a loaded record source."""
        fmt = fmt or DEFAULT_DOWNLOAD_FORMAT
        source_dir = self.store.source_dir(platform or "")
        if source_dir is None:
            raise InvalidPlatform(platform)

        base = source_dir.resolve()
        path = (base / f"{music_id}.{fmt}").resolve()
        # ids like "../x" must not escape the platform directory
        if base not in path.parents or not path.is_file():
            raise LyricFileNotFound(f"{platform}/{music_id}.{fmt}")
        return path
