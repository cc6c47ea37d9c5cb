import json
import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from lyricdb.config.settings import MAX_RECORD_LINE_BYTES, PLATFORM_SOURCES
from lyricdb.exceptions import MalformedRecord
from lyricdb.index.models import IndexEntry, PlatformIndex

logger = logging.getLogger(__name__)


def parse_record_line(line: str) -> IndexEntry:
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedRecord(f"invalid json: {exc}") from exc
    return IndexEntry.from_record(obj)


def stream_index_file(file_path: Path, stats: Optional[dict] = None) -> Iterator[IndexEntry]:
    """
    Yield entries from a jsonl record file in file order.

    Malformed lines (bad json, wrong shape, over-long) are skipped; when
    ``stats`` is given its "lines" and "skipped" counters are updated.
    """
    if stats is None:
        stats = {}
    stats.setdefault("lines", 0)
    stats.setdefault("skipped", 0)

    with open(file_path, "rb") as fh:
        for line_no, raw in enumerate(fh, start=1):
            if not raw.strip():
                continue
            stats["lines"] += 1

            if len(raw) > MAX_RECORD_LINE_BYTES:
                stats["skipped"] += 1
                logger.debug("%s:%d: line exceeds %d bytes, skipped", file_path, line_no, MAX_RECORD_LINE_BYTES)
                continue

            try:
                entry = parse_record_line(raw.decode("utf-8", errors="replace"))
            except MalformedRecord as exc:
                stats["skipped"] += 1
                logger.debug("%s:%d: malformed record skipped: %s", file_path, line_no, exc)
                continue
            yield entry


def load_platform(name: str, file_path: Path) -> PlatformIndex:
    """Build one platform's index. An absent record file gives an empty index with no source dir."""
    file_path = Path(file_path)
    if not file_path.is_file():
        logger.info("No record source for platform %s (%s)", name, file_path)
        return PlatformIndex(name=name)

    stats = {}
    entries = tuple(stream_index_file(file_path, stats))
    if stats["skipped"]:
        logger.warning(
            "Platform %s: skipped %d malformed of %d records in %s",
            name,
            stats["skipped"],
            stats["lines"],
            file_path,
        )
    logger.info("Platform %s: loaded %d entries", name, len(entries))
    return PlatformIndex(name=name, entries=entries, source_dir=file_path.parent)


def load_platforms(root: Path, sources: Optional[Mapping[str, Path]] = None) -> Dict[str, PlatformIndex]:
    if sources is None:
        sources = PLATFORM_SOURCES
    root = Path(root)
    return {name: load_platform(name, root / relative) for name, relative in sources.items()}
