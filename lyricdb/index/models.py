from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lyricdb.exceptions import MalformedRecord


def build_search_blob(entry_id: str, raw_lyric_file: str, metadata: Sequence) -> str:
    """
    Lowercase, space-joined text of the id, the raw lyric file and every
    string value found in the metadata value lists, in their original order.
    Non-string values are left out rather than stringified.
    """
    parts = [entry_id, raw_lyric_file]
    for pair in metadata:
        if len(pair) < 2 or not isinstance(pair[1], list):
            continue
        for value in pair[1]:
            if isinstance(value, str):
                parts.append(value)
    return " ".join(parts).lower()


@dataclass(frozen=True)
class IndexEntry:
    id: str
    raw_lyric_file: str
    metadata: List[List[Any]]
    search_blob: str

    @classmethod
    def from_record(cls, record: Any) -> "IndexEntry":
        if not isinstance(record, dict):
            raise MalformedRecord(f"expected an object, got {type(record).__name__}")

        entry_id = record.get("id")
        raw_lyric_file = record.get("rawLyricFile")
        metadata = record.get("metadata")

        if entry_id is None:
            entry_id = ""
        if raw_lyric_file is None:
            raw_lyric_file = ""
        if metadata is None:
            metadata = []

        if not isinstance(entry_id, str):
            raise MalformedRecord("id is not a string")
        if not isinstance(raw_lyric_file, str):
            raise MalformedRecord("rawLyricFile is not a string")
        if not isinstance(metadata, list) or not all(isinstance(p, list) for p in metadata):
            raise MalformedRecord("metadata is not a list of pairs")

        return cls(
            id=entry_id,
            raw_lyric_file=raw_lyric_file,
            metadata=metadata,
            search_blob=build_search_blob(entry_id, raw_lyric_file, metadata),
        )

    def matches(self, query: str) -> bool:
        # query must already be normalized
        return query in self.search_blob


@dataclass(frozen=True)
class PlatformIndex:
    name: str
    entries: Tuple[IndexEntry, ...] = ()
    source_dir: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class SearchResult:
    id: str
    raw_lyric_file: str
    metadata: List[List[Any]]
    platforms: List[str] = field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: IndexEntry, platform: str) -> "SearchResult":
        return cls(
            id=entry.id,
            raw_lyric_file=entry.raw_lyric_file,
            metadata=entry.metadata,
            platforms=[platform],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rawLyricFile": self.raw_lyric_file,
            "metadata": self.metadata,
            "platforms": list(self.platforms),
        }
