import json
from pathlib import Path

import pytest

from lyricdb.index.store import IndexStore
from lyricdb.search.cache import QueryCache
from lyricdb.search.engine import SearchEngine


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """Provider whose sync outcome and data root are set by the test."""

    def __init__(self, root, changed=False, sync_enabled=True, error=None):
        self.root = root
        self.changed = changed
        self.sync_enabled = sync_enabled
        self.error = error
        self.sync_calls = 0

    def sync(self) -> bool:
        self.sync_calls += 1
        if self.error is not None:
            raise self.error
        return self.changed

    def data_root(self):
        return self.root


def write_jsonl(path: Path, records, extra_lines=()):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [json.dumps(r, ensure_ascii=False) for r in records]
    lines.extend(extra_lines)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


NCM_RECORDS = [
    {"id": "1", "rawLyricFile": "a.lrc", "metadata": [["artist", ["Roy"]], ["musicName", ["Blue Sky"]]]},
    {"id": "2", "rawLyricFile": "b.ttml", "metadata": [["artist", ["Aimer"]], ["musicName", ["Kataomoi"]]]},
    {"id": "3", "rawLyricFile": "c.ttml", "metadata": [["artist", ["Roy Kim"]], ["year", [2019]]]},
]

QQ_RECORDS = [
    {"id": "2", "rawLyricFile": "a.lrc", "metadata": [["title", ["Blue"]]]},
    {"id": "20", "rawLyricFile": "b.ttml", "metadata": [["artist", ["Aimer"]]]},
]


@pytest.fixture
def dataset(tmp_path):
    root = tmp_path / "lyric-data"
    write_jsonl(
        root / "ncm-lyrics" / "index.jsonl",
        NCM_RECORDS,
        extra_lines=["", "{not json", '{"id": 5, "rawLyricFile": "x.ttml"}'],
    )
    write_jsonl(root / "qq-lyrics" / "index.jsonl", QQ_RECORDS)
    # "metadata" exists but holds no raw index, so the raw platform stays empty
    (root / "metadata").mkdir()
    (root / "ncm-lyrics" / "1.ttml").write_text("<tt>roy</tt>", encoding="utf-8")
    return root


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return IndexStore()


@pytest.fixture
def cache(clock):
    return QueryCache(ttl_seconds=300, max_entries=1000, clock=clock)


@pytest.fixture
def engine(store, cache):
    engine = SearchEngine(store, cache, timeout=5.0, max_workers=4)
    yield engine
    engine.close()
