import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from lyricdb.config.settings import PLATFORMS, SEARCH_TIMEOUT_SEC, SEARCH_WORKERS
from lyricdb.exceptions import SearchTimeout
from lyricdb.index.models import PlatformIndex, SearchResult
from lyricdb.index.store import IndexStore
from lyricdb.search.cache import QueryCache

logger = logging.getLogger(__name__)


def normalize_query(query: Optional[str]) -> str:
    return str(query or "").strip().lower()


def resolve_platforms(platforms: Optional[Iterable[str]], known: Sequence[str]) -> List[str]:
    requested = [p for p in (platforms or []) if p]
    if not requested:
        return list(known)
    seen = set()
    ordered = []
    for p in requested:
        if p not in seen:
            seen.add(p)
            ordered.append(p)
    return ordered


def cache_key(query: str, platforms: Sequence[str], serial: int = 0) -> Tuple[str, Tuple[str, ...], int]:
    return query, tuple(sorted(platforms)), serial


def scan_platform(index: PlatformIndex, query: str) -> List[SearchResult]:
    return [SearchResult.from_entry(entry, index.name) for entry in index.entries if entry.matches(query)]


def merge_results(per_platform: Iterable[List[SearchResult]]) -> List[SearchResult]:
    """
    Union per-platform hits by raw lyric file. The first hit for a file keeps
    its id and metadata; later hits only add their platform.
    """
    merged: Dict[str, SearchResult] = {}
    for results in per_platform:
        for item in results:
            existing = merged.get(item.raw_lyric_file)
            if existing is None:
                merged[item.raw_lyric_file] = SearchResult(
                    id=item.id,
                    raw_lyric_file=item.raw_lyric_file,
                    metadata=item.metadata,
                    platforms=list(item.platforms),
                )
                continue
            for platform in item.platforms:
                if platform not in existing.platforms:
                    existing.platforms.append(platform)
    return list(merged.values())


@dataclass
class SearchResponse:
    results: List[SearchResult] = field(default_factory=list)
    cached: bool = False

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict:
        return {
            "status": "success",
            "count": self.count,
            "results": [r.to_dict() for r in self.results],
            "cached": self.cached,
        }


class SearchEngine:
    def __init__(
        self,
        store: IndexStore,
        cache: QueryCache,
        platforms: Sequence[str] = PLATFORMS,
        timeout: float = SEARCH_TIMEOUT_SEC,
        max_workers: int = SEARCH_WORKERS,
    ):
        self.store = store
        self.cache = cache
        self.platforms = list(platforms)
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lyricdb-scan")

    def search(
        self,
        query: Optional[str],
        platforms: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
    ) -> SearchResponse:
        query = normalize_query(query)
        if not query:
            return SearchResponse()

        targets = resolve_platforms(platforms, self.platforms)
        # one generation for the whole query, even if a reload publishes mid-scan;
        # keyed by its serial so a replaced generation never answers a lookup
        generation = self.store.snapshot()
        key = cache_key(query, targets, generation.serial)

        cached, hit = self.cache.lookup(key)
        if hit:
            logger.info("Cache hit for query: %s", query)
            return SearchResponse(results=cached, cached=True)

        futures = [self._executor.submit(scan_platform, generation.get(p), query) for p in targets]

        deadline = self.timeout if timeout is None else timeout
        _, not_done = wait(futures, timeout=deadline)
        if not_done:
            for future in not_done:
                future.cancel()
            logger.warning("Search timeout after %.1fs for query: %s", deadline, query)
            raise SearchTimeout(query, deadline)

        results = merge_results(f.result() for f in futures)
        if results:
            self.cache.store(key, results)
        return SearchResponse(results=results, cached=False)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
