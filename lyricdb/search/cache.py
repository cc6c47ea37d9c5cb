import logging
import threading
import time
from typing import Callable, Dict, Hashable, List, Optional, Tuple

from lyricdb.config.settings import QUERY_CACHE_MAX, QUERY_CACHE_TTL_SEC
from lyricdb.index.models import SearchResult

logger = logging.getLogger(__name__)


class QueryCache:
    """
    Merged search results keyed by query, with per-entry expiry.

    ``max_entries`` is a soft cap: going over it triggers a sweep of expired
    entries, not eviction of live ones, so the cache can stay above the cap
    until something expires.
    """

    def __init__(
        self,
        ttl_seconds: float = QUERY_CACHE_TTL_SEC,
        max_entries: int = QUERY_CACHE_MAX,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[List[SearchResult], float]] = {}
        self._lock = threading.Lock()

    def lookup(self, key: Hashable) -> Tuple[Optional[List[SearchResult]], bool]:
        with self._lock:
            found = self._entries.get(key)
            if found is None:
                return None, False
            results, inserted_at = found
            if self._clock() - inserted_at < self.ttl:
                return results, True
        return None, False

    def store(self, key: Hashable, results: List[SearchResult]) -> None:
        with self._lock:
            now = self._clock()
            self._entries[key] = (results, now)
            if len(self._entries) > self.max_entries:
                self._sweep_expired(now)

    def _sweep_expired(self, now: float) -> None:
        expired = [k for k, (_, inserted_at) in self._entries.items() if now - inserted_at >= self.ttl]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug("Swept %d expired query cache entries", len(expired))

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries = {}
        logger.info("Query cache cleared (%d entries)", count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
