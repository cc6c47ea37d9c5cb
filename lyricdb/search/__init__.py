from lyricdb.search.cache import QueryCache
from lyricdb.search.engine import (
    SearchEngine,
    SearchResponse,
    merge_results,
    normalize_query,
    scan_platform,
)

__all__ = [
    "QueryCache",
    "SearchEngine",
    "SearchResponse",
    "merge_results",
    "normalize_query",
    "scan_platform",
]
