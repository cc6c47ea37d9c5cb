from lyricdb.index.models import IndexEntry, PlatformIndex, SearchResult, build_search_blob
from lyricdb.index.store import IndexGeneration, IndexStore, ReadWriteLock

__all__ = [
    "IndexEntry",
    "PlatformIndex",
    "SearchResult",
    "build_search_blob",
    "IndexGeneration",
    "IndexStore",
    "ReadWriteLock",
]
