import logging
from pathlib import Path
from typing import Optional

from lyricdb.config import settings
from lyricdb.files.store import FileStore
from lyricdb.index.store import IndexStore
from lyricdb.search.cache import QueryCache
from lyricdb.search.engine import SearchEngine
from lyricdb.sync.provider import GitDatasetProvider, LocalDatasetProvider
from lyricdb.sync.reload import ReloadCoordinator

logger = logging.getLogger(__name__)


class LyricService:
    def __init__(
        self,
        provider,
        download_enabled: bool = settings.DOWNLOAD_ENABLED,
        sync_interval: float = settings.SYNC_INTERVAL_SEC,
        cache_ttl: float = settings.QUERY_CACHE_TTL_SEC,
        cache_max: int = settings.QUERY_CACHE_MAX,
        search_timeout: float = settings.SEARCH_TIMEOUT_SEC,
        repo_url: str = settings.REPO_URL,
    ):
        self.provider = provider
        self.download_enabled = download_enabled
        self.repo_url = repo_url
        self.store = IndexStore()
        self.cache = QueryCache(ttl_seconds=cache_ttl, max_entries=cache_max)
        self.engine = SearchEngine(self.store, self.cache, timeout=search_timeout)
        self.coordinator = ReloadCoordinator(provider, self.store, self.cache, interval=sync_interval)
        self.files = FileStore(self.store)

    @property
    def sync_enabled(self) -> bool:
        return self.coordinator.sync_enabled

    def start(self) -> None:
        self.coordinator.startup()
        if self.sync_enabled:
            self.coordinator.start()

    def stop(self) -> None:
        self.coordinator.stop()
        self.engine.close()

    def status(self) -> dict:
        generation = self.store.snapshot()
        last_update = generation.last_update_time
        return {
            "status": "active",
            "last_update_time": last_update.strftime("%Y-%m-%d %H:%M:%S") if last_update else None,
            "total_entries": generation.total_entries,
            "platform_stats": generation.platform_counts(),
            "repo_url": self.repo_url,
            "cache_size": len(self.cache),
            "sync_enabled": self.sync_enabled,
            "last_error": self.coordinator.last_error,
            "reload_state": self.coordinator.state.value,
        }


def build_service(
    data_dir: Optional[Path] = None,
    sync_enabled: Optional[bool] = None,
    download_enabled: Optional[bool] = None,
    sync_interval: Optional[float] = None,
    repo_url: Optional[str] = None,
) -> LyricService:
    data_dir = Path(data_dir) if data_dir is not None else settings.DATA_DIR
    sync_enabled = settings.SYNC_ENABLED if sync_enabled is None else sync_enabled
    repo_url = repo_url or settings.REPO_URL

    if sync_enabled:
        provider = GitDatasetProvider(repo_url=repo_url, data_dir=data_dir)
    else:
        provider = LocalDatasetProvider(data_dir=data_dir)

    return LyricService(
        provider,
        download_enabled=settings.DOWNLOAD_ENABLED if download_enabled is None else download_enabled,
        sync_interval=settings.SYNC_INTERVAL_SEC if sync_interval is None else sync_interval,
        repo_url=repo_url,
    )
