import enum
import logging
import threading
from typing import Callable, Dict, Optional

from lyricdb.config.settings import SYNC_INTERVAL_SEC
from lyricdb.exceptions import DatasetUnavailable, SyncDisabled, SyncFailure
from lyricdb.index.models import PlatformIndex
from lyricdb.index.store import IndexStore
from lyricdb.ingest.jsonl_reader import load_platforms
from lyricdb.search.cache import QueryCache

logger = logging.getLogger(__name__)


class ReloadState(enum.Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    REBUILDING = "rebuilding"
    PUBLISHED = "published"


class ReloadCoordinator:
    """
    Syncs the dataset, rebuilds the index off to the side and publishes it.

    Every failure is logged and leaves the last published generation in
    place; searches never see a half-built index.
    """

    def __init__(
        self,
        provider,
        store: IndexStore,
        cache: QueryCache,
        interval: float = SYNC_INTERVAL_SEC,
        loader: Callable[..., Dict[str, PlatformIndex]] = load_platforms,
    ):
        self.provider = provider
        self.store = store
        self.cache = cache
        self.interval = interval
        self.loader = loader
        self.state = ReloadState.IDLE
        self.last_error: Optional[str] = None
        # set while the data on disk is newer than the published index
        self._rebuild_pending = False
        self._reload_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def sync_enabled(self) -> bool:
        return bool(getattr(self.provider, "sync_enabled", False))

    def _sync(self) -> Optional[bool]:
        self.state = ReloadState.SYNCING
        try:
            return self.provider.sync()
        except SyncFailure as exc:
            self.last_error = str(exc)
            logger.error("Dataset sync failed: %s", exc)
            return None

    def _rebuild(self) -> bool:
        self.state = ReloadState.REBUILDING
        try:
            root = self.provider.data_root()
            if root is None:
                raise DatasetUnavailable("No valid data directory found")
            platforms = self.loader(root)
        except DatasetUnavailable as exc:
            self.last_error = str(exc)
            self._rebuild_pending = True
            logger.warning("%s. Keeping the current index.", exc)
            return False
        except OSError as exc:
            self.last_error = f"Index rebuild failed: {exc}"
            self._rebuild_pending = True
            logger.error("Index rebuild failed, keeping the current index: %s", exc)
            return False

        generation = self.store.publish(platforms)
        self.state = ReloadState.PUBLISHED
        self.cache.clear()
        self.last_error = None
        self._rebuild_pending = False
        logger.info("Metadata reloaded. Root: %s, Total entries: %d", root, generation.total_entries)
        return True

    def startup(self) -> bool:
        with self._reload_lock:
            try:
                if self.sync_enabled:
                    self._sync()
                return self._rebuild()
            finally:
                self.state = ReloadState.IDLE

    def reload(self, force: bool = False) -> bool:
        with self._reload_lock:
            try:
                changed = self._sync()
                if changed is None:
                    return False
                if not changed and not force and not self._rebuild_pending:
                    logger.info("Dataset already up to date")
                    return False
                return self._rebuild()
            finally:
                self.state = ReloadState.IDLE

    def trigger(self) -> bool:
        if not self.sync_enabled:
            raise SyncDisabled("Git sync is disabled by server configuration")
        return self.reload()

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self.reload()
            except Exception:
                logger.exception("Periodic reload crashed")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="lyricdb-reload", daemon=True)
        self._thread.start()
        logger.info("Periodic sync every %.0fs", self.interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
