import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from lyricdb.index.models import PlatformIndex

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Readers share the lock; a writer waits until the last reader leaves.
    Reader-preferring, which is fine while writes stay rare.
    """

    def __init__(self):
        self._readers = 0
        self._readers_lock = threading.Lock()
        self._writer_lock = threading.Lock()

    @contextmanager
    def read_lock(self):
        with self._readers_lock:
            self._readers += 1
            if self._readers == 1:
                self._writer_lock.acquire()
        try:
            yield
        finally:
            with self._readers_lock:
                self._readers -= 1
                if self._readers == 0:
                    self._writer_lock.release()

    @contextmanager
    def write_lock(self):
        self._writer_lock.acquire()
        try:
            yield
        finally:
            self._writer_lock.release()


@dataclass(frozen=True)
class IndexGeneration:
    platforms: Dict[str, PlatformIndex] = field(default_factory=dict)
    last_update_time: Optional[datetime] = None
    # bumped on every publish; cached results are tagged with it
    serial: int = 0

    def get(self, platform: str) -> PlatformIndex:
        found = self.platforms.get(platform)
        if found is None:
            return PlatformIndex(name=platform)
        return found

    @property
    def total_entries(self) -> int:
        return sum(len(p) for p in self.platforms.values())

    def platform_counts(self) -> Dict[str, int]:
        return {name: len(p) for name, p in self.platforms.items()}


class IndexStore:
    def __init__(self):
        self._lock = ReadWriteLock()
        self._generation = IndexGeneration()
        self._serial = 0

    def snapshot(self) -> IndexGeneration:
        with self._lock.read_lock():
            return self._generation

    def get_platform(self, platform: str) -> PlatformIndex:
        with self._lock.read_lock():
            generation = self._generation
        return generation.get(platform)

    def source_dir(self, platform: str) -> Optional[Path]:
        return self.get_platform(platform).source_dir

    def publish(self, platforms: Dict[str, PlatformIndex], when: Optional[datetime] = None) -> IndexGeneration:
        with self._lock.write_lock():
            self._serial += 1
            generation = IndexGeneration(
                platforms=dict(platforms),
                last_update_time=when or datetime.now(),
                serial=self._serial,
            )
            self._generation = generation
        logger.info(
            "Published index generation: %d entries across %d platforms",
            generation.total_entries,
            len(generation.platforms),
        )
        return generation

    @property
    def last_update_time(self) -> Optional[datetime]:
        return self.snapshot().last_update_time
