from lyricdb.sync.provider import GitDatasetProvider, LocalDatasetProvider
from lyricdb.sync.reload import ReloadCoordinator, ReloadState

__all__ = [
    "GitDatasetProvider",
    "LocalDatasetProvider",
    "ReloadCoordinator",
    "ReloadState",
]
