class LyricDBError(Exception):
    pass


class MalformedRecord(LyricDBError):
    pass


class DatasetUnavailable(LyricDBError):
    pass


class SyncFailure(LyricDBError):
    pass


class SyncDisabled(LyricDBError):
    pass


class SearchTimeout(LyricDBError):
    def __init__(self, query: str, timeout: float):
        super().__init__(f"Search for {query!r} did not finish within {timeout:.1f}s")
        self.query = query
        self.timeout = timeout


class InvalidPlatform(LyricDBError):
    def __init__(self, platform: str):
        super().__init__(f"Invalid platform: {platform!r}")
        self.platform = platform


class LyricFileNotFound(LyricDBError):
    pass
