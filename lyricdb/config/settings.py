import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


REPO_URL = os.getenv("LYRICDB_REPO_URL", "https://github.com/Steve-xmh/amll-ttml-db.git")
DATA_DIR = Path(os.getenv("LYRICDB_DATA_DIR", "lyric-data"))

SYNC_ENABLED = _env_bool("LYRICDB_SYNC_ENABLED", True)
DOWNLOAD_ENABLED = _env_bool("LYRICDB_DOWNLOAD_ENABLED", True)
SYNC_INTERVAL_SEC = max(1.0, float(os.getenv("LYRICDB_SYNC_INTERVAL_SEC", "600") or 600))
GIT_TIMEOUT_SEC = max(10.0, float(os.getenv("LYRICDB_GIT_TIMEOUT_SEC", "600") or 600))

QUERY_CACHE_TTL_SEC = max(1.0, float(os.getenv("LYRICDB_CACHE_TTL_SEC", "300") or 300))
QUERY_CACHE_MAX = max(1, int(os.getenv("LYRICDB_CACHE_MAX", "1000") or 1000))

SEARCH_TIMEOUT_SEC = max(0.1, float(os.getenv("LYRICDB_SEARCH_TIMEOUT_SEC", "30") or 30))
SEARCH_WORKERS = max(1, int(os.getenv("LYRICDB_SEARCH_WORKERS", "16") or 16))

# platform -> record file, relative to the dataset root
PLATFORM_SOURCES = {
    "ncm": Path("ncm-lyrics") / "index.jsonl",
    "qq": Path("qq-lyrics") / "index.jsonl",
    "am": Path("am-lyrics") / "index.jsonl",
    "spotify": Path("spotify-lyrics") / "index.jsonl",
    "raw": Path("metadata") / "raw-lyrics-index.jsonl",
}
PLATFORMS = list(PLATFORM_SOURCES.keys())

DATA_DIR_INDICATORS = ["ncm-lyrics", "qq-lyrics", "metadata"]
DATA_DIR_CANDIDATES = ["lyric-data", "amll-ttml-db", "data"]

MAX_RECORD_LINE_BYTES = 1024 * 1024

DOWNLOAD_FORMATS = ["ttml", "lrc", "yrc", "qrc", "lys"]
DEFAULT_DOWNLOAD_FORMAT = "ttml"

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 43594))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
