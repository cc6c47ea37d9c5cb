import logging
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

from lyricdb.config.settings import DATA_DIR, GIT_TIMEOUT_SEC, REPO_URL
from lyricdb.exceptions import SyncFailure
from lyricdb.ingest.layout import find_data_dir

logger = logging.getLogger(__name__)

UP_TO_DATE_MARKER = "Already up to date"


class LocalDatasetProvider:
    """Dataset already on disk; never syncs."""

    sync_enabled = False

    def __init__(self, data_dir: Path = DATA_DIR, cwd: Optional[Path] = None):
        self.data_dir = Path(data_dir)
        self.cwd = cwd

    def sync(self) -> bool:
        return False

    def data_root(self) -> Optional[Path]:
        return find_data_dir(self.data_dir, cwd=self.cwd)


class GitDatasetProvider(LocalDatasetProvider):
    """
    Keeps ``data_dir`` as a shallow clone of ``repo_url``.

    ``sync`` clones when there is no checkout yet and pulls otherwise; it
    returns True when the working tree changed and raises SyncFailure when
    git fails.
    """

    sync_enabled = True

    def __init__(
        self,
        repo_url: str = REPO_URL,
        data_dir: Path = DATA_DIR,
        cwd: Optional[Path] = None,
        timeout: float = GIT_TIMEOUT_SEC,
    ):
        super().__init__(data_dir=data_dir, cwd=cwd)
        self.repo_url = repo_url
        self.timeout = timeout
        self._git_lock = threading.Lock()

    @property
    def target_dir(self) -> Path:
        if self.data_dir.is_absolute() or self.cwd is None:
            return self.data_dir.resolve()
        return (Path(self.cwd) / self.data_dir).resolve()

    def _run_git(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = ["git"] + args
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=False)
        except FileNotFoundError as exc:
            raise SyncFailure("git executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise SyncFailure(f"git {args[0]} timed out after {self.timeout:.0f}s") from exc
        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip()
            raise SyncFailure(f"git {args[0]} failed ({proc.returncode}): {detail}")
        return proc

    def sync(self) -> bool:
        with self._git_lock:
            target = self.target_dir
            if not (target / ".git").exists():
                logger.info("Repository not found. Initializing clone to %s...", target)
                self._run_git(["clone", "--depth", "1", self.repo_url, str(target)])
                return True

            logger.info("Performing incremental update (git pull)...")
            proc = self._run_git(["-C", str(target), "pull"])
            output = (proc.stdout or "") + (proc.stderr or "")
            return UP_TO_DATE_MARKER not in output
