from pathlib import Path
from typing import Iterable, List, Optional

from lyricdb.config.settings import DATA_DIR_CANDIDATES, DATA_DIR_INDICATORS


def is_data_dir(path: Path, indicators: Iterable[str] = DATA_DIR_INDICATORS) -> bool:
    path = Path(path)
    return any((path / name).is_dir() for name in indicators)


def candidate_dirs(preferred: Optional[Path], cwd: Optional[Path] = None) -> List[Path]:
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    candidates = []
    if preferred is not None:
        preferred = Path(preferred)
        candidates.append(preferred if preferred.is_absolute() else cwd / preferred)
    candidates.append(cwd)
    candidates.append(cwd.parent)
    candidates.extend(cwd / sub for sub in DATA_DIR_CANDIDATES)
    return candidates


def find_data_dir(preferred: Optional[Path], cwd: Optional[Path] = None) -> Optional[Path]:
    """First candidate that looks like a dataset root, or None."""
    for path in candidate_dirs(preferred, cwd):
        if is_data_dir(path):
            return path.resolve()
    return None
