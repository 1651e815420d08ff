"""
JSON File Storage Implementation

DESIGN DECISION: Each key lives in its own `<key>.json` file under the data
directory, mirroring browser local storage where every entry is independent.
A corrupt transactions file therefore never takes the goals down with it.

TRADEOFFS:
- No cross-key atomicity (not needed: every mutation writes one key)
- Writes go through a temp file + rename so a crash never leaves half a file
"""

import os
import re
from pathlib import Path
from typing import Optional

from tenacity import retry, stop_after_attempt, wait_exponential

from findash.config import get_settings
from findash.services.storage.interface import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage(KeyValueStorage):
    """
    File-backed key-value storage.

    Values are written verbatim; callers hand in JSON text.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir or get_settings().storage.data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        """Read a key's file, or None if it does not exist."""
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        reraise=True,
    )
    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(value)
        os.replace(tmp_path, path)

    def set(self, key: str, value: str) -> None:
        """Write a key's file, retrying transient OS errors."""
        path = self._path_for(key)
        try:
            self._write(path, value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise StorageWriteError(f"Failed to delete {path}: {e}") from e
        return True

    def keys(self) -> list[str]:
        if not self._data_dir.exists():
            return []
        return sorted(p.stem for p in self._data_dir.glob(f"*{self.SUFFIX}"))
