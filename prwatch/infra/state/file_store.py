import os
from pathlib import Path
from typing import Optional

from prwatch.core.exceptions import StateError
from prwatch.core.ports.state_store import StateStore


class FileStateStore(StateStore):
    """One file per key under ``base_dir``, replaced atomically on write."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as error:
            raise StateError(f"Failed to read state {key}: {error}") from error

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            temp_path.replace(path)
        except OSError as error:
            raise StateError(f"Failed to write state {key}: {error}") from error

    def _path_for(self, key: str) -> Path:
        safe_key = key.replace("/", "_")
        return self._base_dir / f"{safe_key}.state"
