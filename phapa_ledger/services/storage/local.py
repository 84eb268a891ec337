"""
Local Storage Implementations

JsonFileStorage keeps every key in one JSON object on disk, which is
the desktop counterpart of the browser's localStorage. InMemoryStorage
holds the same mapping in a dict and is used by tests and throwaway
sessions.

TRADEOFFS:
- The whole file is rewritten on every set (fine at ledger scale)
- No locking; one process owns the file
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from phapa_ledger.logging_config import get_logger
from phapa_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)

logger = get_logger(__name__)


class JsonFileStorage(KeyValueStorageInterface):
    """
    Key-value store backed by a single JSON file.

    The file holds an object mapping keys to string values.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Read the whole mapping. Missing file reads as empty."""
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(
                f"Storage file {self._path} must hold a JSON object, "
                f"got {type(data).__name__}"
            )
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        """Write the mapping atomically via a temp file in the same directory."""
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e

    def _read_for_update(self) -> dict[str, str]:
        try:
            return self._read_all()
        except StorageReadError as e:
            # Other keys are lost, but the slot being written stays usable
            logger.warning("storage_file_reset", path=str(self._path), error=str(e))
            return {}

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_for_update()
        if key in data:
            del data[key]
            self._write_all(data)


class InMemoryStorage(KeyValueStorageInterface):
    """
    Dict-backed key-value store.

    An optional quota (in characters, summed over all values) makes
    writes fail the way a full browser store does.
    """

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota: Optional[int] = None,
    ):
        self._data: dict[str, str] = dict(initial or {})
        self._quota = quota

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self._quota:
                raise StorageWriteError(
                    f"Quota exceeded writing {key!r}: "
                    f"{used + len(value)} > {self._quota}"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
