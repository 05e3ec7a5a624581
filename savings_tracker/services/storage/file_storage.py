"""
JSON File Storage Implementation

DESIGN DECISION: On-device storage is a single JSON object in a file,
mapping each key to its string value. This is because:
1. The ledger is tiny (two keys), so rewriting the whole file is cheap
2. The file is human-readable for support and manual backup
3. An atomic replace means a crash mid-save leaves the previous save intact

TRADEOFFS:
- Not meant for concurrent writers from several processes
- Every write rewrites the whole file

Blocking file I/O runs in a worker thread so the event loop stays free
while a save is in flight.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from savings_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class CorruptStoreError(StorageReadError):
    """The storage file exists but is not a JSON object of strings."""
    pass


class JsonFileStorage(KeyValueStorageInterface):
    """
    Durable key-value store backed by one JSON file.

    Transient OS errors (locked file, full disk that frees up, flaky
    mounts) are retried with exponential backoff before giving up.
    """

    def __init__(self, path: Path, retry_attempts: int = 3):
        self._path = Path(path)
        self._retry_attempts = retry_attempts
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def _read_file(self) -> dict[str, str]:
        """Load the whole store. A missing file is an empty store."""
        if not self._path.exists():
            return {}

        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStoreError(f"Storage file is not valid UTF-8: {e}")
        if not text.strip():
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"Storage file is not valid JSON: {e}")

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise CorruptStoreError("Storage file is not a JSON object of strings")

        return data

    def _write_file(self, data: dict[str, str]) -> None:
        """Replace the store atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict[str, str]:
        try:
            for attempt in self._retrying():
                with attempt:
                    return self._read_file()
        except OSError as e:
            raise StorageReadError(f"Failed to read {self._path}: {e}")

    def _store(self, items: dict[str, str]) -> None:
        try:
            for attempt in self._retrying():
                with attempt:
                    try:
                        data = self._read_file()
                    except CorruptStoreError as e:
                        # Overwriting a corrupt store is the only way to recover it
                        logger.warning(
                            "storage_file_corrupt_overwriting",
                            path=str(self._path),
                            error=str(e),
                        )
                        data = {}
                    data.update(items)
                    self._write_file(data)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {self._path}: {e}")

    async def get_item(self, key: str) -> Optional[str]:
        """Read one key from the storage file."""
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        """Write one key to the storage file."""
        await self.set_items({key: value})

    async def set_items(self, items: dict[str, str]) -> None:
        """Write several keys in a single atomic file replace."""
        async with self._write_lock:
            await asyncio.to_thread(self._store, dict(items))
