"""In-memory key-value storage, for tests and throwaway sessions."""

from typing import Optional

from savings_tracker.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def dump(self) -> dict[str, str]:
        """Copy of everything stored."""
        return dict(self._data)
