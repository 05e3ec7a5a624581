"""
Abstract Storage Interface

DESIGN DECISION: The ledger only needs a durable map of string keys to
string values, like a phone's async key-value storage. Keeping the
interface that small allows us to:
1. Back it with a JSON file on the device
2. Use in-memory storage for testing
3. Swap in another on-device store without touching the ledger

The methods are async because real device storage may block.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for string key-value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: The key to look up

        Returns:
            The stored string, or None if the key was never set

        Raises:
            StorageReadError: If the store could not be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Args:
            key: The key to write
            value: The string to store

        Raises:
            StorageWriteError: If the value was not durably stored
        """
        pass

    async def set_items(self, items: dict[str, str]) -> None:
        """
        Write several values.

        Backends that can write a batch in one step should override this.
        """
        for key, value in items.items():
            await self.set_item(key, value)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Could not read from the storage backend."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
