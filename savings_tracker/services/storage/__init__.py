"""
Storage Services Package

Provides the key-value storage interface, its implementations, and the
gateway that maps the ledger onto it.
"""

from savings_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from savings_tracker.services.storage.file_storage import (
    CorruptStoreError,
    JsonFileStorage,
)
from savings_tracker.services.storage.memory import InMemoryStorage
from savings_tracker.services.storage.gateway import LedgerPersistenceGateway

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "CorruptStoreError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    # Ledger adapter
    "LedgerPersistenceGateway",
]
