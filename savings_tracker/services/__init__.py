"""Services package."""

from savings_tracker.services.storage import (
    CorruptStoreError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    LedgerPersistenceGateway,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "CorruptStoreError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "LedgerPersistenceGateway",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
