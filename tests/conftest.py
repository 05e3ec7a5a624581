"""Shared fixtures. No test touches real device storage."""

import pytest

from savings_tracker.catalog import AccountCatalog
from savings_tracker.ledger import LedgerStore
from savings_tracker.services.storage import InMemoryStorage, LedgerPersistenceGateway


@pytest.fixture
def catalog() -> AccountCatalog:
    return AccountCatalog.default()


@pytest.fixture
def store(catalog) -> LedgerStore:
    """A hydrated, empty ledger."""
    ledger = LedgerStore(catalog)
    ledger.hydrate(None)
    return ledger


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def gateway(memory_storage) -> LedgerPersistenceGateway:
    return LedgerPersistenceGateway(memory_storage)
