"""Test doubles for storage and auditing."""

import asyncio
from typing import Optional

from savings_tracker.audit import AuditLogger
from savings_tracker.catalog import AccountCatalog
from savings_tracker.ledger import LedgerStore
from savings_tracker.models.audit import LedgerEvent
from savings_tracker.orchestrator import SavingsTrackerFlow
from savings_tracker.services.storage import (
    InMemoryStorage,
    KeyValueStorageInterface,
    LedgerPersistenceGateway,
    StorageReadError,
    StorageWriteError,
)


class FailingStorage(KeyValueStorageInterface):
    """Store whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.inner = InMemoryStorage()

    async def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageReadError("device storage unavailable")
        return await self.inner.get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("device storage full")
        await self.inner.set_item(key, value)


class GatedStorage(InMemoryStorage):
    """In-memory store whose writes wait until the test opens the gate."""

    def __init__(self):
        super().__init__()
        self.write_started = asyncio.Event()
        self.gate = asyncio.Event()

    async def set_items(self, items: dict[str, str]) -> None:
        self.write_started.set()
        await self.gate.wait()
        await super().set_items(items)


class RecordingAuditLogger(AuditLogger):
    """Audit logger that keeps every event for inspection."""

    def __init__(self):
        super().__init__()
        self.events: list[LedgerEvent] = []

    def log(self, event: LedgerEvent) -> None:
        self.events.append(event)
        super().log(event)


def make_flow(
    storage: KeyValueStorageInterface,
    catalog: Optional[AccountCatalog] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> SavingsTrackerFlow:
    return SavingsTrackerFlow(
        store=LedgerStore(catalog or AccountCatalog.default()),
        gateway=LedgerPersistenceGateway(storage),
        audit_logger=audit_logger,
    )
