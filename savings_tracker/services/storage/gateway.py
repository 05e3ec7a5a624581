"""
Ledger Persistence Gateway

Adapts a key-value store to the ledger's snapshot shape.

Persisted layout (two string entries):
    bankSavings   -> JSON array of balances, e.g. [1000,0,0,0,0,0,0,250.5,0,0]
    selectedIndex -> decimal string, e.g. "7"

The gateway does not validate contents; LedgerStore.hydrate does.
"""

from typing import Optional

from savings_tracker.audit import AuditLogger
from savings_tracker.errors import PersistenceReadError, PersistenceWriteError
from savings_tracker.models.ledger import LedgerSnapshot
from savings_tracker.services.storage.interface import KeyValueStorageInterface


class LedgerPersistenceGateway:
    """Loads and saves LedgerSnapshot objects through a key-value store."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        savings_key: str = "bankSavings",
        selected_index_key: str = "selectedIndex",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._savings_key = savings_key
        self._selected_index_key = selected_index_key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def storage(self) -> KeyValueStorageInterface:
        return self._storage

    async def _read(self, key: str) -> Optional[str]:
        try:
            return await self._storage.get_item(key)
        except Exception as e:
            raise PersistenceReadError(f"Failed to read '{key}': {e}") from e

    async def fetch_snapshot(self) -> Optional[LedgerSnapshot]:
        """
        Read the persisted ledger.

        Returns:
            The snapshot, or None if nothing was ever saved

        Raises:
            PersistenceReadError: If the store could not be read
        """
        savings = await self._read(self._savings_key)
        if savings is None:
            return None

        selected_index = await self._read(self._selected_index_key)
        return LedgerSnapshot(savings=savings, selected_index=selected_index)

    async def load_snapshot(self) -> Optional[LedgerSnapshot]:
        """
        Read the persisted ledger for startup.

        A read failure is logged and reported as "no snapshot",
        so startup always succeeds.
        """
        try:
            return await self.fetch_snapshot()
        except PersistenceReadError as e:
            self._audit_logger.log_storage_read_failed(
                key=self._savings_key,
                error_message=str(e),
            )
            return None

    async def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """
        Write both ledger entries.

        Raises:
            PersistenceWriteError: If the store rejected the write.
                The caller must surface this to the user.
        """
        items = {self._savings_key: snapshot.savings}
        if snapshot.selected_index is not None:
            items[self._selected_index_key] = snapshot.selected_index

        try:
            await self._storage.set_items(items)
        except Exception as e:
            raise PersistenceWriteError(
                f"Failed to save ledger: {e}",
                key=self._savings_key,
            ) from e
