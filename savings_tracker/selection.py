"""Translates the account label a user picked into a ledger selection."""

from typing import Optional
from uuid import UUID

from savings_tracker.audit import AuditLogger
from savings_tracker.catalog import AccountCatalog
from savings_tracker.errors import AccountNotFoundError
from savings_tracker.ledger import LedgerStore


class SelectionController:
    """
    Routes dropdown picks to the ledger.

    An unknown label is a no-op: the UI should only offer catalog labels,
    but a stray value must not crash the screen or move the cursor.
    """

    def __init__(
        self,
        catalog: AccountCatalog,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._catalog = catalog
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()

    def on_user_pick(
        self,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Select the account carrying `label`.

        Returns:
            True if the label resolved and the ledger now points at it,
            False if the label was unknown and nothing changed
        """
        try:
            index = self._catalog.index_of(label)
        except AccountNotFoundError:
            self._audit_logger.log_unknown_account(label, correlation_id)
            return False

        self._store.select_account(index)
        self._audit_logger.log_account_selected(index, label, correlation_id)
        return True
