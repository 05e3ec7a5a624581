"""
Main Orchestrator for Savings Tracker

This module ties together the ledger components and defines the
user-facing actions of the single tracker screen:
1. Start (load from device → hydrate)
2. Pick an account (label → index → ledger cursor)
3. Modify the selected balance (text → validated amount)
4. Save (ledger → device)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written to the device without an explicit save
- Every action returns something the UI can show directly
- No action ever raises for a user mistake or a storage failure

The UI re-reads view() after any action; nothing is pushed to it.
"""

from typing import Optional

from savings_tracker.audit import AuditLogger, create_correlation_id
from savings_tracker.catalog import AccountCatalog
from savings_tracker.config import Settings, get_settings
from savings_tracker.errors import InvalidAmountError, PersistenceWriteError
from savings_tracker.ledger import LedgerStore
from savings_tracker.models.ledger import (
    AboutMessage,
    ActionOutcome,
    LedgerView,
    OutcomeKind,
)
from savings_tracker.selection import SelectionController
from savings_tracker.services.storage import (
    JsonFileStorage,
    KeyValueStorageInterface,
    LedgerPersistenceGateway,
)
from savings_tracker.validation import format_amount


ABOUT_MESSAGE = AboutMessage(
    title="ReactNative_鋒兄三七_銀行",
    lines=(
        "委任第五職等",
        "簡任第十二職等",
        "第12屆臺北市長",
        "第23任總統",
        "中央銀行鋒兄分行",
    ),
)


class SavingsTrackerFlow:
    """
    Orchestrates the tracker screen.

    Flow:
    1. start() once, before anything else
    2. pick_account() / modify_balance() any number of times (in memory)
    3. save() whenever the user asks; edits before that are volatile
    """

    def __init__(
        self,
        store: LedgerStore,
        gateway: LedgerPersistenceGateway,
        controller: Optional[SelectionController] = None,
        audit_logger: Optional[AuditLogger] = None,
        currency_symbol: str = "",
    ):
        self._store = store
        self._catalog = store.catalog
        self._gateway = gateway
        self._audit_logger = audit_logger or AuditLogger()
        self._controller = controller or SelectionController(
            self._catalog, store, self._audit_logger
        )
        self._currency_symbol = currency_symbol

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def catalog(self) -> AccountCatalog:
        return self._catalog

    @property
    def gateway(self) -> LedgerPersistenceGateway:
        return self._gateway

    def _display(self, amount) -> str:
        return f"{self._currency_symbol}{format_amount(amount)}"

    async def start(self) -> LedgerView:
        """
        Restore the last saved ledger.

        Never fails: unreadable or corrupt storage starts an empty ledger.
        """
        snapshot = await self._gateway.load_snapshot()
        self._store.hydrate(snapshot)

        if self._store.last_hydrate_error:
            self._audit_logger.log_hydrate_fallback(self._store.last_hydrate_error)
        else:
            self._audit_logger.log_hydrated(
                selected_index=self._store.selected_index,
                total=format_amount(self._store.total()),
            )

        return self.view()

    def view(self) -> LedgerView:
        """Current screen state."""
        return LedgerView(
            selected_index=self._store.selected_index,
            account_label=self._catalog.label_for(self._store.selected_index),
            current_balance=self._display(self._store.current_balance()),
            total=self._display(self._store.total()),
            has_unsaved_changes=self._store.is_dirty,
        )

    def pick_account(self, label: str) -> LedgerView:
        """Handle a dropdown pick. Unknown labels leave the view unchanged."""
        self._controller.on_user_pick(label, create_correlation_id())
        return self.view()

    def modify_balance(self, raw_input: str) -> ActionOutcome:
        """
        Set the selected account's balance from the amount field.

        Returns:
            MODIFIED with the account and stored amount, or
            MODIFY_REJECTED if the text is not a valid amount
        """
        correlation_id = create_correlation_id()
        index = self._store.selected_index
        label = self._catalog.label_for(index)
        previous = self._store.current_balance()

        try:
            value = self._store.set_balance(raw_input)
        except InvalidAmountError as e:
            self._audit_logger.log_balance_rejected(
                index=index,
                raw_input=str(raw_input),
                reason=e.reason,
                correlation_id=correlation_id,
            )
            return ActionOutcome(
                kind=OutcomeKind.MODIFY_REJECTED,
                title="錯誤",
                message="請輸入有效的存款金額",
                account_label=label,
                reason=e.reason,
            )

        self._audit_logger.log_balance_modified(
            index=index,
            label=label,
            amount=format_amount(value),
            previous=format_amount(previous),
            correlation_id=correlation_id,
        )
        amount = self._display(value)
        return ActionOutcome(
            kind=OutcomeKind.MODIFIED,
            title="修改成功",
            message=f"銀行: {label}\n存款金額: {amount}",
            account_label=label,
            amount=amount,
        )

    async def save(self) -> ActionOutcome:
        """
        Write the ledger, as it is right now, to the device.

        Edits made while the write is in flight are kept in memory and
        left for the next save. A failed save keeps every edit.

        Returns:
            SAVED, or SAVE_FAILED with the reason
        """
        correlation_id = create_correlation_id()
        revision = self._store.revision
        snapshot = self._store.serialize()
        saved_total = self._store.total()
        total = self._display(saved_total)

        try:
            await self._gateway.save_snapshot(snapshot)
        except PersistenceWriteError as e:
            self._audit_logger.log_save_failed(str(e), correlation_id)
            return ActionOutcome(
                kind=OutcomeKind.SAVE_FAILED,
                title="存檔失敗",
                message="無法儲存資料",
                amount=total,
                reason=str(e),
            )

        self._store.mark_persisted(revision)
        self._audit_logger.log_saved(
            selected_index=int(snapshot.selected_index),
            total=format_amount(saved_total),
            revision=revision,
            correlation_id=correlation_id,
        )
        return ActionOutcome(
            kind=OutcomeKind.SAVED,
            title="存檔成功",
            message="已將存款資料儲存至設備",
            amount=total,
        )

    def about(self) -> AboutMessage:
        return ABOUT_MESSAGE


def create_tracker(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    catalog: Optional[AccountCatalog] = None,
) -> SavingsTrackerFlow:
    """
    Factory function to create all tracker components.

    Args:
        settings: Settings to use; defaults to get_settings()
        storage: Key-value store; defaults to the configured JSON file
        catalog: Accounts; defaults to the built-in bank list

    Call start() on the result before using it.
    """
    settings = settings or get_settings()
    storage_settings = settings.storage

    if storage is None:
        storage = JsonFileStorage(
            storage_settings.path,
            retry_attempts=storage_settings.retry_attempts,
        )

    audit_logger = AuditLogger()
    gateway = LedgerPersistenceGateway(
        storage,
        savings_key=storage_settings.savings_key,
        selected_index_key=storage_settings.selected_index_key,
        audit_logger=audit_logger,
    )
    store = LedgerStore(catalog or AccountCatalog.default())

    return SavingsTrackerFlow(
        store=store,
        gateway=gateway,
        audit_logger=audit_logger,
        currency_symbol=settings.app.currency_symbol,
    )
