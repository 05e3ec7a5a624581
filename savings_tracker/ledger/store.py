"""
Ledger Store

Owns the per-account balance vector and the selected account index.

Lifecycle:
    UNINITIALIZED -> HYDRATED -> MUTATED <-> PERSISTED

HYDRATED is entered once, at startup. Mutations are rejected until then,
so a late-arriving snapshot can never overwrite a user's edit.

CRITICAL: set_balance is the only way a balance changes, and it touches
exactly one account per call.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog

from savings_tracker.catalog import AccountCatalog
from savings_tracker.errors import LedgerStateError, OutOfRangeError
from savings_tracker.models.ledger import LedgerSnapshot
from savings_tracker.validation import (
    ZERO,
    parse_amount,
    parse_balances,
    parse_index,
    serialize_balances,
)


logger = structlog.get_logger(__name__)


class LedgerLifecycle(str, Enum):
    """Where the ledger is in its load/edit/save cycle."""
    UNINITIALIZED = "uninitialized"
    HYDRATED = "hydrated"
    MUTATED = "mutated"
    PERSISTED = "persisted"


class LedgerStore:
    """
    In-memory ledger: one balance per catalog account plus a cursor.

    The total is never stored; it is summed on every call.
    """

    def __init__(self, catalog: AccountCatalog):
        self._catalog = catalog
        self._size = len(catalog)
        self._balances: list[Decimal] = [ZERO] * self._size
        self._selected_index = 0
        self._lifecycle = LedgerLifecycle.UNINITIALIZED
        self._revision = 0
        self._persisted_revision = 0
        self.last_hydrate_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def catalog(self) -> AccountCatalog:
        return self._catalog

    @property
    def lifecycle(self) -> LedgerLifecycle:
        return self._lifecycle

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def balances(self) -> tuple[Decimal, ...]:
        return tuple(self._balances)

    @property
    def revision(self) -> int:
        """Counter bumped by every accepted mutation."""
        return self._revision

    @property
    def is_dirty(self) -> bool:
        """True if there are edits no successful save has covered."""
        return self._revision != self._persisted_revision

    def current_balance(self) -> Decimal:
        return self._balances[self._selected_index]

    def total(self) -> Decimal:
        """Exact sum of every balance; bounded amounts cannot overflow."""
        return sum(self._balances, ZERO)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def hydrate(self, snapshot: Optional[LedgerSnapshot]) -> None:
        """
        Load the persisted ledger, once, at startup.

        An absent or malformed snapshot yields the default ledger
        (all zeros, first account selected). This is never an error:
        the default is what a first run looks like. The reason for a
        fallback is kept in last_hydrate_error.

        Raises:
            LedgerStateError: If the ledger was already hydrated
        """
        if self._lifecycle is not LedgerLifecycle.UNINITIALIZED:
            raise LedgerStateError("Ledger has already been hydrated")

        balances = [ZERO] * self._size
        selected_index = 0
        self.last_hydrate_error = None

        if snapshot is None:
            self.last_hydrate_error = "no saved ledger"
        else:
            try:
                balances = parse_balances(snapshot.savings, self._size)
                if snapshot.selected_index is not None:
                    selected_index = parse_index(snapshot.selected_index, self._size)
            except ValueError as e:
                balances = [ZERO] * self._size
                selected_index = 0
                self.last_hydrate_error = f"corrupt saved ledger: {e}"

        self._balances = balances
        self._selected_index = selected_index
        self._lifecycle = LedgerLifecycle.HYDRATED

        logger.debug(
            "ledger_hydrated",
            selected_index=selected_index,
            fallback_reason=self.last_hydrate_error,
        )

    def _require_hydrated(self) -> None:
        if self._lifecycle is LedgerLifecycle.UNINITIALIZED:
            raise LedgerStateError("Ledger must be hydrated before it is modified")

    def _touch(self) -> None:
        self._revision += 1
        self._lifecycle = LedgerLifecycle.MUTATED

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def select_account(self, index: int) -> None:
        """
        Move the cursor to another account. Balances are untouched.

        Raises:
            OutOfRangeError: If index is not a catalog position
            LedgerStateError: If called before hydrate
        """
        self._require_hydrated()
        if isinstance(index, bool) or not 0 <= index < self._size:
            raise OutOfRangeError(index, self._size)

        if index != self._selected_index:
            self._selected_index = index
            self._touch()

    def set_balance(self, raw_input: str) -> Decimal:
        """
        Overwrite the selected account's balance from user input.

        Returns:
            The normalized stored value

        Raises:
            InvalidAmountError: If raw_input is not a finite, non-negative
                decimal; the ledger is left unchanged
            LedgerStateError: If called before hydrate
        """
        self._require_hydrated()
        value = parse_amount(raw_input)

        self._balances[self._selected_index] = value
        self._touch()
        return value

    # -------------------------------------------------------------------------
    # Persistence handoff
    # -------------------------------------------------------------------------

    def serialize(self) -> LedgerSnapshot:
        """Durable form of the current state. Deterministic."""
        return LedgerSnapshot(
            savings=serialize_balances(self._balances),
            selected_index=str(self._selected_index),
        )

    def mark_persisted(self, revision: int) -> None:
        """
        Record that the state as of `revision` reached durable storage.

        If the ledger was edited after that revision was serialized, it
        stays MUTATED and dirty; the next save picks those edits up.
        """
        if revision > self._revision:
            raise LedgerStateError(
                f"Revision {revision} has not happened yet (at {self._revision})"
            )

        self._persisted_revision = max(self._persisted_revision, revision)
        if revision == self._revision:
            self._lifecycle = LedgerLifecycle.PERSISTED
