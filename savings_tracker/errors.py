"""
Ledger Exceptions

Every failure the ledger core can report. None of them is fatal:
callers recover from each one (reject the input, ignore the pick,
fall back to the default ledger, or tell the user the save failed).
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidAmountError(LedgerError):
    """Balance input is not a finite, non-negative decimal."""

    def __init__(self, raw_input: str, reason: str):
        self.raw_input = raw_input
        self.reason = reason
        super().__init__(f"Invalid amount {raw_input!r}: {reason}")


class OutOfRangeError(LedgerError):
    """Account index outside the catalog bounds."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Account index {index} is outside [0, {size - 1}]")


class AccountNotFoundError(LedgerError):
    """No account carries the given label."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unknown account: {label!r}")


class LedgerStateError(LedgerError):
    """Operation not allowed in the ledger's current lifecycle state."""
    pass


class PersistenceReadError(LedgerError):
    """The persisted ledger could not be read."""
    pass


class PersistenceWriteError(LedgerError):
    """The ledger could not be written to durable storage."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)
