"""Ledger package."""

from savings_tracker.ledger.store import LedgerLifecycle, LedgerStore

__all__ = ["LedgerLifecycle", "LedgerStore"]
