"""
Data Models Package

This package contains all Pydantic models used by the Savings Tracker core.
"""

from savings_tracker.models.ledger import (
    AboutMessage,
    Account,
    ActionOutcome,
    LedgerSnapshot,
    LedgerView,
    OutcomeKind,
)
from savings_tracker.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "AboutMessage",
    "Account",
    "ActionOutcome",
    "LedgerSnapshot",
    "LedgerView",
    "OutcomeKind",
    # Audit models
    "AuditSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
