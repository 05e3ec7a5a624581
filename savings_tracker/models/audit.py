"""
Audit Models for Savings Tracker

Every significant ledger action emits an event.
This provides:
1. Traceability of what the user did in a session
2. Debugging information when a save or load goes wrong
3. A distinct record of WHY hydration fell back to defaults

DESIGN DECISION: Events are written to the local structured log only.
They are not a transaction history and are never persisted next to the ledger.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we audit."""
    # Lifecycle
    LEDGER_HYDRATED = "ledger_hydrated"
    HYDRATE_FALLBACK = "hydrate_fallback"

    # Selection
    ACCOUNT_SELECTED = "account_selected"
    UNKNOWN_ACCOUNT_IGNORED = "unknown_account_ignored"

    # Balance edits
    BALANCE_MODIFIED = "balance_modified"
    BALANCE_REJECTED = "balance_rejected"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"
    STORAGE_READ_FAILED = "storage_read_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which account the event is about, if any
    account_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Catalog index of the affected account"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "account_index": self.account_index,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class LedgerEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = LedgerEventBuilder.balance_modified(7, label, "250.5", "0", cid)
        event = LedgerEventBuilder.save_failed(error, cid)
    """

    @staticmethod
    def ledger_hydrated(
        selected_index: int,
        total: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_HYDRATED,
            account_index=selected_index,
            description="Ledger restored from device storage",
            details={
                "total": total,
            },
        )

    @staticmethod
    def hydrate_fallback(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.HYDRATE_FALLBACK,
            severity=AuditSeverity.WARNING,
            account_index=0,
            description="Started from an empty ledger",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def account_selected(
        index: int,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ACCOUNT_SELECTED,
            account_index=index,
            correlation_id=correlation_id,
            description=f"Account selected: {label}",
            is_user_action=True,
        )

    @staticmethod
    def unknown_account_ignored(
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.UNKNOWN_ACCOUNT_IGNORED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Ignored pick of an unknown account",
            details={
                "label": label,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_modified(
        index: int,
        label: str,
        amount: str,
        previous: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BALANCE_MODIFIED,
            account_index=index,
            correlation_id=correlation_id,
            description=f"Balance set: {label} = {amount}",
            details={
                "amount": amount,
                "previous": previous,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_rejected(
        index: int,
        raw_input: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BALANCE_REJECTED,
            severity=AuditSeverity.WARNING,
            account_index=index,
            correlation_id=correlation_id,
            description="Balance input rejected",
            details={
                "raw_input": raw_input,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_saved(
        selected_index: int,
        total: str,
        revision: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_SAVED,
            account_index=selected_index,
            correlation_id=correlation_id,
            description="Ledger saved to device storage",
            details={
                "total": total,
                "revision": revision,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Ledger could not be saved",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(
        key: str,
        error_message: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not read '{key}' from device storage",
            details={
                "key": key,
            },
            error_message=error_message,
        )
