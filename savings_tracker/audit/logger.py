"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of a session's selections, edits and saves
2. Debugging capability when storage misbehaves
3. A record of why a ledger came up empty

The audit logger:
- Writes structured JSON records through structlog
- Never raises; a logging failure must not break a user action
- Supports correlation IDs to trace the events of one user action
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from savings_tracker.models.audit import LedgerEvent, LedgerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Routes each LedgerEvent to the structured log at the level
    matching its severity.
    """

    def __init__(self, logger_name: str = "savings_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: LedgerEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Local logging must not break the main flow
            structlog.get_logger().error(
                "audit_log_failed",
                error=str(e),
                event_id=log_dict["event_id"],
            )

    def log_hydrated(self, selected_index: int, total: str) -> None:
        """Log a successful restore from storage."""
        self.log(LedgerEventBuilder.ledger_hydrated(selected_index, total))

    def log_hydrate_fallback(self, reason: str) -> None:
        """Log that the default ledger was used, and why."""
        self.log(LedgerEventBuilder.hydrate_fallback(reason))

    def log_account_selected(
        self,
        index: int,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a selection change."""
        self.log(LedgerEventBuilder.account_selected(
            index=index,
            label=label,
            correlation_id=correlation_id,
        ))

    def log_unknown_account(
        self,
        label: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an ignored pick of a label that is not in the catalog."""
        self.log(LedgerEventBuilder.unknown_account_ignored(
            label=label,
            correlation_id=correlation_id,
        ))

    def log_balance_modified(
        self,
        index: int,
        label: str,
        amount: str,
        previous: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an accepted balance edit."""
        self.log(LedgerEventBuilder.balance_modified(
            index=index,
            label=label,
            amount=amount,
            previous=previous,
            correlation_id=correlation_id,
        ))

    def log_balance_rejected(
        self,
        index: int,
        raw_input: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected balance edit."""
        self.log(LedgerEventBuilder.balance_rejected(
            index=index,
            raw_input=raw_input,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_saved(
        self,
        selected_index: int,
        total: str,
        revision: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful save."""
        self.log(LedgerEventBuilder.ledger_saved(
            selected_index=selected_index,
            total=total,
            revision=revision,
            correlation_id=correlation_id,
        ))

    def log_save_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed save."""
        self.log(LedgerEventBuilder.save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        """Log a storage read that failed and was treated as 'no data'."""
        self.log(LedgerEventBuilder.storage_read_failed(key, error_message))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (pick, modify, save).
    """
    return uuid4()
