"""
Core Data Models for Savings Tracker

These models define the shapes that cross the ledger core's boundaries:
1. The fixed accounts a user can pick from
2. The serialized ledger handed to durable storage
3. The read-only view and action outcomes handed to the UI

DESIGN DECISION: The balance vector itself is NOT a pydantic model.
LedgerStore owns it as a plain list and funnels every write through
the amount validator, so there is exactly one place that can mutate it.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(BaseModel):
    """
    One of the fixed bank/payment accounts.

    Immutable for the process lifetime.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=0,
        description="Position of the account in the catalog"
    )
    label: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display label, also used to resolve user picks"
    )


# =============================================================================
# PERSISTED FORM
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Serialized ledger, one field per storage key.

    Both fields are raw strings exactly as stored. They are NOT trusted:
    LedgerStore.hydrate re-validates them and falls back to the default
    ledger if anything is off.
    """
    model_config = ConfigDict(frozen=True)

    savings: str = Field(
        ...,
        description="JSON array of balances, e.g. '[1000,0,0,0,0,0,0,250.5,0,0]'"
    )
    selected_index: Optional[str] = Field(
        default=None,
        description="Decimal string of the selected account index"
    )


# =============================================================================
# UI OUTPUT SURFACE
# =============================================================================

class LedgerView(BaseModel):
    """Everything the screen needs to render after any action."""
    model_config = ConfigDict(frozen=True)

    selected_index: int
    account_label: str
    current_balance: str = Field(
        ...,
        description="Balance of the selected account, display formatted"
    )
    total: str = Field(
        ...,
        description="Sum of all balances, display formatted"
    )
    has_unsaved_changes: bool = False


class OutcomeKind(str, Enum):
    """
    What a user action resulted in.

    Validation failures and save failures are deliberately separate kinds
    so the UI can word them differently.
    """
    MODIFIED = "modified"
    MODIFY_REJECTED = "modify_rejected"
    SAVED = "saved"
    SAVE_FAILED = "save_failed"


class ActionOutcome(BaseModel):
    """Result of a modify or save action, ready to show in an alert."""
    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    title: str
    message: str
    account_label: Optional[str] = None
    amount: Optional[str] = Field(
        default=None,
        description="Display-formatted amount involved in the action"
    )
    reason: Optional[str] = Field(
        default=None,
        description="Why a rejected or failed action did not go through"
    )

    @property
    def success(self) -> bool:
        return self.kind in (OutcomeKind.MODIFIED, OutcomeKind.SAVED)


class AboutMessage(BaseModel):
    """Static informational dialog shown from the 'about' button."""
    model_config = ConfigDict(frozen=True)

    title: str
    lines: tuple[str, ...]

    @property
    def message(self) -> str:
        return "\n".join(self.lines)
