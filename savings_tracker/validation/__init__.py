"""Amount validation package."""

from savings_tracker.validation.validator import (
    ZERO,
    format_amount,
    normalize_amount,
    parse_amount,
    parse_balances,
    parse_index,
    serialize_balances,
)

__all__ = [
    "ZERO",
    "format_amount",
    "normalize_amount",
    "parse_amount",
    "parse_balances",
    "parse_index",
    "serialize_balances",
]
