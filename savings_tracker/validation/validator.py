"""
Amount Validation

DESIGN DECISION: Amounts are validated at two boundaries:

WRITE BOUNDARY (user input):
- Free text from the amount field
- Must be a plain decimal number, finite and non-negative
- At most 15 integer digits and 10 decimal places
- Rejected input raises InvalidAmountError and changes nothing

READ BOUNDARY (device storage):
- The persisted balance array and selected index
- Storage is never trusted; a value that could not have been
  written through the write boundary is treated as corrupt

Amounts are decimal.Decimal throughout so totals are exact.

IMPORTANT: Validation NEVER silently fixes issues.
"12abc" is rejected, not read as 12.
"""

import json
import re
from decimal import Decimal, DecimalException
from typing import Optional, Sequence

from savings_tracker.errors import InvalidAmountError


# Plain positional or scientific notation; no NaN/Infinity, no separators
_AMOUNT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INDEX_PATTERN = re.compile(r"^\d+$")

ZERO = Decimal(0)

# Bounds keep every amount, and a total over any realistic catalog, well
# inside the 28-digit default context so arithmetic stays exact.
MAX_INTEGER_DIGITS = 15
MAX_FRACTION_DIGITS = 10


def normalize_amount(value: Decimal) -> Decimal:
    """Strip trailing zeros and fold -0 into 0."""
    return (value + ZERO).normalize()


def _magnitude_problem(value: Decimal) -> Optional[str]:
    """Return why a finite amount is out of bounds, or None if it fits."""
    if value.is_zero():
        return None
    if value.adjusted() >= MAX_INTEGER_DIGITS:
        return "amount is too large"

    _, digits, exponent = value.as_tuple()
    significant = len(digits)
    while significant > 1 and digits[significant - 1] == 0:
        significant -= 1
        exponent += 1
    if exponent < -MAX_FRACTION_DIGITS:
        return "too many decimal places"
    return None


def parse_amount(raw_input: str) -> Decimal:
    """
    Parse a user-entered balance.

    Args:
        raw_input: Text from the amount field

    Returns:
        The normalized, non-negative amount

    Raises:
        InvalidAmountError: If the text is not a finite, non-negative decimal
            with at most MAX_INTEGER_DIGITS integer digits and
            MAX_FRACTION_DIGITS decimal places
    """
    if raw_input is None:
        raise InvalidAmountError("", "no amount entered")

    text = str(raw_input).strip()
    if not text:
        raise InvalidAmountError(raw_input, "no amount entered")

    if not _AMOUNT_PATTERN.match(text):
        raise InvalidAmountError(raw_input, "not a number")

    try:
        value = Decimal(text)
    except DecimalException:
        raise InvalidAmountError(raw_input, "not a number") from None

    if not value.is_finite():
        raise InvalidAmountError(raw_input, "not a finite number")
    if value < 0:
        raise InvalidAmountError(raw_input, "amount cannot be negative")

    problem = _magnitude_problem(value)
    if problem:
        raise InvalidAmountError(raw_input, problem)

    return normalize_amount(value)


def format_amount(value: Decimal) -> str:
    """
    Render an amount in plain positional notation.

    Used both for display and for the persisted JSON array, so the
    output is always a valid JSON number: '1000', '250.5', '0'.
    """
    return format(normalize_amount(value), "f")


def serialize_balances(balances: Sequence[Decimal]) -> str:
    """Encode balances as a compact JSON array of numbers."""
    return "[" + ",".join(format_amount(value) for value in balances) + "]"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid balance")


def parse_balances(text: str, size: int) -> list[Decimal]:
    """
    Decode a persisted balance array.

    Args:
        text: JSON array text as stored
        size: Number of accounts the array must cover

    Returns:
        Normalized balances, one per account

    Raises:
        ValueError: If the text is not an array of exactly `size`
            finite, non-negative numbers within the amount bounds
    """
    try:
        data = json.loads(
            text,
            parse_float=Decimal,
            parse_int=Decimal,
            parse_constant=_reject_constant,
        )
    except RecursionError:
        raise ValueError("balances are nested too deeply") from None

    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    if len(data) != size:
        raise ValueError(f"expected {size} balances, got {len(data)}")

    balances = []
    for position, value in enumerate(data):
        # true/false/null/strings never come back as Decimal
        if not isinstance(value, Decimal):
            raise ValueError(f"balance {position} is not a number")
        if not value.is_finite():
            raise ValueError(f"balance {position} is not finite")
        if value < 0:
            raise ValueError(f"balance {position} is negative")
        problem = _magnitude_problem(value)
        if problem:
            raise ValueError(f"balance {position}: {problem}")
        balances.append(normalize_amount(value))

    return balances


def parse_index(text: str, size: int) -> int:
    """
    Decode a persisted selected-account index.

    Raises:
        ValueError: If the text is not a base-10 integer in [0, size - 1]
    """
    stripped = text.strip()
    if not _INDEX_PATTERN.match(stripped):
        raise ValueError(f"selected index {text!r} is not an integer")

    index = int(stripped)
    if index >= size:
        raise ValueError(f"selected index {index} is outside [0, {size - 1}]")
    return index
