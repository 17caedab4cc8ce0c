from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0.00")
_CENT = Decimal("0.01")

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"^\d*\.?\d*")


def q2(value: Decimal | int | float | str) -> Decimal:
    """Quantize to 2 decimal places, HALF_UP."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def to_money(value: object) -> Decimal:
    """Coerce a catalog/backend price into a non-negative 2dp Decimal."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return q2(amount)


def parse_cash(raw: object) -> Decimal:
    """Parse tendered cash the way the till keypad does.

    Every character other than digits and the decimal point is stripped first, then the
    longest leading number is read ("200abc" -> 200, "1.2.3" -> 1.2). Anything
    unparseable is 0.
    """
    if isinstance(raw, Decimal):
        return q2(raw) if raw.is_finite() and raw > 0 else ZERO
    if isinstance(raw, (int, float)):
        amount = Decimal(str(raw))
        return q2(amount) if amount.is_finite() and amount > 0 else ZERO
    cleaned = _NON_NUMERIC.sub("", str(raw if raw is not None else ""))
    match = _LEADING_NUMBER.match(cleaned)
    number = match.group(0) if match else ""
    if number in ("", "."):
        return ZERO
    return q2(Decimal(number))


def parse_count(raw: object) -> int:
    """Non-negative integer; negative or non-numeric input clamps to 0."""
    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError):
        return 0
    return max(0, count)
