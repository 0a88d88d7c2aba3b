# core/money.py

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(v) -> Decimal:
    """Normalize any numeric-ish value to a 2dp Decimal (None / "" -> 0.00)."""
    if v is None or v == "":
        return ZERO
    try:
        return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"invalid money value: {v!r}") from exc


def to_int_qty(value, *, field_name: str = "quantity") -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are whole integer units.
    """
    if value is None or value == "":
        raise ValueError(f"{field_name} is required")

    if isinstance(value, bool):
        # bool is an int subclass in Python
        raise ValueError(f"{field_name} must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)

    raise ValueError(f"{field_name} must be a whole integer unit")
