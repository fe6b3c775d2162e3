"""Money helpers for the store.

Prices are stored as ``Decimal`` with two fractional digits. Amounts charged to
a customer and loyalty points are whole currency units (1 point = 1 unit).

Rounding rules
--------------
Charged amount -> ceiling to the next whole unit (never under-collect)
Points cap     -> floor to a whole point
Cashback       -> floor to a whole point
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any

# ─── constants ───────────────────────────────────────────────────────────────

ZERO = Decimal("0")
CENT = Decimal("0.01")
UNIT = Decimal("1")


# ─── conversion helpers ──────────────────────────────────────────────────────


def to_decimal(value: Any) -> Decimal:
    """Coerce a number or numeric string to ``Decimal`` without float noise."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a valid amount: {value!r}") from exc


def quantize_money(amount: Decimal) -> Decimal:
    """Round half-up to two fractional digits for storage."""
    return to_decimal(amount).quantize(CENT)


def ceil_units(amount: Decimal) -> int:
    """Round up to the nearest whole currency unit."""
    return int(to_decimal(amount).to_integral_value(rounding=ROUND_CEILING))


def floor_units(amount: Decimal) -> int:
    """Round down to a whole unit (points)."""
    return int(to_decimal(amount).to_integral_value(rounding=ROUND_FLOOR))


def format_money(amount: Decimal) -> str:
    """Human-readable amount for notifications, e.g. ``1 250 ₽``."""
    value = to_decimal(amount)
    if value == value.to_integral_value():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.2f}"
    return text.replace(",", " ") + " ₽"
