"""Discount calculation: promo code first, then loyalty points.

The order is fixed. Points are capped at a share of the *post-promo* amount,
so a promo and points together never discount more than
``promo% + cap% of the remainder``.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from libs.common.config import get_settings
from libs.common.currency import ZERO, ceil_units, floor_units, to_decimal
from libs.common.errors import InvalidInputError
from libs.common.logging import get_logger
from services.store_service.models import PromoCode
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

HUNDRED = Decimal("100")
# Point requests above 10**18 are treated as garbage
MAX_POINTS_DIGITS = 18


@dataclass(frozen=True)
class DiscountResult:
    subtotal: Decimal
    promo_code_applied: Optional[str]
    promo_percent: int
    after_promo: Decimal
    points_cap: int
    points_spent: int
    final_price: int


def normalize_promo_code(code: Optional[str]) -> Optional[str]:
    """Trim and upper-case a promo code. Blank input means no code."""
    if code is None:
        return None
    normalized = str(code).strip().upper()
    return normalized or None


def clamp_points(value: Any) -> int:
    """Coerce a caller-supplied point request to a non-negative integer.

    Garbage, negative, non-finite, absurdly large and missing values all
    become 0. The magnitude is checked before ``int()`` so a huge exponent
    never expands into a giant integer.
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not amount.is_finite() or amount < 0 or amount.adjusted() > MAX_POINTS_DIGITS:
        return 0
    return floor_units(amount)


def apply_discounts(
    subtotal: Decimal,
    *,
    promo_percent: int = 0,
    promo_code: Optional[str] = None,
    points_requested: Any = 0,
    user_points: int = 0,
    cap_percent: Optional[int] = None,
) -> DiscountResult:
    """Pure discount arithmetic.

    1. ``after_promo = subtotal * (1 - promo_percent / 100)``, floored at 0
    2. ``points_cap = floor(after_promo * cap_percent / 100)``;
       ``points_spent = min(requested, balance, cap)``
    3. ``final_price = max(0, ceil(after_promo - points_spent))``
    """
    subtotal = to_decimal(subtotal)
    if subtotal < ZERO:
        raise InvalidInputError("Subtotal cannot be negative")
    if not 0 <= promo_percent <= 100:
        raise InvalidInputError("Promo percent must be between 0 and 100")
    if cap_percent is None:
        cap_percent = get_settings().POINTS_REDEEM_CAP_PERCENT

    after_promo = max(subtotal * (HUNDRED - promo_percent) / HUNDRED, ZERO)

    points_cap = max(floor_units(after_promo * cap_percent / HUNDRED), 0)
    points_spent = min(clamp_points(points_requested), max(user_points, 0), points_cap)

    final_price = max(ceil_units(after_promo - points_spent), 0)

    return DiscountResult(
        subtotal=subtotal,
        promo_code_applied=promo_code if promo_percent > 0 else None,
        promo_percent=promo_percent,
        after_promo=after_promo,
        points_cap=points_cap,
        points_spent=points_spent,
        final_price=final_price,
    )


async def find_active_promo(db: AsyncSession, code: Optional[str]) -> Optional[PromoCode]:
    """Look up a promo code by normalized text. Inactive or unknown -> None."""
    normalized = normalize_promo_code(code)
    if normalized is None:
        return None
    result = await db.execute(select(PromoCode).where(PromoCode.code == normalized))
    promo = result.scalar_one_or_none()
    if promo is None or not promo.is_active:
        logger.info("Promo code %s not applicable, ignoring", normalized)
        return None
    return promo


async def calculate_discount(
    db: AsyncSession,
    *,
    subtotal: Decimal,
    promo_code: Optional[str],
    points_requested: Any,
    user_points: int,
) -> DiscountResult:
    """Resolve the promo code, then apply promo and points in order.

    An unknown or inactive code silently means no promo discount.
    """
    promo = await find_active_promo(db, promo_code)
    return apply_discounts(
        subtotal,
        promo_percent=promo.discount_percent if promo else 0,
        promo_code=promo.code if promo else None,
        points_requested=points_requested,
        user_points=user_points,
    )
