"""Order fulfillment: admin marks an active order completed."""

from decimal import Decimal
from typing import Optional, Union

from libs.auth.dependencies import ensure_admin
from libs.common.config import get_settings
from libs.common.currency import floor_units, to_decimal
from libs.common.datetime_utils import utc_now
from libs.common.errors import InvalidInputError, OrderNotFoundError
from libs.common.logging import get_logger
from libs.db.transactions import atomic
from services.store_service.models import Order, OrderStatus, Product, User
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def cashback_for(total_price: Decimal, rate: Union[float, Decimal]) -> int:
    """Points credited for a completed order: ``floor(total * rate)``."""
    rate = to_decimal(rate)
    if rate <= 0:
        return 0
    return max(floor_units(to_decimal(total_price) * rate), 0)


async def complete_order(
    db: AsyncSession,
    *,
    order_id: int,
    admin_id: Union[int, str],
    cashback_rate: Optional[Union[float, Decimal]] = None,
) -> Order:
    """Transition an ``active`` order to ``completed``.

    Admin rights are checked before anything is read. In one transaction:
    the status flips through a conditional update (so a second or racing
    completion is rejected with ``OrderNotFoundError`` before stock moves),
    each snapshot line decrements its product's stock (deleted products are
    skipped, stock may go negative) and cashback points are credited when the
    rate is positive.
    """
    ensure_admin(admin_id)

    rate = get_settings().CASHBACK_RATE if cashback_rate is None else cashback_rate
    if to_decimal(rate) < 0:
        raise InvalidInputError("Cashback rate cannot be negative")

    async with atomic(db, "complete_order"):
        result = await db.execute(
            select(Order).where(Order.id == order_id).with_for_update()
        )
        order = result.scalar_one_or_none()
        if order is None or order.status != OrderStatus.ACTIVE:
            raise OrderNotFoundError()

        cashback = cashback_for(order.total_price, rate)

        claimed = await db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == OrderStatus.ACTIVE)
            .values(
                status=OrderStatus.COMPLETED,
                completed_at=utc_now(),
                cashback_points=cashback,
            )
        )
        if claimed.rowcount != 1:
            raise OrderNotFoundError()

        for line in order.snapshot.lines:
            decremented = await db.execute(
                update(Product)
                .where(Product.id == line.product_id)
                .values(stock=Product.stock - line.quantity)
            )
            if decremented.rowcount == 0:
                logger.warning(
                    "Order %s: product %s no longer exists, stock not adjusted",
                    order_id,
                    line.product_id,
                )

        if cashback > 0:
            credited = await db.execute(
                update(User)
                .where(User.telegram_id == order.user_telegram_id)
                .values(points=User.points + cashback)
            )
            if credited.rowcount == 0:
                logger.warning(
                    "Order %s: purchaser %s not found, cashback of %d skipped",
                    order_id,
                    order.user_telegram_id,
                    cashback,
                )
                order.cashback_points = 0

    await db.refresh(order)
    logger.info(
        "Completed order %s by admin %s (cashback=%d)", order_id, admin_id, cashback
    )
    return order
