"""Order history and admin order management (everything except settlement)."""

from typing import Optional

from libs.common.config import get_settings
from libs.common.errors import ConflictError, OrderNotFoundError
from libs.common.logging import get_logger
from libs.db.transactions import atomic
from services.store_service.models import Order, OrderStatus, User
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def list_user_orders(db: AsyncSession, user_id: int) -> list[Order]:
    """A customer's orders, newest first."""
    result = await db.execute(
        select(Order)
        .where(Order.user_telegram_id == user_id)
        .order_by(Order.id.desc())
    )
    return list(result.scalars().all())


async def list_orders_for_admin(
    db: AsyncSession,
    *,
    status: OrderStatus = OrderStatus.ACTIVE,
    limit: Optional[int] = None,
) -> list[tuple[Order, Optional[User]]]:
    """Newest orders in ``status`` with the purchaser's account, if it still exists."""
    limit = limit or get_settings().ADMIN_ORDERS_PAGE_SIZE
    result = await db.execute(
        select(Order, User)
        .outerjoin(User, User.telegram_id == Order.user_telegram_id)
        .where(Order.status == status)
        .order_by(Order.id.desc())
        .limit(limit)
    )
    return [(row.Order, row.User) for row in result.all()]


async def update_order_contact(
    db: AsyncSession,
    *,
    order_id: int,
    address: Optional[str] = None,
    comment: Optional[str] = None,
) -> Order:
    """Edit the delivery address and comment of an active order. None leaves a field as is."""
    async with atomic(db, "update_order_contact"):
        result = await db.execute(
            select(Order).where(Order.id == order_id).with_for_update()
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError()
        if order.status != OrderStatus.ACTIVE:
            raise ConflictError("Completed orders cannot be edited")
        if address is not None:
            order.address = address
        if comment is not None:
            order.comment = comment

    logger.info("Updated contact details of order %s", order_id)
    return order
