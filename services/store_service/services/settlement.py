"""Order settlement: cart -> priced, discounted, persisted order."""

from dataclasses import dataclass
from typing import Any, Optional

from libs.common.currency import quantize_money
from libs.common.errors import ConflictError, EmptyCartError, UserNotFoundError
from libs.common.logging import get_logger
from libs.common.telegram import TelegramNotifier
from libs.db.transactions import atomic
from services.store_service.models import CartItem, Order, OrderSnapshot, OrderStatus, User
from services.store_service.services.cart_snapshot import load_cart_snapshot
from services.store_service.services.discounts import (
    DiscountResult,
    calculate_discount,
    clamp_points,
)
from services.store_service.services.notifications import notify_new_order
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderQuote:
    snapshot: OrderSnapshot
    discount: DiscountResult
    user_points: int


async def _get_user(db: AsyncSession, user_id: int, *, for_update: bool = False) -> User:
    query = select(User).where(User.telegram_id == user_id)
    if for_update:
        query = query.with_for_update()
    user = (await db.execute(query)).scalar_one_or_none()
    if user is None:
        raise UserNotFoundError()
    return user


async def quote_order(
    db: AsyncSession,
    *,
    user_id: int,
    promo_code: Optional[str] = None,
    points_requested: Any = 0,
) -> OrderQuote:
    """Price the current cart without writing anything."""
    user = await _get_user(db, user_id)
    snapshot = await load_cart_snapshot(db, user_id)
    discount = await calculate_discount(
        db,
        subtotal=snapshot.subtotal,
        promo_code=promo_code,
        points_requested=points_requested,
        user_points=user.points,
    )
    return OrderQuote(snapshot=snapshot, discount=discount, user_points=user.points)


async def place_order(
    db: AsyncSession,
    *,
    user_id: int,
    address: Optional[str],
    comment: Optional[str] = None,
    promo_code: Optional[str] = None,
    points_requested: Any = 0,
    notifier: Optional[TelegramNotifier] = None,
) -> Order:
    """Settle the user's cart into an ``active`` order.

    Runs as one transaction keyed on the user row:

    1. lock the user, load the cart snapshot, price it
    2. insert the order with the immutable line snapshot
    3. debit redeemed points with a conditional update (never below zero)
    4. delete the cart; if another checkout already consumed it, fail

    Any failure rolls back all of it. The admin notification is sent after
    commit and its failure never fails the order.
    """
    points_requested = clamp_points(points_requested)

    async with atomic(db, "place_order"):
        user = await _get_user(db, user_id, for_update=True)
        snapshot = await load_cart_snapshot(db, user_id)
        discount = await calculate_discount(
            db,
            subtotal=snapshot.subtotal,
            promo_code=promo_code,
            points_requested=points_requested,
            user_points=user.points,
        )

        order = Order(
            user_telegram_id=user_id,
            details=snapshot.to_stored(),
            subtotal=quantize_money(discount.subtotal),
            promo_code=discount.promo_code_applied,
            promo_discount_percent=discount.promo_percent,
            points_spent=discount.points_spent,
            total_price=quantize_money(discount.final_price),
            address=address,
            comment=comment,
            status=OrderStatus.ACTIVE,
        )
        db.add(order)
        await db.flush()

        if discount.points_spent > 0:
            debited = await db.execute(
                update(User)
                .where(User.id == user.id, User.points >= discount.points_spent)
                .values(points=User.points - discount.points_spent)
            )
            if debited.rowcount != 1:
                raise ConflictError("Loyalty balance changed, please retry")

        cleared = await db.execute(
            delete(CartItem).where(CartItem.user_telegram_id == user_id)
        )
        if cleared.rowcount < len(snapshot.lines):
            # A concurrent checkout consumed the cart first
            raise EmptyCartError()

    logger.info(
        "Placed order %s for user %s: subtotal=%s promo=%s points=%d total=%s",
        order.id,
        user_id,
        order.subtotal,
        order.promo_code,
        order.points_spent,
        order.total_price,
    )

    await notify_new_order(notifier, order, user)
    return order
