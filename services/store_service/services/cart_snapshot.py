"""Cart snapshot loading: the user's cart joined against live product prices."""

from libs.common.currency import to_decimal
from libs.common.errors import EmptyCartError
from services.store_service.models import CartItem, OrderSnapshot, Product, SnapshotLine
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def load_cart_snapshot(db: AsyncSession, user_id: int) -> OrderSnapshot:
    """Return the user's cart as an order snapshot, priced at current prices.

    Lines are ordered by product name. Raises ``EmptyCartError`` when the user
    has no cart lines. Read-only.
    """
    query = (
        select(CartItem.product_id, CartItem.quantity, Product.name, Product.price)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_telegram_id == user_id)
        .order_by(Product.name.asc(), Product.id.asc())
    )
    rows = (await db.execute(query)).all()
    if not rows:
        raise EmptyCartError()

    return OrderSnapshot(
        lines=tuple(
            SnapshotLine(
                product_id=row.product_id,
                name=row.name,
                unit_price=to_decimal(row.price),
                quantity=row.quantity,
            )
            for row in rows
        )
    )
