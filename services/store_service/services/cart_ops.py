"""Cart line operations."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from libs.common.errors import InvalidInputError, NotFoundError
from libs.db.transactions import atomic
from services.store_service.models import CartItem, Product
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class CartLineView:
    product_id: int
    quantity: int
    name: str
    price: Decimal
    image_url: Optional[str]

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


async def list_cart(db: AsyncSession, user_id: int) -> list[CartLineView]:
    """Cart lines with live product data, ordered by product name."""
    query = (
        select(
            CartItem.product_id,
            CartItem.quantity,
            Product.name,
            Product.price,
            Product.image_url,
        )
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_telegram_id == user_id)
        .order_by(Product.name.asc(), Product.id.asc())
    )
    rows = (await db.execute(query)).all()
    return [
        CartLineView(
            product_id=row.product_id,
            quantity=row.quantity,
            name=row.name,
            price=row.price,
            image_url=row.image_url,
        )
        for row in rows
    ]


async def add_to_cart(
    db: AsyncSession, *, user_id: int, product_id: int, quantity: int = 1
) -> CartItem:
    """Add ``quantity`` of a product; an existing line is incremented."""
    if quantity < 1:
        raise InvalidInputError("Quantity must be at least 1")

    async with atomic(db, "add_to_cart"):
        product = await db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")

        result = await db.execute(
            select(CartItem)
            .where(
                CartItem.user_telegram_id == user_id,
                CartItem.product_id == product_id,
            )
            .with_for_update()
        )
        item = result.scalar_one_or_none()
        if item is not None:
            item.quantity += quantity
        else:
            item = CartItem(
                user_telegram_id=user_id, product_id=product_id, quantity=quantity
            )
            db.add(item)

    return item


async def remove_from_cart(
    db: AsyncSession, *, user_id: int, product_id: int, remove_all: bool = False
) -> Optional[CartItem]:
    """Decrement a line by one, or drop it entirely.

    The line is deleted when ``remove_all`` is set or its quantity is 1.
    Removing a product that is not in the cart is a no-op. Returns the
    remaining line, or None once it is gone.
    """
    async with atomic(db, "remove_from_cart"):
        result = await db.execute(
            select(CartItem)
            .where(
                CartItem.user_telegram_id == user_id,
                CartItem.product_id == product_id,
            )
            .with_for_update()
        )
        item = result.scalar_one_or_none()
        if item is None:
            return None
        if remove_all or item.quantity <= 1:
            await db.delete(item)
            item = None
        else:
            item.quantity -= 1

    return item
