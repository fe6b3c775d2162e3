"""Store cart router: view, add and remove cart lines."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    CartItemCreate,
    CartItemRemove,
    CartLineResponse,
    CartResponse,
)
from services.store_service.services.cart_ops import add_to_cart, list_cart, remove_from_cart
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


async def _cart_response(db: AsyncSession, user_id: int) -> CartResponse:
    lines = await list_cart(db, user_id)
    return CartResponse(
        items=[CartLineResponse.model_validate(line) for line in lines],
        subtotal=sum((line.line_total for line in lines), Decimal("0")),
    )


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get the caller's cart at current prices."""
    return await _cart_response(db, current_user.user_id)


@router.post("/cart/add", response_model=CartResponse)
async def add_item(
    item_in: CartItemCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Add a product to the cart (increments an existing line)."""
    await add_to_cart(
        db,
        user_id=current_user.user_id,
        product_id=item_in.product_id,
        quantity=item_in.quantity,
    )
    return await _cart_response(db, current_user.user_id)


@router.post("/cart/remove", response_model=CartResponse)
async def remove_item(
    item_in: CartItemRemove,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Decrement a cart line by one, or remove it with ``remove_all``."""
    await remove_from_cart(
        db,
        user_id=current_user.user_id,
        product_id=item_in.product_id,
        remove_all=item_in.remove_all,
    )
    return await _cart_response(db, current_user.user_id)
