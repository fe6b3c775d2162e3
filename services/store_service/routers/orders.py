"""Store orders router: checkout quote, order placement and history."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.telegram import TelegramNotifier, get_notifier
from libs.db.session import get_async_db
from services.store_service.schemas import (
    CheckoutOptions,
    OrderCreate,
    OrderResponse,
    PlaceOrderResponse,
    QuoteResponse,
)
from services.store_service.services.order_queries import list_user_orders
from services.store_service.services.settlement import place_order, quote_order
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("/cart/quote", response_model=QuoteResponse)
async def quote_checkout(
    options: CheckoutOptions,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Price the current cart with a promo code and points, without ordering."""
    quote = await quote_order(
        db,
        user_id=current_user.user_id,
        promo_code=options.promo_code,
        points_requested=options.points_requested,
    )
    discount = quote.discount
    return QuoteResponse(
        items=list(quote.snapshot.lines),
        subtotal=discount.subtotal,
        promo_code_applied=discount.promo_code_applied,
        promo_percent=discount.promo_percent,
        points_balance=quote.user_points,
        points_cap=discount.points_cap,
        points_spent=discount.points_spent,
        final_price=discount.final_price,
    )


@router.post("/order", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    notifier: TelegramNotifier = Depends(get_notifier),
):
    """Turn the caller's cart into an order."""
    order = await place_order(
        db,
        user_id=current_user.user_id,
        address=order_in.address,
        comment=order_in.comment,
        promo_code=order_in.promo_code,
        points_requested=order_in.points_requested,
        notifier=notifier,
    )
    return PlaceOrderResponse(
        order_id=order.id,
        total_price=order.total_price,
        points_spent=order.points_spent,
    )


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_my_orders(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's orders, newest first."""
    orders = await list_user_orders(db, current_user.user_id)
    return [OrderResponse.from_order(order) for order in orders]
