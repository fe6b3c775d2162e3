"""Admin store orders router: listing, editing and completing orders."""

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import OrderStatus
from services.store_service.schemas import (
    AdminOrderResponse,
    OrderContactUpdate,
    OrderResponse,
)
from services.store_service.services.fulfillment import complete_order
from services.store_service.services.order_queries import (
    list_orders_for_admin,
    update_order_contact,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])


@router.get("/orders", response_model=list[AdminOrderResponse])
async def list_orders(
    status: OrderStatus = Query(OrderStatus.ACTIVE),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Newest orders in a status, with the customer's contact details."""
    rows = await list_orders_for_admin(db, status=status)
    return [AdminOrderResponse.from_order_and_user(order, user) for order, user in rows]


@router.patch("/orders/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    update_in: OrderContactUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Edit address and comment of an active order."""
    order = await update_order_contact(
        db, order_id=order_id, address=update_in.address, comment=update_in.comment
    )
    return OrderResponse.from_order(order)


@router.post("/orders/{order_id}/done", response_model=OrderResponse)
async def mark_order_done(
    order_id: int,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Complete an active order: settle stock and credit cashback."""
    order = await complete_order(db, order_id=order_id, admin_id=current_user.user_id)
    return OrderResponse.from_order(order)
