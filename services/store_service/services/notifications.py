"""Admin notifications for store events."""

from typing import Optional

from libs.common.currency import format_money
from libs.common.logging import get_logger
from libs.common.telegram import TelegramNotifier
from services.store_service.models import Order, User

logger = get_logger(__name__)


def format_order_summary(order: Order, user: Optional[User]) -> str:
    """Plain-text order summary sent to admins."""
    snapshot = order.snapshot
    items_text = "\n".join(
        f"  - {line.name} x{line.quantity} = {format_money(line.line_total)}"
        for line in snapshot.lines
    )

    if user is not None:
        handle = f"@{user.username}" if user.username else "no username"
        customer = f"{user.name or 'Unknown'} ({handle}), {user.phone or 'no phone'}"
    else:
        customer = f"Telegram id {order.user_telegram_id}"

    parts = [
        f"New order #{order.id}",
        f"Customer: {customer}",
        "",
        "Items:",
        items_text,
        "",
        f"Subtotal: {format_money(order.subtotal)}",
    ]
    if order.promo_code:
        parts.append(f"Promo {order.promo_code}: -{order.promo_discount_percent}%")
    if order.points_spent:
        parts.append(f"Points redeemed: {order.points_spent}")
    parts.append(f"Total: {format_money(order.total_price)}")
    parts.append(f"Address: {order.address or '-'}")
    if order.comment:
        parts.append(f"Comment: {order.comment}")
    return "\n".join(parts)


async def notify_new_order(
    notifier: Optional[TelegramNotifier], order: Order, user: Optional[User]
) -> None:
    """Tell admins about a new order. Never raises."""
    if notifier is None:
        return
    try:
        await notifier.notify_admins(format_order_summary(order, user))
    except Exception as e:
        logger.error("Failed to send new order notification for order %s: %s", order.id, e)
