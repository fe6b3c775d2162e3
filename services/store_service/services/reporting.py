"""Monthly profit and loss report and expense entry."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import ZERO, quantize_money, to_decimal
from libs.common.datetime_utils import month_bounds
from libs.common.errors import InvalidInputError
from libs.common.logging import get_logger
from libs.db.transactions import atomic
from services.store_service.models import Expense, Order, OrderStatus, Product
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class MonthlyReport:
    period_start: datetime
    period_end: datetime
    revenue: Decimal = ZERO
    cogs: Decimal = ZERO
    expenses: Decimal = ZERO
    expenses_list: list[Expense] = field(default_factory=list)

    @property
    def net_profit(self) -> Decimal:
        return self.revenue - self.cogs - self.expenses


async def monthly_report(db: AsyncSession, now: Optional[datetime] = None) -> MonthlyReport:
    """Revenue, cost of goods and expenses for the current calendar month.

    Revenue counts completed orders created in the month. Cost of goods uses
    each product's *current* purchase price; lines of deleted products add
    nothing.
    """
    start, end = month_bounds(now)
    report = MonthlyReport(period_start=start, period_end=end)

    orders = (
        await db.execute(
            select(Order).where(
                Order.status == OrderStatus.COMPLETED,
                Order.created_at >= start,
                Order.created_at < end,
            )
        )
    ).scalars().all()

    snapshots = [order.snapshot for order in orders]
    product_ids = {line.product_id for snap in snapshots for line in snap.lines}
    purchase_prices: dict[int, Decimal] = {}
    if product_ids:
        rows = await db.execute(
            select(Product.id, Product.purchase_price).where(Product.id.in_(sorted(product_ids)))
        )
        purchase_prices = {row.id: to_decimal(row.purchase_price or 0) for row in rows}

    for order, snap in zip(orders, snapshots):
        report.revenue += to_decimal(order.total_price)
        for line in snap.lines:
            report.cogs += purchase_prices.get(line.product_id, ZERO) * line.quantity

    expenses = (
        await db.execute(
            select(Expense)
            .where(Expense.created_at >= start, Expense.created_at < end)
            .order_by(Expense.created_at.desc())
        )
    ).scalars().all()
    report.expenses_list = list(expenses)
    report.expenses = sum((to_decimal(e.amount) for e in expenses), ZERO)

    return report


async def add_expense(db: AsyncSession, *, amount: Decimal, comment: Optional[str]) -> Expense:
    amount = to_decimal(amount)
    if amount <= ZERO:
        raise InvalidInputError("Expense amount must be positive")

    expense = Expense(amount=quantize_money(amount), comment=comment)
    async with atomic(db, "add_expense"):
        db.add(expense)

    logger.info("Recorded expense %s: %s", expense.id, expense.amount)
    return expense
