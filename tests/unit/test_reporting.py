"""Unit tests for the monthly report and expense entry."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from libs.common.datetime_utils import month_bounds
from libs.common.errors import InvalidInputError
from services.store_service.models import OrderStatus
from services.store_service.services.reporting import add_expense, monthly_report
from tests.factories import ExpenseFactory, OrderFactory, ProductFactory, persist

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_month_bounds_use_shop_timezone():
    # 2026-03-31 22:30 UTC is already April 1st in Moscow (UTC+3)
    start, end = month_bounds(datetime(2026, 3, 31, 22, 30, tzinfo=timezone.utc))

    assert start == datetime(2026, 3, 31, 21, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 4, 30, 21, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_monthly_report_totals(db_session):
    tea = await persist(
        db_session, ProductFactory.create(price=Decimal("300.00"), purchase_price=Decimal("120.00"))
    )
    cup = await persist(
        db_session, ProductFactory.create(price=Decimal("200.00"), purchase_price=Decimal("50.00"))
    )
    in_month = NOW - timedelta(days=2)
    await persist(
        db_session,
        OrderFactory.create(
            lines=[(tea, 2), (cup, 1)],
            status=OrderStatus.COMPLETED,
            total_price=Decimal("765.00"),
            created_at=in_month,
        ),
        # Active orders are not revenue yet
        OrderFactory.create(lines=[(tea, 5)], created_at=in_month),
        # Previous month
        OrderFactory.create(
            lines=[(cup, 1)],
            status=OrderStatus.COMPLETED,
            created_at=NOW - timedelta(days=40),
        ),
        ExpenseFactory.create(amount=Decimal("100.00"), created_at=in_month),
        ExpenseFactory.create(amount=Decimal("999.00"), created_at=NOW - timedelta(days=40)),
    )

    report = await monthly_report(db_session, now=NOW)

    assert report.revenue == Decimal("765.00")
    assert report.cogs == Decimal("290.00")
    assert report.expenses == Decimal("100.00")
    assert report.net_profit == Decimal("375.00")
    assert len(report.expenses_list) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_deleted_product_adds_no_cost(db_session):
    gone = await persist(db_session, ProductFactory.create(purchase_price=Decimal("80.00")))
    await persist(
        db_session,
        OrderFactory.create(
            lines=[(gone, 1)], status=OrderStatus.COMPLETED, created_at=NOW - timedelta(days=1)
        ),
    )
    await db_session.delete(gone)
    await db_session.commit()

    report = await monthly_report(db_session, now=NOW)

    assert report.revenue == Decimal("100.00")
    assert report.cogs == Decimal("0")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_expense(db_session):
    expense = await add_expense(db_session, amount=Decimal("49.999"), comment="Tape")
    assert expense.id is not None
    assert expense.amount == Decimal("50.00")

    with pytest.raises(InvalidInputError):
        await add_expense(db_session, amount=Decimal("0"), comment=None)
