"""Admin reporting router: monthly stats and expenses."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    ExpenseCreate,
    ExpenseResponse,
    MonthlyStatsResponse,
)
from services.store_service.services.reporting import add_expense, monthly_report
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])


@router.get("/stats", response_model=MonthlyStatsResponse)
async def get_monthly_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Current month revenue, cost of goods, expenses and net profit."""
    report = await monthly_report(db)
    return MonthlyStatsResponse(
        period_start=report.period_start,
        period_end=report.period_end,
        revenue=report.revenue,
        cogs=report.cogs,
        expenses=report.expenses,
        net_profit=report.net_profit,
        expenses_list=[ExpenseResponse.model_validate(e) for e in report.expenses_list],
    )


@router.post("/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await add_expense(db, amount=expense_in.amount, comment=expense_in.comment)
