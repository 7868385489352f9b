"""Budget, dashboard and monthly rollover endpoints."""
from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.budget import BudgetSummary, DashboardResponse, RolloverSummary
from campusfin.services.budget_service import BudgetService
from campusfin.services.rollover_service import RolloverService

router = APIRouter(tags=["Budget"], dependencies=[Depends(enforce_rate_limit)])


def get_budget_service(session: Session = Depends(get_session)) -> BudgetService:
    """Dependency for getting BudgetService instance."""
    return BudgetService(session)


def get_rollover_service(session: Session = Depends(get_session)) -> RolloverService:
    return RolloverService(session)


@router.get("/budget", response_model=BudgetSummary)
async def budget_summary(
    current_user: CurrentUser = Depends(get_current_user),
    service: BudgetService = Depends(get_budget_service),
    month: Optional[str] = Query(None, description="Month as YYYY-MM; defaults to the current month"),
):
    return service.summary(current_user.user_id, month)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    current_user: CurrentUser = Depends(get_current_user),
    service: BudgetService = Depends(get_budget_service),
):
    """Balance, status, current month totals, spending breakdown and accounts."""
    return service.dashboard(current_user.user_id)


@router.post("/monthly-rollover", response_model=RolloverSummary)
async def monthly_rollover(
    current_user: CurrentUser = Depends(get_current_user),
    service: RolloverService = Depends(get_rollover_service),
):
    """Carry last month's unspent budgets into category rollover balances."""
    return service.process_monthly_rollover(current_user.user_id)
