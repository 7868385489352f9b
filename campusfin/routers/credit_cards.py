"""Credit card spending router.

Credit cards are accounts of type ``credit``; these routes only read them.
"""
from fastapi import APIRouter, Depends, Query
from typing import List
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.budget import CreditCardSpendingHistory, CreditCardSummary
from campusfin.services.account_service import AccountService

router = APIRouter(prefix="/credit-cards", tags=["Credit Cards"], dependencies=[Depends(enforce_rate_limit)])


def get_account_service(session: Session = Depends(get_session)) -> AccountService:
    return AccountService(session)


@router.get("", response_model=List[CreditCardSummary])
async def list_credit_cards(
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Every credit card with this month's spending and its auto-pay account."""
    return service.credit_cards_summary(current_user.user_id)


@router.get("/{card_id}/spending", response_model=CreditCardSpendingHistory)
async def credit_card_spending(
    card_id: str,
    months_back: int = Query(12, ge=1, le=60, description="Months with charges to include"),
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Current month spending plus earlier months, newest first."""
    return service.credit_card_spending(card_id, current_user.user_id, months_back=months_back)
