"""Transaction router for CampusFin."""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from datetime import datetime
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.finance import TransactionCreate, TransactionResponse, TransactionUpdate
from campusfin.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"], dependencies=[Depends(enforce_rate_limit)])


def get_transaction_service(session: Session = Depends(get_session)) -> TransactionService:
    """Dependency for getting TransactionService instance."""
    return TransactionService(session)


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    current_user: CurrentUser = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
    type: Optional[str] = Query(None, pattern=r"^(expense|income)$", description="Filter by type"),
    account_id: Optional[str] = Query(None, description="Filter by account"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    start: Optional[datetime] = Query(None, description="Transactions on or after this time (ISO format)"),
    end: Optional[datetime] = Query(None, description="Transactions on or before this time (ISO format)"),
):
    """List transactions, newest first."""
    return service.list(
        current_user.user_id,
        type=type,
        account_id=account_id,
        category_id=category_id,
        start=start,
        end=end,
    )


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    """Record an expense or income and update the account balance."""
    return service.create(current_user.user_id, transaction_data)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    return service.get_or_404(transaction_id, current_user.user_id)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    transaction_data: TransactionUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    return service.update(transaction_id, current_user.user_id, transaction_data)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
):
    service.delete(transaction_id, current_user.user_id)
