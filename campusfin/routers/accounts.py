"""Account router for CampusFin."""
from fastapi import APIRouter, Depends, status
from typing import List
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.budget import AccountBalance
from campusfin.schemas.finance import AccountCreate, AccountResponse, AccountUpdate
from campusfin.services.account_service import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"], dependencies=[Depends(enforce_rate_limit)])


def get_account_service(session: Session = Depends(get_session)) -> AccountService:
    """Dependency for getting AccountService instance."""
    return AccountService(session)


@router.get("", response_model=List[AccountResponse])
async def list_accounts(
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    return service.list(current_user.user_id)


@router.get("/balances", response_model=List[AccountBalance])
async def account_balances(
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Balances with display strings and transaction counts."""
    return service.balances(current_user.user_id)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_data: AccountCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    return service.create(current_user.user_id, account_data)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    return service.get_or_404(account_id, current_user.user_id)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    account_data: AccountUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    return service.update(account_id, current_user.user_id, account_data)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Delete an account and its transactions."""
    service.delete(account_id, current_user.user_id)
