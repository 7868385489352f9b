"""Savings category router for CampusFin."""
from fastapi import APIRouter, Depends, status
from typing import List
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.finance import SavingsCategoryCreate, SavingsCategoryResponse, SavingsCategoryUpdate
from campusfin.services.savings_category_service import SavingsCategoryService

router = APIRouter(
    prefix="/savings-categories", tags=["Savings Categories"], dependencies=[Depends(enforce_rate_limit)]
)


def get_savings_category_service(session: Session = Depends(get_session)) -> SavingsCategoryService:
    return SavingsCategoryService(session)


@router.get("", response_model=List[SavingsCategoryResponse])
async def list_savings_categories(
    current_user: CurrentUser = Depends(get_current_user),
    service: SavingsCategoryService = Depends(get_savings_category_service),
):
    return service.list(current_user.user_id)


@router.post("", response_model=SavingsCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_savings_category(
    category_data: SavingsCategoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SavingsCategoryService = Depends(get_savings_category_service),
):
    return service.create(current_user.user_id, category_data)


@router.patch("/{category_id}", response_model=SavingsCategoryResponse)
async def update_savings_category(
    category_id: str,
    category_data: SavingsCategoryUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SavingsCategoryService = Depends(get_savings_category_service),
):
    return service.update(category_id, current_user.user_id, category_data)


@router.delete("/{category_id}")
async def delete_savings_category(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SavingsCategoryService = Depends(get_savings_category_service),
):
    service.delete(category_id, current_user.user_id)
    return {"success": True}
