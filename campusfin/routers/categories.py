"""Category router for CampusFin."""
from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List, Optional
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.budget import RolloverTransferRequest
from campusfin.schemas.finance import CategoryCreate, CategoryResponse, CategoryUpdate
from campusfin.services.category_service import CategoryService
from campusfin.services.rollover_service import RolloverService

router = APIRouter(prefix="/categories", tags=["Categories"], dependencies=[Depends(enforce_rate_limit)])


def get_category_service(session: Session = Depends(get_session)) -> CategoryService:
    """Dependency for getting CategoryService instance."""
    return CategoryService(session)


def get_rollover_service(session: Session = Depends(get_session)) -> RolloverService:
    """Dependency for getting RolloverService instance."""
    return RolloverService(session)


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    current_user: CurrentUser = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
    type: Optional[str] = Query(None, pattern=r"^(expense|income)$", description="Filter by type"),
):
    return service.list(current_user.user_id, type=type)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return service.create(current_user.user_id, category_data)


@router.post("/rollover-transfer", response_model=Dict[str, Any])
async def transfer_rollover(
    transfer: RolloverTransferRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: RolloverService = Depends(get_rollover_service),
):
    """Move rollover balance from one category to another."""
    from_category, to_category = service.transfer_rollover(
        current_user.user_id,
        transfer.from_category_id,
        transfer.to_category_id,
        transfer.amount,
    )
    return {
        "from_category": CategoryResponse.model_validate(from_category),
        "to_category": CategoryResponse.model_validate(to_category),
        "amount": transfer.amount,
    }


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return service.get_or_404(category_id, current_user.user_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return service.update(category_id, current_user.user_id, category_data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    service.delete(category_id, current_user.user_id)
