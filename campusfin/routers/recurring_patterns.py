"""Recurring pattern router for CampusFin."""
from fastapi import APIRouter, Depends, status
from typing import Any, Dict, List, Optional
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.recurrence import (
    GenerateRequest,
    GenerateResponse,
    RecurringPatternCreate,
    RecurringPatternResponse,
)
from campusfin.services.recurring_pattern_service import RecurringPatternService

router = APIRouter(
    prefix="/recurring-patterns",
    tags=["Recurring Patterns"],
    dependencies=[Depends(enforce_rate_limit)],
)


def get_pattern_service(session: Session = Depends(get_session)) -> RecurringPatternService:
    """Dependency for getting RecurringPatternService instance."""
    return RecurringPatternService(session)


@router.get("", response_model=List[RecurringPatternResponse])
async def list_patterns(
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    return service.list(current_user.user_id)


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_pattern(
    pattern_data: RecurringPatternCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    """Create a pattern and materialize its first window of instances."""
    pattern, created = service.create(current_user.user_id, pattern_data)
    return {
        "pattern": RecurringPatternResponse.model_validate(pattern),
        "instances_created": created,
    }


@router.post("/generate", response_model=GenerateResponse)
async def generate_all(
    request: Optional[GenerateRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    """Top up every active pattern of the caller."""
    request = request or GenerateRequest()
    created = service.generate_all(
        current_user.user_id,
        entity_type=request.entity_type,
        window_days=request.window_days,
    )
    return GenerateResponse(created=created)


@router.get("/{pattern_id}", response_model=RecurringPatternResponse)
async def get_pattern(
    pattern_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    return service.get_or_404(pattern_id, current_user.user_id)


@router.post("/{pattern_id}/generate", response_model=GenerateResponse)
async def generate_pattern(
    pattern_id: str,
    request: Optional[GenerateRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    request = request or GenerateRequest()
    created = service.generate(pattern_id, current_user.user_id, window_days=request.window_days)
    return GenerateResponse(created=created)


@router.delete("/{pattern_id}")
async def delete_pattern(
    pattern_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: RecurringPatternService = Depends(get_pattern_service),
):
    """Stop a series: upcoming instances are removed, past ones are kept."""
    deleted = service.deactivate(pattern_id, current_user.user_id)
    return {"deactivated": True, "instances_deleted": deleted}
