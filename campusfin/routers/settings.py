"""User settings router for CampusFin."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.settings import SettingsResponse, SettingsUpdate
from campusfin.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"], dependencies=[Depends(enforce_rate_limit)])


def get_settings_service(session: Session = Depends(get_session)) -> SettingsService:
    return SettingsService(session)


@router.get("", response_model=SettingsResponse)
async def get_settings(
    current_user: CurrentUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get(current_user.user_id)


@router.put("", response_model=SettingsResponse)
async def update_settings(
    settings_data: SettingsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return service.update(current_user.user_id, settings_data)
