"""Notification router for CampusFin."""
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.notification import NotificationListResponse, NotificationMarkRead
from campusfin.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"], dependencies=[Depends(enforce_rate_limit)])


def get_notification_service(session: Session = Depends(get_session)) -> NotificationService:
    """Dependency for getting NotificationService instance."""
    return NotificationService(session)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
    unread: bool = Query(False, description="Only unread notifications"),
):
    """Notifications from the last 30 days plus the total unread count."""
    return NotificationListResponse(
        notifications=service.list(current_user.user_id, unread_only=unread),
        unread_count=service.unread_count(current_user.user_id),
    )


@router.patch("")
async def mark_notifications_read(
    request: NotificationMarkRead,
    current_user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_read(
        current_user.user_id,
        notification_id=request.notification_id,
        mark_all=request.mark_all_as_read,
    )
    return {"updated": updated}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    service.delete(notification_id, current_user.user_id)
