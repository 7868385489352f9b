"""
Notification Service

Stores in-app notifications (rollover results and similar events) and
lets users list, mark and delete them.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from campusfin.models.notification import Notification
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.notifications")

# Notifications older than this are not listed
NOTIFICATION_LOOKBACK_DAYS = 30


class NotificationService:
    """Service to manage a user's notifications."""

    def __init__(self, session: Session):
        self.session = session

    def notify(self, user_id: str, title: str, message: str, type: str = "info", commit: bool = True) -> Notification:
        notification = Notification(user_id=user_id, title=title, message=message, type=type)
        self.session.add(notification)
        if commit:
            self.session.commit()
            self.session.refresh(notification)
        logger.info("Created notification", user_id=user_id, type=type)
        return notification

    def list(self, user_id: str, unread_only: bool = False, now: Optional[datetime] = None) -> List[Notification]:
        """Notifications from the last 30 days, newest first."""
        since = (now or datetime.utcnow()) - timedelta(days=NOTIFICATION_LOOKBACK_DAYS)
        statement = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.created_at >= since)
        )
        if unread_only:
            statement = statement.where(Notification.read == False)  # noqa: E712
        return self.session.exec(statement.order_by(Notification.created_at.desc())).all()

    def unread_count(self, user_id: str) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read == False)  # noqa: E712
        ).one()

    def mark_read(self, user_id: str, notification_id: Optional[str] = None, mark_all: bool = False) -> int:
        """
        Mark one notification, or all unread ones, as read.

        Returns:
            Number of notifications updated

        Raises:
            ValidationError: neither a notification id nor mark_all was given
            NotFoundError: the notification does not belong to the user
        """
        if mark_all:
            result = self.session.exec(
                update(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.read == False)  # noqa: E712
                .values(read=True)
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
            return result.rowcount

        if not notification_id:
            raise ValidationError("Provide notification_id or mark_all_as_read")

        notification = self._get_or_404(notification_id, user_id)
        notification.read = True
        self.session.add(notification)
        self.session.commit()
        return 1

    def delete(self, notification_id: str, user_id: str) -> None:
        notification = self._get_or_404(notification_id, user_id)
        self.session.delete(notification)
        self.session.commit()

    def _get_or_404(self, notification_id: str, user_id: str) -> Notification:
        notification = self.session.exec(
            select(Notification)
            .where(Notification.id == notification_id)
            .where(Notification.user_id == user_id)
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")
        return notification
