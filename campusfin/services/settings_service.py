"""User settings service for CampusFin."""
from sqlmodel import Session, select
from datetime import datetime

from campusfin.models.account import Account
from campusfin.models.settings import UserSettings
from campusfin.schemas.settings import SettingsUpdate
from campusfin.services.errors import NotFoundError


class SettingsService:
    """Read and update the per-user settings row."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: str) -> UserSettings:
        """Return the user's settings, creating the defaults on first read."""
        settings = self.session.get(UserSettings, user_id)
        if settings is None:
            settings = UserSettings(user_id=user_id)
            self.session.add(settings)
            self.session.commit()
            self.session.refresh(settings)
        return settings

    def update(self, user_id: str, data: SettingsUpdate) -> UserSettings:
        settings = self.get(user_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("default_account_id"):
            account = self.session.exec(
                select(Account.id)
                .where(Account.id == changes["default_account_id"])
                .where(Account.user_id == user_id)
            ).first()
            if not account:
                raise NotFoundError("Account not found")
        if "currency" in changes and changes["currency"]:
            changes["currency"] = changes["currency"].upper()

        for key, value in changes.items():
            setattr(settings, key, value)
        settings.updated_at = datetime.utcnow()
        self.session.add(settings)
        self.session.commit()
        self.session.refresh(settings)
        return settings
