"""Savings category service for CampusFin."""
from sqlmodel import Session, select
from sqlalchemy import func
from typing import List, Optional
from datetime import datetime

from campusfin.models.savings_category import SavingsCategory
from campusfin.schemas.finance import SavingsCategoryCreate, SavingsCategoryUpdate
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.savings")


class SavingsCategoryService:
    """Service class for savings category CRUD operations.

    Names are trimmed and unique per user; new categories are appended after
    the highest existing ``order``.
    """

    def __init__(self, session: Session):
        self.session = session

    def list(self, user_id: str) -> List[SavingsCategory]:
        return self.session.exec(
            select(SavingsCategory)
            .where(SavingsCategory.user_id == user_id)
            .order_by(SavingsCategory.name)
        ).all()

    def get_or_404(self, category_id: str, user_id: str) -> SavingsCategory:
        category = self.session.exec(
            select(SavingsCategory)
            .where(SavingsCategory.id == category_id)
            .where(SavingsCategory.user_id == user_id)
        ).first()
        if not category:
            raise NotFoundError("Savings category not found")
        return category

    def create(self, user_id: str, data: SavingsCategoryCreate) -> SavingsCategory:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        self._ensure_unique(user_id, name)

        last_order = self.session.exec(
            select(func.max(SavingsCategory.order)).where(SavingsCategory.user_id == user_id)
        ).one()
        category = SavingsCategory(
            user_id=user_id,
            name=name,
            description=data.description or "",
            target_amount=data.target_amount,
            order=(last_order if last_order is not None else -1) + 1,
        )
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        logger.info("Created savings category", user_id=user_id, category_id=category.id)
        return category

    def update(self, category_id: str, user_id: str, data: SavingsCategoryUpdate) -> SavingsCategory:
        category = self.get_or_404(category_id, user_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Category name cannot be empty")
            self._ensure_unique(user_id, name, exclude_id=category.id)
            changes["name"] = name
        if "description" in changes:
            changes["description"] = changes["description"] or ""
        if "current_balance" in changes and changes["current_balance"] is None:
            raise ValidationError("Current balance must be a non-negative number")
        if "order" in changes and changes["order"] is None:
            raise ValidationError("Order must be a non-negative integer")

        for key, value in changes.items():
            setattr(category, key, value)
        category.updated_at = datetime.utcnow()
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def delete(self, category_id: str, user_id: str) -> None:
        category = self.get_or_404(category_id, user_id)
        self.session.delete(category)
        self.session.commit()
        logger.info("Deleted savings category", user_id=user_id, category_id=category_id)

    def _ensure_unique(self, user_id: str, name: str, exclude_id: Optional[str] = None) -> None:
        statement = (
            select(SavingsCategory.id)
            .where(SavingsCategory.user_id == user_id)
            .where(SavingsCategory.name == name)
        )
        if exclude_id:
            statement = statement.where(SavingsCategory.id != exclude_id)
        if self.session.exec(statement).first():
            raise ValidationError("A savings category with this name already exists")
