"""Category service for CampusFin."""
from sqlmodel import Session, select
from typing import Dict, List, Optional
from datetime import datetime

from campusfin.models.category import Category
from campusfin.schemas.finance import CategoryCreate, CategoryUpdate
from campusfin.services.errors import NotFoundError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.categories")

# Seeded for every new user: group -> (type, category names)
DEFAULT_CATEGORY_GROUPS: Dict[str, tuple] = {
    "Essentials": ("expense", ["Groceries", "Rent", "Utilities", "Transport"]),
    "Lifestyle": ("expense", ["Dining", "Entertainment", "Shopping"]),
    "Health": ("expense", ["Medical", "Fitness", "Wellness"]),
    "Personal": ("expense", ["Subscriptions", "Services", "Miscellaneous"]),
    "Income": ("income", ["Salary", "Freelance", "Other Income"]),
}


class CategoryService:
    """Service class for category CRUD operations and the default seed."""

    def __init__(self, session: Session):
        self.session = session

    def list(self, user_id: str, type: Optional[str] = None) -> List[Category]:
        statement = select(Category).where(Category.user_id == user_id)
        if type:
            statement = statement.where(Category.type == type)
        return self.session.exec(statement.order_by(Category.order, Category.name)).all()

    def get_by_id(self, category_id: str, user_id: str) -> Optional[Category]:
        return self.session.exec(
            select(Category)
            .where(Category.id == category_id)
            .where(Category.user_id == user_id)
        ).first()

    def get_or_404(self, category_id: str, user_id: str) -> Category:
        category = self.get_by_id(category_id, user_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create(self, user_id: str, data: CategoryCreate) -> Category:
        category = Category(user_id=user_id, **data.model_dump())
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def update(self, category_id: str, user_id: str, data: CategoryUpdate) -> Category:
        category = self.get_or_404(category_id, user_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)
        category.updated_at = datetime.utcnow()
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def delete(self, category_id: str, user_id: str) -> None:
        """Delete a category; its transactions become uncategorized."""
        category = self.get_or_404(category_id, user_id)
        self.session.delete(category)
        self.session.commit()
        logger.info("Deleted category", user_id=user_id, category_id=category_id)

    def seed_default_categories(self, user_id: str, commit: bool = True) -> int:
        """
        Create the default category groups for a user.

        Skipped when the user already has any category.

        Returns:
            Number of categories created
        """
        existing = self.session.exec(
            select(Category.id).where(Category.user_id == user_id)
        ).first()
        if existing:
            return 0

        created = 0
        for group, (category_type, names) in DEFAULT_CATEGORY_GROUPS.items():
            for order, name in enumerate(names):
                self.session.add(Category(
                    user_id=user_id,
                    name=name,
                    type=category_type,
                    parent_group=group,
                    order=order,
                ))
                created += 1

        if commit:
            self.session.commit()
        logger.info("Seeded default categories", user_id=user_id, count=created)
        return created
