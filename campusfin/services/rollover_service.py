"""
Monthly Rollover Service

Carries unspent category budget into ``Category.rollover_balance`` and moves
rollover money between categories. Balance changes are SQL-side increments
committed in a single transaction per operation.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy import update
from sqlmodel import Session, select

from campusfin.config import local_now
from campusfin.models.category import Category
from campusfin.models.transaction import Transaction
from campusfin.schemas.budget import CategoryRolloverUpdate, RolloverSummary
from campusfin.services.balance_calculations import (
    calculate_category_budget_status,
    format_currency,
    parse_month,
    previous_month,
)
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.services.notification_service import NotificationService
from campusfin.utils.logger import get_logger
from campusfin.utils.metrics import metrics_collector

logger = get_logger("campusfin.rollover")


class RolloverService:
    """Service for budget rollover processing and rollover transfers."""

    def __init__(self, session: Session):
        self.session = session

    @metrics_collector.time_operation("rollover_seconds")
    def process_monthly_rollover(self, user_id: str, today: Optional[date] = None) -> RolloverSummary:
        """
        Add last month's unspent budget to each expense category's rollover balance.

        Only positive leftovers are carried; an overspent category keeps its
        rollover balance unchanged.

        Args:
            user_id: Owner of the categories
            today: Reference day; the month before it is processed

        Returns:
            RolloverSummary for the processed month
        """
        today = today or local_now().date()
        month = previous_month(today)
        month_start, month_end = parse_month(month)

        transactions = self.session.exec(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .where(Transaction.type == "expense")
            .where(Transaction.date >= datetime.combine(month_start, datetime.min.time()))
            .where(Transaction.date < datetime.combine(month_end + timedelta(days=1), datetime.min.time()))
        ).all()

        categories = self.session.exec(
            select(Category)
            .where(Category.user_id == user_id)
            .where(Category.type == "expense")
        ).all()
        budgeted = [c for c in categories if c.monthly_budget and c.monthly_budget > 0]

        carried = []
        for category in budgeted:
            status = calculate_category_budget_status(category, transactions, month)
            if status is None or status.available <= 0:
                continue

            self.session.exec(
                update(Category)
                .where(Category.id == category.id)
                .values(
                    rollover_balance=Category.rollover_balance + status.available,
                    updated_at=datetime.utcnow(),
                )
            )
            carried.append((category, status.available))

        total_rolled_over = sum(amount for _, amount in carried)
        if total_rolled_over > 0:
            NotificationService(self.session).notify(
                user_id,
                title="Budget rolled over",
                message=f"${format_currency(total_rolled_over)} of unspent {month} budget was added to your rollover balances.",
                type="rollover",
                commit=False,
            )

        self.session.commit()

        updates = []
        for category, unspent in carried:
            self.session.refresh(category)
            updates.append(CategoryRolloverUpdate(
                category_id=category.id,
                category_name=category.name,
                unspent=unspent,
                new_rollover_balance=category.rollover_balance,
            ))

        metrics_collector.rollover_run()
        logger.info(
            "Processed monthly rollover",
            user_id=user_id,
            month=month,
            categories_processed=len(budgeted),
            total_rolled_over=total_rolled_over,
        )

        return RolloverSummary(
            month=month,
            total_rolled_over=total_rolled_over,
            category_updates=updates,
            categories_processed=len(budgeted),
        )

    def transfer_rollover(
        self,
        user_id: str,
        from_category_id: str,
        to_category_id: str,
        amount: float,
    ) -> Tuple[Category, Category]:
        """
        Move ``amount`` of rollover balance from one category to another.

        Raises:
            ValidationError: non-positive amount, same category, or insufficient balance
            NotFoundError: either category is missing or not owned by the user
        """
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be a positive number")
        if from_category_id == to_category_id:
            raise ValidationError("Cannot transfer rollover to the same category")

        from_category = self._get_owned(from_category_id, user_id)
        to_category = self._get_owned(to_category_id, user_id)
        if not from_category or not to_category:
            raise NotFoundError("Category not found")

        now = datetime.utcnow()
        debit = self.session.exec(
            update(Category)
            .where(Category.id == from_category_id)
            .where(Category.user_id == user_id)
            .where(Category.rollover_balance >= amount)
            .values(rollover_balance=Category.rollover_balance - amount, updated_at=now)
        )
        if debit.rowcount != 1:
            self.session.rollback()
            logger.warning(
                "Rejected rollover transfer",
                user_id=user_id,
                from_category_id=from_category_id,
                amount=amount,
                reason="insufficient_balance",
            )
            raise ValidationError("Insufficient rollover balance")

        self.session.exec(
            update(Category)
            .where(Category.id == to_category_id)
            .where(Category.user_id == user_id)
            .values(rollover_balance=Category.rollover_balance + amount, updated_at=now)
        )
        self.session.commit()
        self.session.refresh(from_category)
        self.session.refresh(to_category)

        metrics_collector.rollover_transfer()
        logger.info(
            "Transferred rollover balance",
            user_id=user_id,
            from_category_id=from_category_id,
            to_category_id=to_category_id,
            amount=amount,
        )
        return from_category, to_category

    def _get_owned(self, category_id: str, user_id: str) -> Optional[Category]:
        return self.session.exec(
            select(Category)
            .where(Category.id == category_id)
            .where(Category.user_id == user_id)
        ).first()
