"""
Transaction Service

Expense and income CRUD. Every write also moves the owning account's
``current_balance`` with a SQL-side increment in the same commit, so the
stored balance always equals the signed sum of the account's transactions
plus its opening balance.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from campusfin.models.account import Account
from campusfin.models.category import Category
from campusfin.models.transaction import Transaction
from campusfin.schemas.finance import TransactionCreate, TransactionUpdate
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.transactions")


def signed_amount(type: str, amount: float) -> float:
    """Effect of a transaction on its account balance."""
    return amount if type == "income" else -amount


class TransactionService:
    """Service class for transaction CRUD with account balance sync."""

    def __init__(self, session: Session):
        self.session = session

    def list(
        self,
        user_id: str,
        type: Optional[str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Transaction]:
        """List a user's transactions, newest first."""
        statement = select(Transaction).where(Transaction.user_id == user_id)
        if type:
            statement = statement.where(Transaction.type == type)
        if account_id:
            statement = statement.where(Transaction.account_id == account_id)
        if category_id:
            statement = statement.where(Transaction.category_id == category_id)
        if start:
            statement = statement.where(Transaction.date >= start)
        if end:
            statement = statement.where(Transaction.date <= end)
        return self.session.exec(statement.order_by(Transaction.date.desc())).all()

    def get_by_id(self, transaction_id: str, user_id: str) -> Optional[Transaction]:
        return self.session.exec(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        ).first()

    def get_or_404(self, transaction_id: str, user_id: str) -> Transaction:
        transaction = self.get_by_id(transaction_id, user_id)
        if not transaction:
            raise NotFoundError("Transaction not found")
        return transaction

    def create(self, user_id: str, data: TransactionCreate) -> Transaction:
        self._validate_references(user_id, data.type, data.account_id, data.category_id)

        transaction = Transaction(user_id=user_id, **data.model_dump())
        self.session.add(transaction)
        self._adjust_balance(data.account_id, signed_amount(data.type, data.amount))
        self.session.commit()
        self.session.refresh(transaction)

        logger.info(
            "Created transaction",
            user_id=user_id,
            transaction_id=transaction.id,
            type=transaction.type,
            amount=transaction.amount,
        )
        return transaction

    def update(self, transaction_id: str, user_id: str, data: TransactionUpdate) -> Transaction:
        """
        Apply a partial update and move the balance difference.

        The old effect is reversed on the old account and the new effect
        applied on the (possibly different) new account.
        """
        transaction = self.get_or_404(transaction_id, user_id)
        changes = data.model_dump(exclude_unset=True)

        old_account_id = transaction.account_id
        old_effect = signed_amount(transaction.type, transaction.amount)

        new_type = changes.get("type") or transaction.type
        new_account_id = changes.get("account_id") or transaction.account_id
        new_category_id = changes["category_id"] if "category_id" in changes else transaction.category_id
        new_amount = changes.get("amount") or transaction.amount
        self._validate_references(user_id, new_type, new_account_id, new_category_id)

        for key, value in changes.items():
            if key in ("type", "amount", "account_id", "date") and value is None:
                continue
            setattr(transaction, key, value)
        transaction.updated_at = datetime.utcnow()
        self.session.add(transaction)

        self._adjust_balance(old_account_id, -old_effect)
        self._adjust_balance(new_account_id, signed_amount(new_type, new_amount))
        self.session.commit()
        self.session.refresh(transaction)
        return transaction

    def delete(self, transaction_id: str, user_id: str) -> None:
        transaction = self.get_or_404(transaction_id, user_id)
        self._adjust_balance(transaction.account_id, -signed_amount(transaction.type, transaction.amount))
        self.session.delete(transaction)
        self.session.commit()
        logger.info("Deleted transaction", user_id=user_id, transaction_id=transaction_id)

    def _validate_references(
        self,
        user_id: str,
        type: str,
        account_id: str,
        category_id: Optional[str],
    ) -> None:
        if type not in ("expense", "income"):
            raise ValidationError('Type must be "expense" or "income"')

        account = self.session.exec(
            select(Account.id)
            .where(Account.id == account_id)
            .where(Account.user_id == user_id)
        ).first()
        if not account:
            raise NotFoundError("Account not found")

        if category_id:
            category = self.session.exec(
                select(Category)
                .where(Category.id == category_id)
                .where(Category.user_id == user_id)
            ).first()
            if not category:
                raise NotFoundError("Category not found")
            if category.type != type:
                raise ValidationError(f'Category type must be "{type}"')

    def _adjust_balance(self, account_id: str, delta: float) -> None:
        if not delta:
            return
        self.session.exec(
            update(Account)
            .where(Account.id == account_id)
            .values(
                current_balance=Account.current_balance + delta,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
