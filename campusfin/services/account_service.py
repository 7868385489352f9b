"""Account service for CampusFin."""
from sqlmodel import Session, select
from typing import List, Optional
from datetime import date, datetime

from campusfin.models.account import Account
from campusfin.models.transaction import Transaction
from campusfin.schemas.budget import AccountBalance, CreditCardSpendingHistory, CreditCardSummary
from campusfin.schemas.finance import AccountCreate, AccountUpdate
from campusfin.services.balance_calculations import (
    get_account_balances,
    get_auto_pay_account,
    get_credit_card_spending_history,
    get_credit_cards_summary,
)
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.accounts")

AUTO_PAY_SOURCE_TYPES = ("checking", "savings")


class AccountService:
    """Service class for account CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def list(self, user_id: str) -> List[Account]:
        return self.session.exec(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.order, Account.created_at)
        ).all()

    def get_by_id(self, account_id: str, user_id: str) -> Optional[Account]:
        return self.session.exec(
            select(Account)
            .where(Account.id == account_id)
            .where(Account.user_id == user_id)
        ).first()

    def get_or_404(self, account_id: str, user_id: str) -> Account:
        account = self.get_by_id(account_id, user_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def create(self, user_id: str, data: AccountCreate) -> Account:
        """Create an account; its opening balance is taken as given."""
        self._validate_auto_pay(user_id, data.type, data.auto_pay_account_id)
        account = Account(user_id=user_id, **data.model_dump())
        if account.is_default:
            self._clear_default(user_id)
        self.session.add(account)
        self.session.commit()
        self.session.refresh(account)
        logger.info("Created account", user_id=user_id, account_id=account.id, type=account.type)
        return account

    def update(self, account_id: str, user_id: str, data: AccountUpdate) -> Account:
        account = self.get_or_404(account_id, user_id)
        changes = data.model_dump(exclude_unset=True)
        account_type = changes.get("type") or account.type
        if account_type != "credit" and "auto_pay_account_id" not in changes:
            changes["auto_pay_account_id"] = None
        self._validate_auto_pay(user_id, account_type, changes.get("auto_pay_account_id"))
        if changes.get("is_default"):
            self._clear_default(user_id, keep_id=account.id)
        for key, value in changes.items():
            setattr(account, key, value)
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        self.session.commit()
        self.session.refresh(account)
        return account

    def delete(self, account_id: str, user_id: str) -> None:
        """Delete an account together with its transactions."""
        account = self.get_or_404(account_id, user_id)
        for transaction in self.session.exec(
            select(Transaction).where(Transaction.account_id == account.id)
        ).all():
            self.session.delete(transaction)
        self.session.delete(account)
        self.session.commit()
        logger.info("Deleted account", user_id=user_id, account_id=account_id)

    def balances(self, user_id: str) -> List[AccountBalance]:
        """Balance view of every account with display strings and transaction counts."""
        transactions = self.session.exec(
            select(Transaction).where(Transaction.user_id == user_id)
        ).all()
        return get_account_balances(transactions, self.list(user_id))

    def credit_cards_summary(self, user_id: str, today: Optional[date] = None) -> List[CreditCardSummary]:
        transactions = self.session.exec(
            select(Transaction).where(Transaction.user_id == user_id)
        ).all()
        return get_credit_cards_summary(transactions, self.list(user_id), today=today)

    def credit_card_spending(
        self,
        card_id: str,
        user_id: str,
        months_back: int = 12,
        today: Optional[date] = None,
    ) -> CreditCardSpendingHistory:
        """
        Month-by-month spending of one credit card.

        Raises:
            NotFoundError: the account is missing, not the user's, or not a credit card
        """
        card = self.get_by_id(card_id, user_id)
        if not card or card.type != "credit":
            raise NotFoundError("Credit card not found")

        transactions = self.session.exec(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .where(Transaction.account_id == card.id)
        ).all()
        months = get_credit_card_spending_history(transactions, card.id, months_back=months_back, today=today)

        return CreditCardSpendingHistory(
            card_id=card.id,
            card_name=card.name,
            current_month=months[0],
            history=months[1:],
            auto_pay_account=get_auto_pay_account(card, self.list(user_id)),
        )

    def _validate_auto_pay(self, user_id: str, account_type: str, auto_pay_account_id: Optional[str]) -> None:
        if not auto_pay_account_id:
            return
        if account_type != "credit":
            raise ValidationError("Only credit cards can have an auto-pay account")
        source = self.get_by_id(auto_pay_account_id, user_id)
        if not source:
            raise NotFoundError("Auto-pay account not found")
        if source.type not in AUTO_PAY_SOURCE_TYPES:
            raise ValidationError("Auto-pay account must be a checking or savings account")

    def _clear_default(self, user_id: str, keep_id: Optional[str] = None) -> None:
        """Unset ``is_default`` on the user's other accounts; does not commit."""
        for other in self.session.exec(
            select(Account)
            .where(Account.user_id == user_id)
            .where(Account.is_default == True)  # noqa: E712
        ).all():
            if other.id != keep_id:
                other.is_default = False
                self.session.add(other)
