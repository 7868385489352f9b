"""Budget and dashboard views assembled from the pure balance calculations."""
from sqlmodel import Session, select
from typing import Optional
from datetime import date

from campusfin.config import local_now
from campusfin.models.account import Account
from campusfin.models.category import Category
from campusfin.models.transaction import Transaction
from campusfin.schemas.budget import BudgetSummary, DashboardResponse
from campusfin.services.balance_calculations import (
    calculate_average_daily_income,
    calculate_average_daily_spending,
    calculate_balance,
    calculate_budget_summary,
    calculate_total_net_worth,
    determine_financial_status,
    get_account_balances,
    get_month_spending,
    get_monthly_spending_by_category,
    month_key,
    parse_month,
)
from campusfin.services.errors import ValidationError
from campusfin.services.settings_service import SettingsService


class BudgetService:
    """Loads a user's rows and hands them to the balance calculations."""

    def __init__(self, session: Session):
        self.session = session

    def _transactions(self, user_id: str):
        return self.session.exec(select(Transaction).where(Transaction.user_id == user_id)).all()

    def _categories(self, user_id: str):
        return self.session.exec(select(Category).where(Category.user_id == user_id)).all()

    def summary(self, user_id: str, month: Optional[str] = None, today: Optional[date] = None) -> BudgetSummary:
        month = month or month_key(today or local_now().date())
        try:
            parse_month(month)
        except ValueError as e:
            raise ValidationError(str(e))
        return calculate_budget_summary(self._categories(user_id), self._transactions(user_id), month)

    def dashboard(self, user_id: str, today: Optional[date] = None) -> DashboardResponse:
        today = today or local_now().date()
        transactions = self._transactions(user_id)
        accounts = self.session.exec(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.order, Account.created_at)
        ).all()
        settings = SettingsService(self.session).get(user_id)

        balance = calculate_balance(transactions)
        return DashboardResponse(
            balance=balance,
            status=determine_financial_status(balance, settings.safe_threshold, settings.tight_threshold),
            month=get_month_spending(transactions, today=today),
            spending_breakdown=get_monthly_spending_by_category(
                transactions, self._categories(user_id), month_key(today)
            ),
            accounts=get_account_balances(transactions, accounts),
            net_worth=calculate_total_net_worth(accounts),
            average_daily_spending=calculate_average_daily_spending(transactions, today=today),
            average_daily_income=calculate_average_daily_income(transactions, today=today),
        )
