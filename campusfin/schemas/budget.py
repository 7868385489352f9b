"""Budget, balance and rollover schemas."""
from pydantic import BaseModel, Field
from typing import List, Optional


class FinancialStatus(BaseModel):
    """Traffic-light status of the overall balance."""
    balance: float
    status: str  # safe, tight, danger
    message: str
    severity: str  # info, warning, critical


class SpendingCategory(BaseModel):
    """One slice of a spending breakdown."""
    category_name: str
    category_id: Optional[str] = None
    amount: float
    percentage: float
    color: Optional[str] = None


class MonthSpending(BaseModel):
    income: float
    expenses: float
    net: float
    days: int
    days_passed: int


class BudgetStatus(BaseModel):
    """Budget position of a single category for one month."""
    category_id: str
    category_name: str
    budgeted: float
    spent: float
    available: float
    rollover: float
    total_available: float
    percent_used: float
    overspent: bool


class BudgetSummary(BaseModel):
    month: str
    total_budgeted: float
    total_spent: float
    total_available: float
    categories: List[BudgetStatus]
    overall_percent_used: float
    categories_over_budget: int


class AccountBalance(BaseModel):
    account_id: str
    account_name: str
    account_type: str
    balance: float
    transaction_count: int
    display_balance: str


class CreditCardMonthlySpending(BaseModel):
    """Expense total charged to a credit card in one month."""
    month: str  # YYYY-MM
    year: int
    month_num: int
    month_name: str
    spent: float
    transaction_count: int
    is_current_month: bool


class AutoPayAccount(BaseModel):
    id: str
    name: str
    type: str


class CreditCardSpendingHistory(BaseModel):
    card_id: str
    card_name: str
    current_month: CreditCardMonthlySpending
    history: List[CreditCardMonthlySpending]
    auto_pay_account: Optional[AutoPayAccount] = None


class CreditCardSummary(BaseModel):
    card_id: str
    card_name: str
    current_balance: float
    current_month_spending: float
    current_month_transaction_count: int
    auto_pay_account: Optional[AutoPayAccount] = None


class CategoryRolloverUpdate(BaseModel):
    category_id: str
    category_name: str
    unspent: float
    new_rollover_balance: float


class RolloverSummary(BaseModel):
    month: str
    total_rolled_over: float
    category_updates: List[CategoryRolloverUpdate]
    categories_processed: int


class RolloverTransferRequest(BaseModel):
    """Move rollover money between two of the caller's categories."""
    from_category_id: str = Field(..., min_length=1)
    to_category_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)


class DashboardResponse(BaseModel):
    balance: float
    status: FinancialStatus
    month: MonthSpending
    spending_breakdown: List[SpendingCategory]
    accounts: List[AccountBalance]
    net_worth: float
    average_daily_spending: float
    average_daily_income: float
