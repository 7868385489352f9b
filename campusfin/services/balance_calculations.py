"""
Balance and budget calculations.

Pure functions over transaction, category and account rows. Nothing in
this module touches the database; callers load the rows and pass them in.
Rows only need the attributes used here, so SQLModel instances and plain
objects work alike.

Dates are compared at day granularity and ranges are inclusive on both ends.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from campusfin.config import local_now
from campusfin.schemas.budget import (
    AccountBalance,
    AutoPayAccount,
    BudgetStatus,
    BudgetSummary,
    CreditCardMonthlySpending,
    CreditCardSummary,
    FinancialStatus,
    MonthSpending,
    SpendingCategory,
)

DEFAULT_SAFE_THRESHOLD = 1000.0
DEFAULT_TIGHT_THRESHOLD = 200.0


def as_date(value) -> date:
    """Coerce a datetime, date or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


def parse_month(month: str) -> Tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month.

    Raises:
        ValueError: if ``month`` is not a valid ``YYYY-MM`` string
    """
    try:
        year_str, month_str = month.split("-")
        year, month_num = int(year_str), int(month_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    if not 1 <= month_num <= 12:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last_day)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def previous_month(today: date) -> str:
    """``YYYY-MM`` of the month before ``today``."""
    first_of_month = today.replace(day=1)
    return month_key(first_of_month - timedelta(days=1))


def format_currency(amount: float) -> str:
    return f"{amount:,.2f}"


def _signed_amount(transaction) -> float:
    if transaction.type == "income":
        return transaction.amount
    if transaction.type == "expense":
        return -transaction.amount
    return 0.0


def _in_range(transaction, start: date, end: date) -> bool:
    return start <= as_date(transaction.date) <= end


def calculate_balance(transactions: Iterable) -> float:
    """
    Rolling balance across all transactions.

    Balance = sum of income - sum of expenses, with no monthly resets.
    An empty list has a balance of 0.
    """
    return sum((_signed_amount(t) for t in transactions), 0.0)


def determine_financial_status(
    balance: float,
    safe_threshold: Optional[float],
    tight_threshold: Optional[float],
) -> FinancialStatus:
    """
    Classify a balance against the user's thresholds.

    Defaults when a threshold is unset: safe >= 1000, tight >= 200,
    danger below that.
    """
    safe = safe_threshold if safe_threshold is not None else DEFAULT_SAFE_THRESHOLD
    tight = tight_threshold if tight_threshold is not None else DEFAULT_TIGHT_THRESHOLD

    if balance >= safe:
        return FinancialStatus(
            balance=balance,
            status="safe",
            message="You're in good shape financially",
            severity="info",
        )
    if balance >= tight:
        return FinancialStatus(
            balance=balance,
            status="tight",
            message="Watch your spending carefully",
            severity="warning",
        )
    return FinancialStatus(
        balance=balance,
        status="danger",
        message="Critical: Your balance is dangerously low",
        severity="critical",
    )


def _breakdown(expenses: List, categories: Sequence) -> List[SpendingCategory]:
    total = sum(t.amount for t in expenses)
    if total == 0:
        return []

    by_category: Dict[Optional[str], float] = defaultdict(float)
    for t in expenses:
        by_category[t.category_id or None] += t.amount

    lookup = {c.id: c for c in categories}
    rows = []
    for category_id, amount in by_category.items():
        category = lookup.get(category_id) if category_id else None
        rows.append(SpendingCategory(
            category_name=category.name if category else "Uncategorized",
            category_id=category_id,
            amount=amount,
            percentage=(amount / total) * 100,
            color=category.color_tag if category else None,
        ))
    return sorted(rows, key=lambda row: row.amount, reverse=True)


def get_spending_breakdown(transactions: Iterable, categories: Sequence) -> List[SpendingCategory]:
    """Expense totals per category, largest first, with share of all expenses."""
    return _breakdown([t for t in transactions if t.type == "expense"], categories)


def get_spending_by_category(
    transactions: Iterable,
    categories: Sequence,
    start_date,
    end_date,
) -> List[SpendingCategory]:
    start, end = as_date(start_date), as_date(end_date)
    expenses = [t for t in transactions if t.type == "expense" and _in_range(t, start, end)]
    return _breakdown(expenses, categories)


def get_monthly_spending_by_category(
    transactions: Iterable,
    categories: Sequence,
    month: str,
) -> List[SpendingCategory]:
    start, end = parse_month(month)
    return get_spending_by_category(transactions, categories, start, end)


def calculate_income_in_range(transactions: Iterable, start_date, end_date) -> float:
    start, end = as_date(start_date), as_date(end_date)
    return sum(t.amount for t in transactions if t.type == "income" and _in_range(t, start, end))


def calculate_expenses_in_range(transactions: Iterable, start_date, end_date) -> float:
    start, end = as_date(start_date), as_date(end_date)
    return sum(t.amount for t in transactions if t.type == "expense" and _in_range(t, start, end))


def _average_daily(transactions: Iterable, kind: str, days: int, today: Optional[date]) -> float:
    today = today or local_now().date()
    cutoff = today - timedelta(days=days)
    total = sum(
        t.amount for t in transactions
        if t.type == kind and as_date(t.date) >= cutoff
    )
    return total / days


def calculate_average_daily_spending(transactions: Iterable, days: int = 30, today: Optional[date] = None) -> float:
    """Average expense per day over the last ``days`` days."""
    return _average_daily(transactions, "expense", days, today)


def calculate_average_daily_income(transactions: Iterable, days: int = 30, today: Optional[date] = None) -> float:
    return _average_daily(transactions, "income", days, today)


def get_month_spending(transactions: Iterable, today: Optional[date] = None) -> MonthSpending:
    """Income, expenses and net for the current month up to and including today."""
    today = today or local_now().date()
    start = today.replace(day=1)
    month_transactions = [t for t in transactions if _in_range(t, start, today)]

    income = sum(t.amount for t in month_transactions if t.type == "income")
    expenses = sum(t.amount for t in month_transactions if t.type == "expense")

    return MonthSpending(
        income=income,
        expenses=expenses,
        net=income - expenses,
        days=calendar.monthrange(today.year, today.month)[1],
        days_passed=today.day,
    )


def calculate_account_balance(transactions: Iterable, account_id: str) -> float:
    return calculate_balance(t for t in transactions if t.account_id == account_id)


def calculate_all_account_balances(accounts: Iterable) -> Dict[str, float]:
    """Map of account id to its stored balance.

    ``current_balance`` is kept in sync by the transaction service, so the
    stored value is authoritative.
    """
    return {account.id: account.current_balance for account in accounts}


def format_account_balance(account_type: str, balance: float) -> str:
    if account_type == "credit" and balance < 0:
        return f"Owed: ${format_currency(abs(balance))}"
    if balance < 0:
        return f"-${format_currency(abs(balance))}"
    return f"${format_currency(balance)}"


def get_account_balances(transactions: Sequence, accounts: Sequence) -> List[AccountBalance]:
    balances = calculate_all_account_balances(accounts)
    counts: Dict[str, int] = defaultdict(int)
    for t in transactions:
        counts[t.account_id] += 1

    return [
        AccountBalance(
            account_id=account.id,
            account_name=account.name,
            account_type=account.type,
            balance=balances[account.id],
            transaction_count=counts[account.id],
            display_balance=format_account_balance(account.type, balances[account.id]),
        )
        for account in accounts
    ]


def calculate_total_net_worth(accounts: Iterable) -> float:
    return sum(calculate_all_account_balances(accounts).values(), 0.0)


def calculate_category_budget_status(category, transactions: Iterable, month: str) -> Optional[BudgetStatus]:
    """
    Budgeted, spent and available amounts for one category in ``month``.

    Returns None when the category has no budget. ``available`` may be
    negative (overspend); ``total_available`` adds the carried rollover.
    """
    if not category.monthly_budget:
        return None

    start, end = parse_month(month)
    spent = sum(
        t.amount for t in transactions
        if t.type == "expense" and t.category_id == category.id and _in_range(t, start, end)
    )

    budgeted = category.monthly_budget
    available = budgeted - spent
    rollover = category.rollover_balance or 0.0

    return BudgetStatus(
        category_id=category.id,
        category_name=category.name,
        budgeted=budgeted,
        spent=spent,
        available=available,
        rollover=rollover,
        total_available=available + rollover,
        percent_used=(spent / budgeted) * 100,
        overspent=spent > budgeted,
    )


def calculate_budget_summary(categories: Iterable, transactions: Sequence, month: str) -> BudgetSummary:
    """Roll up every budgeted expense category for ``month``; categories sorted by spend."""
    statuses: List[BudgetStatus] = []
    for category in categories:
        if category.type != "expense" or not category.monthly_budget:
            continue
        status = calculate_category_budget_status(category, transactions, month)
        if status:
            statuses.append(status)

    total_budgeted = sum(s.budgeted for s in statuses)
    total_spent = sum(s.spent for s in statuses)

    return BudgetSummary(
        month=month,
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        total_available=total_budgeted - total_spent,
        categories=sorted(statuses, key=lambda s: s.spent, reverse=True),
        overall_percent_used=(total_spent / total_budgeted) * 100 if total_budgeted > 0 else 0.0,
        categories_over_budget=sum(1 for s in statuses if s.overspent),
    )


def _card_expenses(transactions: Iterable, card_id: str) -> List:
    return [t for t in transactions if t.account_id == card_id and t.type == "expense"]


def calculate_credit_card_month_spending(transactions: Iterable, card_id: str, month: str) -> float:
    """Expenses charged to ``card_id`` in ``month``; payments and income are ignored."""
    start, end = parse_month(month)
    return sum((t.amount for t in _card_expenses(transactions, card_id) if _in_range(t, start, end)), 0.0)


def _monthly_spending(expenses: Sequence, month: str, current_month: str) -> CreditCardMonthlySpending:
    start, end = parse_month(month)
    in_month = [t for t in expenses if _in_range(t, start, end)]
    return CreditCardMonthlySpending(
        month=month,
        year=start.year,
        month_num=start.month,
        month_name=calendar.month_name[start.month],
        spent=sum((t.amount for t in in_month), 0.0),
        transaction_count=len(in_month),
        is_current_month=month == current_month,
    )


def get_credit_card_spending_history(
    transactions: Iterable,
    card_id: str,
    months_back: int = 12,
    today: Optional[date] = None,
) -> List[CreditCardMonthlySpending]:
    """
    Monthly spending of a card, newest month first.

    Only months with at least one charge are listed, up to ``months_back`` of
    them. The current month is always present, with zero spending if the card
    has not been used yet.
    """
    today = today or local_now().date()
    current_month = month_key(today)
    expenses = _card_expenses(transactions, card_id)

    months = sorted({month_key(as_date(t.date)) for t in expenses}, reverse=True)[:months_back]
    history = [_monthly_spending(expenses, month, current_month) for month in months]

    if current_month not in months:
        history.insert(0, _monthly_spending([], current_month, current_month))
    return history


def get_auto_pay_account(card, accounts: Iterable) -> Optional[AutoPayAccount]:
    if not card.auto_pay_account_id:
        return None
    for account in accounts:
        if account.id == card.auto_pay_account_id:
            return AutoPayAccount(id=account.id, name=account.name, type=account.type)
    return None


def get_credit_cards_summary(
    transactions: Sequence,
    accounts: Sequence,
    today: Optional[date] = None,
) -> List[CreditCardSummary]:
    """Current month spending and auto-pay source for every credit account."""
    current_month = month_key(today or local_now().date())
    summaries = []
    for card in accounts:
        if card.type != "credit":
            continue
        month = _monthly_spending(_card_expenses(transactions, card.id), current_month, current_month)
        summaries.append(CreditCardSummary(
            card_id=card.id,
            card_name=card.name,
            current_balance=card.current_balance,
            current_month_spending=month.spent,
            current_month_transaction_count=month.transaction_count,
            auto_pay_account=get_auto_pay_account(card, accounts),
        ))
    return summaries
