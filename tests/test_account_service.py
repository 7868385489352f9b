from datetime import date, datetime
from types import SimpleNamespace

import pytest

from campusfin.models.account import Account
from campusfin.models.transaction import Transaction
from campusfin.schemas.finance import AccountCreate, AccountUpdate
from campusfin.services.account_service import AccountService
from campusfin.services.balance_calculations import (
    calculate_credit_card_month_spending,
    get_credit_card_spending_history,
    get_credit_cards_summary,
)
from campusfin.services.errors import NotFoundError, ValidationError

TODAY = date(2024, 3, 15)


def charge(amount, day, type="expense", account_id="card-1"):
    return SimpleNamespace(type=type, amount=amount, date=datetime(day.year, day.month, day.day, 12), account_id=account_id)


CHARGES = [
    charge(40.0, date(2024, 3, 2)),
    charge(25.0, date(2024, 1, 10)),
    charge(10.0, date(2024, 1, 20)),
    charge(100.0, date(2024, 1, 21), type="income"),
    charge(99.0, date(2024, 3, 3), account_id="card-2"),
]


def test_month_spending_ignores_payments_and_other_cards():
    assert calculate_credit_card_month_spending(CHARGES, "card-1", "2024-01") == 35.0
    assert calculate_credit_card_month_spending(CHARGES, "card-1", "2024-02") == 0.0


def test_spending_history_lists_months_with_charges_newest_first():
    history = get_credit_card_spending_history(CHARGES, "card-1", today=TODAY)

    assert [(m.month, m.spent, m.transaction_count) for m in history] == [("2024-03", 40.0, 1), ("2024-01", 35.0, 2)]
    assert history[0].is_current_month is True
    assert history[1].month_name == "January"
    assert (history[1].year, history[1].month_num) == (2024, 1)


def test_spending_history_always_has_current_month():
    history = get_credit_card_spending_history(CHARGES, "card-1", today=date(2024, 4, 1))

    assert [m.month for m in history] == ["2024-04", "2024-03", "2024-01"]
    assert history[0].spent == 0.0
    assert history[0].month_name == "April"

    assert [m.month for m in get_credit_card_spending_history(CHARGES, "card-1", months_back=1, today=TODAY)] == ["2024-03"]


def test_credit_cards_summary_skips_other_account_types():
    checking = SimpleNamespace(id="chk", name="Checking", type="checking", current_balance=500.0, auto_pay_account_id=None)
    card = SimpleNamespace(id="card-1", name="Visa", type="credit", current_balance=-40.0, auto_pay_account_id="chk")

    summaries = get_credit_cards_summary(CHARGES, [checking, card], today=TODAY)

    assert len(summaries) == 1
    assert summaries[0].current_month_spending == 40.0
    assert summaries[0].current_month_transaction_count == 1
    assert summaries[0].auto_pay_account.name == "Checking"


def credit_card(name="Visa", **overrides):
    return AccountCreate(name=name, type="credit", **overrides)


def test_auto_pay_account_must_be_checking_or_savings(session, user, account):
    service = AccountService(session)
    cash = service.create(user.id, AccountCreate(name="Wallet", type="cash"))

    card = service.create(user.id, credit_card(auto_pay_account_id=account.id))
    assert card.auto_pay_account_id == account.id

    with pytest.raises(ValidationError, match="Auto-pay account must be a checking or savings account"):
        service.create(user.id, credit_card("Amex", auto_pay_account_id=cash.id))
    with pytest.raises(NotFoundError, match="Auto-pay account not found"):
        service.update(card.id, user.id, AccountUpdate(auto_pay_account_id="missing"))
    with pytest.raises(ValidationError, match="Only credit cards can have an auto-pay account"):
        service.update(cash.id, user.id, AccountUpdate(auto_pay_account_id=account.id))


def test_changing_card_type_drops_auto_pay(session, user, account):
    service = AccountService(session)
    card = service.create(user.id, credit_card(auto_pay_account_id=account.id))

    updated = service.update(card.id, user.id, AccountUpdate(type="checking"))

    assert updated.auto_pay_account_id is None


def test_only_one_default_account(session, user, account):
    service = AccountService(session)
    first = service.create(user.id, AccountCreate(name="Main", is_default=True))
    second = service.create(user.id, AccountCreate(name="Backup", is_default=True))

    session.refresh(first)
    assert first.is_default is False
    assert second.is_default is True

    service.update(first.id, user.id, AccountUpdate(is_default=True))
    session.refresh(second)
    assert second.is_default is False


def test_credit_card_spending_reads_only_that_card(session, user, account):
    service = AccountService(session)
    card = service.create(user.id, credit_card(auto_pay_account_id=account.id))
    session.add_all([
        Transaction(user_id=user.id, type="expense", amount=18.0, date=datetime(2024, 3, 4, 9), account_id=card.id),
        Transaction(user_id=user.id, type="expense", amount=7.0, date=datetime(2024, 2, 9, 9), account_id=card.id),
        Transaction(user_id=user.id, type="expense", amount=50.0, date=datetime(2024, 3, 5, 9), account_id=account.id),
    ])
    session.commit()

    spending = service.credit_card_spending(card.id, user.id, today=TODAY)

    assert spending.card_name == "Visa"
    assert spending.current_month.spent == 18.0
    assert [m.month for m in spending.history] == ["2024-02"]
    assert spending.auto_pay_account.id == account.id

    with pytest.raises(NotFoundError, match="Credit card not found"):
        service.credit_card_spending(account.id, user.id)


def test_deleting_auto_pay_source_unlinks_card(session, user, account):
    service = AccountService(session)
    card = service.create(user.id, credit_card(auto_pay_account_id=account.id))

    service.delete(account.id, user.id)

    session.expire_all()
    assert session.get(Account, card.id).auto_pay_account_id is None
