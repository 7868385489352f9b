from datetime import date, datetime

import pytest
from sqlmodel import select

from campusfin.models.category import Category
from campusfin.models.notification import Notification
from campusfin.models.transaction import Transaction
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.services.rollover_service import RolloverService

TODAY = date(2024, 3, 15)


def add_category(session, user, name, monthly_budget=None, rollover_balance=0.0, type="expense"):
    category = Category(
        user_id=user.id,
        name=name,
        type=type,
        monthly_budget=monthly_budget,
        rollover_balance=rollover_balance,
    )
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def add_expense(session, user, account, category, amount, when):
    session.add(Transaction(
        user_id=user.id,
        type="expense",
        amount=amount,
        date=when,
        account_id=account.id,
        category_id=category.id,
    ))
    session.commit()


def test_unspent_budget_rolls_over(session, user, account):
    groceries = add_category(session, user, "Groceries", monthly_budget=400.0)
    add_expense(session, user, account, groceries, 250.0, datetime(2024, 2, 10, 18, 0))
    add_expense(session, user, account, groceries, 90.0, datetime(2024, 3, 2, 9, 0))

    summary = RolloverService(session).process_monthly_rollover(user.id, today=TODAY)

    session.refresh(groceries)
    assert summary.month == "2024-02"
    assert summary.total_rolled_over == 150.0
    assert groceries.rollover_balance == 150.0
    assert summary.category_updates[0].new_rollover_balance == 150.0

    notification = session.exec(select(Notification).where(Notification.user_id == user.id)).one()
    assert notification.type == "rollover"
    assert "150.00" in notification.message


def test_overspent_category_keeps_its_rollover(session, user, account):
    dining = add_category(session, user, "Dining", monthly_budget=100.0, rollover_balance=20.0)
    add_expense(session, user, account, dining, 150.0, datetime(2024, 2, 14, 20, 0))

    summary = RolloverService(session).process_monthly_rollover(user.id, today=TODAY)

    session.refresh(dining)
    assert dining.rollover_balance == 20.0
    assert summary.total_rolled_over == 0.0
    assert summary.category_updates == []
    assert session.exec(select(Notification)).all() == []


def test_rollover_adds_to_existing_balance(session, user):
    rent = add_category(session, user, "Rent", monthly_budget=500.0, rollover_balance=30.0)
    add_category(session, user, "Unbudgeted")
    add_category(session, user, "Salary", monthly_budget=1000.0, type="income")

    summary = RolloverService(session).process_monthly_rollover(user.id, today=TODAY)

    session.refresh(rent)
    assert rent.rollover_balance == 530.0
    assert summary.categories_processed == 1


def test_transfer_moves_rollover(session, user):
    source = add_category(session, user, "Groceries", rollover_balance=50.0)
    target = add_category(session, user, "Books")

    from_category, to_category = RolloverService(session).transfer_rollover(user.id, source.id, target.id, 30.0)

    assert from_category.rollover_balance == 20.0
    assert to_category.rollover_balance == 30.0


def test_insufficient_transfer_changes_nothing(session, user):
    source = add_category(session, user, "Groceries", rollover_balance=50.0)
    target = add_category(session, user, "Books", rollover_balance=5.0)

    with pytest.raises(ValidationError, match="Insufficient rollover balance"):
        RolloverService(session).transfer_rollover(user.id, source.id, target.id, 80.0)

    session.refresh(source)
    session.refresh(target)
    assert source.rollover_balance == 50.0
    assert target.rollover_balance == 5.0


def test_transfer_validation(session, user):
    source = add_category(session, user, "Groceries", rollover_balance=50.0)
    service = RolloverService(session)

    with pytest.raises(ValidationError, match="positive"):
        service.transfer_rollover(user.id, source.id, "other", 0)
    with pytest.raises(ValidationError, match="same category"):
        service.transfer_rollover(user.id, source.id, source.id, 10.0)
    with pytest.raises(NotFoundError):
        service.transfer_rollover(user.id, source.id, "missing", 10.0)
