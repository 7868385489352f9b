from datetime import datetime

import pytest

from campusfin.models.account import Account
from campusfin.models.category import Category
from campusfin.models.user import User
from campusfin.schemas.finance import TransactionCreate, TransactionUpdate
from campusfin.services.category_service import DEFAULT_CATEGORY_GROUPS, CategoryService
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.services.transaction_service import TransactionService


@pytest.fixture
def funded_account(session, user):
    account = Account(user_id=user.id, name="Checking", current_balance=100.0)
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@pytest.fixture
def food(session, user):
    category = Category(user_id=user.id, name="Food", type="expense")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def expense(account, amount, category=None):
    return TransactionCreate(
        type="expense",
        amount=amount,
        date=datetime(2024, 4, 2, 13, 0),
        account_id=account.id,
        category_id=category.id if category else None,
    )


def test_create_update_delete_keep_balance_in_sync(session, user, funded_account, food):
    service = TransactionService(session)

    transaction = service.create(user.id, expense(funded_account, 30.0, food))
    assert funded_account.current_balance == 70.0

    service.update(transaction.id, user.id, TransactionUpdate(amount=50.0))
    assert funded_account.current_balance == 50.0

    service.update(transaction.id, user.id, TransactionUpdate(type="income", category_id=None))
    assert funded_account.current_balance == 150.0

    service.delete(transaction.id, user.id)
    assert funded_account.current_balance == 100.0


def test_moving_transaction_between_accounts(session, user, funded_account):
    savings = Account(user_id=user.id, name="Savings", type="savings", current_balance=0.0)
    session.add(savings)
    session.commit()
    service = TransactionService(session)

    transaction = service.create(user.id, expense(funded_account, 40.0))
    service.update(transaction.id, user.id, TransactionUpdate(account_id=savings.id))

    assert funded_account.current_balance == 100.0
    assert savings.current_balance == -40.0


def test_category_type_must_match(session, user, funded_account, food):
    data = expense(funded_account, 10.0, food)
    data.type = "income"

    with pytest.raises(ValidationError, match='Category type must be "income"'):
        TransactionService(session).create(user.id, data)
    assert funded_account.current_balance == 100.0


def test_other_users_account_is_not_found(session, user, food):
    stranger = User(email="other@campusfin.io", password_hash="x")
    session.add(stranger)
    session.commit()
    foreign = Account(user_id=stranger.id, name="Theirs")
    session.add(foreign)
    session.commit()

    with pytest.raises(NotFoundError, match="Account not found"):
        TransactionService(session).create(user.id, expense(foreign, 10.0))


def test_default_categories_are_seeded_once(session, user):
    service = CategoryService(session)
    expected = sum(len(names) for _, names in DEFAULT_CATEGORY_GROUPS.values())

    assert service.seed_default_categories(user.id) == expected
    assert service.seed_default_categories(user.id) == 0
    assert {c.parent_group for c in service.list(user.id, type="income")} == {"Income"}
