"""Shared fixtures: in-memory database, API client and signed-in users."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

import campusfin.models  # noqa: F401
from campusfin.db.config import engine
from campusfin.main import app
from campusfin.models.account import Account
from campusfin.models.user import User


@pytest.fixture(autouse=True)
def reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def session():
    with Session(engine) as session:
        yield session


@pytest.fixture
def user(session):
    user = User(email="student@campusfin.io", name="Student", password_hash="not-a-real-hash")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def account(session, user):
    account = Account(user_id=user.id, name="Checking", type="checking", current_balance=0.0)
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


def sign_up(client, email="student@campusfin.io", password="correct-horse-battery"):
    response = client.post("/auth/sign-up", json={"email": email, "password": password, "name": "Student"})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    token = sign_up(client)["token"]
    return {"Authorization": f"Bearer {token}"}
