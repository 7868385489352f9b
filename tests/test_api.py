from datetime import timedelta

from fastapi import Depends
from sqlmodel import Session

from campusfin.config import local_now
from campusfin.db.config import get_session
from campusfin.middleware.rate_limit import get_rate_limiter
from campusfin.main import app
from campusfin.services.rate_limiter import RateLimiter
from tests.conftest import sign_up


def create_account(client, headers, **overrides):
    payload = {"name": "Checking", "type": "checking", "current_balance": 500.0}
    payload.update(overrides)
    response = client.post("/api/accounts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def category_named(client, headers, name):
    categories = client.get("/api/categories", headers=headers).json()
    return next(c for c in categories if c["name"] == name)


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert "recurring_instances_created_total" in client.get("/metrics").json()["counters"]


def test_sign_up_seeds_categories_and_sign_in(client):
    token = sign_up(client)["token"]
    headers = {"Authorization": f"Bearer {token}"}

    categories = client.get("/api/categories", headers=headers).json()
    assert len(categories) == 16
    assert {c["parent_group"] for c in categories} == {"Essentials", "Lifestyle", "Health", "Personal", "Income"}

    duplicate = client.post("/auth/sign-up", json={"email": "student@campusfin.io", "password": "another-password"})
    assert duplicate.status_code == 400

    good = client.post("/auth/sign-in", json={"email": "student@campusfin.io", "password": "correct-horse-battery"})
    bad = client.post("/auth/sign-in", json={"email": "student@campusfin.io", "password": "wrong-password"})
    assert good.status_code == 200
    assert bad.status_code == 401


def test_requests_without_token_are_rejected(client):
    response = client.get("/api/accounts")
    assert response.status_code == 401
    assert response.json()["detail"] == "Please sign in to continue"

    response = client.get("/api/accounts", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_transactions_update_account_balance(client, auth_headers):
    account = create_account(client, auth_headers)
    groceries = category_named(client, auth_headers, "Groceries")
    today = local_now()

    response = client.post("/api/transactions", json={
        "type": "expense",
        "amount": 42.5,
        "date": today.isoformat(),
        "account_id": account["id"],
        "category_id": groceries["id"],
        "merchant": "Campus Market",
    }, headers=auth_headers)
    assert response.status_code == 201, response.text
    transaction = response.json()

    assert client.get(f"/api/accounts/{account['id']}", headers=auth_headers).json()["current_balance"] == 457.5

    mismatched = client.post("/api/transactions", json={
        "type": "income",
        "amount": 10,
        "date": today.isoformat(),
        "account_id": account["id"],
        "category_id": groceries["id"],
    }, headers=auth_headers)
    assert mismatched.status_code == 400
    assert mismatched.json()["code"] == "VALIDATION_ERROR"

    negative = client.post("/api/transactions", json={
        "type": "expense", "amount": -5, "date": today.isoformat(), "account_id": account["id"],
    }, headers=auth_headers)
    assert negative.status_code == 422

    assert client.delete(f"/api/transactions/{transaction['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/accounts/{account['id']}", headers=auth_headers).json()["current_balance"] == 500.0

    balances = client.get("/api/accounts/balances", headers=auth_headers).json()
    assert balances[0]["display_balance"] == "$500.00"


def test_dashboard_uses_user_thresholds(client, auth_headers):
    account = create_account(client, auth_headers, current_balance=0.0)
    client.post("/api/transactions", json={
        "type": "income", "amount": 300, "date": local_now().isoformat(), "account_id": account["id"],
    }, headers=auth_headers)

    assert client.get("/api/dashboard", headers=auth_headers).json()["status"]["status"] == "tight"

    settings = client.put("/api/settings", json={"safe_threshold": 250, "currency": "eur"}, headers=auth_headers)
    assert settings.status_code == 200
    assert settings.json()["currency"] == "EUR"

    dashboard = client.get("/api/dashboard", headers=auth_headers).json()
    assert dashboard["status"]["status"] == "safe"
    assert dashboard["balance"] == 300.0
    assert dashboard["month"]["income"] == 300.0
    assert dashboard["net_worth"] == 300.0


def test_budget_month_validation(client, auth_headers):
    assert client.get("/api/budget", headers=auth_headers).status_code == 200
    response = client.get("/api/budget", params={"month": "2024-13"}, headers=auth_headers)
    assert response.status_code == 400


def test_rollover_transfer_endpoint(client, auth_headers):
    groceries = category_named(client, auth_headers, "Groceries")
    dining = category_named(client, auth_headers, "Dining")

    response = client.post("/api/categories/rollover-transfer", json={
        "from_category_id": groceries["id"],
        "to_category_id": dining["id"],
        "amount": 10,
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient rollover balance"


def test_monthly_rollover_creates_notification(client, auth_headers):
    rent = category_named(client, auth_headers, "Rent")
    client.patch(f"/api/categories/{rent['id']}", json={"monthly_budget": 600}, headers=auth_headers)

    summary = client.post("/api/monthly-rollover", headers=auth_headers).json()
    assert summary["total_rolled_over"] == 600.0
    assert client.get(f"/api/categories/{rent['id']}", headers=auth_headers).json()["rollover_balance"] == 600.0

    notifications = client.get("/api/notifications", params={"unread": True}, headers=auth_headers).json()
    assert notifications["unread_count"] == 1
    assert notifications["notifications"][0]["type"] == "rollover"

    marked = client.patch("/api/notifications", json={"mark_all_as_read": True}, headers=auth_headers)
    assert marked.json() == {"updated": 1}
    assert client.get("/api/notifications", headers=auth_headers).json()["unread_count"] == 0


def test_monthly_rollover_carries_unspent_budget(client, auth_headers):
    account = create_account(client, auth_headers)
    groceries = category_named(client, auth_headers, "Groceries")
    client.patch(f"/api/categories/{groceries['id']}", json={"monthly_budget": 400}, headers=auth_headers)
    last_month = local_now().replace(day=1, hour=12) - timedelta(days=10)
    spent = client.post("/api/transactions", json={
        "type": "expense",
        "amount": 250,
        "date": last_month.isoformat(),
        "account_id": account["id"],
        "category_id": groceries["id"],
    }, headers=auth_headers)
    assert spent.status_code == 201, spent.text

    response = client.post("/api/monthly-rollover", headers=auth_headers)

    assert response.status_code == 200
    summary = response.json()
    assert summary["month"] == last_month.strftime("%Y-%m")
    assert summary["total_rolled_over"] == 150.0
    assert summary["category_updates"] == [{
        "category_id": groceries["id"],
        "category_name": "Groceries",
        "unspent": 150.0,
        "new_rollover_balance": 150.0,
    }]
    assert client.get(f"/api/categories/{groceries['id']}", headers=auth_headers).json()["rollover_balance"] == 150.0


def test_recurring_pattern_lifecycle(client, auth_headers):
    today = local_now().date()
    response = client.post("/api/recurring-patterns", json={
        "entity_type": "task",
        "recurrence_type": "custom",
        "interval_days": 1,
        "start_date": (today - timedelta(days=3)).isoformat(),
        "occurrence_count": 5,
        "template": {"title": "Flashcards", "notes": "20 minutes"},
    }, headers=auth_headers)
    assert response.status_code == 201, response.text
    body = response.json()
    pattern_id = body["pattern"]["id"]
    assert body["instances_created"] == 5
    assert body["pattern"]["instance_count"] == 5

    generated = client.post(f"/api/recurring-patterns/{pattern_id}/generate", headers=auth_headers)
    assert generated.json() == {"created": 0}

    tasks = client.get("/api/tasks", params={"recurring_pattern_id": pattern_id}, headers=auth_headers).json()
    assert len(tasks) == 5
    tomorrow = next(t for t in tasks if t["instance_date"] == (today + timedelta(days=1)).isoformat())

    deleted = client.delete(f"/api/tasks/{tomorrow['id']}", headers=auth_headers)
    assert deleted.json() == {"deleted": 3}

    remaining = client.get("/api/tasks", params={"recurring_pattern_id": pattern_id}, headers=auth_headers).json()
    assert sorted(t["instance_date"] for t in remaining) == [
        (today - timedelta(days=2)).isoformat(),
        (today - timedelta(days=1)).isoformat(),
    ]
    assert client.get(f"/api/recurring-patterns/{pattern_id}", headers=auth_headers).json()["is_active"] is False


def test_invalid_pattern_is_rejected(client, auth_headers):
    response = client.post("/api/recurring-patterns", json={
        "entity_type": "deadline",
        "recurrence_type": "custom",
        "template": {"title": "Weekly reflection"},
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "interval_days" in response.json()["detail"]


def test_deleting_pattern_keeps_past_instances(client, auth_headers):
    today = local_now().date()
    pattern_id = client.post("/api/recurring-patterns", json={
        "entity_type": "exam",
        "recurrence_type": "custom",
        "interval_days": 7,
        "start_date": (today - timedelta(days=14)).isoformat(),
        "template": {"title": "Weekly quiz", "exam_time": "10:00"},
    }, headers=auth_headers).json()["pattern"]["id"]

    response = client.delete(f"/api/recurring-patterns/{pattern_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["deactivated"] is True

    exams = client.get("/api/exams", params={"recurring_pattern_id": pattern_id}, headers=auth_headers).json()
    assert [e["instance_date"] for e in exams] == [(today - timedelta(days=7)).isoformat()]
    assert exams[0]["exam_at"].endswith("10:00:00")


def test_standalone_task_crud(client, auth_headers):
    created = client.post("/api/tasks", json={
        "title": "Return library books",
        "links": [{"label": "Library", "url": "https://library.campusfin.io"}],
    }, headers=auth_headers)
    assert created.status_code == 201
    task_id = created.json()["id"]

    updated = client.patch(f"/api/tasks/{task_id}", json={"status": "done", "pinned": True}, headers=auth_headers)
    assert updated.json()["status"] == "done"
    assert updated.json()["pinned"] is True

    assert client.delete(f"/api/tasks/{task_id}", headers=auth_headers).json() == {"deleted": 1}
    assert client.get(f"/api/tasks/{task_id}", headers=auth_headers).status_code == 404


def test_rate_limit_rejects_with_retry_after(client, auth_headers):
    def tight_limiter(session: Session = Depends(get_session)) -> RateLimiter:
        return RateLimiter(session, max_requests=2, window_seconds=60)

    app.dependency_overrides[get_rate_limiter] = tight_limiter

    first = client.get("/api/settings", headers=auth_headers)
    assert first.headers["X-RateLimit-Remaining"] == "1"
    client.get("/api/settings", headers=auth_headers)
    rejected = client.get("/api/settings", headers=auth_headers)

    assert rejected.status_code == 429
    assert int(rejected.headers["Retry-After"]) >= 1
    assert rejected.json()["detail"]["error"] == "Rate limit exceeded"


def test_course_routes_and_task_link(client, auth_headers):
    created = client.post("/api/courses", json={
        "code": "HIST 210",
        "name": "Modern Europe",
        "meeting_times": [{"day": 2, "start": "13:00", "end": "14:15"}],
        "links": [{"label": "Syllabus", "url": "https://lms.campusfin.io/hist210"}],
    }, headers=auth_headers)
    assert created.status_code == 201, created.text
    course_id = created.json()["id"]
    assert created.json()["meeting_times"][0]["start"] == "13:00"

    assert client.patch(f"/api/courses/{course_id}", json={"term": "Spring"}, headers=auth_headers).json()["term"] == "Spring"
    assert [c["id"] for c in client.get("/api/courses", headers=auth_headers).json()] == [course_id]

    task = client.post("/api/tasks", json={"title": "Essay outline", "course_id": course_id}, headers=auth_headers)
    assert task.status_code == 201
    missing = client.post("/api/tasks", json={"title": "Essay draft", "course_id": "nope"}, headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Course not found"

    filtered = client.get("/api/tasks", params={"course_id": course_id}, headers=auth_headers).json()
    assert [t["title"] for t in filtered] == ["Essay outline"]

    assert client.delete(f"/api/courses/{course_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/tasks/{task.json()['id']}", headers=auth_headers).json()["course_id"] is None


def test_savings_category_routes(client, auth_headers):
    created = client.post("/api/savings-categories", json={"name": "Spring break", "target_amount": 800}, headers=auth_headers)
    assert created.status_code == 201, created.text
    category_id = created.json()["id"]

    duplicate = client.post("/api/savings-categories", json={"name": "Spring break"}, headers=auth_headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "A savings category with this name already exists"

    negative = client.patch(f"/api/savings-categories/{category_id}", json={"current_balance": -1}, headers=auth_headers)
    assert negative.status_code == 422

    updated = client.patch(f"/api/savings-categories/{category_id}", json={"current_balance": 120}, headers=auth_headers)
    assert updated.json()["current_balance"] == 120.0

    assert client.delete(f"/api/savings-categories/{category_id}", headers=auth_headers).json() == {"success": True}
    assert client.delete(f"/api/savings-categories/{category_id}", headers=auth_headers).status_code == 404


def test_credit_card_spending_route(client, auth_headers):
    checking = create_account(client, auth_headers)
    card = create_account(client, auth_headers, name="Visa", type="credit", current_balance=0.0, auto_pay_account_id=checking["id"])
    client.post("/api/transactions", json={
        "type": "expense", "amount": 60, "date": local_now().isoformat(), "account_id": card["id"],
    }, headers=auth_headers)

    spending = client.get(f"/api/credit-cards/{card['id']}/spending", headers=auth_headers)
    assert spending.status_code == 200, spending.text
    body = spending.json()
    assert body["current_month"]["spent"] == 60.0
    assert body["current_month"]["is_current_month"] is True
    assert body["history"] == []
    assert body["auto_pay_account"] == {"id": checking["id"], "name": "Checking", "type": "checking"}

    summary = client.get("/api/credit-cards", headers=auth_headers).json()
    assert [c["card_id"] for c in summary] == [card["id"]]

    not_a_card = client.get(f"/api/credit-cards/{checking['id']}/spending", headers=auth_headers)
    assert not_a_card.status_code == 404
    assert not_a_card.json()["detail"] == "Credit card not found"

    bad_source = client.post("/api/accounts", json={
        "name": "Amex", "type": "credit", "auto_pay_account_id": card["id"],
    }, headers=auth_headers)
    assert bad_source.status_code == 400
