from datetime import datetime, timedelta

from campusfin.services.rate_limiter import RateLimiter

NOW = datetime(2024, 5, 1, 12, 0, 0)


def test_hundred_and_first_request_is_rejected(session, user):
    limiter = RateLimiter(session, max_requests=100, window_seconds=60)

    decisions = [limiter.check(user.id, "/api/transactions", now=NOW) for _ in range(101)]

    assert all(d.allowed for d in decisions[:100])
    assert decisions[99].remaining == 0
    rejected = decisions[100]
    assert rejected.allowed is False
    assert rejected.count == 101
    assert rejected.reset_at == NOW + timedelta(seconds=60)
    assert rejected.retry_after(NOW + timedelta(seconds=15)) == 45


def test_window_resets_at_reset_time(session, user):
    limiter = RateLimiter(session, max_requests=2, window_seconds=60)
    for _ in range(3):
        limiter.check(user.id, "/api/tasks", now=NOW)

    decision = limiter.check(user.id, "/api/tasks", now=NOW + timedelta(seconds=60))

    assert decision.allowed is True
    assert decision.count == 1
    assert decision.reset_at == NOW + timedelta(seconds=120)


def test_endpoints_are_counted_separately(session, user):
    limiter = RateLimiter(session, max_requests=1, window_seconds=60)

    assert limiter.check(user.id, "/api/tasks", now=NOW).allowed is True
    assert limiter.check(user.id, "/api/exams", now=NOW).allowed is True
    assert limiter.check(user.id, "/api/tasks", now=NOW).allowed is False


def test_retry_after_is_at_least_one_second(session, user):
    decision = RateLimiter(session, max_requests=1).check(user.id, "/api/budget", now=NOW)
    assert decision.retry_after(decision.reset_at + timedelta(seconds=5)) == 1
