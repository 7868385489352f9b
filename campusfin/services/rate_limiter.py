"""
Rate Limiter

Fixed-window request counter per (user, endpoint), persisted in the
``rate_limit`` table. Window rollover is detected lazily on the next request.
The reset and the increment are single SQL statements committed together,
so concurrent requests never write back a stale count.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from campusfin.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from campusfin.models.rate_limit import RateLimit


@dataclass
class RateLimitDecision:
    """Outcome of counting one request."""
    allowed: bool
    count: int
    limit: int
    remaining: int
    reset_at: datetime

    def retry_after(self, now: Optional[datetime] = None) -> int:
        """Whole seconds until the window resets (at least 1 when rejected)."""
        now = now or datetime.utcnow()
        return max(1, math.ceil((self.reset_at - now).total_seconds()))


class RateLimiter:
    """Counts requests and decides whether they fit in the current window."""

    def __init__(
        self,
        session: Session,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
    ):
        self.session = session
        self.max_requests = max_requests
        self.window = timedelta(seconds=window_seconds)

    def check(self, user_id: str, endpoint: str, now: Optional[datetime] = None) -> RateLimitDecision:
        """
        Count one request for (user_id, endpoint).

        The window resets when ``now`` reaches the stored ``reset_at``; the
        first request of the new window counts as 1. Requests beyond
        ``max_requests`` in a window are not allowed.
        """
        now = now or datetime.utcnow()

        if not self._increment(user_id, endpoint, now):
            self.session.add(RateLimit(
                user_id=user_id,
                endpoint=endpoint,
                count=1,
                reset_at=now + self.window,
            ))
            try:
                self.session.commit()
            except IntegrityError:
                # A concurrent request created the row first
                self.session.rollback()
                self._increment(user_id, endpoint, now)
                self.session.commit()
        else:
            self.session.commit()

        row = self.session.exec(
            select(RateLimit)
            .where(RateLimit.user_id == user_id)
            .where(RateLimit.endpoint == endpoint)
        ).one()

        return RateLimitDecision(
            allowed=row.count <= self.max_requests,
            count=row.count,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - row.count),
            reset_at=row.reset_at,
        )

    def _increment(self, user_id: str, endpoint: str, now: datetime) -> bool:
        """Reset an expired window then add one; False when no row exists yet."""
        self.session.exec(
            update(RateLimit)
            .where(RateLimit.user_id == user_id)
            .where(RateLimit.endpoint == endpoint)
            .where(RateLimit.reset_at <= now)
            .values(count=0, reset_at=now + self.window)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(
            update(RateLimit)
            .where(RateLimit.user_id == user_id)
            .where(RateLimit.endpoint == endpoint)
            .values(count=RateLimit.count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
