"""Per-user rate limiting dependency for API routers."""
from datetime import datetime

from fastapi import Depends, HTTPException, Request, Response, status
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import get_optional_user_id
from campusfin.services.rate_limiter import RateLimiter
from campusfin.utils.logger import get_logger
from campusfin.utils.metrics import metrics_collector

logger = get_logger("campusfin.rate_limit")


def get_rate_limiter(session: Session = Depends(get_session)) -> RateLimiter:
    """Dependency for getting RateLimiter instance."""
    return RateLimiter(session)


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    """
    Count the request against the caller's per-endpoint window.

    Anonymous requests are not counted; authentication is enforced by the
    route itself. Rejected requests get 429 with ``Retry-After``; allowed
    ones carry ``X-RateLimit-*`` headers.
    """
    user_id = get_optional_user_id(request)
    if not user_id:
        return

    endpoint = request.url.path
    now = datetime.utcnow()
    decision = limiter.check(user_id, endpoint, now=now)

    if not decision.allowed:
        metrics_collector.rate_limit_rejected()
        logger.warning("Rate limit exceeded", user_id=user_id, endpoint=endpoint, count=decision.count)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Rate limit exceeded",
                "message": "Too many requests. Please try again later.",
                "reset_at": decision.reset_at.isoformat(),
            },
            headers={"Retry-After": str(decision.retry_after(now))},
        )

    response.headers["X-RateLimit-Limit"] = str(decision.limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    response.headers["X-RateLimit-Reset"] = decision.reset_at.isoformat()
