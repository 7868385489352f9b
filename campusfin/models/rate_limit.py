"""Rate limit counter model for SQLModel."""
from sqlmodel import SQLModel, Field
from datetime import datetime


class RateLimit(SQLModel, table=True):
    """Fixed-window request counter for one (user, endpoint) pair."""

    __tablename__ = "rate_limit"

    user_id: str = Field(primary_key=True, max_length=64)
    endpoint: str = Field(primary_key=True, max_length=255)
    count: int = Field(default=0)
    reset_at: datetime
