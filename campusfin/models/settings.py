"""Per-user settings model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
from typing import Optional


class UserSettings(SQLModel, table=True):
    """Display and threshold preferences; one row per user."""

    __tablename__ = "user_settings"

    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
    )
    currency: str = Field(default="USD", max_length=3)
    safe_threshold: Optional[float] = Field(default=None)
    tight_threshold: Optional[float] = Field(default=None)
    enable_warnings: bool = Field(default=True)
    warning_threshold: Optional[float] = Field(default=None)
    default_payment_method: Optional[str] = Field(default=None, max_length=50)
    default_account_id: Optional[str] = Field(default=None)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
