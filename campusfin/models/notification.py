"""Notification model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
import uuid


class Notification(SQLModel, table=True):
    """In-app notification shown to a user."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    title: str = Field(max_length=200)
    message: str
    type: str = Field(default="info", max_length=50)  # info, rollover, budget_warning
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
