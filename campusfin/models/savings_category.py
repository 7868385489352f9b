"""Savings category model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
from typing import Optional
import uuid


class SavingsCategory(SQLModel, table=True):
    """A named savings goal with an optional target amount."""

    __tablename__ = "savings_category"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    name: str = Field(max_length=100)
    description: str = Field(default="")
    target_amount: Optional[float] = Field(default=None)
    current_balance: float = Field(default=0.0)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
