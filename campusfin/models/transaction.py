"""Transaction model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
from typing import Optional
import uuid


class Transaction(SQLModel, table=True):
    """A single expense or income; ``amount`` is always positive, ``type`` carries the sign."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    type: str = Field(max_length=20)  # expense, income
    amount: float
    date: datetime = Field(index=True)
    account_id: str = Field(
        sa_column=Column(String, ForeignKey("account.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    category_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("category.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    merchant: Optional[str] = Field(default=None, max_length=200)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    notes: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
