"""Account model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
from typing import Optional
import uuid

ACCOUNT_TYPES = ("checking", "savings", "credit", "cash")


class Account(SQLModel, table=True):
    """A money container (bank account, card, cash) whose balance tracks its transactions."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    name: str = Field(max_length=100)
    type: str = Field(default="checking", max_length=20)  # checking, savings, credit, cash
    current_balance: float = Field(default=0.0)
    notes: str = Field(default="")
    color_tag: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=50)
    order: int = Field(default=0)
    is_default: bool = Field(default=False)
    # Credit cards only: the account that pays the statement
    auto_pay_account_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True)
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
