"""Category model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime
from typing import Optional
import uuid


class Category(SQLModel, table=True):
    """Spending or income category with an optional monthly budget.

    ``rollover_balance`` accumulates unspent budget from previous months and
    is only changed by the monthly rollover and by rollover transfers.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    name: str = Field(max_length=100)
    type: str = Field(max_length=20)  # expense, income
    parent_group: Optional[str] = Field(default=None, max_length=100)
    color_tag: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=50)
    order: int = Field(default=0)
    monthly_budget: Optional[float] = Field(default=None)
    budget_period: str = Field(default="monthly", max_length=20)
    rollover_balance: float = Field(default=0.0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
