"""Recurring pattern model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey, JSON
from datetime import datetime, date
from typing import Any, Dict, List, Optional
import uuid

RECURRENCE_TYPES = ("weekly", "monthly", "custom")
ENTITY_TYPES = ("task", "deadline", "exam")


class RecurringPattern(SQLModel, table=True):
    """Template that materializes dated task, deadline or exam rows."""

    __tablename__ = "recurring_pattern"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    entity_type: str = Field(max_length=20, index=True)  # task, deadline, exam
    recurrence_type: str = Field(max_length=20)  # weekly, monthly, custom
    interval_days: Optional[int] = Field(default=None)
    days_of_week: Optional[List[int]] = Field(default=None, sa_column=Column(JSON))  # 0-6 for Sunday-Saturday
    days_of_month: Optional[List[int]] = Field(default=None, sa_column=Column(JSON))  # 1-31
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    occurrence_count: Optional[int] = Field(default=None)  # Max occurrences
    instance_count: int = Field(default=0)
    last_generated: Optional[datetime] = Field(default=None)
    template: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
