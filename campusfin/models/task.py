"""Task model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey, JSON, UniqueConstraint
from datetime import datetime, date
from typing import Any, Dict, List, Optional
import uuid


class Task(SQLModel, table=True):
    """A to-do item, either standalone or one instance of a recurring pattern."""

    __table_args__ = (
        UniqueConstraint("recurring_pattern_id", "instance_date", name="uq_task_pattern_instance"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    title: str = Field(max_length=200, min_length=1)
    course_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("course.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    due_at: Optional[datetime] = Field(default=None, index=True)
    pinned: bool = Field(default=False)
    checklist: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    notes: str = Field(default="")
    links: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: str = Field(default="open", max_length=20)  # open, done

    # Recurring instance bookkeeping
    recurring_pattern_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("recurring_pattern.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    instance_date: Optional[date] = Field(default=None)
    is_recurring: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
