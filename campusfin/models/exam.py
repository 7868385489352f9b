"""Exam model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from datetime import datetime, date
from typing import Optional
import uuid


class Exam(SQLModel, table=True):
    """An exam or quiz; ``exam_at`` is null for all-day entries."""

    __table_args__ = (
        UniqueConstraint("recurring_pattern_id", "instance_date", name="uq_exam_pattern_instance"),
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
    exam_at: Optional[datetime] = Field(default=None, index=True)
    location: Optional[str] = Field(default=None, max_length=200)
    notes: str = Field(default="")
    status: str = Field(default="scheduled", max_length=20)  # scheduled, completed

    recurring_pattern_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("recurring_pattern.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    instance_date: Optional[date] = Field(default=None)
    is_recurring: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
