"""Course model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, ForeignKey, JSON
from datetime import datetime, date
from typing import Any, Dict, List, Optional
import uuid


class Course(SQLModel, table=True):
    """A class the student is enrolled in; planner items may point at one."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    code: str = Field(max_length=32)
    name: str = Field(max_length=200)
    term: Optional[str] = Field(default=None, max_length=50)
    # [{"day": 1, "start": "09:00", "end": "10:15", "location": "..."}]
    meeting_times: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    links: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    color_tag: Optional[str] = Field(default=None, max_length=20)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
