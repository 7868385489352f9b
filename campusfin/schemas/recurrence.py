"""Recurring pattern schemas."""
from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Any, Dict, List, Optional

from campusfin.config import RECURRENCE_WINDOW_DAYS


class RecurringPatternCreate(BaseModel):
    """Schema for creating a recurring task, deadline or exam."""
    entity_type: str = Field(..., pattern=r"^(task|deadline|exam)$")
    recurrence_type: str = Field(..., pattern=r"^(weekly|monthly|custom)$")
    interval_days: Optional[int] = Field(None, ge=1, le=365)
    days_of_week: Optional[List[int]] = Field(None, max_length=7)  # 0-6 for Sunday-Saturday
    days_of_month: Optional[List[int]] = Field(None, max_length=31)  # 1-31
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    occurrence_count: Optional[int] = Field(None, ge=1)
    template: Dict[str, Any]  # title, notes, links, course_id, plus link/location/exam_time


class RecurringPatternResponse(BaseModel):
    id: str
    user_id: str
    entity_type: str
    recurrence_type: str
    interval_days: Optional[int] = None
    days_of_week: Optional[List[int]] = None
    days_of_month: Optional[List[int]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    occurrence_count: Optional[int] = None
    instance_count: int
    last_generated: Optional[datetime] = None
    template: Dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GenerateRequest(BaseModel):
    window_days: int = Field(RECURRENCE_WINDOW_DAYS, ge=1, le=366)
    entity_type: Optional[str] = Field(None, pattern=r"^(task|deadline|exam)$")


class GenerateResponse(BaseModel):
    created: int
