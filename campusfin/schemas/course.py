"""Course schemas."""
from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import List, Optional

from campusfin.schemas.planner import Link


class MeetingTime(BaseModel):
    day: int = Field(..., ge=0, le=6)  # 0 = Sunday
    start: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    end: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    location: Optional[str] = Field(None, max_length=200)


class CourseCreate(BaseModel):
    """Schema for creating a course."""
    code: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=200)
    term: Optional[str] = Field(None, max_length=50)
    meeting_times: List[MeetingTime] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    color_tag: Optional[str] = Field(None, max_length=20)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CourseUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=32)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    term: Optional[str] = Field(None, max_length=50)
    meeting_times: Optional[List[MeetingTime]] = None
    links: Optional[List[Link]] = None
    color_tag: Optional[str] = Field(None, max_length=20)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CourseResponse(BaseModel):
    id: str
    user_id: str
    code: str
    name: str
    term: Optional[str] = None
    meeting_times: List[MeetingTime] = []
    links: List[Link] = []
    color_tag: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
