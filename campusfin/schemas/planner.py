"""Task, deadline and exam schemas."""
from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Any, Dict, List, Optional


class Link(BaseModel):
    label: Optional[str] = None
    url: str = Field(..., min_length=1)


class TaskCreate(BaseModel):
    """Schema for creating a standalone task."""
    title: str = Field(..., min_length=1, max_length=200)
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    pinned: bool = False
    checklist: List[Dict[str, Any]] = Field(default_factory=list)
    notes: str = ""
    links: List[Link] = Field(default_factory=list)
    status: str = Field(default="open", pattern=r"^(open|done)$")


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    pinned: Optional[bool] = None
    checklist: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    links: Optional[List[Link]] = None
    status: Optional[str] = Field(None, pattern=r"^(open|done)$")


class TaskResponse(BaseModel):
    id: str
    user_id: str
    title: str
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    pinned: bool
    checklist: List[Dict[str, Any]] = []
    notes: str
    links: List[Dict[str, Any]] = []
    status: str
    recurring_pattern_id: Optional[str] = None
    instance_date: Optional[date] = None
    is_recurring: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeadlineCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    notes: str = ""
    link: Optional[str] = Field(None, max_length=500)
    status: str = Field(default="open", pattern=r"^(open|done)$")


class DeadlineUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    notes: Optional[str] = None
    link: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = Field(None, pattern=r"^(open|done)$")


class DeadlineResponse(BaseModel):
    id: str
    user_id: str
    title: str
    course_id: Optional[str] = None
    due_at: Optional[datetime] = None
    notes: str
    link: Optional[str] = None
    status: str
    recurring_pattern_id: Optional[str] = None
    instance_date: Optional[date] = None
    is_recurring: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    course_id: Optional[str] = None
    exam_at: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    notes: str = ""
    status: str = Field(default="scheduled", pattern=r"^(scheduled|completed)$")


class ExamUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    course_id: Optional[str] = None
    exam_at: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    status: Optional[str] = Field(None, pattern=r"^(scheduled|completed)$")


class ExamResponse(BaseModel):
    id: str
    user_id: str
    title: str
    course_id: Optional[str] = None
    exam_at: Optional[datetime] = None
    location: Optional[str] = None
    notes: str
    status: str
    recurring_pattern_id: Optional[str] = None
    instance_date: Optional[date] = None
    is_recurring: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
