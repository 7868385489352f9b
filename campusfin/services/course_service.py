"""Course service for CampusFin."""
from sqlmodel import Session, select
from typing import Any, Dict, List, Optional
from datetime import datetime

from campusfin.models.course import Course
from campusfin.models.recurring_pattern import RecurringPattern
from campusfin.schemas.course import CourseCreate, CourseUpdate
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.courses")


class CourseService:
    """Service class for course CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def list(self, user_id: str) -> List[Course]:
        return self.session.exec(
            select(Course)
            .where(Course.user_id == user_id)
            .order_by(Course.created_at.desc())
        ).all()

    def get_by_id(self, course_id: str, user_id: str) -> Optional[Course]:
        return self.session.exec(
            select(Course)
            .where(Course.id == course_id)
            .where(Course.user_id == user_id)
        ).first()

    def get_or_404(self, course_id: str, user_id: str) -> Course:
        course = self.get_by_id(course_id, user_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def create(self, user_id: str, data: CourseCreate) -> Course:
        payload = data.model_dump()
        self._check_dates(payload)
        course = Course(user_id=user_id, **payload)
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        logger.info("Created course", user_id=user_id, course_id=course.id, code=course.code)
        return course

    def update(self, course_id: str, user_id: str, data: CourseUpdate) -> Course:
        course = self.get_or_404(course_id, user_id)
        changes = data.model_dump(exclude_unset=True)
        self._check_dates({
            "start_date": changes.get("start_date", course.start_date),
            "end_date": changes.get("end_date", course.end_date),
        })
        for key, value in changes.items():
            setattr(course, key, value)
        course.updated_at = datetime.utcnow()
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        return course

    def delete(self, course_id: str, user_id: str) -> None:
        """Delete a course; planner items and pattern templates that referenced it lose the link."""
        course = self.get_or_404(course_id, user_id)
        for pattern in self.session.exec(
            select(RecurringPattern).where(RecurringPattern.user_id == user_id)
        ).all():
            if (pattern.template or {}).get("course_id") == course.id:
                pattern.template = {**pattern.template, "course_id": None}
                self.session.add(pattern)
        self.session.delete(course)
        self.session.commit()
        logger.info("Deleted course", user_id=user_id, course_id=course_id)

    @staticmethod
    def _check_dates(payload: Dict[str, Any]) -> None:
        start, end = payload.get("start_date"), payload.get("end_date")
        if start and end and end < start:
            raise ValidationError("end_date cannot be before start_date")
