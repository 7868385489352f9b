"""Planner service: tasks, deadlines and exams."""
from sqlmodel import Session, SQLModel, select
from typing import Any, Dict, List, Optional, Type
from datetime import date, datetime

from campusfin.config import local_now
from campusfin.models.deadline import Deadline
from campusfin.models.exam import Exam
from campusfin.models.recurring_pattern import RecurringPattern
from campusfin.models.task import Task
from campusfin.services.course_service import CourseService
from campusfin.services.errors import NotFoundError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.planner")


class PlannerService:
    """
    CRUD for one planner entity type.

    The same class serves tasks, deadlines and exams; ``model`` selects the
    table and ``label`` is used in error messages.
    """

    def __init__(self, session: Session, model: Type[SQLModel], label: str, order_field: str = "due_at"):
        self.session = session
        self.model = model
        self.label = label
        self.order_field = order_field

    def list(
        self,
        user_id: str,
        status: Optional[str] = None,
        course_id: Optional[str] = None,
        recurring_pattern_id: Optional[str] = None,
    ) -> List[SQLModel]:
        statement = select(self.model).where(self.model.user_id == user_id)
        if status:
            statement = statement.where(self.model.status == status)
        if course_id:
            statement = statement.where(self.model.course_id == course_id)
        if recurring_pattern_id:
            statement = statement.where(self.model.recurring_pattern_id == recurring_pattern_id)
        order_column = getattr(self.model, self.order_field)
        return self.session.exec(statement.order_by(order_column, self.model.created_at)).all()

    def get_or_404(self, item_id: str, user_id: str) -> SQLModel:
        item = self.session.exec(
            select(self.model)
            .where(self.model.id == item_id)
            .where(self.model.user_id == user_id)
        ).first()
        if not item:
            raise NotFoundError(f"{self.label} not found")
        return item

    def create(self, user_id: str, data: Dict[str, Any]) -> SQLModel:
        self._check_course(user_id, data)
        item = self.model(user_id=user_id, **data)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def update(self, item_id: str, user_id: str, data: Dict[str, Any]) -> SQLModel:
        item = self.get_or_404(item_id, user_id)
        self._check_course(user_id, data)
        for key, value in data.items():
            setattr(item, key, value)
        item.updated_at = datetime.utcnow()
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def delete(self, item_id: str, user_id: str, today: Optional[date] = None) -> int:
        """
        Delete an item.

        Deleting a recurring instance stops the series: the instance, every
        instance of the same pattern dated today or later, and the pattern's
        active flag all go in one commit.

        Returns:
            Number of rows deleted
        """
        item = self.get_or_404(item_id, user_id)
        pattern_id = item.recurring_pattern_id
        if not item.is_recurring or not pattern_id:
            self.session.delete(item)
            self.session.commit()
            return 1

        deleted = stop_recurring_series(self.session, self.model, pattern_id, user_id, today=today, keep_id=item.id)
        self.session.delete(item)
        self.session.commit()
        logger.info(
            "Deleted recurring instance and stopped series",
            user_id=user_id,
            entity=self.label,
            pattern_id=pattern_id,
            deleted=deleted + 1,
        )
        return deleted + 1

    def _check_course(self, user_id: str, data: Dict[str, Any]) -> None:
        """Blank course ids mean no course; any other id must be one of the user's courses."""
        if "course_id" not in data:
            return
        if not data["course_id"]:
            data["course_id"] = None
            return
        CourseService(self.session).get_or_404(data["course_id"], user_id)


def stop_recurring_series(
    session: Session,
    model: Type[SQLModel],
    pattern_id: str,
    user_id: str,
    today: Optional[date] = None,
    keep_id: Optional[str] = None,
) -> int:
    """
    Remove the upcoming instances of a pattern and deactivate it.

    Instances dated before today are kept as history. Does not commit.

    Returns:
        Number of instances marked for deletion (excluding ``keep_id``)
    """
    today = today or local_now().date()
    upcoming = session.exec(
        select(model)
        .where(model.recurring_pattern_id == pattern_id)
        .where(model.user_id == user_id)
        .where(model.instance_date >= today)
    ).all()

    deleted = 0
    for row in upcoming:
        if row.id == keep_id:
            continue
        session.delete(row)
        deleted += 1

    pattern = session.exec(
        select(RecurringPattern)
        .where(RecurringPattern.id == pattern_id)
        .where(RecurringPattern.user_id == user_id)
    ).first()
    if pattern and pattern.is_active:
        pattern.is_active = False
        pattern.updated_at = datetime.utcnow()
        session.add(pattern)
    return deleted


def task_service(session: Session) -> PlannerService:
    return PlannerService(session, Task, "Task")


def deadline_service(session: Session) -> PlannerService:
    return PlannerService(session, Deadline, "Deadline")


def exam_service(session: Session) -> PlannerService:
    return PlannerService(session, Exam, "Exam", order_field="exam_at")
