"""
Recurring Instance Generator

Materializes dated rows (tasks, deadlines, exams) from a RecurringPattern
inside a forward window. The stepping logic lives in RecurrenceSchedule; the
entity-specific part (which table, how a row is built from the template) is
supplied by an InstanceAdapter, so every entity type shares one generator.

Each run resumes after the latest materialized instance, skips dates that
already exist, and writes all new rows plus the pattern counters in one
commit. Running it twice over the same window is a no-op the second time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Set, Type

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from campusfin.config import RECURRENCE_WINDOW_DAYS, local_now
from campusfin.models.deadline import Deadline
from campusfin.models.exam import Exam
from campusfin.models.recurring_pattern import RecurringPattern
from campusfin.models.task import Task
from campusfin.utils.logger import get_logger
from campusfin.utils.metrics import metrics_collector

logger = get_logger("campusfin.recurrence")

# Upper bounds on day-by-day scanning for filtered patterns
MAX_WEEKDAY_SCAN = 7
MAX_MONTHDAY_SCAN = 365

DEFAULT_INTERVALS = {"weekly": 7, "monthly": 30}


def weekday_number(day: date) -> int:
    """Day of week with 0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


@dataclass
class RecurrenceSchedule:
    """Date stepping rules of a pattern, independent of storage."""
    recurrence_type: str
    interval_days: Optional[int] = None
    days_of_week: List[int] = field(default_factory=list)
    days_of_month: List[int] = field(default_factory=list)

    @classmethod
    def from_pattern(cls, pattern: RecurringPattern) -> "RecurrenceSchedule":
        return cls(
            recurrence_type=pattern.recurrence_type,
            interval_days=pattern.interval_days,
            days_of_week=list(pattern.days_of_week or []),
            days_of_month=list(pattern.days_of_month or []),
        )

    @property
    def uses_weekday_filter(self) -> bool:
        return self.recurrence_type == "weekly" and bool(self.days_of_week)

    @property
    def uses_monthday_filter(self) -> bool:
        return self.recurrence_type == "monthly" and bool(self.days_of_month)

    @property
    def step_days(self) -> int:
        if self.recurrence_type == "custom":
            return self.interval_days or 7
        return DEFAULT_INTERVALS.get(self.recurrence_type, 7)

    def matches(self, day: date) -> bool:
        if self.uses_weekday_filter:
            return weekday_number(day) in self.days_of_week
        if self.uses_monthday_filter:
            # Months without the requested day are skipped
            return day.day in self.days_of_month
        return True

    def next_after(self, day: date) -> date:
        """Next candidate strictly after ``day``."""
        if self.uses_weekday_filter or self.uses_monthday_filter:
            limit = MAX_WEEKDAY_SCAN if self.uses_weekday_filter else MAX_MONTHDAY_SCAN
            candidate = day
            for _ in range(limit):
                candidate += timedelta(days=1)
                if self.matches(candidate):
                    return candidate
            return candidate
        return day + timedelta(days=self.step_days)

    def first_on_or_after(self, day: date) -> date:
        return day if self.matches(day) else self.next_after(day)


def plan_instance_dates(
    schedule: RecurrenceSchedule,
    first: date,
    window_end: date,
    existing: Set[date],
    end_date: Optional[date] = None,
    occurrence_count: Optional[int] = None,
    instance_count: int = 0,
) -> List[date]:
    """
    Walk forward from ``first`` and collect dates that still need a row.

    Stops past ``window_end`` or ``end_date``, or once ``instance_count``
    reaches ``occurrence_count``. Dates in ``existing`` are skipped.
    """
    planned: List[date] = []
    count = instance_count
    cursor = first

    while cursor <= window_end:
        if end_date and cursor > end_date:
            break
        if occurrence_count and count >= occurrence_count:
            break
        if cursor not in existing and schedule.matches(cursor):
            planned.append(cursor)
            count += 1
        cursor = schedule.next_after(cursor)

    return planned


class InstanceAdapter(ABC):
    """Per-entity hooks used by RecurrenceGenerator."""

    model: Type[SQLModel]

    @abstractmethod
    def build(self, pattern: RecurringPattern, instance_date: date) -> SQLModel:
        """Create an unsaved row for ``instance_date`` from the pattern template."""

    def existing_dates(self, session: Session, pattern_id: str) -> Set[date]:
        rows = session.exec(
            select(self.model.instance_date).where(self.model.recurring_pattern_id == pattern_id)
        ).all()
        return {row for row in rows if row is not None}

    def latest_date(self, session: Session, pattern_id: str) -> Optional[date]:
        return session.exec(
            select(func.max(self.model.instance_date)).where(self.model.recurring_pattern_id == pattern_id)
        ).one()


def _end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59))


class TaskInstanceAdapter(InstanceAdapter):
    model = Task

    def build(self, pattern: RecurringPattern, instance_date: date) -> Task:
        template = pattern.template or {}
        return Task(
            user_id=pattern.user_id,
            title=template.get("title", ""),
            course_id=template.get("course_id") or None,
            notes=template.get("notes") or "",
            links=list(template.get("links") or []),
            checklist=[dict(item, done=False) for item in template.get("checklist") or []],
            due_at=_end_of_day(instance_date),
            status="open",
            recurring_pattern_id=pattern.id,
            instance_date=instance_date,
            is_recurring=True,
        )


class DeadlineInstanceAdapter(InstanceAdapter):
    model = Deadline

    def build(self, pattern: RecurringPattern, instance_date: date) -> Deadline:
        template = pattern.template or {}
        link = template.get("link")
        if not link and template.get("links"):
            link = template["links"][0].get("url")
        return Deadline(
            user_id=pattern.user_id,
            title=template.get("title", ""),
            course_id=template.get("course_id") or None,
            notes=template.get("notes") or "",
            link=link,
            due_at=_end_of_day(instance_date),
            status="open",
            recurring_pattern_id=pattern.id,
            instance_date=instance_date,
            is_recurring=True,
        )


class ExamInstanceAdapter(InstanceAdapter):
    model = Exam

    def build(self, pattern: RecurringPattern, instance_date: date) -> Exam:
        template = pattern.template or {}
        return Exam(
            user_id=pattern.user_id,
            title=template.get("title", ""),
            course_id=template.get("course_id") or None,
            location=template.get("location"),
            notes=template.get("notes") or "",
            exam_at=self._exam_at(template.get("exam_time"), instance_date),
            status="scheduled",
            recurring_pattern_id=pattern.id,
            instance_date=instance_date,
            is_recurring=True,
        )

    @staticmethod
    def _exam_at(exam_time: Optional[str], instance_date: date) -> Optional[datetime]:
        """Combine the template's HH:MM with the date; None means all-day."""
        if not exam_time:
            return None
        try:
            parsed = datetime.strptime(exam_time, "%H:%M").time()
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid exam_time in template", exam_time=exam_time)
            return None
        return datetime.combine(instance_date, parsed)


ADAPTERS: Dict[str, InstanceAdapter] = {
    "task": TaskInstanceAdapter(),
    "deadline": DeadlineInstanceAdapter(),
    "exam": ExamInstanceAdapter(),
}


class RecurrenceGenerator:
    """Service that materializes recurring pattern instances."""

    def __init__(self, session: Session):
        self.session = session

    @metrics_collector.time_operation("recurrence_generation_seconds")
    def generate_instances(
        self,
        pattern_id: str,
        user_id: str,
        window_days: int = RECURRENCE_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> int:
        """
        Materialize every missing occurrence of a pattern up to ``today + window_days``.

        Args:
            pattern_id: Pattern to expand
            user_id: Owner of the pattern
            window_days: Size of the forward window
            today: Reference day (defaults to today in APP_TIMEZONE)

        Returns:
            Number of rows created; 0 when the pattern is missing, inactive,
            or already fully materialized
        """
        pattern = self.session.exec(
            select(RecurringPattern)
            .where(RecurringPattern.id == pattern_id)
            .where(RecurringPattern.user_id == user_id)
            .where(RecurringPattern.is_active == True)  # noqa: E712
        ).first()
        if not pattern:
            logger.info("Pattern not found or inactive", pattern_id=pattern_id, user_id=user_id)
            return 0

        adapter = ADAPTERS[pattern.entity_type]
        schedule = RecurrenceSchedule.from_pattern(pattern)
        today = today or local_now().date()
        window_end = today + timedelta(days=window_days)

        latest = adapter.latest_date(self.session, pattern.id)
        if latest is not None:
            first = schedule.next_after(latest)
        elif pattern.start_date:
            # The start date anchors the series; the first instance follows it
            first = schedule.next_after(pattern.start_date)
        else:
            first = schedule.first_on_or_after(today)

        planned = plan_instance_dates(
            schedule,
            first=first,
            window_end=window_end,
            existing=adapter.existing_dates(self.session, pattern.id),
            end_date=pattern.end_date,
            occurrence_count=pattern.occurrence_count,
            instance_count=pattern.instance_count,
        )
        if not planned:
            return 0

        self.session.add_all(adapter.build(pattern, day) for day in planned)
        pattern.instance_count += len(planned)
        pattern.last_generated = datetime.utcnow()
        self.session.add(pattern)

        try:
            self.session.commit()
        except IntegrityError:
            # Another generation run materialized the same dates first
            self.session.rollback()
            logger.warning("Concurrent generation detected; nothing written", pattern_id=pattern_id)
            return 0

        metrics_collector.recurring_instances_created(len(planned))
        logger.info(
            "Created recurring instances",
            pattern_id=pattern_id,
            entity_type=pattern.entity_type,
            count=len(planned),
            first_instance=planned[0],
            last_instance=planned[-1],
        )
        return len(planned)

    def generate_all_for_user(
        self,
        user_id: str,
        entity_type: Optional[str] = None,
        window_days: int = RECURRENCE_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> int:
        """Run the generator for each of the user's active patterns; returns rows created."""
        statement = (
            select(RecurringPattern.id)
            .where(RecurringPattern.user_id == user_id)
            .where(RecurringPattern.is_active == True)  # noqa: E712
        )
        if entity_type:
            statement = statement.where(RecurringPattern.entity_type == entity_type)
        pattern_ids: Iterable[str] = self.session.exec(statement).all()

        return sum(
            self.generate_instances(pattern_id, user_id, window_days=window_days, today=today)
            for pattern_id in pattern_ids
        )
