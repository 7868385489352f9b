"""Recurring pattern service for CampusFin."""
from sqlmodel import Session, select
from typing import List, Optional, Tuple
from datetime import date, datetime

from campusfin.config import RECURRENCE_WINDOW_DAYS
from campusfin.models.recurring_pattern import RecurringPattern
from campusfin.schemas.recurrence import RecurringPatternCreate
from campusfin.services.course_service import CourseService
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.services.planner_service import stop_recurring_series
from campusfin.services.recurrence_generator import ADAPTERS, RecurrenceGenerator
from campusfin.services.recurrence_validator import RecurrenceValidator
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.recurring_patterns")


class RecurringPatternService:
    """Service class for recurring pattern lifecycle."""

    def __init__(self, session: Session):
        self.session = session
        self.generator = RecurrenceGenerator(session)

    def list(self, user_id: str, entity_type: Optional[str] = None, active_only: bool = False) -> List[RecurringPattern]:
        statement = select(RecurringPattern).where(RecurringPattern.user_id == user_id)
        if entity_type:
            statement = statement.where(RecurringPattern.entity_type == entity_type)
        if active_only:
            statement = statement.where(RecurringPattern.is_active == True)  # noqa: E712
        return self.session.exec(statement.order_by(RecurringPattern.created_at)).all()

    def get_or_404(self, pattern_id: str, user_id: str) -> RecurringPattern:
        pattern = self.session.exec(
            select(RecurringPattern)
            .where(RecurringPattern.id == pattern_id)
            .where(RecurringPattern.user_id == user_id)
        ).first()
        if not pattern:
            raise NotFoundError("Recurring pattern not found")
        return pattern

    def create(
        self,
        user_id: str,
        data: RecurringPatternCreate,
        window_days: int = RECURRENCE_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> Tuple[RecurringPattern, int]:
        """
        Validate and store a pattern, then generate its first window.

        Returns:
            The stored pattern and the number of instances created

        Raises:
            ValidationError: with every failed check in ``details["errors"]``
        """
        payload = data.model_dump()
        validation = RecurrenceValidator.validate_pattern(payload)
        if not validation["valid"]:
            raise ValidationError(
                validation["errors"][0],
                details={"errors": validation["errors"], "warnings": validation["warnings"]},
            )
        template_course = (payload.get("template") or {}).get("course_id")
        if template_course:
            CourseService(self.session).get_or_404(template_course, user_id)
        for warning in validation["warnings"]:
            logger.warning("Recurring pattern warning", user_id=user_id, warning=warning)

        pattern = RecurringPattern(user_id=user_id, **payload)
        self.session.add(pattern)
        self.session.commit()
        self.session.refresh(pattern)

        created = self.generator.generate_instances(pattern.id, user_id, window_days=window_days, today=today)
        self.session.refresh(pattern)
        logger.info(
            "Created recurring pattern",
            user_id=user_id,
            pattern_id=pattern.id,
            entity_type=pattern.entity_type,
            recurrence_type=pattern.recurrence_type,
            instances_created=created,
        )
        return pattern, created

    def generate(
        self,
        pattern_id: str,
        user_id: str,
        window_days: int = RECURRENCE_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> int:
        self.get_or_404(pattern_id, user_id)
        return self.generator.generate_instances(pattern_id, user_id, window_days=window_days, today=today)

    def generate_all(
        self,
        user_id: str,
        entity_type: Optional[str] = None,
        window_days: int = RECURRENCE_WINDOW_DAYS,
        today: Optional[date] = None,
    ) -> int:
        return self.generator.generate_all_for_user(user_id, entity_type=entity_type, window_days=window_days, today=today)

    def deactivate(self, pattern_id: str, user_id: str, today: Optional[date] = None) -> int:
        """Stop a series: drop its upcoming instances and mark it inactive."""
        pattern = self.get_or_404(pattern_id, user_id)
        adapter = ADAPTERS[pattern.entity_type]
        deleted = stop_recurring_series(self.session, adapter.model, pattern.id, user_id, today=today)
        pattern.is_active = False
        pattern.updated_at = datetime.utcnow()
        self.session.add(pattern)
        self.session.commit()
        logger.info("Deactivated recurring pattern", user_id=user_id, pattern_id=pattern_id, deleted=deleted)
        return deleted
