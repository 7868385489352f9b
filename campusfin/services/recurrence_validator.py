"""Recurrence Validator."""
from datetime import date, datetime
from typing import Dict, Any, List, Optional
import re

from campusfin.models.recurring_pattern import ENTITY_TYPES, RECURRENCE_TYPES

EXAM_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class RecurrenceValidator:
    """Validate recurring pattern definitions before they are stored."""

    @staticmethod
    def _result() -> Dict[str, Any]:
        return {
            "valid": True,
            "errors": [],
            "warnings": []
        }

    @staticmethod
    def validate_recurrence_pattern(
        recurrence_type: str,
        interval_days: Optional[int] = None,
        days_of_week: Optional[List[int]] = None,
        days_of_month: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """
        Validate recurrence type and its stepping parameters.

        Args:
            recurrence_type: weekly, monthly or custom
            interval_days: Step for custom recurrence
            days_of_week: Allowed weekdays, 0 (Sunday) to 6 (Saturday)
            days_of_month: Allowed month days, 1 to 31

        Returns:
            Dict with validation result
        """
        result = RecurrenceValidator._result()

        if recurrence_type not in RECURRENCE_TYPES:
            result["valid"] = False
            result["errors"].append("Recurrence must be one of: weekly, monthly, custom")
            return result

        if recurrence_type == "custom" and (interval_days is None or interval_days < 1):
            result["valid"] = False
            result["errors"].append("Custom recurrence requires interval_days of at least 1")

        if days_of_week:
            if any(not isinstance(d, int) or d < 0 or d > 6 for d in days_of_week):
                result["valid"] = False
                result["errors"].append("days_of_week values must be between 0 (Sunday) and 6 (Saturday)")
            if recurrence_type != "weekly":
                result["warnings"].append("days_of_week only applies to weekly recurrence")

        if days_of_month:
            if any(not isinstance(d, int) or d < 1 or d > 31 for d in days_of_month):
                result["valid"] = False
                result["errors"].append("days_of_month values must be between 1 and 31")
            if recurrence_type != "monthly":
                result["warnings"].append("days_of_month only applies to monthly recurrence")
            elif any(d > 28 for d in days_of_month):
                result["warnings"].append("Months without the selected day are skipped")

        return result

    @staticmethod
    def validate_bounds(
        start_date: Optional[date],
        end_date: Optional[date],
        occurrence_count: Optional[int],
    ) -> Dict[str, Any]:
        """Validate the date range and occurrence cap."""
        result = RecurrenceValidator._result()

        if start_date and end_date and end_date < start_date:
            result["valid"] = False
            result["errors"].append("end_date cannot be before start_date")

        if occurrence_count is not None and occurrence_count < 1:
            result["valid"] = False
            result["errors"].append("occurrence_count must be at least 1")

        return result

    @staticmethod
    def validate_template(entity_type: str, template: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate the payload copied onto each instance.

        Args:
            entity_type: task, deadline or exam
            template: Template dictionary

        Returns:
            Dict with validation result
        """
        result = RecurrenceValidator._result()

        if entity_type not in ENTITY_TYPES:
            result["valid"] = False
            result["errors"].append("entity_type must be one of: task, deadline, exam")
            return result

        title = template.get("title") if isinstance(template, dict) else None
        if not isinstance(title, str) or not title.strip():
            result["valid"] = False
            result["errors"].append("Template title is required")
        elif len(title) > 200:
            result["valid"] = False
            result["errors"].append("Template title exceeds maximum length of 200 characters")

        if entity_type == "exam":
            exam_time = template.get("exam_time")
            if exam_time and not EXAM_TIME_RE.match(str(exam_time)):
                result["warnings"].append(f"exam_time '{exam_time}' is not HH:MM; instances will be all-day")

        return result

    @staticmethod
    def validate_pattern(data: Dict[str, Any]) -> Dict[str, Any]:
        """Run every check over a pattern payload and merge the results."""
        result = RecurrenceValidator._result()
        checks = [
            RecurrenceValidator.validate_recurrence_pattern(
                data.get("recurrence_type"),
                data.get("interval_days"),
                data.get("days_of_week"),
                data.get("days_of_month"),
            ),
            RecurrenceValidator.validate_bounds(
                _as_date(data.get("start_date")),
                _as_date(data.get("end_date")),
                data.get("occurrence_count"),
            ),
            RecurrenceValidator.validate_template(data.get("entity_type"), data.get("template") or {}),
        ]
        for check in checks:
            result["valid"] = result["valid"] and check["valid"]
            result["errors"].extend(check["errors"])
            result["warnings"].extend(check["warnings"])
        return result


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value))
