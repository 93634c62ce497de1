"""Field rules for raw activity and goal input.

Every rule is checked independently so a single call reports all problems
with the input, in a fixed order, rather than stopping at the first one.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
import math
from numbers import Real
from typing import Any

from .activity import ActivityType
from .contracts import ActivityInput, FieldError, GoalInput, ValidationResult
from .goal import MetricType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_datetime(value: Any) -> datetime | None:
    """Return ``value`` as an aware datetime, or ``None`` when it is not a date.

    Naive datetimes are taken to be UTC, plain dates to mean midnight UTC and
    strings are parsed as ISO-8601.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return None


def _is_number(value: Any) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # integers beyond float range
        return False


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _member_of(enum_cls: type, value: Any) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def _check_quantity(
    errors: list[FieldError],
    field: str,
    label: str,
    value: Any,
    *,
    allow_zero: bool,
) -> None:
    if value is None:
        errors.append(FieldError(field, f"{label} is required"))
    elif not _is_number(value):
        errors.append(FieldError(field, f"{label} must be a number"))
    elif allow_zero and value < 0:
        errors.append(FieldError(field, f"{label} cannot be negative"))
    elif not allow_zero and value <= 0:
        errors.append(FieldError(field, f"{label} must be greater than zero"))


def validate_activity(data: ActivityInput) -> ValidationResult:
    """Check raw activity input against the activity field rules."""
    errors: list[FieldError] = []

    if _is_missing(data.type):
        errors.append(FieldError("type", "Activity type is required"))
    elif not _member_of(ActivityType, data.type):
        errors.append(FieldError("type", "Invalid activity type"))

    if _is_missing(data.date):
        errors.append(FieldError("date", "Date is required"))
    elif coerce_datetime(data.date) is None:
        errors.append(FieldError("date", "Date must be a valid date"))

    _check_quantity(errors, "duration", "Duration", data.duration, allow_zero=False)
    _check_quantity(errors, "distance", "Distance", data.distance, allow_zero=True)
    _check_quantity(errors, "calories", "Calories", data.calories, allow_zero=True)

    return ValidationResult(errors)


def validate_goal(data: GoalInput, now: datetime | None = None) -> ValidationResult:
    """Check raw goal input against the goal field rules.

    The deadline must lie strictly after ``now`` (the current time when not
    given).
    """
    errors: list[FieldError] = []

    if not isinstance(data.name, str) or not data.name.strip():
        errors.append(FieldError("name", "Goal name is required"))

    if _is_missing(data.target_metric):
        errors.append(FieldError("target_metric", "Target metric is required"))
    elif not _member_of(MetricType, data.target_metric):
        errors.append(FieldError("target_metric", "Invalid target metric"))

    _check_quantity(errors, "target_value", "Target value", data.target_value, allow_zero=False)

    if _is_missing(data.deadline):
        errors.append(FieldError("deadline", "Deadline is required"))
    else:
        deadline = coerce_datetime(data.deadline)
        if deadline is None:
            errors.append(FieldError("deadline", "Deadline must be a valid date"))
        elif deadline <= (coerce_datetime(now) or utcnow()):
            errors.append(FieldError("deadline", "Deadline must be in the future"))

    return ValidationResult(errors)
