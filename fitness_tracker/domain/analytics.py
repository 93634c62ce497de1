"""Read-only statistics over logged activities.

Analytics never reports errors: when activities cannot be loaded the caller
gets zero-valued statistics instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
import logging
from typing import Callable, Iterable

from ..results import Err
from .activity import Activity, ActivityType
from .activity_manager import ActivityManager
from .validation import utcnow

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TypeStatistics:
    total_distance: float = 0
    total_duration: float = 0
    total_calories: float = 0
    workout_count: int = 0

    def add(self, activity: Activity) -> None:
        self.total_distance += activity.distance
        self.total_duration += activity.duration
        self.total_calories += activity.calories
        self.workout_count += 1


@dataclass(slots=True)
class Statistics:
    """Totals over a set of activities with a per-type breakdown."""

    total_distance: float = 0
    total_duration: float = 0
    total_calories: float = 0
    workout_count: int = 0
    breakdown_by_type: dict[ActivityType, TypeStatistics] = field(default_factory=dict)


def summarize(activities: Iterable[Activity]) -> Statistics:
    stats = Statistics()
    for activity in activities:
        stats.total_distance += activity.distance
        stats.total_duration += activity.duration
        stats.total_calories += activity.calories
        stats.workout_count += 1
        stats.breakdown_by_type.setdefault(activity.type, TypeStatistics()).add(activity)
    return stats


def summarize_type(activities: Iterable[Activity]) -> TypeStatistics:
    stats = TypeStatistics()
    for activity in activities:
        stats.add(activity)
    return stats


class AnalyticsEngine:
    """Aggregate activity totals over fixed and custom periods."""

    def __init__(
        self,
        activity_manager: ActivityManager,
        clock: Callable[[], datetime] = utcnow,
        *,
        weekly_window_days: int = 7,
        monthly_window_days: int = 30,
    ) -> None:
        self._activities = activity_manager
        self._clock = clock
        self._weekly_window = timedelta(days=weekly_window_days)
        self._monthly_window = timedelta(days=monthly_window_days)

    async def get_weekly_stats(self) -> Statistics:
        """Statistics for the trailing week, ending now."""
        now = self._clock()
        return await self.get_stats_by_period(now - self._weekly_window, now)

    async def get_monthly_stats(self) -> Statistics:
        """Statistics for the trailing month window, ending now."""
        now = self._clock()
        return await self.get_stats_by_period(now - self._monthly_window, now)

    async def get_stats_by_period(self, start: datetime, end: datetime) -> Statistics:
        result = await self._activities.get_activities_by_date_range(start, end)
        if isinstance(result, Err):
            logger.warning("period statistics degraded to empty: %s", result.error.message)
            return Statistics()
        return summarize(result.value)

    async def get_stats_by_activity_type(
        self, activity_type: ActivityType, start: datetime, end: datetime
    ) -> TypeStatistics:
        result = await self._activities.get_activities_by_date_range(start, end)
        if isinstance(result, Err):
            logger.warning("%s statistics degraded to empty: %s", activity_type.value, result.error.message)
            return TypeStatistics()
        return summarize_type(activity for activity in result.value if activity.type == activity_type)

    async def calculate_average_duration(self) -> float:
        """Mean duration over all activities ever logged; 0 when there are none."""
        result = await self._activities.get_all_activities()
        if isinstance(result, Err):
            logger.warning("average duration degraded to zero: %s", result.error.message)
            return 0
        if not result.value:
            return 0
        return sum(activity.duration for activity in result.value) / len(result.value)
