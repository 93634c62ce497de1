"""Goal workflows: persistence plus derived progress and status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable

from ..results import Err, Ok, Result
from ..storage.base import Storage
from .activity import Activity
from .activity_manager import ActivityManager
from .contracts import GoalInput, ServiceError
from .factories import create_goal
from .goal import Goal, GoalStatus, MetricType, goal_status
from .validation import coerce_datetime, utcnow, validate_goal

logger = logging.getLogger(__name__)

GoalResult = Result[Goal, ServiceError]

PROGRESS_LOAD_FAILED = "Failed to load activities for progress calculation"


@dataclass(slots=True)
class GoalProgress:
    """Snapshot of how far a goal has come."""

    goal: Goal
    current_value: float
    target_value: float
    percentage: float
    status: GoalStatus


def metric_value(metric: MetricType, activities: list[Activity]) -> float:
    """Reduce ``activities`` to the single value tracked by ``metric``."""
    if metric == MetricType.total_distance:
        return sum(activity.distance for activity in activities)
    if metric == MetricType.total_duration:
        return sum(activity.duration for activity in activities)
    if metric == MetricType.total_calories:
        return sum(activity.calories for activity in activities)
    if metric == MetricType.workout_count:
        return len(activities)
    raise ValueError(f"unsupported metric {metric!r}")


class GoalTracker:
    """Goal CRUD and progress tracking over activities logged in each goal's window."""

    def __init__(
        self,
        storage: Storage,
        activity_manager: ActivityManager,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Store dependencies; ``clock`` supplies the current time for deadlines."""
        self._storage = storage
        self._activities = activity_manager
        self._clock = clock

    async def create_goal(self, data: GoalInput) -> GoalResult:
        now = self._clock()
        validation = validate_goal(data, now=now)
        if not validation.valid:
            return Err(ServiceError.validation(validation))

        goal = create_goal(data, now=now)
        saved = await self._storage.save_goal(goal)
        if isinstance(saved, Err):
            return Err(ServiceError.storage(saved.error.message))

        logger.debug("goal %s created for %s", goal.id, goal.target_metric.value)
        return Ok(goal)

    async def get_goal(self, goal_id: str) -> GoalResult:
        loaded = await self._storage.load_goal(goal_id)
        if isinstance(loaded, Err):
            return Err(ServiceError.not_found("Goal", goal_id))
        return loaded

    async def get_all_goals(self) -> Result[list[Goal], ServiceError]:
        loaded = await self._storage.load_all_goals()
        if isinstance(loaded, Err):
            return Err(ServiceError.storage(loaded.error.message))
        return loaded

    async def update_goal(self, goal_id: str, data: GoalInput) -> GoalResult:
        """Replace a goal's fields, keeping its id and creation time."""
        existing = await self.get_goal(goal_id)
        if isinstance(existing, Err):
            return existing

        validation = validate_goal(data, now=self._clock())
        if not validation.valid:
            return Err(ServiceError.validation(validation))

        updated = Goal(
            id=goal_id,
            name=data.name,
            target_metric=MetricType(data.target_metric),
            target_value=data.target_value,
            deadline=coerce_datetime(data.deadline),
            created_at=existing.value.created_at,
        )
        saved = await self._storage.update_goal(updated)
        if isinstance(saved, Err):
            return Err(ServiceError.storage(saved.error.message))
        return Ok(updated)

    async def delete_goal(self, goal_id: str) -> Result[None, ServiceError]:
        existing = await self.get_goal(goal_id)
        if isinstance(existing, Err):
            return existing

        deleted = await self._storage.delete_goal(goal_id)
        if isinstance(deleted, Err):
            return Err(ServiceError.storage(deleted.error.message))
        return Ok(None)

    async def calculate_goal_progress(self, goal_id: str) -> Result[float, ServiceError]:
        """Return the share of the target reached so far, as a percentage capped at 100."""
        goal = await self.get_goal(goal_id)
        if isinstance(goal, Err):
            return goal

        current = await self._current_value(goal.value)
        if isinstance(current, Err):
            return current
        return Ok(min(100.0, current.value / goal.value.target_value * 100))

    async def check_goal_status(self, goal_id: str) -> Result[GoalStatus, ServiceError]:
        goal = await self.get_goal(goal_id)
        if isinstance(goal, Err):
            return goal

        now = self._clock()
        progress = await self.calculate_goal_progress(goal_id)
        if isinstance(progress, Err):
            return progress
        return Ok(goal_status(progress.value, now, goal.value.deadline))

    async def get_goal_progress(self, goal_id: str) -> Result[GoalProgress, ServiceError]:
        goal = await self.get_goal(goal_id)
        if isinstance(goal, Err):
            return goal

        percentage = await self.calculate_goal_progress(goal_id)
        if isinstance(percentage, Err):
            return percentage

        status = await self.check_goal_status(goal_id)
        if isinstance(status, Err):
            return status

        current = await self._current_value(goal.value)
        if isinstance(current, Err):
            return current

        return Ok(
            GoalProgress(
                goal=goal.value,
                current_value=current.value,
                target_value=goal.value.target_value,
                percentage=percentage.value,
                status=status.value,
            )
        )

    async def get_all_goal_progress(self) -> Result[list[GoalProgress], ServiceError]:
        """Return a progress snapshot for every stored goal."""
        goals = await self.get_all_goals()
        if isinstance(goals, Err):
            return goals

        snapshots: list[GoalProgress] = []
        for goal in goals.value:
            progress = await self.get_goal_progress(goal.id)
            if isinstance(progress, Err):
                return progress
            snapshots.append(progress.value)
        return Ok(snapshots)

    async def _current_value(self, goal: Goal) -> Result[float, ServiceError]:
        activities = await self._activities.get_activities_by_date_range(goal.created_at, goal.deadline)
        if isinstance(activities, Err):
            logger.warning("progress for goal %s unavailable: %s", goal.id, activities.error.message)
            return Err(ServiceError.storage(PROGRESS_LOAD_FAILED))
        return Ok(metric_value(goal.target_metric, activities.value))
