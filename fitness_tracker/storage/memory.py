"""In-memory storage adapter used for tests and as the degraded fallback."""

from __future__ import annotations

from dataclasses import replace

from ..domain.activity import Activity
from ..domain.goal import Goal
from ..results import Ok
from .base import Storage, StorageErrorKind, StorageResult, storage_error, stored


class InMemoryStorage(Storage):
    """Dictionary-backed storage; records are copied in and out so callers never alias them."""

    def __init__(self) -> None:
        self._activities: dict[str, Activity] = {}
        self._goals: dict[str, Goal] = {}

    async def save_activity(self, activity: Activity) -> StorageResult[None]:
        self._activities[activity.id] = replace(activity)
        return stored()

    async def load_activity(self, activity_id: str) -> StorageResult[Activity]:
        activity = self._activities.get(activity_id)
        if activity is None:
            return storage_error(StorageErrorKind.read, f"Activity with id {activity_id} not found")
        return Ok(replace(activity))

    async def load_all_activities(self) -> StorageResult[list[Activity]]:
        return Ok([replace(activity) for activity in self._activities.values()])

    async def update_activity(self, activity: Activity) -> StorageResult[None]:
        return await self.save_activity(activity)

    async def delete_activity(self, activity_id: str) -> StorageResult[None]:
        self._activities.pop(activity_id, None)
        return stored()

    async def save_goal(self, goal: Goal) -> StorageResult[None]:
        self._goals[goal.id] = replace(goal)
        return stored()

    async def load_goal(self, goal_id: str) -> StorageResult[Goal]:
        goal = self._goals.get(goal_id)
        if goal is None:
            return storage_error(StorageErrorKind.read, f"Goal with id {goal_id} not found")
        return Ok(replace(goal))

    async def load_all_goals(self) -> StorageResult[list[Goal]]:
        return Ok([replace(goal) for goal in self._goals.values()])

    async def update_goal(self, goal: Goal) -> StorageResult[None]:
        return await self.save_goal(goal)

    async def delete_goal(self, goal_id: str) -> StorageResult[None]:
        self._goals.pop(goal_id, None)
        return stored()
