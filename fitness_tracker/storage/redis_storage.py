"""Redis-backed storage adapter.

Each entity kind lives in one Redis hash keyed by entity id, with the JSON
produced by the record schemas as the value.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..domain.activity import Activity
from ..domain.goal import Goal
from ..results import Ok
from ..schemas import ActivityRecord, GoalRecord
from .base import Storage, StorageErrorKind, StorageResult, storage_error, stored

logger = logging.getLogger(__name__)

E = TypeVar("E")


class RedisStorage(Storage):
    """Persist activities and goals in Redis hashes."""

    def __init__(self, client: Redis, *, key_prefix: str = "fitness") -> None:
        self._client = client
        self._activities_key = f"{key_prefix}:activities"
        self._goals_key = f"{key_prefix}:goals"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def save_activity(self, activity: Activity) -> StorageResult[None]:
        return await self._put(
            self._activities_key, activity.id, lambda: ActivityRecord.from_domain(activity), "activity"
        )

    async def load_activity(self, activity_id: str) -> StorageResult[Activity]:
        return await self._get(self._activities_key, activity_id, ActivityRecord, "Activity")

    async def load_all_activities(self) -> StorageResult[list[Activity]]:
        return await self._get_all(self._activities_key, ActivityRecord, "activities")

    async def update_activity(self, activity: Activity) -> StorageResult[None]:
        return await self.save_activity(activity)

    async def delete_activity(self, activity_id: str) -> StorageResult[None]:
        return await self._remove(self._activities_key, activity_id, "activity")

    async def save_goal(self, goal: Goal) -> StorageResult[None]:
        return await self._put(self._goals_key, goal.id, lambda: GoalRecord.from_domain(goal), "goal")

    async def load_goal(self, goal_id: str) -> StorageResult[Goal]:
        return await self._get(self._goals_key, goal_id, GoalRecord, "Goal")

    async def load_all_goals(self) -> StorageResult[list[Goal]]:
        return await self._get_all(self._goals_key, GoalRecord, "goals")

    async def update_goal(self, goal: Goal) -> StorageResult[None]:
        return await self.save_goal(goal)

    async def delete_goal(self, goal_id: str) -> StorageResult[None]:
        return await self._remove(self._goals_key, goal_id, "goal")

    async def _put(
        self, key: str, entity_id: str, build: Callable[[], BaseModel], label: str
    ) -> StorageResult[None]:
        try:
            payload = build().model_dump_json(by_alias=True)
        except ValidationError as exc:
            logger.warning("could not serialise %s %s: %s", label, entity_id, exc)
            return storage_error(StorageErrorKind.serialization, f"Failed to serialise {label}", exc)
        try:
            await self._client.hset(key, entity_id, payload)
        except RedisError as exc:
            logger.warning("error saving %s %s: %s", label, entity_id, exc)
            return storage_error(StorageErrorKind.write, f"Failed to save {label}", exc)
        return stored()

    async def _get(self, key: str, entity_id: str, schema: type, label: str) -> StorageResult[E]:
        try:
            raw = await self._client.hget(key, entity_id)
        except RedisError as exc:
            logger.warning("error loading %s %s: %s", label.lower(), entity_id, exc)
            return storage_error(StorageErrorKind.read, f"Failed to load {label.lower()}", exc)
        if raw is None:
            return storage_error(StorageErrorKind.read, f"{label} with id {entity_id} not found")
        try:
            return Ok(schema.model_validate_json(raw).to_domain())
        except ValidationError as exc:
            logger.warning("corrupt %s record %s: %s", label.lower(), entity_id, exc)
            return storage_error(
                StorageErrorKind.serialization, f"Failed to decode {label.lower()} {entity_id}", exc
            )

    async def _get_all(self, key: str, schema: type, label: str) -> StorageResult[list[E]]:
        try:
            values = await self._client.hvals(key)
        except RedisError as exc:
            logger.warning("error loading %s: %s", label, exc)
            return storage_error(StorageErrorKind.read, f"Failed to load {label}", exc)
        try:
            return Ok([schema.model_validate_json(raw).to_domain() for raw in values])
        except ValidationError as exc:
            logger.warning("corrupt record in %s: %s", key, exc)
            return storage_error(StorageErrorKind.serialization, f"Failed to decode {label}", exc)

    async def _remove(self, key: str, entity_id: str, label: str) -> StorageResult[None]:
        try:
            await self._client.hdel(key, entity_id)
        except RedisError as exc:
            logger.warning("error deleting %s %s: %s", label, entity_id, exc)
            return storage_error(StorageErrorKind.delete, f"Failed to delete {label}", exc)
        return stored()
