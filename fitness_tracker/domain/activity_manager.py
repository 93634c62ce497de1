"""Activity workflows backed by the storage port."""

from __future__ import annotations

from datetime import datetime
import logging

from ..results import Err, Ok, Result
from ..storage.base import Storage
from .activity import Activity, ActivityType
from .contracts import ActivityInput, ServiceError
from .factories import create_activity
from .validation import coerce_datetime, validate_activity

logger = logging.getLogger(__name__)

ActivityResult = Result[Activity, ServiceError]
ActivityListResult = Result[list[Activity], ServiceError]


class ActivityManager:
    """Create, query, update and delete logged activities.

    Nothing is cached between calls; every operation reads from storage.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def create_activity(self, data: ActivityInput) -> ActivityResult:
        """Validate ``data``, build the activity and persist it."""
        validation = validate_activity(data)
        if not validation.valid:
            return Err(ServiceError.validation(validation))

        activity = create_activity(data)
        saved = await self._storage.save_activity(activity)
        if isinstance(saved, Err):
            return Err(ServiceError.storage(saved.error.message))

        logger.debug("activity %s created (%s)", activity.id, activity.type.value)
        return Ok(activity)

    async def get_activity(self, activity_id: str) -> ActivityResult:
        loaded = await self._storage.load_activity(activity_id)
        if isinstance(loaded, Err):
            return Err(ServiceError.not_found("Activity", activity_id))
        return loaded

    async def get_all_activities(self) -> ActivityListResult:
        """Return every activity, most recent first."""
        loaded = await self._storage.load_all_activities()
        if isinstance(loaded, Err):
            return Err(ServiceError.storage(loaded.error.message))
        return Ok(sorted(loaded.value, key=lambda activity: activity.date, reverse=True))

    async def get_activities_by_type(self, activity_type: ActivityType) -> ActivityListResult:
        result = await self.get_all_activities()
        if isinstance(result, Err):
            return result
        return Ok([activity for activity in result.value if activity.type == activity_type])

    async def get_activities_by_date_range(self, start: datetime, end: datetime) -> ActivityListResult:
        """Return activities dated within ``[start, end]``, both bounds included."""
        result = await self.get_all_activities()
        if isinstance(result, Err):
            return result
        lower, upper = coerce_datetime(start), coerce_datetime(end)
        return Ok([activity for activity in result.value if lower <= activity.date <= upper])

    async def update_activity(self, activity_id: str, data: ActivityInput) -> ActivityResult:
        """Replace every field of an existing activity, keeping its id."""
        existing = await self.get_activity(activity_id)
        if isinstance(existing, Err):
            return existing

        validation = validate_activity(data)
        if not validation.valid:
            return Err(ServiceError.validation(validation))

        updated = Activity(
            id=activity_id,
            type=ActivityType(data.type),
            date=coerce_datetime(data.date),
            duration=data.duration,
            distance=data.distance,
            calories=data.calories,
        )
        saved = await self._storage.update_activity(updated)
        if isinstance(saved, Err):
            return Err(ServiceError.storage(saved.error.message))
        return Ok(updated)

    async def delete_activity(self, activity_id: str) -> Result[None, ServiceError]:
        existing = await self.get_activity(activity_id)
        if isinstance(existing, Err):
            return existing

        deleted = await self._storage.delete_activity(activity_id)
        if isinstance(deleted, Err):
            return Err(ServiceError.storage(deleted.error.message))
        logger.debug("activity %s deleted", activity_id)
        return Ok(None)
