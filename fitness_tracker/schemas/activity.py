"""Pydantic model for the persisted and wire shape of an activity."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ..domain.activity import Activity, ActivityType


class ActivityRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: ActivityType
    date: datetime
    duration: float
    distance: float
    calories: float

    @classmethod
    def from_domain(cls, activity: Activity) -> "ActivityRecord":
        """Build a record from the domain dataclass."""
        return cls(
            id=activity.id,
            type=activity.type,
            date=activity.date,
            duration=activity.duration,
            distance=activity.distance,
            calories=activity.calories,
        )

    def to_domain(self) -> Activity:
        return Activity(
            id=self.id,
            type=self.type,
            date=self.date,
            duration=self.duration,
            distance=self.distance,
            calories=self.calories,
        )
