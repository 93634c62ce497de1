from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ActivityType(str, Enum):
    running = "running"
    cycling = "cycling"
    swimming = "swimming"
    walking = "walking"
    strength_training = "strength_training"


@dataclass(slots=True)
class Activity:
    """One logged workout.

    ``duration`` is in minutes and ``distance`` in kilometres.
    """

    id: str
    type: ActivityType
    date: datetime
    duration: float
    distance: float
    calories: float
