"""Shared schema exports."""

from .activity import ActivityRecord
from .goal import GoalRecord

__all__ = [
    "ActivityRecord",
    "GoalRecord",
]
