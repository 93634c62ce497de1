"""Pydantic model for the persisted and wire shape of a goal."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..domain.goal import Goal, MetricType


class GoalRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    target_metric: MetricType = Field(..., alias="targetMetric")
    target_value: float = Field(..., alias="targetValue")
    deadline: datetime
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_domain(cls, goal: Goal) -> "GoalRecord":
        """Build a record from the domain dataclass."""
        return cls(
            id=goal.id,
            name=goal.name,
            target_metric=goal.target_metric,
            target_value=goal.target_value,
            deadline=goal.deadline,
            created_at=goal.created_at,
        )

    def to_domain(self) -> Goal:
        return Goal(
            id=self.id,
            name=self.name,
            target_metric=self.target_metric,
            target_value=self.target_value,
            deadline=self.deadline,
            created_at=self.created_at,
        )
