from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fitness_tracker.domain.activity_manager import ActivityManager
from fitness_tracker.domain.analytics import AnalyticsEngine
from fitness_tracker.domain.goal_tracker import GoalTracker
from fitness_tracker.storage.base import StorageErrorKind, storage_error
from fitness_tracker.storage.memory import InMemoryStorage

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class Clock:
    """Settable clock handed to services in place of the wall clock."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def fail_storage(storage, monkeypatch):
    """Make the named storage operation return a failure result."""

    def _fail(operation: str, kind: StorageErrorKind = StorageErrorKind.read) -> None:
        async def failing(*args, **kwargs):
            return storage_error(kind, f"{operation} unavailable")

        monkeypatch.setattr(storage, operation, failing)

    return _fail


@pytest.fixture
def manager(storage) -> ActivityManager:
    return ActivityManager(storage)


@pytest.fixture
def tracker(storage, manager, clock) -> GoalTracker:
    return GoalTracker(storage, manager, clock=clock)


@pytest.fixture
def analytics(manager, clock) -> AnalyticsEngine:
    return AnalyticsEngine(manager, clock=clock)
