"""Tests for the storage adapters and backend selection."""

from __future__ import annotations

from datetime import datetime, timezone

from fakeredis import FakeAsyncRedis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from fitness_tracker.config import Settings
from fitness_tracker.domain.activity import Activity, ActivityType
from fitness_tracker.domain.activity_manager import ActivityManager
from fitness_tracker.domain.contracts import ActivityInput, ServiceErrorKind
from fitness_tracker.domain.goal import Goal, MetricType
from fitness_tracker.results import Err, Ok
from fitness_tracker.storage import factory
from fitness_tracker.storage.base import StorageErrorKind
from fitness_tracker.storage.memory import InMemoryStorage
from fitness_tracker.storage.redis_storage import RedisStorage


def make_activity(activity_id: str = "act-1", **overrides) -> Activity:
    fields = dict(
        id=activity_id,
        type=ActivityType.cycling,
        date=datetime(2024, 1, 10, 6, 30, tzinfo=timezone.utc),
        duration=45,
        distance=18.5,
        calories=520,
    )
    fields.update(overrides)
    return Activity(**fields)


def make_goal(goal_id: str = "goal-1", **overrides) -> Goal:
    fields = dict(
        id=goal_id,
        name="Ride 200km",
        target_metric=MetricType.total_distance,
        target_value=200,
        deadline=datetime(2024, 3, 1, tzinfo=timezone.utc),
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Goal(**fields)


class BrokenRedis:
    """Client stand-in whose every command fails with a connection error."""

    async def _fail(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    hset = hget = hvals = hdel = _fail


@pytest.fixture()
def redis_client() -> FakeAsyncRedis:
    return FakeAsyncRedis()


@pytest.fixture(params=["memory", "redis"])
def any_storage(request, redis_client):
    if request.param == "memory":
        return InMemoryStorage()
    return RedisStorage(redis_client, key_prefix="test")


@pytest.mark.asyncio
async def test_activity_round_trip(any_storage):
    activity = make_activity()
    assert await any_storage.save_activity(activity) == Ok(None)

    loaded = await any_storage.load_activity(activity.id)
    assert isinstance(loaded, Ok)
    assert loaded.value == activity
    assert loaded.value.type is ActivityType.cycling


@pytest.mark.asyncio
async def test_goal_round_trip(any_storage):
    goal = make_goal()
    await any_storage.save_goal(goal)

    loaded = await any_storage.load_goal(goal.id)
    assert loaded.value == goal
    assert loaded.value.target_metric is MetricType.total_distance


@pytest.mark.asyncio
async def test_missing_records_fail_with_read_kind(any_storage):
    activity = await any_storage.load_activity("missing")
    goal = await any_storage.load_goal("missing")
    assert isinstance(activity, Err) and isinstance(goal, Err)
    assert activity.error.kind is StorageErrorKind.read
    assert goal.error.kind is StorageErrorKind.read
    assert activity.error.message == "Activity with id missing not found"


@pytest.mark.asyncio
async def test_update_overwrites_whole_record(any_storage):
    await any_storage.save_activity(make_activity())
    await any_storage.update_activity(make_activity(type=ActivityType.walking, distance=3.0))

    loaded = (await any_storage.load_activity("act-1")).value
    assert loaded.type is ActivityType.walking
    assert loaded.distance == 3.0

    everything = (await any_storage.load_all_activities()).value
    assert len(everything) == 1


@pytest.mark.asyncio
async def test_load_all_and_delete(any_storage):
    for idx in range(3):
        await any_storage.save_activity(make_activity(f"act-{idx}"))
        await any_storage.save_goal(make_goal(f"goal-{idx}"))

    assert await any_storage.delete_activity("act-1") == Ok(None)
    assert await any_storage.delete_goal("goal-2") == Ok(None)
    assert await any_storage.delete_goal("never-existed") == Ok(None)

    activities = (await any_storage.load_all_activities()).value
    goals = (await any_storage.load_all_goals()).value
    assert sorted(activity.id for activity in activities) == ["act-0", "act-2"]
    assert sorted(goal.id for goal in goals) == ["goal-0", "goal-1"]


@pytest.mark.asyncio
async def test_memory_storage_does_not_alias_records():
    storage = InMemoryStorage()
    activity = make_activity()
    await storage.save_activity(activity)
    activity.duration = 999

    loaded = (await storage.load_activity(activity.id)).value
    assert loaded.duration == 45
    loaded.duration = 1
    assert (await storage.load_activity(activity.id)).value.duration == 45


@pytest.mark.asyncio
async def test_redis_storage_uses_camel_case_wire_shape(redis_client):
    storage = RedisStorage(redis_client, key_prefix="test")
    await storage.save_goal(make_goal())

    raw = await redis_client.hget("test:goals", "goal-1")
    assert b'"targetMetric":"total_distance"' in raw
    assert b'"createdAt"' in raw


@pytest.mark.asyncio
async def test_redis_storage_reports_corrupt_records(redis_client):
    storage = RedisStorage(redis_client, key_prefix="test")
    await redis_client.hset("test:activities", "bad", b"{not json")

    single = await storage.load_activity("bad")
    assert single.error.kind is StorageErrorKind.serialization
    many = await storage.load_all_activities()
    assert many.error.kind is StorageErrorKind.serialization


@pytest.mark.asyncio
async def test_infinite_quantity_never_reaches_redis(redis_client):
    manager = ActivityManager(RedisStorage(redis_client, key_prefix="test"))
    when = datetime(2024, 1, 10, tzinfo=timezone.utc)
    await manager.create_activity(ActivityInput(type="running", date=when, duration=30, distance=5, calories=300))

    rejected = await manager.create_activity(
        ActivityInput(type="running", date=when, duration=float("inf"), distance=5, calories=300)
    )
    assert rejected.error.kind is ServiceErrorKind.validation

    listed = await manager.get_all_activities()
    assert isinstance(listed, Ok)
    assert len(listed.value) == 1


@pytest.mark.asyncio
async def test_redis_errors_map_to_storage_error_kinds():
    storage = RedisStorage(BrokenRedis())

    saved = await storage.save_activity(make_activity())
    loaded = await storage.load_goal("goal-1")
    listed = await storage.load_all_activities()
    deleted = await storage.delete_goal("goal-1")

    assert saved.error.kind is StorageErrorKind.write
    assert loaded.error.kind is StorageErrorKind.read
    assert listed.error.kind is StorageErrorKind.read
    assert deleted.error.kind is StorageErrorKind.delete
    assert isinstance(saved.error.cause, RedisConnectionError)


@pytest.mark.asyncio
async def test_build_storage_defaults_to_memory():
    storage = await factory.build_storage(Settings(storage_backend="memory"))
    assert isinstance(storage, InMemoryStorage)


@pytest.mark.asyncio
async def test_build_storage_uses_redis_when_reachable(monkeypatch):
    monkeypatch.setattr(factory, "Redis", FakeAsyncRedis)
    storage = await factory.build_storage(
        Settings(storage_backend="redis", redis_url="redis://localhost:6379/0")
    )
    assert isinstance(storage, RedisStorage)


@pytest.mark.asyncio
async def test_build_storage_falls_back_when_redis_unreachable(monkeypatch):
    closed = []

    class Unreachable:
        @classmethod
        def from_url(cls, url):
            return cls()

        async def ping(self):
            raise RedisConnectionError("connection refused")

        async def aclose(self):
            closed.append(self)

    monkeypatch.setattr(factory, "Redis", Unreachable)
    storage = await factory.build_storage(
        Settings(storage_backend="redis", redis_url="redis://localhost:6379/0")
    )
    assert isinstance(storage, InMemoryStorage)
    assert len(closed) == 1


@pytest.mark.asyncio
async def test_redis_storage_aclose_closes_client():
    class RecordingClient:
        closed = False

        async def aclose(self):
            self.closed = True

    client = RecordingClient()
    await RedisStorage(client).aclose()
    assert client.closed
    await InMemoryStorage().aclose()
