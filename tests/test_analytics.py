from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fitness_tracker.domain.activity import ActivityType
from fitness_tracker.domain.analytics import Statistics, TypeStatistics
from fitness_tracker.domain.contracts import ActivityInput

NOW = datetime(2024, 3, 31, 12, tzinfo=timezone.utc)


async def log(manager, activity_type: ActivityType, when: datetime, duration=30, distance=5.0, calories=300):
    await manager.create_activity(
        ActivityInput(type=activity_type, date=when, duration=duration, distance=distance, calories=calories)
    )


@pytest.fixture
def clock_at_now(clock):
    clock.now = NOW
    return clock


@pytest.mark.asyncio
async def test_weekly_stats_cover_trailing_seven_days(analytics, manager, clock_at_now):
    await log(manager, ActivityType.running, NOW - timedelta(days=7))
    await log(manager, ActivityType.running, NOW - timedelta(days=2))
    await log(manager, ActivityType.cycling, NOW, distance=20, duration=60, calories=500)
    await log(manager, ActivityType.running, NOW - timedelta(days=7, seconds=1))

    stats = await analytics.get_weekly_stats()
    assert stats.workout_count == 3
    assert stats.total_distance == 30
    assert stats.total_duration == 120
    assert stats.total_calories == 1100
    assert stats.breakdown_by_type[ActivityType.running] == TypeStatistics(10, 60, 600, 2)
    assert stats.breakdown_by_type[ActivityType.cycling] == TypeStatistics(20, 60, 500, 1)
    assert ActivityType.swimming not in stats.breakdown_by_type


@pytest.mark.asyncio
async def test_monthly_stats_cover_trailing_thirty_days(analytics, manager, clock_at_now):
    await log(manager, ActivityType.walking, NOW - timedelta(days=30))
    await log(manager, ActivityType.walking, NOW - timedelta(days=31))
    await log(manager, ActivityType.swimming, NOW - timedelta(days=10))

    stats = await analytics.get_monthly_stats()
    assert stats.workout_count == 2
    assert set(stats.breakdown_by_type) == {ActivityType.walking, ActivityType.swimming}


@pytest.mark.asyncio
async def test_breakdown_adds_up_to_totals(analytics, manager):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    samples = [
        (ActivityType.running, 32, 6.2, 410),
        (ActivityType.cycling, 75, 28.4, 690),
        (ActivityType.swimming, 40, 1.6, 380),
        (ActivityType.strength_training, 50, 0, 260),
        (ActivityType.running, 28, 5.1, 350),
        (ActivityType.walking, 60, 4.8, 240),
    ]
    for day, (activity_type, duration, distance, calories) in enumerate(samples):
        await log(manager, activity_type, start + timedelta(days=day), duration, distance, calories)

    stats = await analytics.get_stats_by_period(start, start + timedelta(days=30))
    breakdown = stats.breakdown_by_type.values()
    assert sum(sub.workout_count for sub in breakdown) == stats.workout_count == len(samples)
    assert sum(sub.total_duration for sub in breakdown) == stats.total_duration
    assert sum(sub.total_calories for sub in breakdown) == stats.total_calories
    assert sum(sub.total_distance for sub in breakdown) == pytest.approx(stats.total_distance)


@pytest.mark.asyncio
async def test_stats_by_activity_type(analytics, manager):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await log(manager, ActivityType.running, start + timedelta(days=1), distance=5)
    await log(manager, ActivityType.running, start + timedelta(days=2), distance=7)
    await log(manager, ActivityType.cycling, start + timedelta(days=2), distance=30)
    await log(manager, ActivityType.running, start + timedelta(days=40), distance=9)

    stats = await analytics.get_stats_by_activity_type(ActivityType.running, start, start + timedelta(days=7))
    assert stats == TypeStatistics(total_distance=12, total_duration=60, total_calories=600, workout_count=2)


@pytest.mark.asyncio
async def test_average_duration(analytics, manager):
    assert await analytics.calculate_average_duration() == 0

    await log(manager, ActivityType.running, datetime(2020, 1, 1, tzinfo=timezone.utc), duration=10)
    await log(manager, ActivityType.cycling, datetime(2030, 1, 1, tzinfo=timezone.utc), duration=20)
    assert await analytics.calculate_average_duration() == 15


@pytest.mark.asyncio
async def test_storage_failures_degrade_to_empty_statistics(analytics, manager, fail_storage):
    await log(manager, ActivityType.running, datetime(2024, 1, 1, tzinfo=timezone.utc))
    fail_storage("load_all_activities")

    start, end = datetime(2023, 1, 1, tzinfo=timezone.utc), datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert await analytics.get_stats_by_period(start, end) == Statistics()
    assert await analytics.get_weekly_stats() == Statistics()
    assert await analytics.get_monthly_stats() == Statistics()
    assert await analytics.get_stats_by_activity_type(ActivityType.running, start, end) == TypeStatistics()
    assert await analytics.calculate_average_duration() == 0
