"""HTTP route definitions for the fitness tracker service."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from prometheus_client import Counter
from pydantic import BaseModel, ConfigDict, Field

from ..domain.activity import ActivityType
from ..domain.activity_manager import ActivityManager
from ..domain.analytics import AnalyticsEngine, Statistics, TypeStatistics
from ..domain.contracts import ActivityInput, GoalInput, ServiceError, ServiceErrorKind
from ..domain.goal import GoalStatus
from ..domain.goal_tracker import GoalProgress, GoalTracker
from ..results import Err
from ..schemas import ActivityRecord, GoalRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")

service_errors = Counter(
    "fitness_service_errors_total",
    "Service errors returned to HTTP clients, by error kind.",
    ["kind"],
)


class ActivityRequest(BaseModel):
    """Payload accepted when logging or replacing an activity.

    Fields are left untyped so malformed values reach the domain validators
    and come back as a single 400 listing every problem.
    """

    type: Any = None
    date: Any = None
    duration: Any = None
    distance: Any = None
    calories: Any = None

    def to_input(self) -> ActivityInput:
        return ActivityInput(
            type=self.type,
            date=self.date,
            duration=self.duration,
            distance=self.distance,
            calories=self.calories,
        )


class GoalRequest(BaseModel):
    """Payload accepted when creating or replacing a goal."""

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    target_metric: Any = Field(default=None, alias="targetMetric")
    target_value: Any = Field(default=None, alias="targetValue")
    deadline: Any = None

    def to_input(self) -> GoalInput:
        return GoalInput(
            name=self.name,
            target_metric=self.target_metric,
            target_value=self.target_value,
            deadline=self.deadline,
        )


class GoalProgressResponse(BaseModel):
    """Serialised representation of a `GoalProgress` snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    goal: GoalRecord
    current_value: float = Field(..., alias="currentValue")
    target_value: float = Field(..., alias="targetValue")
    percentage: float
    status: GoalStatus

    @classmethod
    def from_domain(cls, progress: GoalProgress) -> "GoalProgressResponse":
        return cls(
            goal=GoalRecord.from_domain(progress.goal),
            current_value=progress.current_value,
            target_value=progress.target_value,
            percentage=progress.percentage,
            status=progress.status,
        )


class GoalStatusResponse(BaseModel):
    status: GoalStatus


class TypeStatisticsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_distance: float = Field(..., alias="totalDistance")
    total_duration: float = Field(..., alias="totalDuration")
    total_calories: float = Field(..., alias="totalCalories")
    workout_count: int = Field(..., alias="workoutCount")

    @classmethod
    def from_domain(cls, stats: TypeStatistics) -> "TypeStatisticsResponse":
        return cls(
            total_distance=stats.total_distance,
            total_duration=stats.total_duration,
            total_calories=stats.total_calories,
            workout_count=stats.workout_count,
        )


class StatisticsResponse(TypeStatisticsResponse):
    """Period totals with the per-type breakdown."""

    breakdown_by_type: dict[ActivityType, TypeStatisticsResponse] = Field(..., alias="breakdownByType")

    @classmethod
    def from_domain(cls, stats: Statistics) -> "StatisticsResponse":
        return cls(
            total_distance=stats.total_distance,
            total_duration=stats.total_duration,
            total_calories=stats.total_calories,
            workout_count=stats.workout_count,
            breakdown_by_type={
                activity_type: TypeStatisticsResponse.from_domain(subtotal)
                for activity_type, subtotal in stats.breakdown_by_type.items()
            },
        )


class AverageDurationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    average_duration: float = Field(..., alias="averageDuration")


def get_activity_manager(request: Request) -> ActivityManager:
    """Resolve the `ActivityManager` stored on the FastAPI application state."""
    manager: ActivityManager = request.app.state.activity_manager
    return manager


def get_goal_tracker(request: Request) -> GoalTracker:
    tracker: GoalTracker = request.app.state.goal_tracker
    return tracker


def get_analytics(request: Request) -> AnalyticsEngine:
    engine: AnalyticsEngine = request.app.state.analytics
    return engine


@router.post("/activities", response_model=ActivityRecord, status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: ActivityRequest,
    manager: ActivityManager = Depends(get_activity_manager),
) -> ActivityRecord:
    """Log a new activity."""
    result = await manager.create_activity(payload.to_input())
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return ActivityRecord.from_domain(result.value)


@router.get("/activities", response_model=list[ActivityRecord])
async def list_activities(
    activity_type: ActivityType | None = Query(default=None, alias="type"),
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    manager: ActivityManager = Depends(get_activity_manager),
) -> list[ActivityRecord]:
    """List activities, most recent first, optionally narrowed by type and date range."""
    if (start is None) != (end is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="start and end must be given together"
        )
    if start is not None:
        result = await manager.get_activities_by_date_range(start, end)
    elif activity_type is not None:
        result = await manager.get_activities_by_type(activity_type)
    else:
        result = await manager.get_all_activities()
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)

    activities = result.value
    if start is not None and activity_type is not None:
        activities = [activity for activity in activities if activity.type == activity_type]
    return [ActivityRecord.from_domain(activity) for activity in activities]


@router.get("/activities/{activity_id}", response_model=ActivityRecord)
async def get_activity(
    activity_id: str,
    manager: ActivityManager = Depends(get_activity_manager),
) -> ActivityRecord:
    result = await manager.get_activity(activity_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return ActivityRecord.from_domain(result.value)


@router.put("/activities/{activity_id}", response_model=ActivityRecord)
async def update_activity(
    activity_id: str,
    payload: ActivityRequest,
    manager: ActivityManager = Depends(get_activity_manager),
) -> ActivityRecord:
    """Replace every field of an existing activity."""
    result = await manager.update_activity(activity_id, payload.to_input())
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return ActivityRecord.from_domain(result.value)


@router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: str,
    manager: ActivityManager = Depends(get_activity_manager),
) -> Response:
    result = await manager.delete_activity(activity_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/goals", response_model=GoalRecord, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalRequest,
    tracker: GoalTracker = Depends(get_goal_tracker),
) -> GoalRecord:
    """Create a goal whose window starts now."""
    result = await tracker.create_goal(payload.to_input())
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return GoalRecord.from_domain(result.value)


@router.get("/goals", response_model=list[GoalRecord])
async def list_goals(tracker: GoalTracker = Depends(get_goal_tracker)) -> list[GoalRecord]:
    result = await tracker.get_all_goals()
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return [GoalRecord.from_domain(goal) for goal in result.value]


@router.get("/goals/progress", response_model=list[GoalProgressResponse])
async def list_goal_progress(
    tracker: GoalTracker = Depends(get_goal_tracker),
) -> list[GoalProgressResponse]:
    """Return progress snapshots for every goal."""
    result = await tracker.get_all_goal_progress()
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return [GoalProgressResponse.from_domain(progress) for progress in result.value]


@router.get("/goals/{goal_id}", response_model=GoalRecord)
async def get_goal(goal_id: str, tracker: GoalTracker = Depends(get_goal_tracker)) -> GoalRecord:
    result = await tracker.get_goal(goal_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return GoalRecord.from_domain(result.value)


@router.put("/goals/{goal_id}", response_model=GoalRecord)
async def update_goal(
    goal_id: str,
    payload: GoalRequest,
    tracker: GoalTracker = Depends(get_goal_tracker),
) -> GoalRecord:
    result = await tracker.update_goal(goal_id, payload.to_input())
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return GoalRecord.from_domain(result.value)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: str, tracker: GoalTracker = Depends(get_goal_tracker)) -> Response:
    result = await tracker.delete_goal(goal_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/goals/{goal_id}/progress", response_model=GoalProgressResponse)
async def get_goal_progress(
    goal_id: str,
    tracker: GoalTracker = Depends(get_goal_tracker),
) -> GoalProgressResponse:
    result = await tracker.get_goal_progress(goal_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return GoalProgressResponse.from_domain(result.value)


@router.get("/goals/{goal_id}/status", response_model=GoalStatusResponse)
async def get_goal_status(
    goal_id: str,
    tracker: GoalTracker = Depends(get_goal_tracker),
) -> GoalStatusResponse:
    result = await tracker.check_goal_status(goal_id)
    if isinstance(result, Err):
        raise _http_error_from_service_error(result.error)
    return GoalStatusResponse(status=result.value)


@router.get("/stats", response_model=StatisticsResponse)
async def get_stats_by_period(
    start: datetime = Query(...),
    end: datetime = Query(...),
    engine: AnalyticsEngine = Depends(get_analytics),
) -> StatisticsResponse:
    """Totals for activities dated within ``[start, end]``."""
    return StatisticsResponse.from_domain(await engine.get_stats_by_period(start, end))


@router.get("/stats/weekly", response_model=StatisticsResponse)
async def get_weekly_stats(engine: AnalyticsEngine = Depends(get_analytics)) -> StatisticsResponse:
    return StatisticsResponse.from_domain(await engine.get_weekly_stats())


@router.get("/stats/monthly", response_model=StatisticsResponse)
async def get_monthly_stats(engine: AnalyticsEngine = Depends(get_analytics)) -> StatisticsResponse:
    return StatisticsResponse.from_domain(await engine.get_monthly_stats())


@router.get("/stats/average-duration", response_model=AverageDurationResponse)
async def get_average_duration(
    engine: AnalyticsEngine = Depends(get_analytics),
) -> AverageDurationResponse:
    return AverageDurationResponse(average_duration=await engine.calculate_average_duration())


@router.get("/stats/types/{activity_type}", response_model=TypeStatisticsResponse)
async def get_stats_by_activity_type(
    activity_type: ActivityType,
    start: datetime = Query(...),
    end: datetime = Query(...),
    engine: AnalyticsEngine = Depends(get_analytics),
) -> TypeStatisticsResponse:
    stats = await engine.get_stats_by_activity_type(activity_type, start, end)
    return TypeStatisticsResponse.from_domain(stats)


def _http_error_from_service_error(error: ServiceError) -> HTTPException:
    service_errors.labels(kind=error.kind.value).inc()
    status_code = status.HTTP_400_BAD_REQUEST
    if error.kind == ServiceErrorKind.not_found:
        status_code = status.HTTP_404_NOT_FOUND
    elif error.kind == ServiceErrorKind.storage:
        logger.warning("storage failure surfaced to client: %s", error.message)
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HTTPException(status_code=status_code, detail=error.message)
