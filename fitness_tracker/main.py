"""FastAPI application wiring for the fitness tracker service."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
import uvicorn

from .api.routes import router as v1_router
from .config import get_settings
from .domain.activity_manager import ActivityManager
from .domain.analytics import AnalyticsEngine
from .domain.goal_tracker import GoalTracker
from .storage.factory import build_storage

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise storage and the services sharing it for the app lifecycle."""
    storage = await build_storage(settings)
    activity_manager = ActivityManager(storage)
    app.state.storage = storage
    app.state.activity_manager = activity_manager
    app.state.goal_tracker = GoalTracker(storage, activity_manager)
    app.state.analytics = AnalyticsEngine(
        activity_manager,
        weekly_window_days=settings.weekly_window_days,
        monthly_window_days=settings.monthly_window_days,
    )
    try:
        yield
    finally:
        await storage.aclose()


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

# CORS for local frontend dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


app.include_router(v1_router)


@app.get("/metrics", tags=["health"])
def metrics() -> Response:
    """Expose Prometheus metrics for scrapes."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)
