from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from roundcaddy.api.health import health as _health_handler
from roundcaddy.api.routers.caddie import router as caddie_router
from roundcaddy.api.routers.community import router as community_router
from roundcaddy.api.routers.courses import router as courses_router
from roundcaddy.api.routers.notes import router as notes_router
from roundcaddy.api.routers.rounds import router as rounds_router
from roundcaddy.api.routers.weather import router as weather_router
from roundcaddy.config import env_bool
from roundcaddy.courses.sync import get_course_sync_service
from roundcaddy.metrics import MetricsMiddleware, metrics_app

logger = logging.getLogger(__name__)

SYNC_CHECK_INTERVAL_S = 3600


@asynccontextmanager
async def lifespan(app: FastAPI):
    sync_task: Optional[asyncio.Task] = None

    if env_bool("COURSE_SYNC_ON_STARTUP"):

        async def _loop() -> None:
            service = get_course_sync_service()
            while True:
                try:
                    # sync() skips on its own until the interval has elapsed
                    await asyncio.to_thread(service.sync)
                except Exception:
                    logger.exception("background course sync crashed")
                finally:
                    await asyncio.sleep(SYNC_CHECK_INTERVAL_S)

        sync_task = asyncio.create_task(_loop())

    try:
        yield
    finally:
        if sync_task:
            sync_task.cancel()
            try:
                await sync_task
            except asyncio.CancelledError:
                pass


app = FastAPI(title="RoundCaddy", lifespan=lifespan)

allow = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in allow if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

app.include_router(courses_router)
app.include_router(notes_router)
app.include_router(caddie_router)
app.include_router(rounds_router)
app.include_router(community_router)
app.include_router(weather_router)
app.add_api_route("/health", _health_handler, methods=["GET"])

_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)

__all__ = ["app"]
