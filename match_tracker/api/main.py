"""
FastAPI Application Main
Hauptanwendung für die Match Tracker API
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from .. import __version__
from ..apps.tracker_app import MatchTrackerApp
from ..core.config import Settings
from ..monitoring.prometheus_metrics import PrometheusMetrics
from .models import HealthResponse
from .router import api_router


def create_fastapi_app(
    settings: Settings,
    tracker_app: MatchTrackerApp,
    *,
    metrics: Optional[PrometheusMetrics] = None,
    manage_lifecycle: bool = False,
):
    """Factory function to create the FastAPI app.

    With `manage_lifecycle` the lifespan initializes the tracker, runs the
    bootstrap update and starts the scheduler (standalone uvicorn). main.py
    does that itself and passes False.
    """
    metrics = metrics or tracker_app.metrics

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application Lifespan Management"""
        logger = logging.getLogger(__name__)
        logger.info("Starting Match Tracker API")
        if manage_lifecycle:
            await tracker_app.initialize()
            try:
                await tracker_app.bootstrap()
            except Exception:
                logger.exception("Initial update failed")
            if settings.enable_scheduler:
                tracker_app.scheduler.start()
        logger.info("Application startup complete")
        yield
        logger.info("Shutting down application")
        if manage_lifecycle:
            await tracker_app.cleanup()

    app = FastAPI(
        title="Club Match Tracker API",
        description="Snapshot, metadata and history of the club's tracked matches",
        version=__version__,
        lifespan=lifespan,
    )

    # Make app available to endpoints
    app.state.tracker_app = tracker_app
    app.state.metrics = metrics

    # CORS Middleware (tighten in non-development)
    cors_origins = settings.cors_origins
    if settings.environment != "development":
        cors_origins = [o for o in cors_origins if o != "*"] or []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def metrics_http_middleware(request: Request, call_next):
        start = time.time()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration = time.time() - start
            if app.state.metrics:
                status = str(response.status_code) if response is not None else "500"
                app.state.metrics.record_api_request(
                    method=request.method, endpoint=request.url.path, status=status, duration=duration
                )
            logging.getLogger("api.access").debug(f"{request.method} {request.url.path} {duration * 1000:.1f}ms")

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Basic health check endpoint"""
        return HealthResponse(status="ok", message="Match tracker running")

    @app.get("/metrics", response_class=PlainTextResponse)
    async def prometheus_metrics():
        """Prometheus metrics endpoint"""
        if not app.state.metrics:
            return PlainTextResponse("# metrics disabled\n", status_code=404)
        return PlainTextResponse(app.state.metrics.export_metrics(), media_type=CONTENT_TYPE_LATEST)

    # Include aggregated API router
    app.include_router(api_router, prefix="/api")

    return app


def create_default_app() -> FastAPI:
    """ASGI factory for `uvicorn match_tracker.api.main:create_default_app --factory`"""
    settings = Settings()
    return create_fastapi_app(settings, MatchTrackerApp(settings), manage_lifecycle=True)
