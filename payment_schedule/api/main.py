"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payment_schedule.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payment_schedule.api.v1 import audit, calendar_days, schedule
from payment_schedule.infrastructure.cache import ScheduleCache
from payment_schedule.infrastructure.observability.logging import setup_logging
from payment_schedule.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Payment Schedule Engine",
        description="Card/direct-debit withdrawal scheduling, calendar totals and configuration audit",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.schedule_cache = ScheduleCache(
        max_entries=settings.schedule_cache_max_entries,
        enabled=settings.schedule_cache_enabled,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(schedule.router, prefix="/v1", tags=["schedule"])
    app.include_router(calendar_days.router, prefix="/v1", tags=["calendar"])
    app.include_router(audit.router, prefix="/v1", tags=["audit"])

    return app


app = create_app()
