"""KnockWise — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from knockwise.adapters.persistence.database import engine
from knockwise.config import settings
from knockwise.domain.errors import NotFoundError, ValidationError
from knockwise.infrastructure.api.routes_assignments import router as assignments_router
from knockwise.infrastructure.api.routes_health import router as health_router
from knockwise.infrastructure.api.routes_scheduled import router as scheduled_router
from knockwise.infrastructure.api.routes_status import router as status_router
from knockwise.infrastructure.scheduler.activation_job import ActivationJob

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)

    job = None
    if settings.scheduler_enabled:
        job = ActivationJob(
            interval=settings.activation_interval_seconds,
            startup_delay=settings.activation_startup_delay_seconds,
        )
        job.start()
    app.state.activation_job = job

    yield

    if job is not None:
        await job.stop()
    await engine.dispose()


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="KnockWise — Territory Assignment Service",
        description="Agent and team zone assignments, scheduling, and derived statuses",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(scheduled_router, prefix="/api")
    app.include_router(status_router, prefix="/api")

    return app


app = create_app()
