"""FitCoach - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitcoach.config import get_settings
from fitcoach.database import Base, engine
from fitcoach.errors import FitCoachError
from fitcoach.logging_config import setup_logging
from fitcoach.routers import (
    conditions_router,
    plans_router,
    results_router,
    sessions_router,
    stats_router,
    workout_exercises_router,
)
from fitcoach.scheduler import start_scheduler

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)

    scheduler = start_scheduler() if settings.enable_scheduler else None
    yield

    if scheduler is not None:
        scheduler.shutdown()
        logger.info("[SCHEDULER] Stopped overdue plan sweeper")


app = FastAPI(
    title="FitCoach API",
    description="Adaptive weekly training plans with cascading workout tracking",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        settings.frontend_url,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FitCoachError)
async def fitcoach_error_handler(request: Request, exc: FitCoachError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Include routers
app.include_router(plans_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(workout_exercises_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")
app.include_router(conditions_router, prefix="/api/v1")
app.include_router(stats_router, prefix="/api/v1")


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
@app.get("/api/v1/health")
def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}
