"""FastAPI application entry point."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.db.init_db import init_db
from app.db.session import AsyncSessionLocal, engine
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.scoring.engine import ScoringEngine
from app.scoring.store import TestDefinitionStore
from app.tasks.retention import retention_loop

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

SERVICE_NAME = "Mental Health Assessment API"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Starting {SERVICE_NAME} (env={settings.env})")

    # Questionnaires are loaded once and shared read-only
    store = TestDefinitionStore.from_directory(settings.questionnaires_dir)
    app.state.scoring_engine = ScoringEngine(store)

    if settings.init_db_on_startup and settings.is_dev:
        logger.info("Initializing database...")
        await init_db(engine)

    cleanup_task = None
    if settings.is_prod:
        cleanup_task = asyncio.create_task(retention_loop(AsyncSessionLocal))

    yield

    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task

    logger.info(f"Shutting down {SERVICE_NAME}")


app = FastAPI(
    title=SERVICE_NAME,
    description="Anonymous mental-health self-assessment questionnaires and scoring",
    version=SERVICE_VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
    openapi_url="/openapi.json" if settings.is_dev else None,
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(RateLimitMiddleware, enabled=settings.rate_limit_enabled)

# Production accepts any origin; elsewhere only the configured front ends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_prod else settings.cors_origins,
    allow_credentials=not settings.is_prod,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Origin",
        "X-Requested-With",
        "Content-Type",
        "Accept",
        "Authorization",
        "X-Anonymous-ID",
        "X-Language",
    ],
    expose_headers=["X-Total-Count", "X-User-ID"],
    max_age=86400,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    # Don't expose internal errors in production
    if settings.is_prod:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# Include API router
app.include_router(api_router, prefix="/api/v1")


# Root endpoint
@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs" if settings.is_dev else "Disabled in production",
        "health": "/api/v1/health",
    }
