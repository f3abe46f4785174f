#!/usr/bin/env python3
"""
FastAPI Application Entry Point

This is the main entry point for the Mission Telemetry Orchestrator.
It configures the FastAPI application, middleware, and routes.

Author: Senior Solution Architect
Date: 2025-12-08
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.application.api.middleware import setup_middleware
from src.application.api.routes.events import router as events_router
from src.application.api.routes.health import router as health_router
from src.application.api.routes.streams import router as streams_router
from src.application.api.routes.system import router as system_router
from src.application.api.routes.tabs import router as tabs_router
from src.application.runtime import TelemetryRuntime, build_runtime
from src.core.config.settings import get_settings
from src.core.exceptions import TelemetryBaseError, UnknownViewError
from src.core.logging.logger import get_logger, setup_logging

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


def _lifespan_for(injected: TelemetryRuntime | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle (startup and shutdown).
        """
        settings = get_settings()
        setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

        logger.info(
            "Starting Mission Telemetry Orchestrator",
            environment=settings.app.ENVIRONMENT,
            version=settings.app.APP_VERSION,
        )

        runtime = injected or build_runtime(settings)
        app.state.runtime = runtime

        try:
            started = await runtime.start(view_id=runtime.settings.app.DEFAULT_VIEW)
            if started:
                logger.info("Application startup complete", active_view=runtime.tab_manager.active_view)
            else:
                # Stay up so /health reports the critical state and /system/retry can recover
                logger.error("Orchestrator initialization failed; serving in critical state")

            yield

        finally:
            logger.info("Shutting down application")
            await runtime.stop()
            logger.info("Application shutdown complete")

    return lifespan


# ============================================================================
# Exception Handlers
# ============================================================================


async def unknown_view_handler(request: Request, exc: UnknownViewError):
    return JSONResponse(status_code=404, content=exc.to_dict())


async def telemetry_exception_handler(request: Request, exc: TelemetryBaseError):
    """Handle typed telemetry exceptions that escaped a route."""
    logger.error(
        f"Telemetry exception: {exc.message}", error_type=type(exc).__name__, stream_id=exc.stream_id
    )
    return JSONResponse(status_code=500, content=exc.to_dict())


# ============================================================================
# Application Factory
# ============================================================================


def create_app(runtime: TelemetryRuntime | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        runtime: Pre-built runtime (tests); built from settings at startup otherwise

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Real-time orchestration of space-mission telemetry streams",
        lifespan=_lifespan_for(runtime),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Middleware runs in reverse order of registration: error handling wraps CORS
    setup_middleware(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(UnknownViewError, unknown_view_handler)
    app.add_exception_handler(TelemetryBaseError, telemetry_exception_handler)

    base_path = settings.app.API_BASE_PATH
    app.include_router(health_router, prefix=base_path)
    app.include_router(streams_router, prefix=base_path)
    app.include_router(tabs_router, prefix=base_path)
    app.include_router(system_router, prefix=base_path)
    app.include_router(events_router, prefix=base_path)

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint with API information.
        """
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": f"{base_path}/health",
        }

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
