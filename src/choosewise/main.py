"""
FastAPI application entry point for the Choose-Wise Advice Service.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from choosewise.api.error_handlers import EXCEPTION_HANDLERS
from choosewise.api.middleware import RequestTracingMiddleware
from choosewise.api.rate_limit import SlidingWindowRateLimiter
from choosewise.api.routes import router
from choosewise.config import Settings, settings
from choosewise.logging_config import configure_logging
from choosewise.orchestrator.failover import FailoverOrchestrator

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the provider banner on startup, close provider clients on shutdown."""
    app_settings: Settings = app.state.settings
    orchestrator: FailoverOrchestrator = app.state.orchestrator
    configured = [spec.name for spec in orchestrator.configured_providers]

    logger.info(
        "Application startup",
        version=app_settings.APP_VERSION,
        environment=app_settings.ENVIRONMENT,
        port=app_settings.PORT,
        primary=configured[0] if configured else None,
        fallbacks=configured[1:],
        unconfigured=[s.name for s in orchestrator.chain if not s.is_configured()],
        emergency_enabled=orchestrator.emergency_enabled,
    )

    yield

    logger.info("Application shutdown")
    await orchestrator.close()
    logger.info("Application shutdown complete")


def create_app(
    app_settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    The orchestrator and rate limiter are created here, so a bad provider
    configuration fails at boot rather than on the first request.

    Args:
        app_settings: Settings to use (defaults to the environment)
        transport: Optional httpx transport for every provider client (tests)

    Raises:
        ConfigurationError: Unknown provider in PROVIDER_ORDER, or no
            provider configured with emergency fallback disabled
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Decision advice with multi-provider failover and local emergency fallback",
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.orchestrator = FailoverOrchestrator.from_settings(app_settings, transport=transport)
    app.state.rate_limiter = (
        SlidingWindowRateLimiter(
            max_requests=app_settings.RATE_LIMIT_REQUESTS,
            window_seconds=app_settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        if app_settings.RATE_LIMIT_ENABLED
        else None
    )

    # Request tracing middleware (must be first for request_id in all logs)
    app.add_middleware(RequestTracingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router, tags=["advice"])

    @app.get("/")
    async def root():
        """Root endpoint with API documentation links."""
        return {
            "service": app_settings.APP_NAME,
            "version": app_settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
            "status": "/api/status",
            "metrics": "/metrics" if app_settings.PROMETHEUS_ENABLED else None,
        }

    if app_settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


# Configure structured logging before the app logs anything
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT, settings.APP_VERSION)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "choosewise.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
