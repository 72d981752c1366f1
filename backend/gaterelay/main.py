"""
Gate Relay - Main FastAPI Application Entry Point

Builds the application: settings, logging, the gate coordinator with its
Slack notifier, exception handlers and routes.
"""

from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from gaterelay.api.health import router as health_router
from gaterelay.api.routes import router as gate_router
from gaterelay.core.config import Settings, get_settings
from gaterelay.core.logging import RequestLoggingMiddleware, configure_logging, get_logger
from gaterelay.gate.coordinator import GateCoordinator
from gaterelay.middleware.exception import setup_exception_handlers
from gaterelay.services.notifier import SlackNotifier

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    settings: Settings = app.state.settings

    if not settings.SLACK_TOKEN:
        logger.warning("SLACK_TOKEN is not set; every slash command will be rejected")
    if not settings.API_TOKEN:
        logger.warning("API_TOKEN is not set; the gate device cannot confirm")

    logger.info(
        "Server listening",
        version=settings.APP_VERSION,
        host=settings.HOST,
        port=settings.PORT,
        confirm_timeout=settings.GATE_CONFIRM_TIMEOUT_SECONDS,
    )

    yield

    logger.info("Shutting down server")
    await app.state.coordinator.close()
    await app.state.notifier.aclose()


def create_application(
    settings: Optional[Settings] = None,
    notifier: Optional[Any] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Relay between a Slack slash command and the gate opener",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    notifier = notifier or SlackNotifier(timeout=settings.NOTIFY_TIMEOUT_SECONDS)

    app.state.settings = settings
    app.state.command_regex = settings.command_regex
    app.state.notifier = notifier
    app.state.coordinator = GateCoordinator(
        notifier,
        confirm_timeout=settings.GATE_CONFIRM_TIMEOUT_SECONDS,
        scoped_timeouts=settings.GATE_TIMEOUT_SCOPED,
    )

    app.middleware("http")(RequestLoggingMiddleware())

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(gate_router)

    return app


app = create_application()
