"""Application startup and shutdown lifecycle management."""

from contextlib import asynccontextmanager
import httpx
import structlog
from fastapi import FastAPI

from toolhouse_connector.config import settings, SettingsCredentialStore
from toolhouse_connector.adapters import HttpxTransport
from toolhouse_connector.core.webhook import WebhookStatusClassifier

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan management for startup/shutdown.
    Owns the shared HTTP client used for every Toolhouse call.
    """
    logger.info("application_starting")

    settings.validate_critical_config()

    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    logger.info("http_client_initialized", timeout_seconds=settings.http_timeout_seconds)

    # Store in app state for access in routes
    app.state.http_client = http_client
    app.state.transport = HttpxTransport(client=http_client)
    app.state.credential_store = SettingsCredentialStore()
    app.state.webhook_classifier = WebhookStatusClassifier()

    logger.info("application_ready")

    yield

    # Shutdown
    logger.info("application_shutting_down")

    await http_client.aclose()

    logger.info("application_stopped")
