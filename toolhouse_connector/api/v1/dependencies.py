"""Shared dependencies for API routes."""

from fastapi import Depends, Request

from toolhouse_connector.config import settings, CredentialStore
from toolhouse_connector.core import (
    AgentCatalog,
    AgentExecutor,
    HttpTransport,
    WebhookStatusClassifier,
)
from toolhouse_connector.models import Credential


def get_transport(request: Request) -> HttpTransport:
    """Get HTTP transport from app state."""
    return request.app.state.transport


def get_credential_store(request: Request) -> CredentialStore:
    """Get credential store from app state."""
    return request.app.state.credential_store


def get_webhook_classifier(request: Request) -> WebhookStatusClassifier:
    """Get webhook classifier from app state."""
    return request.app.state.webhook_classifier


def get_credential(credential_store=Depends(get_credential_store)) -> Credential:
    """Credential for the current invocation (present or absent)."""
    return credential_store.get_credential(settings.credential_name)


def get_executor(transport=Depends(get_transport)) -> AgentExecutor:
    """Executor bound to the shared transport; created per request, holds no state."""
    return AgentExecutor(transport)


def get_catalog(
    transport=Depends(get_transport),
    credential_store=Depends(get_credential_store),
) -> AgentCatalog:
    return AgentCatalog(transport, credential_store)
