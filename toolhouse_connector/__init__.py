"""Toolhouse agent conversation step and run callback webhook."""

# Core components
from toolhouse_connector.core import (
    AgentExecutor,
    AgentCatalog,
    AgentVisibilityResolver,
    ConversationTransport,
    WebhookStatusClassifier,
    TransportFailure,
    ConfigurationError,
    AuthorizationDenied,
    track_run_id,
    route_outcome,
)

# Models and schemas
from toolhouse_connector.models import (
    ExecutionItem,
    ExecutionResult,
    OutcomeRecord,
    WebhookCallback,
    WebhookResult,
    PresentCredential,
    AbsentCredential,
)

# Adapters
from toolhouse_connector.adapters import HttpxTransport

# Configuration
from toolhouse_connector.config import (
    settings,
    SettingsCredentialStore,
)

__version__ = "1.0.0"

__all__ = [
    # Core
    'AgentExecutor',
    'AgentCatalog',
    'AgentVisibilityResolver',
    'ConversationTransport',
    'WebhookStatusClassifier',
    'TransportFailure',
    'ConfigurationError',
    'AuthorizationDenied',
    'track_run_id',
    'route_outcome',
    # Models
    'ExecutionItem',
    'ExecutionResult',
    'OutcomeRecord',
    'WebhookCallback',
    'WebhookResult',
    'PresentCredential',
    'AbsentCredential',
    # Adapters
    'HttpxTransport',
    # Config
    'settings',
    'SettingsCredentialStore',
]
