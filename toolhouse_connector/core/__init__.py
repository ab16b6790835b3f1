"""Core business logic components."""

from toolhouse_connector.core.errors import (
    TransportFailure,
    ConfigurationError,
    AuthorizationDenied,
)
from toolhouse_connector.core.transport import HttpResponse, HttpTransport
from toolhouse_connector.core.visibility import AgentVisibilityResolver
from toolhouse_connector.core.conversation import (
    ConversationTransport,
    ConversationReply,
    conversation_credential,
)
from toolhouse_connector.core.run_tracker import track_run_id
from toolhouse_connector.core.router import route_outcome
from toolhouse_connector.core.executor import AgentExecutor
from toolhouse_connector.core.agent_catalog import AgentCatalog
from toolhouse_connector.core.webhook import WebhookStatusClassifier

__all__ = [
    'TransportFailure',
    'ConfigurationError',
    'AuthorizationDenied',
    'HttpResponse',
    'HttpTransport',
    'AgentVisibilityResolver',
    'ConversationTransport',
    'ConversationReply',
    'conversation_credential',
    'track_run_id',
    'route_outcome',
    'AgentExecutor',
    'AgentCatalog',
    'WebhookStatusClassifier',
]
