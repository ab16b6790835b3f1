"""Data models and schemas."""

from toolhouse_connector.models.credentials import (
    Credential,
    PresentCredential,
    AbsentCredential,
    credential_from_token,
)
from toolhouse_connector.models.schemas import (
    Operation,
    Visibility,
    Lane,
    WebhookLane,
    RUN_ID_HEADER,
    COMPLETED_STATUS,
    Agent,
    visibility_from_metadata,
    AgentOption,
    ExecutionItem,
    ErrorDetail,
    ErrorResponse,
    OutcomeRecord,
    RoutedOutcome,
    ExecutionRequest,
    ExecutionResult,
    WebhookCallback,
    WebhookPayload,
    WebhookResult,
    CredentialTestRequest,
    CredentialTestResponse,
    HealthResponse,
)

__all__ = [
    # Credentials
    'Credential',
    'PresentCredential',
    'AbsentCredential',
    'credential_from_token',
    # Enums / constants
    'Operation',
    'Visibility',
    'Lane',
    'WebhookLane',
    'RUN_ID_HEADER',
    'COMPLETED_STATUS',
    # Schemas
    'Agent',
    'visibility_from_metadata',
    'AgentOption',
    'ExecutionItem',
    'ErrorDetail',
    'ErrorResponse',
    'OutcomeRecord',
    'RoutedOutcome',
    'ExecutionRequest',
    'ExecutionResult',
    'WebhookCallback',
    'WebhookPayload',
    'WebhookResult',
    'CredentialTestRequest',
    'CredentialTestResponse',
    'HealthResponse',
]
