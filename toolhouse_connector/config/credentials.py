"""
Credential lookup for the Toolhouse API.

The connector only ever asks one question of the credential store: "give me the
secret stored under this name". Everything else about storage stays outside.
"""

from typing import Dict, Optional, Protocol
import structlog

from toolhouse_connector.config.settings import settings
from toolhouse_connector.models.credentials import (
    Credential,
    PresentCredential,
    AbsentCredential,
    credential_from_token,
)

logger = structlog.get_logger()


class CredentialStore(Protocol):
    """Contract for fetching a stored secret by name"""

    def get_credential(self, name: str) -> Credential:
        ...


class SettingsCredentialStore:
    """
    Credential store backed by application settings.

    Only `settings.credential_name` resolves to the configured
    TOOLHOUSE_API_TOKEN; any other name is absent.
    """

    def __init__(self, token: Optional[str] = None, name: Optional[str] = None):
        self.token = token if token is not None else settings.toolhouse_api_token
        self.name = name or settings.credential_name

    def get_credential(self, name: str) -> Credential:
        if name != self.name:
            logger.debug("credential_name_unknown", name=name)
            return AbsentCredential()

        credential = credential_from_token(self.token)
        logger.debug(
            "credential_lookup",
            name=name,
            present=isinstance(credential, PresentCredential),
        )
        return credential


class StaticCredentialStore:
    """In-memory credential store, keyed by credential name"""

    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self._tokens = dict(tokens or {})

    def get_credential(self, name: str) -> Credential:
        return credential_from_token(self._tokens.get(name))
