"""
Agent catalog: option loading for agent selection.

Lists the account's agents, checks one agent's visibility, and tests a
credential against the metadata API. Unlike the conversation step, every
operation here requires a credential.
"""

from typing import List, Optional
import structlog
from pydantic import ValidationError

from toolhouse_connector.config.credentials import CredentialStore
from toolhouse_connector.config.settings import settings
from toolhouse_connector.core.errors import (
    ConfigurationError,
    TransportFailure,
    MISSING_CREDENTIALS_MESSAGE,
)
from toolhouse_connector.core.transport import HttpTransport
from toolhouse_connector.models.credentials import Credential, PresentCredential
from toolhouse_connector.models.schemas import (
    Agent,
    AgentOption,
    CredentialTestResponse,
    Visibility,
    visibility_from_metadata,
)

logger = structlog.get_logger()

INVALID_CREDENTIAL_STATUSES = (401, 403)


def agent_option(agent: Agent) -> AgentOption:
    label = "Private" if agent.visibility is Visibility.PRIVATE else "Public"
    return AgentOption(name=f"{agent.title} ({label})", value=agent.id)


def visibility_option(visibility: Visibility) -> AgentOption:
    if visibility is Visibility.PUBLIC:
        return AgentOption(name="Public Agent", value="public", description="This agent is public.")
    return AgentOption(name="Private Agent", value="private", description="This agent is private.")


class AgentCatalog:
    """Agent listing and visibility checks for building agent pickers"""

    def __init__(
        self,
        transport: HttpTransport,
        credential_store: CredentialStore,
        api_base_url: Optional[str] = None,
        credential_name: Optional[str] = None,
    ):
        self.transport = transport
        self.credential_store = credential_store
        self.api_base_url = (api_base_url or settings.toolhouse_api_url).rstrip("/")
        self.credential_name = credential_name or settings.credential_name

    def require_credential(self) -> PresentCredential:
        """Fetch the stored credential or fail with ConfigurationError."""
        credential = self.credential_store.get_credential(self.credential_name)
        if not isinstance(credential, PresentCredential):
            logger.error("catalog_credential_missing", credential_name=self.credential_name)
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        return credential

    async def list_agents(self) -> List[AgentOption]:
        """List agents as `"<title> (Public|Private)"` options keyed by agent id."""
        credential = self.require_credential()

        response = await self.transport.request(
            "GET",
            f"{self.api_base_url}/agents",
            headers=credential.auth_headers(),
        )

        if not isinstance(response.body, list):
            logger.warning("agent_list_unexpected_body", body_type=type(response.body).__name__)
            return []

        options = []
        for entry in response.body:
            try:
                options.append(agent_option(Agent.model_validate(entry)))
            except ValidationError as e:
                logger.warning("agent_list_entry_skipped", error=str(e))
        logger.info("agents_listed", count=len(options))
        return options

    async def check_public_private(self, agent_id: str) -> List[AgentOption]:
        """Return a single option describing whether `agent_id` is public or private."""
        credential = self.require_credential()

        response = await self.transport.request(
            "GET",
            f"{self.api_base_url}/agents/{agent_id}",
            headers=credential.auth_headers(),
        )
        visibility = visibility_from_metadata(response.body)

        logger.info("agent_visibility_checked", agent_id=agent_id, visibility=visibility.value)
        return [visibility_option(visibility)]

    async def test_credential(self, credential: Credential) -> CredentialTestResponse:
        """
        Check a token against GET /agents.

        401/403 means the token is rejected; any other failure propagates.
        """
        if not isinstance(credential, PresentCredential):
            return CredentialTestResponse(valid=False, message=MISSING_CREDENTIALS_MESSAGE)

        try:
            await self.transport.request(
                "GET",
                f"{self.api_base_url}/agents",
                headers=credential.auth_headers(),
            )
        except TransportFailure as e:
            if e.http_status in INVALID_CREDENTIAL_STATUSES:
                logger.info("credential_rejected", status=e.http_status)
                return CredentialTestResponse(valid=False, message=e.message)
            raise

        logger.info("credential_accepted")
        return CredentialTestResponse(valid=True, message="Connection successful")
