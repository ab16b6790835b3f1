"""
Agent visibility resolution.
Looks up an agent's metadata to decide whether it is public or private before
any conversation call is made.
"""

from typing import Optional, Union
import structlog

from toolhouse_connector.config.settings import settings
from toolhouse_connector.core.errors import AuthorizationDenied, TransportFailure
from toolhouse_connector.core.transport import HttpTransport
from toolhouse_connector.models.credentials import Credential, PresentCredential
from toolhouse_connector.models.schemas import Visibility, visibility_from_metadata

logger = structlog.get_logger()


VisibilityResult = Union[Visibility, AuthorizationDenied]


class AgentVisibilityResolver:
    """
    Resolves whether an agent is public or private.

    The lookup is performed fresh on every call; nothing is cached between
    items, even for the same agent.
    """

    def __init__(self, transport: HttpTransport, api_base_url: Optional[str] = None):
        self.transport = transport
        self.api_base_url = (api_base_url or settings.toolhouse_api_url).rstrip("/")

    def agent_url(self, agent_id: str) -> str:
        return f"{self.api_base_url}/agents/{agent_id}"

    async def resolve(self, agent_id: str, credential: Credential) -> VisibilityResult:
        """
        Resolve the visibility of `agent_id`.

        Args:
            agent_id: Toolhouse agent identifier (empty means public, no lookup)
            credential: Present credential is sent with the lookup, absent is not

        Returns:
            Visibility.PUBLIC / Visibility.PRIVATE, or AuthorizationDenied on 403

        Raises:
            TransportFailure: Any lookup failure other than 403
        """
        if not agent_id:
            return Visibility.PUBLIC

        try:
            response = await self.transport.request(
                "GET",
                self.agent_url(agent_id),
                headers=credential.auth_headers(),
            )
        except TransportFailure as e:
            if e.is_forbidden:
                logger.info("agent_access_denied", agent_id=agent_id)
                return AuthorizationDenied.from_failure(e)
            logger.error(
                "agent_lookup_failed",
                agent_id=agent_id,
                status=e.http_status,
                error=e.message,
            )
            raise

        visibility = visibility_from_metadata(response.body)
        logger.info(
            "agent_visibility_resolved",
            agent_id=agent_id,
            visibility=visibility.value,
            authenticated=isinstance(credential, PresentCredential),
        )
        return visibility
