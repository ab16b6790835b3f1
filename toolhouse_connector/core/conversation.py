"""
Conversation calls against the Toolhouse agent endpoint.

start:    POST {agents}/{agent_id}           {"message": ...}
continue: PUT  {agents}/{agent_id}/{run_id}  {"message": ...}

Both read the run identifier from the x-toolhouse-run-id response header.
"""

from typing import Any, Optional
import structlog

from toolhouse_connector.config.settings import settings
from toolhouse_connector.core.run_tracker import track_run_id
from toolhouse_connector.core.transport import HttpTransport
from toolhouse_connector.models.credentials import (
    Credential,
    AbsentCredential,
    PresentCredential,
)
from toolhouse_connector.models.schemas import Operation, Visibility, RUN_ID_HEADER

logger = structlog.get_logger()


def conversation_credential(visibility: Visibility, credential: Credential) -> Credential:
    """Tokens are only sent to private agents; public agents are always called anonymously."""
    if visibility is Visibility.PRIVATE and isinstance(credential, PresentCredential):
        return credential
    return AbsentCredential()


class ConversationReply:
    """Body of a successful conversation call plus the tracked run identifier"""

    def __init__(self, body: Any, run_id: str):
        self.body = body
        self.run_id = run_id

    def __repr__(self) -> str:
        return f"<ConversationReply(run_id='{self.run_id}')>"


class ConversationTransport:
    """
    Starts and continues conversations with a Toolhouse agent.
    Failures surface as TransportFailure; routing them is the caller's job.
    """

    def __init__(self, transport: HttpTransport, agents_base_url: Optional[str] = None):
        self.transport = transport
        self.agents_base_url = (agents_base_url or settings.toolhouse_agents_url).rstrip("/")

    async def start(
        self,
        agent_id: str,
        message: str,
        credential: Credential = AbsentCredential(),
    ) -> ConversationReply:
        """Start a new run; the run id comes from the response header (empty if absent)."""
        response = await self.transport.request(
            "POST",
            f"{self.agents_base_url}/{agent_id}",
            headers=credential.auth_headers(),
            json_body={"message": message},
        )
        run_id = track_run_id(Operation.START, "", response.header(RUN_ID_HEADER))

        logger.info(
            "conversation_started",
            agent_id=agent_id,
            run_id=run_id,
            authenticated=isinstance(credential, PresentCredential),
        )
        return ConversationReply(response.body, run_id)

    async def continue_conversation(
        self,
        agent_id: str,
        run_id: str,
        message: str,
        credential: Credential = AbsentCredential(),
    ) -> ConversationReply:
        """Append a turn to an existing run; a new run id in the response replaces the old one."""
        if not run_id:
            # Sent anyway; the remote side decides what an empty run id means
            logger.warning("conversation_continue_without_run_id", agent_id=agent_id)

        response = await self.transport.request(
            "PUT",
            f"{self.agents_base_url}/{agent_id}/{run_id}",
            headers=credential.auth_headers(),
            json_body={"message": message},
        )
        new_run_id = track_run_id(Operation.CONTINUE, run_id, response.header(RUN_ID_HEADER))

        logger.info(
            "conversation_continued",
            agent_id=agent_id,
            run_id=new_run_id,
            run_id_changed=new_run_id != run_id,
            authenticated=isinstance(credential, PresentCredential),
        )
        return ConversationReply(response.body, new_run_id)
