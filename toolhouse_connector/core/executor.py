"""
Conversation step executor.
Runs each item through visibility resolution, the conversation call and the
result router, strictly one item at a time and in input order.
"""

from typing import Iterable, Optional
import structlog

from toolhouse_connector.core.conversation import (
    ConversationTransport,
    conversation_credential,
)
from toolhouse_connector.core.errors import AuthorizationDenied, TransportFailure
from toolhouse_connector.core.router import route_outcome
from toolhouse_connector.core.transport import HttpTransport
from toolhouse_connector.core.visibility import AgentVisibilityResolver
from toolhouse_connector.models.credentials import Credential, PresentCredential
from toolhouse_connector.models.schemas import (
    ExecutionItem,
    ExecutionResult,
    Operation,
    RoutedOutcome,
)

logger = structlog.get_logger()


class AgentExecutor:
    """
    Executes start/continue items against Toolhouse agents.

    Business outcomes (denial, failed conversation call) are routed to the
    failure lane. A failed visibility lookup other than a denial is not a
    per-item outcome: it propagates and aborts the invocation.
    """

    def __init__(
        self,
        transport: HttpTransport,
        api_base_url: Optional[str] = None,
        agents_base_url: Optional[str] = None,
    ):
        self.resolver = AgentVisibilityResolver(transport, api_base_url)
        self.conversations = ConversationTransport(transport, agents_base_url)

    async def execute_item(self, item: ExecutionItem, credential: Credential) -> RoutedOutcome:
        """Process one item and return its tagged outcome."""
        visibility = await self.resolver.resolve(item.agent_id, credential)

        if isinstance(visibility, AuthorizationDenied):
            # No conversation call for a denied agent
            return route_outcome(item, visibility)

        auth = conversation_credential(visibility, credential)

        try:
            if item.operation is Operation.START:
                outcome = await self.conversations.start(item.agent_id, item.message, auth)
            else:
                outcome = await self.conversations.continue_conversation(
                    item.agent_id, item.run_id, item.message, auth
                )
        except TransportFailure as e:
            logger.warning(
                "conversation_call_failed",
                agent_id=item.agent_id,
                operation=item.operation.value,
                status=e.http_status,
                error=e.message,
            )
            outcome = e

        return route_outcome(item, visibility, outcome)

    async def execute(
        self,
        items: Iterable[ExecutionItem],
        credential: Credential,
    ) -> ExecutionResult:
        """
        Run all items sequentially and collect both lanes.

        Args:
            items: Execution items, processed in order
            credential: Credential for the invocation (present or absent)

        Returns:
            ExecutionResult with one record per item across both lanes

        Raises:
            TransportFailure: A visibility lookup failed with a non-403 error
        """
        result = ExecutionResult()
        items = list(items)

        logger.info(
            "execution_started",
            item_count=len(items),
            has_credential=isinstance(credential, PresentCredential),
        )

        for index, item in enumerate(items):
            try:
                routed = await self.execute_item(item, credential)
            except TransportFailure:
                logger.error(
                    "execution_aborted",
                    item_index=index,
                    agent_id=item.agent_id,
                    exc_info=True,
                )
                raise
            result.append(routed)

        logger.info(
            "execution_completed",
            item_count=len(items),
            success_count=len(result.success),
            failure_count=len(result.failure),
        )
        return result
