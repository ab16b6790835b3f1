"""
Result routing for the conversation step.

Every item ends up as exactly one OutcomeRecord tagged with exactly one lane.
The functions here are pure; the executor appends their result to the lane.
"""

from typing import Optional
import structlog

from toolhouse_connector.core.conversation import ConversationReply
from toolhouse_connector.core.errors import AuthorizationDenied, TransportFailure
from toolhouse_connector.models.schemas import (
    ErrorDetail,
    ErrorResponse,
    ExecutionItem,
    Lane,
    OutcomeRecord,
    RoutedOutcome,
    Visibility,
)

logger = structlog.get_logger()

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def error_response(message: Optional[str], status: Optional[int], details=None) -> dict:
    """Build the {error: {message, status, details}} response body"""
    return ErrorResponse(
        error=ErrorDetail(
            message=message or UNKNOWN_ERROR_MESSAGE,
            status=status,
            details=details,
        )
    ).model_dump(mode="json")


def route_denied(item: ExecutionItem, denial: AuthorizationDenied) -> RoutedOutcome:
    """Denied lookup: failure lane, no run id, agent reported as private."""
    return RoutedOutcome(
        lane=Lane.FAILURE,
        record=OutcomeRecord(
            response=error_response(denial.message, denial.status, denial.details),
            run_id="",
            agent_id=item.agent_id,
            public=False,
        ),
    )


def route_success(
    item: ExecutionItem,
    visibility: Visibility,
    reply: ConversationReply,
) -> RoutedOutcome:
    return RoutedOutcome(
        lane=Lane.SUCCESS,
        record=OutcomeRecord(
            response=reply.body,
            run_id=reply.run_id,
            agent_id=item.agent_id,
            public=visibility.is_public,
        ),
    )


def route_failure(
    item: ExecutionItem,
    visibility: Visibility,
    failure: TransportFailure,
) -> RoutedOutcome:
    """Failed conversation call: failure lane, run id left as the item carried it."""
    return RoutedOutcome(
        lane=Lane.FAILURE,
        record=OutcomeRecord(
            response=error_response(failure.message, failure.http_status, failure.response_body),
            run_id=item.input_run_id,
            agent_id=item.agent_id,
            public=visibility.is_public,
        ),
    )


def route_outcome(item: ExecutionItem, visibility, outcome=None) -> RoutedOutcome:
    """
    Classify one item's outcome into a lane.

    Args:
        item: The execution item
        visibility: Visibility of the agent, or AuthorizationDenied
        outcome: ConversationReply or TransportFailure (ignored when denied)

    Returns:
        RoutedOutcome tagged with Lane.SUCCESS or Lane.FAILURE
    """
    if isinstance(visibility, AuthorizationDenied):
        routed = route_denied(item, visibility)
    elif isinstance(outcome, ConversationReply):
        routed = route_success(item, visibility, outcome)
    elif isinstance(outcome, TransportFailure):
        routed = route_failure(item, visibility, outcome)
    else:
        raise TypeError(f"Cannot route outcome of type {type(outcome).__name__}")

    logger.debug(
        "outcome_routed",
        agent_id=item.agent_id,
        operation=item.operation.value,
        lane=routed.lane.name.lower(),
    )
    return routed
