"""Toolhouse conversation and agent catalog endpoints."""

from typing import List
import structlog
from fastapi import APIRouter, HTTPException, Depends

from toolhouse_connector.api.v1.dependencies import (
    get_catalog,
    get_credential,
    get_executor,
)
from toolhouse_connector.core import ConfigurationError, TransportFailure
from toolhouse_connector.models import (
    AgentOption,
    CredentialTestRequest,
    CredentialTestResponse,
    ExecutionRequest,
    ExecutionResult,
    PresentCredential,
)

router = APIRouter(prefix="/api/v1/toolhouse", tags=["toolhouse"])
logger = structlog.get_logger()


def upstream_error(e: TransportFailure) -> HTTPException:
    """Aborting Toolhouse failure -> 502 carrying the remote status and body"""
    return HTTPException(
        status_code=502,
        detail={
            "message": e.message,
            "status": e.http_status,
            "details": e.response_body,
        },
    )


@router.post("/execute", response_model=ExecutionResult)
async def execute_items(
    request: ExecutionRequest,
    executor=Depends(get_executor),
    credential=Depends(get_credential),
):
    """
    Start or continue conversations for a batch of items.

    Every item lands in exactly one of `success` or `failure`, in input order.
    A visibility lookup failure other than 403 aborts the batch with 502.

    Example:
        POST /api/v1/toolhouse/execute
        {
            "items": [
                {"operation": "start", "agentId": "a1", "message": "hi"},
                {"operation": "continue", "agentId": "a1", "runId": "r1", "message": "more"}
            ]
        }
    """
    try:
        return await executor.execute(request.items, credential)
    except TransportFailure as e:
        logger.error(
            "execution_request_failed",
            item_count=len(request.items),
            status=e.http_status,
            error=e.message,
            exc_info=True,
        )
        raise upstream_error(e)


@router.get("/agents", response_model=List[AgentOption])
async def list_agents(catalog=Depends(get_catalog)):
    """List agents available to the configured credential"""
    try:
        return await catalog.list_agents()
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportFailure as e:
        logger.error("agent_list_failed", status=e.http_status, error=e.message, exc_info=True)
        raise upstream_error(e)


@router.get("/agents/{agent_id}/visibility", response_model=List[AgentOption])
async def check_agent_visibility(agent_id: str, catalog=Depends(get_catalog)):
    """Check whether an agent is public or private"""
    try:
        return await catalog.check_public_private(agent_id)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportFailure as e:
        logger.error(
            "agent_visibility_check_failed",
            agent_id=agent_id,
            status=e.http_status,
            exc_info=True,
        )
        raise upstream_error(e)


@router.post("/credentials/test", response_model=CredentialTestResponse)
async def verify_credentials(request: CredentialTestRequest, catalog=Depends(get_catalog)):
    """Verify a Toolhouse API key without storing it"""
    try:
        return await catalog.test_credential(PresentCredential(token=request.token))
    except TransportFailure as e:
        logger.error("credential_test_failed", status=e.http_status, error=e.message, exc_info=True)
        raise upstream_error(e)
