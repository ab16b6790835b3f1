"""Toolhouse run callback webhook."""

import structlog
from fastapi import APIRouter, Depends

from toolhouse_connector.api.v1.dependencies import get_webhook_classifier
from toolhouse_connector.config import settings
from toolhouse_connector.models import WebhookPayload, WebhookResult

router = APIRouter(tags=["webhook"])
logger = structlog.get_logger()


@router.post(settings.webhook_path, response_model=WebhookResult)
async def handle_toolhouse_callback(
    payload: WebhookPayload,
    classifier=Depends(get_webhook_classifier),
):
    """
    Receive an asynchronous run callback from Toolhouse.

    Body: {"data": {"run_id": ..., "status": ..., "last_agent_message": ...}}

    The callback is returned in `completed` when status is "completed" and in
    `failed` for any other status.
    """
    logger.info("toolhouse_callback_received", run_id=payload.data.run_id)
    return classifier.route(payload.data)
