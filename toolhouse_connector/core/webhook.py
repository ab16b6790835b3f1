"""
Callback classification for asynchronous Toolhouse runs.
Only an exact "completed" status is success; anything else goes to the failed lane.
"""

import structlog

from toolhouse_connector.models.schemas import (
    COMPLETED_STATUS,
    WebhookCallback,
    WebhookLane,
    WebhookResult,
)

logger = structlog.get_logger()


class WebhookStatusClassifier:
    """Stateless classifier; safe to share between concurrent callbacks"""

    def classify(self, callback: WebhookCallback) -> WebhookLane:
        if callback.status == COMPLETED_STATUS:
            return WebhookLane.COMPLETED
        return WebhookLane.FAILED

    def route(self, callback: WebhookCallback) -> WebhookResult:
        """Place the callback in exactly one lane of a WebhookResult."""
        lane = self.classify(callback)

        logger.info(
            "webhook_callback_classified",
            run_id=callback.run_id,
            status=callback.status,
            lane=lane.name.lower(),
        )

        if lane is WebhookLane.COMPLETED:
            return WebhookResult(completed=[callback])
        return WebhookResult(failed=[callback])
