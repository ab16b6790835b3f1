#!/usr/bin/env python3
"""
Test: Webhook Status Classification
Purpose: Verify completed/failed routing of run callbacks

Tests:
- "completed" goes to the completed lane
- "failed", "pending", unknown and missing statuses go to the failed lane
- Routing places the callback in exactly one lane, unchanged
- Payload parsing keeps non-string values instead of dropping them
"""

import asyncio
import sys

from fixtures import run_tests, assert_equal, assert_raises

from pydantic import ValidationError

from toolhouse_connector.core import WebhookStatusClassifier
from toolhouse_connector.models import WebhookCallback, WebhookLane, WebhookPayload


def callback(status, run_id="run-1", message="done"):
    return WebhookCallback(run_id=run_id, status=status, last_agent_message=message)


async def test_completed_status():
    classifier = WebhookStatusClassifier()
    assert_equal(classifier.classify(callback("completed")), WebhookLane.COMPLETED)


async def test_non_completed_statuses_fail():
    """Default-to-failed: anything but an exact "completed" is a failure"""
    classifier = WebhookStatusClassifier()

    for status in ["failed", "pending", "running", "Completed", "COMPLETED", " completed", "", None]:
        assert_equal(
            classifier.classify(callback(status)),
            WebhookLane.FAILED,
            f"status={status!r} should be failed",
        )


async def test_route_places_callback_in_one_lane():
    classifier = WebhookStatusClassifier()

    completed = classifier.route(callback("completed"))
    assert_equal(len(completed.completed), 1)
    assert_equal(len(completed.failed), 0)
    assert_equal(completed.completed[0].model_dump(), {
        "run_id": "run-1",
        "status": "completed",
        "last_agent_message": "done",
    })

    failed = classifier.route(callback("error", run_id="run-2"))
    assert_equal(len(failed.completed), 0)
    assert_equal(failed.failed[0].run_id, "run-2")


async def test_payload_parsing():
    payload = WebhookPayload.model_validate({
        "data": {"run_id": "run-3", "status": "completed", "last_agent_message": "all good"}
    })
    assert_equal(payload.data.status, "completed")
    assert_equal(payload.data.last_agent_message, "all good")


async def test_payload_coerces_non_string_status():
    """A numeric status is kept as text and lands in the failed lane"""
    payload = WebhookPayload.model_validate({"data": {"run_id": 42, "status": 500}})

    assert_equal(payload.data.run_id, "42")
    assert_equal(payload.data.status, "500")
    assert_equal(payload.data.last_agent_message, None)
    assert_equal(WebhookStatusClassifier().classify(payload.data), WebhookLane.FAILED)


async def test_payload_without_data_is_rejected():
    assert_raises(ValidationError, WebhookPayload.model_validate, {"run_id": "x"})


async def test_classifier_is_reentrant():
    """Concurrent classifications do not interfere"""
    classifier = WebhookStatusClassifier()
    statuses = ["completed", "failed"] * 25

    async def classify(status):
        await asyncio.sleep(0)
        return classifier.classify(callback(status))

    lanes = await asyncio.gather(*(classify(s) for s in statuses))

    expected = [WebhookLane.COMPLETED if s == "completed" else WebhookLane.FAILED for s in statuses]
    assert_equal(list(lanes), expected)


async def main():
    """Run all webhook tests"""
    return await run_tests("Webhook Classification Tests", [
        ("completed status", test_completed_status),
        ("Non-completed statuses fail", test_non_completed_statuses_fail),
        ("Route places callback in one lane", test_route_places_callback_in_one_lane),
        ("Payload parsing", test_payload_parsing),
        ("Payload coerces non-string status", test_payload_coerces_non_string_status),
        ("Payload without data is rejected", test_payload_without_data_is_rejected),
        ("Classifier is reentrant", test_classifier_is_reentrant),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
