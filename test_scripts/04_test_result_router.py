#!/usr/bin/env python3
"""
Test: Result Router
Purpose: Verify lane assignment and record shape per outcome

Tests:
- Denial goes to the failure lane with status 403 and no run id
- Success goes to the success lane with the remote body
- Conversation failure goes to the failure lane with status/details
- Missing status/details/message fall back to null / "Unknown error"
- Lanes preserve input order
"""

import asyncio
import sys

from fixtures import (
    run_tests, start_item, continue_item,
    assert_equal, assert_raises
)

from toolhouse_connector.core import (
    AuthorizationDenied,
    ConversationReply,
    TransportFailure,
    route_outcome,
)
from toolhouse_connector.models import ExecutionResult, Lane, Visibility


async def test_denied_routes_to_failure_lane():
    routed = route_outcome(start_item("locked"), AuthorizationDenied(details={"detail": "forbidden"}))

    assert_equal(routed.lane, Lane.FAILURE)
    assert_equal(routed.record.to_output(), {
        "response": {
            "error": {
                "message": "access denied",
                "status": 403,
                "details": {"detail": "forbidden"},
            }
        },
        "runId": "",
        "agentId": "locked",
        "public": False,
    })


async def test_denied_clears_run_id_of_continue_item():
    routed = route_outcome(continue_item(run_id="r1"), AuthorizationDenied())
    assert_equal(routed.record.run_id, "")
    assert_equal(routed.record.response["error"]["details"], None)


async def test_success_routes_to_success_lane():
    reply = ConversationReply({"reply": "hello"}, "run-9")
    routed = route_outcome(start_item("a1"), Visibility.PUBLIC, reply)

    assert_equal(routed.lane, Lane.SUCCESS)
    assert_equal(routed.record.to_output(), {
        "response": {"reply": "hello"},
        "runId": "run-9",
        "agentId": "a1",
        "public": True,
    })


async def test_success_reports_private_visibility():
    routed = route_outcome(start_item("secret"), Visibility.PRIVATE, ConversationReply({}, "r"))
    assert_equal(routed.record.public, False)


async def test_failure_routes_to_failure_lane():
    failure = TransportFailure(
        "Request failed with status code 500",
        http_status=500,
        response_body={"detail": "agent crashed"},
    )
    routed = route_outcome(continue_item("a1", "r1"), Visibility.PUBLIC, failure)

    assert_equal(routed.lane, Lane.FAILURE)
    assert_equal(routed.record.to_output(), {
        "response": {
            "error": {
                "message": "Request failed with status code 500",
                "status": 500,
                "details": {"detail": "agent crashed"},
            }
        },
        "runId": "r1",
        "agentId": "a1",
        "public": True,
    })


async def test_failure_fields_best_effort():
    """Network failures carry no status or body; empty messages get a default"""
    routed = route_outcome(start_item("a1"), Visibility.PUBLIC, TransportFailure(""))

    assert_equal(routed.record.response, {
        "error": {"message": "Unknown error", "status": None, "details": None}
    })
    assert_equal(routed.record.run_id, "", "start items have no run id to keep")


async def test_unknown_outcome_is_rejected():
    assert_raises(TypeError, route_outcome, start_item(), Visibility.PUBLIC, "not an outcome")


async def test_lanes_preserve_input_order():
    result = ExecutionResult()
    outcomes = [
        (start_item("s1"), Visibility.PUBLIC, ConversationReply({}, "1")),
        (start_item("f1"), Visibility.PUBLIC, TransportFailure("x", 500)),
        (start_item("s2"), Visibility.PUBLIC, ConversationReply({}, "2")),
        (start_item("f2"), AuthorizationDenied(), None),
        (start_item("s3"), Visibility.PUBLIC, ConversationReply({}, "3")),
    ]
    for item, visibility, outcome in outcomes:
        result.append(route_outcome(item, visibility, outcome))

    assert_equal([r.agent_id for r in result.success], ["s1", "s2", "s3"])
    assert_equal([r.agent_id for r in result.failure], ["f1", "f2"])
    assert_equal(result.total, len(outcomes))


async def main():
    """Run all result router tests"""
    return await run_tests("Result Router Tests", [
        ("Denied routes to failure lane", test_denied_routes_to_failure_lane),
        ("Denied clears run id of continue item", test_denied_clears_run_id_of_continue_item),
        ("Success routes to success lane", test_success_routes_to_success_lane),
        ("Success reports private visibility", test_success_reports_private_visibility),
        ("Failure routes to failure lane", test_failure_routes_to_failure_lane),
        ("Failure fields best effort", test_failure_fields_best_effort),
        ("Unknown outcome is rejected", test_unknown_outcome_is_rejected),
        ("Lanes preserve input order", test_lanes_preserve_input_order),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
