#!/usr/bin/env python3
"""
Test: Agent Executor
Purpose: End-to-end behavior of the conversation step over a batch of items

Tests:
- start on a public agent lands in the success lane
- continue failing with 500 lands in the failure lane with the input run id
- Every item produces exactly one record; lanes keep input order
- A denied item makes no conversation call and does not stop the batch
- A non-403 lookup failure aborts the invocation
- Tokens reach private agents only
"""

import asyncio
import sys

from fixtures import (
    run_tests, MockToolhouseAPI, API_BASE_URL, AGENTS_BASE_URL,
    start_item, continue_item,
    assert_equal, assert_true, assert_not_in, assert_raises_async
)

from toolhouse_connector.core import AgentExecutor, TransportFailure
from toolhouse_connector.models import AbsentCredential, PresentCredential


def make_executor(api):
    return AgentExecutor(api.transport(), API_BASE_URL, AGENTS_BASE_URL)


async def test_start_on_public_agent():
    api = MockToolhouseAPI()
    api.add_agent("a1", public=True, run_id="run-1")

    result = await make_executor(api).execute([start_item("a1", "hi")], AbsentCredential())

    assert_equal(len(result.failure), 0)
    assert_equal(result.success[0].to_output(), {
        "response": {"agent_id": "a1", "reply": "echo: hi"},
        "runId": "run-1",
        "agentId": "a1",
        "public": True,
    })


async def test_start_without_run_id_header():
    api = MockToolhouseAPI()
    api.add_agent("a1")

    result = await make_executor(api).execute([start_item("a1", "hi")], AbsentCredential())
    assert_equal(result.success[0].run_id, "")


async def test_continue_failure_keeps_input_run_id():
    api = MockToolhouseAPI()
    api.add_agent("a1")
    api.fail_conversation("a1", status=500, body={"detail": "agent crashed"})

    result = await make_executor(api).execute([continue_item("a1", "r1", "more")], AbsentCredential())

    assert_equal(len(result.success), 0)
    assert_equal(result.failure[0].to_output(), {
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


async def test_continue_success_tracks_new_run_id():
    api = MockToolhouseAPI()
    api.add_agent("a1", run_id="r2")
    api.add_agent("a2")

    result = await make_executor(api).execute(
        [continue_item("a1", "r1"), continue_item("a2", "r5")],
        AbsentCredential(),
    )
    assert_equal([r.run_id for r in result.success], ["r2", "r5"])


async def test_denied_item_skips_conversation_and_batch_continues():
    api = MockToolhouseAPI()
    api.forbid("locked")
    api.add_agent("a1")

    result = await make_executor(api).execute(
        [start_item("locked"), start_item("a1")],
        PresentCredential(token="tok"),
    )

    assert_equal(len(api.conversation_requests_for("locked")), 0, "Denied item must not be sent")
    assert_equal(len(result.failure), 1)
    assert_equal(len(result.success), 1)

    denied = result.failure[0].to_output()
    assert_equal(denied["response"]["error"]["status"], 403)
    assert_equal(denied["public"], False)
    assert_equal(denied["runId"], "")
    assert_equal(denied["agentId"], "locked")


async def test_every_item_routed_once_in_order():
    api = MockToolhouseAPI()
    api.add_agent("ok", run_id="r")
    api.add_agent("bad")
    api.fail_conversation("bad", status=502)
    api.forbid("locked")

    items = [
        start_item("ok", "1"),
        start_item("bad", "2"),
        continue_item("ok", "r0", "3"),
        start_item("locked", "4"),
        continue_item("bad", "r1", "5"),
        start_item("ok", "6"),
    ]
    result = await make_executor(api).execute(items, PresentCredential(token="tok"))

    assert_equal(result.total, len(items), "No drops, no duplicates")
    assert_equal(
        [r.response["reply"] for r in result.success],
        ["echo: 1", "echo: 3", "echo: 6"],
        "Success lane keeps input order",
    )
    assert_equal(
        [(r.agent_id, r.run_id) for r in result.failure],
        [("bad", ""), ("locked", ""), ("bad", "r1")],
        "Failure lane keeps input order",
    )


async def test_empty_batch():
    api = MockToolhouseAPI()
    result = await make_executor(api).execute([], AbsentCredential())

    assert_equal(result.total, 0)
    assert_equal(len(api.requests), 0)


async def test_lookup_failure_aborts_invocation():
    api = MockToolhouseAPI()
    api.add_agent("a1")
    api.fail_lookup("broken", status=500)

    error = await assert_raises_async(
        TransportFailure,
        make_executor(api).execute(
            [start_item("a1"), start_item("broken"), start_item("a1")],
            AbsentCredential(),
        ),
    )
    assert_equal(error.http_status, 500)
    assert_equal(len(api.conversation_requests()), 1, "Items after the failure are not processed")


async def test_token_never_sent_to_public_agent():
    api = MockToolhouseAPI()
    api.add_agent("open", public=True)

    await make_executor(api).execute([start_item("open")], PresentCredential(token="tok"))

    lookup = api.lookup_requests()[0]
    conversation = api.conversation_requests()[0]
    assert_equal(lookup.headers.get("Authorization"), "Bearer tok", "Lookup uses the credential")
    assert_not_in("Authorization", conversation.headers, "Public agent call is anonymous")


async def test_private_agent_gets_token():
    api = MockToolhouseAPI()
    api.add_agent("secret", public=False, run_id="rs")

    result = await make_executor(api).execute([start_item("secret")], PresentCredential(token="tok"))

    conversation = api.conversation_requests()[0]
    assert_equal(conversation.headers.get("Authorization"), "Bearer tok")
    assert_equal(result.success[0].public, False)
    assert_equal(result.success[0].run_id, "rs")


async def test_private_agent_without_credential_fails_remotely():
    """No token for a private agent: call goes out anonymously and the failure is routed"""
    api = MockToolhouseAPI()
    api.add_agent("secret", public=False)

    result = await make_executor(api).execute([start_item("secret")], AbsentCredential())

    assert_equal(len(result.failure), 1)
    record = result.failure[0]
    assert_equal(record.response["error"]["status"], 401)
    assert_equal(record.public, False)
    assert_true(
        "Authorization" not in api.conversation_requests()[0].headers,
        "No credential, no auth header",
    )


async def test_empty_agent_id_skips_lookup():
    api = MockToolhouseAPI()

    result = await make_executor(api).execute([start_item("")], AbsentCredential())

    assert_equal(len(api.lookup_requests()), 0)
    assert_equal(result.total, 1)
    assert_equal(result.success[0].public, True)


async def main():
    """Run all executor tests"""
    return await run_tests("Agent Executor Tests", [
        ("start on public agent", test_start_on_public_agent),
        ("start without run id header", test_start_without_run_id_header),
        ("continue failure keeps input run id", test_continue_failure_keeps_input_run_id),
        ("continue success tracks new run id", test_continue_success_tracks_new_run_id),
        ("Denied item skips conversation, batch continues", test_denied_item_skips_conversation_and_batch_continues),
        ("Every item routed once, in order", test_every_item_routed_once_in_order),
        ("Empty batch", test_empty_batch),
        ("Lookup failure aborts invocation", test_lookup_failure_aborts_invocation),
        ("Token never sent to public agent", test_token_never_sent_to_public_agent),
        ("Private agent gets token", test_private_agent_gets_token),
        ("Private agent without credential fails remotely", test_private_agent_without_credential_fails_remotely),
        ("Empty agent id skips lookup", test_empty_agent_id_skips_lookup),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
