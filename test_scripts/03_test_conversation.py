#!/usr/bin/env python3
"""
Test: Conversation Transport
Purpose: Verify start/continue calls and run id extraction

Tests:
- start posts the message and reads the run id header
- continue puts to {agent}/{run} and keeps or replaces the run id
- Auth is attached only for private agents with a credential
- Failures surface as TransportFailure with status and body
- Network errors surface as TransportFailure without a status
- Mock transports share one client that closes cleanly
"""

import asyncio
import json
import sys

import httpx

from fixtures import (
    run_tests, MockToolhouseAPI, AGENTS_BASE_URL,
    assert_equal, assert_true, assert_not_in, assert_raises_async
)

from toolhouse_connector.adapters import HttpxTransport
from toolhouse_connector.core import (
    ConversationTransport,
    TransportFailure,
    conversation_credential,
)
from toolhouse_connector.models import (
    AbsentCredential,
    PresentCredential,
    Visibility,
)


def make_conversations(api):
    return ConversationTransport(api.transport(), AGENTS_BASE_URL)


async def test_start_reads_run_id_header():
    api = MockToolhouseAPI()
    api.add_agent("a1", run_id="run-123")

    reply = await make_conversations(api).start("a1", "hi")

    assert_equal(reply.run_id, "run-123")
    assert_equal(reply.body, {"agent_id": "a1", "reply": "echo: hi"})

    request = api.conversation_requests()[0]
    assert_equal(request.method, "POST")
    assert_equal(str(request.url), f"{AGENTS_BASE_URL}/a1")
    assert_equal(json.loads(request.content), {"message": "hi"})


async def test_start_without_header_has_empty_run_id():
    api = MockToolhouseAPI()
    api.add_agent("a1")

    reply = await make_conversations(api).start("a1", "hi")
    assert_equal(reply.run_id, "")


async def test_continue_replaces_run_id_from_header():
    api = MockToolhouseAPI()
    api.add_agent("a1", run_id="r2")

    reply = await make_conversations(api).continue_conversation("a1", "r1", "more")

    assert_equal(reply.run_id, "r2")
    request = api.conversation_requests()[0]
    assert_equal(request.method, "PUT")
    assert_equal(str(request.url), f"{AGENTS_BASE_URL}/a1/r1")
    assert_equal(json.loads(request.content), {"message": "more"})


async def test_continue_keeps_run_id_without_header():
    api = MockToolhouseAPI()
    api.add_agent("a1")

    reply = await make_conversations(api).continue_conversation("a1", "r1", "more")
    assert_equal(reply.run_id, "r1")


async def test_continue_with_empty_run_id_is_still_sent():
    """No local validation: the call goes out and the remote decides"""
    api = MockToolhouseAPI()
    api.add_agent("a1")

    reply = await make_conversations(api).continue_conversation("a1", "", "more")

    assert_equal(len(api.conversation_requests()), 1)
    assert_equal(reply.run_id, "")


async def test_auth_only_for_private_agents_with_credential():
    token = PresentCredential(token="tok")

    assert_equal(conversation_credential(Visibility.PRIVATE, token), token)
    assert_true(
        isinstance(conversation_credential(Visibility.PUBLIC, token), AbsentCredential),
        "Public agents must never receive the token",
    )
    assert_true(
        isinstance(conversation_credential(Visibility.PRIVATE, AbsentCredential()), AbsentCredential),
        "No credential means no auth",
    )


async def test_credential_sent_as_bearer_header():
    api = MockToolhouseAPI()
    api.add_agent("secret", public=False)
    api.add_agent("open")
    conversations = make_conversations(api)

    await conversations.start("secret", "hi", PresentCredential(token="tok"))
    await conversations.start("open", "hi")

    private_request, public_request = api.conversation_requests()
    assert_equal(private_request.headers.get("Authorization"), "Bearer tok")
    assert_not_in("Authorization", public_request.headers)


async def test_failure_raises_transport_failure():
    api = MockToolhouseAPI()
    api.fail_conversation("a1", status=500, body={"detail": "agent crashed"})

    error = await assert_raises_async(
        TransportFailure,
        make_conversations(api).continue_conversation("a1", "r1", "more"),
    )
    assert_equal(error.http_status, 500)
    assert_equal(error.response_body, {"detail": "agent crashed"})
    assert_equal(error.message, "Request failed with status code 500")


async def test_network_error_raises_transport_failure():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as client:
        conversations = ConversationTransport(HttpxTransport(client=client), AGENTS_BASE_URL)
        error = await assert_raises_async(TransportFailure, conversations.start("a1", "hi"))

    assert_equal(error.http_status, None)
    assert_equal(error.response_body, None)
    assert_equal(error.message, "connection refused")


async def test_non_json_body_is_kept_as_text():
    def plain_text(request):
        return httpx.Response(200, text="hello there", headers={"X-Toolhouse-Run-Id": "r7"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(plain_text)) as client:
        reply = await ConversationTransport(HttpxTransport(client=client), AGENTS_BASE_URL).start("a1", "hi")

    assert_equal(reply.body, "hello there")
    assert_equal(reply.run_id, "r7", "Header lookup must be case-insensitive")


async def test_mock_transports_share_one_closable_client():
    api = MockToolhouseAPI()
    api.add_agent("a1")
    first = api.transport()
    second = api.transport()

    assert_true(first.client is second.client, "One client per mock")
    await make_conversations(api).start("a1", "hi")

    await api.aclose()
    assert_true(first.client.is_closed)


async def main():
    """Run all conversation transport tests"""
    return await run_tests("Conversation Transport Tests", [
        ("start reads run id header", test_start_reads_run_id_header),
        ("start without header has empty run id", test_start_without_header_has_empty_run_id),
        ("continue replaces run id from header", test_continue_replaces_run_id_from_header),
        ("continue keeps run id without header", test_continue_keeps_run_id_without_header),
        ("continue with empty run id is still sent", test_continue_with_empty_run_id_is_still_sent),
        ("Auth only for private agents with credential", test_auth_only_for_private_agents_with_credential),
        ("Credential sent as bearer header", test_credential_sent_as_bearer_header),
        ("Failure raises TransportFailure", test_failure_raises_transport_failure),
        ("Network error raises TransportFailure", test_network_error_raises_transport_failure),
        ("Non-JSON body is kept as text", test_non_json_body_is_kept_as_text),
        ("Mock transports share one closable client", test_mock_transports_share_one_closable_client),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
