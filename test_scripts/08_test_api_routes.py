#!/usr/bin/env python3
"""
Test: HTTP API
Purpose: Verify the FastAPI routes wired to the executor, catalog and webhook

Tests:
- POST /api/v1/toolhouse/execute returns both lanes with camelCase records
- Lookup failure aborts the request with 502
- A null runId is sent and routed instead of rejecting the batch
- Catalog routes map a missing credential to 400
- Webhook routes callbacks into completed/failed and rejects malformed bodies
- Health check
"""

import sys
from contextlib import contextmanager

from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from fixtures import (
    MockToolhouseAPI, print_test_header, print_pass, print_fail, print_summary,
    assert_equal, assert_true
)

from toolhouse_connector.config import StaticCredentialStore
from main import app


@contextmanager
def api_client(api, token="tok"):
    """TestClient with the app's transport and credential store swapped for mocks"""
    with TestClient(app) as client:
        app.state.transport = api.transport()
        app.state.credential_store = StaticCredentialStore({"toolhouseApi": token} if token else {})
        try:
            yield client
        finally:
            client.portal.call(api.aclose)


def test_execute_routes_items_into_lanes():
    api = MockToolhouseAPI()
    api.add_agent("a1", run_id="run-1")
    api.fail_conversation("a1-broken", status=500)
    api.add_agent("a1-broken")

    with api_client(api, token=None) as client:
        response = client.post("/api/v1/toolhouse/execute", json={"items": [
            {"operation": "start", "agentId": "a1", "message": "hi"},
            {"operation": "continue", "agentId": "a1-broken", "runId": "r1", "message": "more"},
        ]})

    assert_equal(response.status_code, 200)
    body = response.json()
    assert_equal(body["success"], [{
        "response": {"agent_id": "a1", "reply": "echo: hi"},
        "runId": "run-1",
        "agentId": "a1",
        "public": True,
    }])
    assert_equal(body["failure"][0]["runId"], "r1")
    assert_equal(body["failure"][0]["response"]["error"]["status"], 500)


def test_execute_lookup_failure_is_502():
    api = MockToolhouseAPI()
    api.fail_lookup("broken", status=500)

    with api_client(api) as client:
        response = client.post("/api/v1/toolhouse/execute", json={"items": [
            {"operation": "start", "agentId": "broken", "message": "hi"},
        ]})

    assert_equal(response.status_code, 502)
    assert_equal(response.json()["detail"]["status"], 500)


def test_execute_null_run_id_is_routed_per_item():
    api = MockToolhouseAPI()
    api.add_agent("a1", run_id="run-1")
    api.add_agent("a2")
    api.fail_conversation("a2", status=404, body={"detail": "run not found"})

    with api_client(api, token=None) as client:
        response = client.post("/api/v1/toolhouse/execute", json={"items": [
            {"operation": "start", "agentId": "a1", "message": "hi"},
            {"operation": "continue", "agentId": "a2", "runId": None, "message": "more"},
        ]})

    assert_equal(response.status_code, 200)
    body = response.json()
    assert_equal(len(body["success"]) + len(body["failure"]), 2)
    assert_equal(body["success"][0]["agentId"], "a1")
    assert_equal(body["failure"][0]["runId"], "")
    assert_equal(body["failure"][0]["response"]["error"]["status"], 404)
    assert_equal(api.conversation_requests_for("a2")[0].url.path, "/a2/")


def test_route_failure_is_logged_with_traceback():
    api = MockToolhouseAPI()
    api.fail_lookup("broken", status=500)

    with capture_logs() as logs:
        with api_client(api) as client:
            client.post("/api/v1/toolhouse/execute", json={"items": [
                {"operation": "start", "agentId": "broken", "message": "hi"},
            ]})

    failures = [log for log in logs if log["event"] == "execution_request_failed"]
    assert_equal(len(failures), 1)
    assert_equal(failures[0]["exc_info"], True)
    assert_equal(failures[0]["status"], 500)


def test_execute_rejects_unknown_operation():
    with api_client(MockToolhouseAPI()) as client:
        response = client.post("/api/v1/toolhouse/execute", json={"items": [
            {"operation": "delete", "agentId": "a1"},
        ]})

    assert_equal(response.status_code, 422)


def test_agent_routes():
    api = MockToolhouseAPI()
    api.add_agent("a1", title="Researcher", public=False)

    with api_client(api) as client:
        listing = client.get("/api/v1/toolhouse/agents")
        visibility = client.get("/api/v1/toolhouse/agents/a1/visibility")

    assert_equal(listing.status_code, 200)
    assert_equal(listing.json()[0]["name"], "Researcher (Private)")
    assert_equal(visibility.json()[0]["value"], "private")


def test_agent_routes_without_credential_are_400():
    with api_client(MockToolhouseAPI(), token=None) as client:
        response = client.get("/api/v1/toolhouse/agents")

    assert_equal(response.status_code, 400)
    assert_true("credentials" in response.json()["detail"])


def test_credential_route():
    with api_client(MockToolhouseAPI(valid_token="good")) as client:
        good = client.post("/api/v1/toolhouse/credentials/test", json={"token": "good"})
        bad = client.post("/api/v1/toolhouse/credentials/test", json={"token": "bad"})

    assert_equal(good.json()["valid"], True)
    assert_equal(bad.json()["valid"], False)


def test_webhook_lanes():
    with api_client(MockToolhouseAPI()) as client:
        completed = client.post("/toolhouse-callback", json={
            "data": {"run_id": "r1", "status": "completed", "last_agent_message": "done"}
        })
        pending = client.post("/toolhouse-callback", json={
            "data": {"run_id": "r2", "status": "pending", "last_agent_message": ""}
        })
        malformed = client.post("/toolhouse-callback", json={"status": "completed"})

    assert_equal(completed.json(), {
        "completed": [{"run_id": "r1", "status": "completed", "last_agent_message": "done"}],
        "failed": [],
    })
    assert_equal(pending.json()["completed"], [])
    assert_equal(pending.json()["failed"][0]["run_id"], "r2")
    assert_equal(malformed.status_code, 422)


def test_health():
    with api_client(MockToolhouseAPI()) as client:
        response = client.get("/health")

    assert_equal(response.status_code, 200)
    assert_equal(response.json()["status"], "healthy")


def main():
    """Run all API tests"""
    print_test_header("HTTP API Tests")

    tests_passed = 0
    tests_failed = 0

    tests = [
        ("execute routes items into lanes", test_execute_routes_items_into_lanes),
        ("execute lookup failure is 502", test_execute_lookup_failure_is_502),
        ("execute null run id is routed per item", test_execute_null_run_id_is_routed_per_item),
        ("Route failure is logged with traceback", test_route_failure_is_logged_with_traceback),
        ("execute rejects unknown operation", test_execute_rejects_unknown_operation),
        ("Agent routes", test_agent_routes),
        ("Agent routes without credential are 400", test_agent_routes_without_credential_are_400),
        ("Credential route", test_credential_route),
        ("Webhook lanes", test_webhook_lanes),
        ("Health", test_health),
    ]

    for test_name, test_func in tests:
        try:
            test_func()
            print_pass(test_name)
            tests_passed += 1
        except Exception as e:
            print_fail(test_name, str(e))
            import traceback
            traceback.print_exc()
            tests_failed += 1

    print_summary(tests_passed, tests_failed)
    return 0 if tests_failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
