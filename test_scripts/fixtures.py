"""
Test fixtures and helper utilities for standalone test scripts.
Provides a mock Toolhouse API, test data factories and assertion helpers.
"""

import sys
import os
import json

import httpx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from toolhouse_connector.adapters import HttpxTransport
from toolhouse_connector.models import ExecutionItem, Operation, RUN_ID_HEADER


# ============================================================================
# Color codes for terminal output
# ============================================================================

GREEN = '\033[92m'
RED = '\033[91m'
YELLOW = '\033[93m'
BLUE = '\033[94m'
CYAN = '\033[96m'
RESET = '\033[0m'


# ============================================================================
# Test output helpers
# ============================================================================

def print_test_header(test_name):
    """Print formatted test header"""
    print(f"\n{'='*70}")
    print(f"{CYAN}Running: {test_name}{RESET}")
    print(f"{'='*70}\n")


def print_pass(test_name):
    """Print test pass message"""
    print(f"{GREEN}✓ PASS{RESET}: {test_name}")


def print_fail(test_name, error):
    """Print test failure message with error details"""
    print(f"{RED}✗ FAIL{RESET}: {test_name}")
    print(f"{RED}  Error: {error}{RESET}")


def print_info(message):
    """Print informational message"""
    print(f"{BLUE}ℹ {message}{RESET}")


def print_summary(tests_passed, tests_failed):
    """Print test summary"""
    print(f"\n{'='*70}")
    total = tests_passed + tests_failed
    if tests_failed == 0:
        print(f"{GREEN}✓ ALL TESTS PASSED{RESET}: {tests_passed}/{total}")
    else:
        print(f"{RED}✗ SOME TESTS FAILED{RESET}: {tests_passed} passed, {tests_failed} failed")
    print(f"{'='*70}\n")


async def run_tests(title, tests):
    """Run (name, coroutine function) pairs and print a summary; returns exit code"""
    print_test_header(title)

    tests_passed = 0
    tests_failed = 0

    for test_name, test_func in tests:
        try:
            await test_func()
            print_pass(test_name)
            tests_passed += 1
        except Exception as e:
            print_fail(test_name, str(e))
            import traceback
            traceback.print_exc()
            tests_failed += 1
        finally:
            await MockToolhouseAPI.close_all()

    print_summary(tests_passed, tests_failed)
    return 0 if tests_failed == 0 else 1


# ============================================================================
# Mock Toolhouse API
# ============================================================================

API_BASE_URL = "https://api.toolhouse.ai/v1"
AGENTS_BASE_URL = "https://agents.toolhouse.ai"


class MockToolhouseAPI:
    """
    In-memory Toolhouse served through httpx.MockTransport.

    Metadata API (api.toolhouse.ai):
        GET /v1/agents, GET /v1/agents/{id}
    Agent endpoint (agents.toolhouse.ai):
        POST /{agent_id}, PUT /{agent_id}/{run_id}

    Private agents reject conversation calls without an Authorization header.
    """

    API_HOST = "api.toolhouse.ai"
    AGENTS_HOST = "agents.toolhouse.ai"
    live = []

    def __init__(self, valid_token=None):
        self.agents = {}
        self.run_ids = {}
        self.forbidden = set()
        self.lookup_failures = {}
        self.conversation_failures = {}
        self.valid_token = valid_token
        self.requests = []
        self.client = None
        MockToolhouseAPI.live.append(self)

    # ------------------------------------------------------------------ setup

    def add_agent(self, agent_id, title="Test Agent", public=None, run_id=None):
        """Register an agent; `public=None` omits the field from metadata"""
        agent = {"id": agent_id, "title": title}
        if public is not None:
            agent["public"] = public
        self.agents[agent_id] = agent
        self.run_ids[agent_id] = run_id
        return agent

    def forbid(self, agent_id):
        """Metadata lookup of this agent answers 403"""
        self.forbidden.add(agent_id)

    def fail_lookup(self, agent_id, status=500):
        self.lookup_failures[agent_id] = status

    def fail_conversation(self, agent_id, status=500, body=None):
        self.conversation_failures[agent_id] = (status, body if body is not None else {"detail": "boom"})

    # ---------------------------------------------------------------- helpers

    def transport(self):
        """HttpxTransport wired to this mock; every call shares one client"""
        if self.client is None:
            self.client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return HttpxTransport(client=self.client)

    async def aclose(self):
        if self.client is not None:
            await self.client.aclose()

    @classmethod
    async def close_all(cls):
        """Close the clients of every mock created so far"""
        while cls.live:
            await cls.live.pop().aclose()

    def lookup_requests(self):
        return [r for r in self.requests if r.url.host == self.API_HOST]

    def conversation_requests(self):
        return [r for r in self.requests if r.url.host == self.AGENTS_HOST]

    def conversation_requests_for(self, agent_id):
        return [
            r for r in self.conversation_requests()
            if r.url.path.strip("/").split("/")[0] == agent_id
        ]

    # ---------------------------------------------------------------- handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == self.API_HOST:
            return self._handle_metadata(request)
        if request.url.host == self.AGENTS_HOST:
            return self._handle_conversation(request)
        return httpx.Response(404, json={"detail": "unknown host"})

    def _handle_metadata(self, request):
        path = request.url.path

        if path == "/v1/agents":
            if self.valid_token is not None:
                if request.headers.get("Authorization") != f"Bearer {self.valid_token}":
                    return httpx.Response(401, json={"detail": "invalid api key"})
            return httpx.Response(200, json=list(self.agents.values()))

        agent_id = path[len("/v1/agents/"):]
        if agent_id in self.forbidden:
            return httpx.Response(403, json={"detail": "forbidden"})
        if agent_id in self.lookup_failures:
            return httpx.Response(self.lookup_failures[agent_id], json={"detail": "lookup failed"})
        if agent_id not in self.agents:
            return httpx.Response(404, json={"detail": "agent not found"})
        return httpx.Response(200, json=self.agents[agent_id])

    def _handle_conversation(self, request):
        agent_id = request.url.path.strip("/").split("/")[0]

        if agent_id in self.conversation_failures:
            status, body = self.conversation_failures[agent_id]
            return httpx.Response(status, json=body)

        agent = self.agents.get(agent_id, {})
        if agent.get("public") is False and "Authorization" not in request.headers:
            return httpx.Response(401, json={"detail": "authentication required"})

        message = json.loads(request.content).get("message", "")
        headers = {}
        if self.run_ids.get(agent_id):
            headers[RUN_ID_HEADER] = self.run_ids[agent_id]

        return httpx.Response(
            200,
            json={"agent_id": agent_id, "reply": f"echo: {message}"},
            headers=headers,
        )


# ============================================================================
# Test data factories
# ============================================================================

def start_item(agent_id="a1", message="hi"):
    """Create a start-conversation item"""
    return ExecutionItem(operation=Operation.START, agent_id=agent_id, message=message)


def continue_item(agent_id="a1", run_id="r1", message="more"):
    """Create a continue-conversation item"""
    return ExecutionItem(
        operation=Operation.CONTINUE,
        agent_id=agent_id,
        run_id=run_id,
        message=message,
    )


# ============================================================================
# Assertion helpers
# ============================================================================

def assert_equal(actual, expected, message=""):
    """Assert two values are equal"""
    if actual != expected:
        raise AssertionError(
            f"{message}\nExpected: {expected}\nActual: {actual}"
        )


def assert_true(condition, message=""):
    """Assert condition is true"""
    if not condition:
        raise AssertionError(f"{message}\nExpected: True\nActual: False")


def assert_false(condition, message=""):
    """Assert condition is false"""
    if condition:
        raise AssertionError(f"{message}\nExpected: False\nActual: True")


def assert_in(item, container, message=""):
    """Assert item is in container"""
    if item not in container:
        raise AssertionError(
            f"{message}\nExpected {item} to be in {container}"
        )


def assert_not_in(item, container, message=""):
    """Assert item is not in container"""
    if item in container:
        raise AssertionError(
            f"{message}\nExpected {item} to not be in {container}"
        )


def assert_raises(exception_type, func, *args, **kwargs):
    """Assert function raises specific exception; returns the exception"""
    try:
        func(*args, **kwargs)
    except exception_type as e:
        return e
    except Exception as e:
        raise AssertionError(
            f"Expected {exception_type.__name__} to be raised, but got {type(e).__name__}: {e}"
        )
    raise AssertionError(
        f"Expected {exception_type.__name__} to be raised, but no exception was raised"
    )


async def assert_raises_async(exception_type, coro):
    """Assert awaited coroutine raises specific exception; returns the exception"""
    try:
        await coro
    except exception_type as e:
        return e
    except Exception as e:
        raise AssertionError(
            f"Expected {exception_type.__name__} to be raised, but got {type(e).__name__}: {e}"
        )
    raise AssertionError(
        f"Expected {exception_type.__name__} to be raised, but no exception was raised"
    )
