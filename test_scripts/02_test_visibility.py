#!/usr/bin/env python3
"""
Test: Agent Visibility Resolution
Purpose: Verify public/private detection and denial handling

Tests:
- Empty agent id is public without a lookup
- `public: false` is private; missing or true is public
- 403 yields a denial carrying the response body
- Other lookup failures propagate
- Lookup is authenticated only when a credential is present
- No caching between lookups
"""

import asyncio
import sys

from fixtures import (
    run_tests, MockToolhouseAPI, API_BASE_URL,
    assert_equal, assert_true, assert_not_in, assert_raises_async
)

from toolhouse_connector.core import (
    AgentVisibilityResolver,
    AuthorizationDenied,
    HttpResponse,
    TransportFailure,
)
from toolhouse_connector.models import (
    AbsentCredential,
    PresentCredential,
    Visibility,
    visibility_from_metadata,
)


def make_resolver(api):
    return AgentVisibilityResolver(api.transport(), API_BASE_URL)


async def test_empty_agent_id_is_public_without_lookup():
    """No agent id: public, no network call"""
    api = MockToolhouseAPI()
    result = await make_resolver(api).resolve("", AbsentCredential())

    assert_equal(result, Visibility.PUBLIC)
    assert_equal(len(api.requests), 0, "No request should be made")


async def test_public_false_is_private():
    api = MockToolhouseAPI()
    api.add_agent("secret", public=False)

    result = await make_resolver(api).resolve("secret", PresentCredential(token="tok"))
    assert_equal(result, Visibility.PRIVATE)


async def test_missing_or_true_flag_is_public():
    """Default-open: absent flag is trusted as public"""
    api = MockToolhouseAPI()
    api.add_agent("no-flag")
    api.add_agent("flagged", public=True)
    resolver = make_resolver(api)

    assert_equal(await resolver.resolve("no-flag", AbsentCredential()), Visibility.PUBLIC)
    assert_equal(await resolver.resolve("flagged", AbsentCredential()), Visibility.PUBLIC)


async def test_only_literal_false_marks_private():
    """Falsy values other than a boolean false stay public"""
    assert_equal(visibility_from_metadata({"public": False}), Visibility.PRIVATE)
    assert_equal(visibility_from_metadata({"public": None}), Visibility.PUBLIC)
    assert_equal(visibility_from_metadata({"public": 0}), Visibility.PUBLIC)
    assert_equal(visibility_from_metadata({"public": "false"}), Visibility.PUBLIC)
    assert_equal(visibility_from_metadata("not an object"), Visibility.PUBLIC)
    assert_equal(visibility_from_metadata(None), Visibility.PUBLIC)


async def test_forbidden_lookup_is_denied():
    """403 yields AuthorizationDenied with the transport's body as details"""
    api = MockToolhouseAPI()
    api.forbid("locked")

    result = await make_resolver(api).resolve("locked", PresentCredential(token="tok"))

    assert_true(isinstance(result, AuthorizationDenied), f"Expected denial, got {result!r}")
    assert_equal(result.status, 403)
    assert_equal(result.details, {"detail": "forbidden"})


async def test_other_lookup_failures_propagate():
    """Non-403 failures are not caught by the resolver"""
    api = MockToolhouseAPI()
    api.fail_lookup("broken", status=500)

    error = await assert_raises_async(
        TransportFailure,
        make_resolver(api).resolve("broken", AbsentCredential()),
    )
    assert_equal(error.http_status, 500)
    assert_equal(error.response_body, {"detail": "lookup failed"})


async def test_unknown_agent_propagates_404():
    api = MockToolhouseAPI()

    error = await assert_raises_async(
        TransportFailure,
        make_resolver(api).resolve("ghost", AbsentCredential()),
    )
    assert_equal(error.http_status, 404)


async def test_lookup_authenticated_only_with_credential():
    api = MockToolhouseAPI()
    api.add_agent("a1")
    resolver = make_resolver(api)

    await resolver.resolve("a1", PresentCredential(token="tok"))
    await resolver.resolve("a1", AbsentCredential())

    first, second = api.lookup_requests()
    assert_equal(first.headers.get("Authorization"), "Bearer tok")
    assert_not_in("Authorization", second.headers, "Absent credential must not send auth")
    assert_equal(str(first.url), f"{API_BASE_URL}/agents/a1")


async def test_lookup_is_never_cached():
    """Same agent twice means two lookups"""
    api = MockToolhouseAPI()
    api.add_agent("a1")
    resolver = make_resolver(api)

    await resolver.resolve("a1", AbsentCredential())
    await resolver.resolve("a1", AbsentCredential())

    assert_equal(len(api.lookup_requests()), 2)


async def test_resolver_accepts_any_transport():
    """The resolver depends on the transport contract, not on httpx"""

    class StaticTransport:
        def __init__(self):
            self.calls = []

        async def request(self, method, url, headers=None, json_body=None):
            self.calls.append((method, url))
            return HttpResponse(200, {}, {"id": "x", "public": False})

    transport = StaticTransport()
    resolver = AgentVisibilityResolver(transport, "https://example.test/v1/")

    assert_equal(await resolver.resolve("x", AbsentCredential()), Visibility.PRIVATE)
    assert_equal(transport.calls, [("GET", "https://example.test/v1/agents/x")])


async def main():
    """Run all visibility tests"""
    return await run_tests("Agent Visibility Tests", [
        ("Empty agent id is public without lookup", test_empty_agent_id_is_public_without_lookup),
        ("public: false is private", test_public_false_is_private),
        ("Missing or true flag is public", test_missing_or_true_flag_is_public),
        ("Only literal false marks private", test_only_literal_false_marks_private),
        ("Forbidden lookup is denied", test_forbidden_lookup_is_denied),
        ("Other lookup failures propagate", test_other_lookup_failures_propagate),
        ("Unknown agent propagates 404", test_unknown_agent_propagates_404),
        ("Lookup authenticated only with credential", test_lookup_authenticated_only_with_credential),
        ("Lookup is never cached", test_lookup_is_never_cached),
        ("Resolver accepts any transport", test_resolver_accepts_any_transport),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
