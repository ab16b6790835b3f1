#!/usr/bin/env python3
"""
Test: Agent Catalog
Purpose: Verify agent listing, visibility checks and credential testing

Tests:
- Agents are listed as "<title> (Public|Private)" options
- Entries with a null title or no id are still listed; non-objects are skipped
- Visibility check returns a single public/private option
- Missing credential raises ConfigurationError before any request
- Credential test distinguishes valid, rejected and missing tokens
"""

import asyncio
import sys

from structlog.testing import capture_logs

from fixtures import (
    run_tests, MockToolhouseAPI, API_BASE_URL,
    assert_equal, assert_false, assert_true, assert_raises_async
)

from toolhouse_connector.config import SettingsCredentialStore, StaticCredentialStore
from toolhouse_connector.core import AgentCatalog, ConfigurationError, TransportFailure
from toolhouse_connector.models import AbsentCredential, PresentCredential


def make_catalog(api, token="tok"):
    tokens = {"toolhouseApi": token} if token else {}
    return AgentCatalog(api.transport(), StaticCredentialStore(tokens), API_BASE_URL, "toolhouseApi")


async def test_list_agents_labels_visibility():
    api = MockToolhouseAPI(valid_token="tok")
    api.add_agent("a1", title="Researcher", public=True)
    api.add_agent("a2", title="Ops Bot", public=False)
    api.add_agent("a3", title="Legacy")

    options = await make_catalog(api).list_agents()

    assert_equal(
        [(o.name, o.value) for o in options],
        [("Researcher (Public)", "a1"), ("Ops Bot (Private)", "a2"), ("Legacy (Public)", "a3")],
    )
    assert_equal(api.lookup_requests()[0].headers.get("Authorization"), "Bearer tok")


async def test_list_agents_tolerates_incomplete_entries():
    api = MockToolhouseAPI()
    api.add_agent("a1", title="Researcher")
    api.agents["untitled"] = {"id": "untitled", "title": None, "public": False}
    api.agents["anonymous"] = {"title": "No Id"}
    api.agents["junk"] = "not an agent"

    with capture_logs() as logs:
        options = await make_catalog(api).list_agents()

    assert_equal(
        [(o.name, o.value) for o in options],
        [("Researcher (Public)", "a1"), (" (Private)", "untitled"), ("No Id (Public)", "")],
    )
    assert_equal([log["event"] for log in logs if log["log_level"] == "warning"], ["agent_list_entry_skipped"])


async def test_check_public_private():
    api = MockToolhouseAPI()
    api.add_agent("open", public=True)
    api.add_agent("secret", public=False)
    catalog = make_catalog(api)

    public = await catalog.check_public_private("open")
    private = await catalog.check_public_private("secret")

    assert_equal(public[0].model_dump(), {
        "name": "Public Agent", "value": "public", "description": "This agent is public.",
    })
    assert_equal(private[0].model_dump(), {
        "name": "Private Agent", "value": "private", "description": "This agent is private.",
    })


async def test_missing_credential_raises_configuration_error():
    api = MockToolhouseAPI()
    api.add_agent("a1")
    catalog = make_catalog(api, token=None)

    error = await assert_raises_async(ConfigurationError, catalog.list_agents())
    assert_true("Unable to retrieve Toolhouse API credentials" in str(error))
    await assert_raises_async(ConfigurationError, catalog.check_public_private("a1"))
    assert_equal(len(api.requests), 0, "No request without a credential")


async def test_settings_store_treats_empty_token_as_absent():
    assert_true(isinstance(SettingsCredentialStore(token="").get_credential("toolhouseApi"), AbsentCredential))
    assert_true(isinstance(SettingsCredentialStore(token="t").get_credential("toolhouseApi"), PresentCredential))
    assert_true(
        isinstance(SettingsCredentialStore(token="t").get_credential("otherApi"), AbsentCredential),
        "Unknown credential names are absent",
    )


async def test_credential_test_results():
    api = MockToolhouseAPI(valid_token="good")
    catalog = make_catalog(api)

    valid = await catalog.test_credential(PresentCredential(token="good"))
    rejected = await catalog.test_credential(PresentCredential(token="bad"))
    missing = await catalog.test_credential(AbsentCredential())

    assert_true(valid.valid)
    assert_false(rejected.valid)
    assert_equal(rejected.message, "Request failed with status code 401")
    assert_false(missing.valid)
    assert_equal(len(api.requests), 2, "Absent credential is not sent")


async def test_catalog_failure_propagates():
    api = MockToolhouseAPI()
    api.fail_lookup("broken", status=503)

    error = await assert_raises_async(TransportFailure, make_catalog(api).check_public_private("broken"))
    assert_equal(error.http_status, 503)


async def main():
    """Run all agent catalog tests"""
    return await run_tests("Agent Catalog Tests", [
        ("List agents labels visibility", test_list_agents_labels_visibility),
        ("List agents tolerates incomplete entries", test_list_agents_tolerates_incomplete_entries),
        ("Check public/private", test_check_public_private),
        ("Missing credential raises ConfigurationError", test_missing_credential_raises_configuration_error),
        ("Settings store treats empty token as absent", test_settings_store_treats_empty_token_as_absent),
        ("Credential test results", test_credential_test_results),
        ("Catalog failure propagates", test_catalog_failure_propagates),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
