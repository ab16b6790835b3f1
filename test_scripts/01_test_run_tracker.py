#!/usr/bin/env python3
"""
Test: Run Identifier Tracking
Purpose: Verify which run id an item ends up with after start/continue

Tests:
- start takes the response's run id, empty when absent
- continue keeps the caller's run id unless the response supplies one
- Items only carry a run id into continue calls
"""

import asyncio
import sys

from fixtures import run_tests, start_item, continue_item, assert_equal

from toolhouse_connector.core import track_run_id
from toolhouse_connector.models import ExecutionItem, Operation


async def test_start_uses_response_run_id():
    """start: final run id is the header value"""
    assert_equal(track_run_id(Operation.START, "", "run-1"), "run-1")


async def test_start_without_header_is_empty():
    """start: no header means empty run id, regardless of input"""
    assert_equal(track_run_id(Operation.START, "", ""), "")
    assert_equal(track_run_id(Operation.START, "stale", ""), "", "start never keeps an input run id")


async def test_continue_replaces_run_id_from_response():
    """continue: a new header value replaces the input"""
    assert_equal(track_run_id(Operation.CONTINUE, "r1", "r2"), "r2")


async def test_continue_keeps_input_without_header():
    """continue: empty header keeps the caller's run id"""
    assert_equal(track_run_id(Operation.CONTINUE, "r1", ""), "r1")


async def test_item_input_run_id():
    """Only continue items carry their run id into the call"""
    assert_equal(continue_item(run_id="r9").input_run_id, "r9")

    item = ExecutionItem(operation=Operation.START, agent_id="a1", message="hi", run_id="ignored")
    assert_equal(item.input_run_id, "", "start items carry no run id")
    assert_equal(start_item().input_run_id, "")


async def test_item_accepts_camel_case_fields():
    """Items parse the workflow's camelCase field names"""
    item = ExecutionItem.model_validate(
        {"operation": "continue", "agentId": "a1", "runId": "r1", "message": "more"}
    )
    assert_equal(item.operation, Operation.CONTINUE)
    assert_equal(item.agent_id, "a1")
    assert_equal(item.run_id, "r1")


async def main():
    """Run all run tracker tests"""
    return await run_tests("Run Identifier Tracking Tests", [
        ("start uses response run id", test_start_uses_response_run_id),
        ("start without header is empty", test_start_without_header_is_empty),
        ("continue replaces run id from response", test_continue_replaces_run_id_from_response),
        ("continue keeps input without header", test_continue_keeps_input_without_header),
        ("Item input run id", test_item_input_run_id),
        ("Item accepts camelCase fields", test_item_accepts_camel_case_fields),
    ])


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
