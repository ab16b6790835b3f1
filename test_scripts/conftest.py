"""
pytest hooks for the standalone test scripts.
Closes the mock Toolhouse clients after every test, as run_tests does.
"""

import asyncio

import pytest

from fixtures import MockToolhouseAPI


@pytest.fixture(autouse=True)
def close_mock_clients():
    yield
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(MockToolhouseAPI.close_all())
    finally:
        loop.close()
