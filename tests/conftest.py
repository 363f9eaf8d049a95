"""Shared test fixtures for the Gemini panel test suite.

Provides stub Gemini clients so no test touches the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types


class FakePager:
    """Async-iterable stand-in for the SDK's model pager."""

    def __init__(self, items):
        self.items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self.items:
            yield item


def make_response(*texts: str) -> types.GenerateContentResponse:
    """Build a generate_content response whose first candidate has these parts."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(text=t) for t in texts],
                )
            )
        ]
    )


def make_client(models=None, response=None, list_error=None, generate_error=None):
    """Create a mock genai.Client exposing the async models surface."""
    client = MagicMock()
    if list_error is not None:
        client.aio.models.list = AsyncMock(side_effect=list_error)
    else:
        client.aio.models.list = AsyncMock(return_value=FakePager(models or []))
    if generate_error is not None:
        client.aio.models.generate_content = AsyncMock(side_effect=generate_error)
    else:
        client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


@pytest.fixture
def client_factory():
    """Returns (factory, calls): factory(key) hands out `factory.client`, recording keys."""
    calls = []

    def factory(api_key):
        calls.append(api_key)
        return factory.client

    factory.client = make_client(models=[types.Model(name="models/gemini-2.5-flash")])
    return factory, calls
