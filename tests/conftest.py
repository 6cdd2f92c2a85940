"""Pytest configuration for Navi SDK tests.

This file contains shared fixtures for all tests. HTTP traffic is mocked
with respx; no Navi server is needed.

Run the tests with:
    uv run pytest tests/ -v
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from navi_sdk import NaviClient


class FakeResponse:
    """In-memory stand-in for a streaming httpx.Response.

    Yields the given chunks from ``iter_bytes()``, records how many chunks
    were read and how often ``close()`` was called. An exception instance in
    ``chunks`` is raised when reached.
    """

    def __init__(self, chunks: list[bytes | BaseException]) -> None:
        self._chunks = chunks
        self.chunks_read = 0
        self.close_calls = 0

    def iter_bytes(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            if isinstance(chunk, BaseException):
                raise chunk
            self.chunks_read += 1
            yield chunk

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    """Return the FakeResponse class."""
    return FakeResponse


@pytest.fixture
def api_key() -> str:
    """Return a well-formed test API key."""
    return "navi_sk_test_0123456789abcdef"


@pytest.fixture
def server_url() -> str:
    """Return test server URL."""
    return "https://test.navi.dev"


@pytest.fixture
def base_url(server_url: str) -> str:
    """Return the integration API root."""
    return f"{server_url}/api/integration"


@pytest.fixture
def client(api_key: str, server_url: str) -> Iterator[NaviClient]:
    """Return a client pointed at the test server."""
    with NaviClient(api_key, base_url=server_url) as navi:
        yield navi
