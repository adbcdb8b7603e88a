# tests/integration/conftest.py — v1
"""Shared fixtures for integration tests.

Engines run against a real LocalBlobStore in a temp directory. Remote
downloads go through HttpFetcher over an httpx.MockTransport that counts
requests per URL, so no network is needed.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from mediacache.cache.engine import CacheEngine
from mediacache.cache.keyed_lock import KeyedLock
from mediacache.fetch.http_fetcher import HttpFetcher
from mediacache.fetch.retry import RetryConfig
from mediacache.storage.local_store import LocalBlobStore

IMAGE_BYTES = b"\xff\xd8\xff\xe0 jpeg bytes"


class MockServer:
    """Request handler for httpx.MockTransport.

    Serves ``IMAGE_BYTES`` for every path except ``/missing`` (404) and
    ``/private`` (401 unless the bearer token is ``letmein``). ``delay``
    slows every response down to widen race windows.
    """

    def __init__(self) -> None:
        self.hits: Counter[str] = Counter()
        self.auth_headers: list[str | None] = []
        self.delay = 0.0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.hits[str(request.url)] += 1
        self.auth_headers.append(request.headers.get("Authorization"))
        if self.delay:
            await asyncio.sleep(self.delay)
        if request.url.path == "/missing":
            return httpx.Response(404)
        if request.url.path == "/private":
            if request.headers.get("Authorization") != "Bearer letmein":
                return httpx.Response(401)
        return httpx.Response(200, content=IMAGE_BYTES)


@pytest.fixture
def mock_server() -> MockServer:
    return MockServer()


@pytest.fixture
def image_bytes() -> bytes:
    return IMAGE_BYTES


@pytest_asyncio.fixture
async def http_engine(tmp_cache_dir: Path, mock_server: MockServer):
    """Engine wired to HttpFetcher over the mock transport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(mock_server))
    fetcher = HttpFetcher(
        client=client,
        retry_configs={"server_error": RetryConfig(max_retries=1, base_delay_s=0.0)},
    )
    engine = CacheEngine(LocalBlobStore(tmp_cache_dir, fetcher=fetcher), lock=KeyedLock())
    await engine.initialize()
    yield engine
    await engine.aclose()
    await client.aclose()
