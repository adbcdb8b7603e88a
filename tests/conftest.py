# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a fake fetcher, a local blob store rooted in a temp directory and
an engine wired to both. No network access — all transport is faked.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from mediacache.cache.engine import CacheEngine
from mediacache.cache.keyed_lock import KeyedLock
from mediacache.cache.models import FetchResult
from mediacache.fetch.base_fetcher import BaseFetcher
from mediacache.storage.local_store import LocalBlobStore


class FakeFetcher(BaseFetcher):
    """Writes a fixed payload; records every call.

    Set ``gate`` to an ``asyncio.Event`` to hold downloads until it is set,
    ``fail`` to report an unsuccessful response, ``error`` to raise.
    """

    def __init__(self, payload: bytes = b"\x89PNG fake bytes") -> None:
        self.payload = payload
        self.calls: list[tuple[str, Path, dict[str, str]]] = []
        self.gate: asyncio.Event | None = None
        self.fail = False
        self.error: Exception | None = None
        self.closed = False

    async def download(self, url, dest, headers=None):
        self.calls.append((url, Path(dest), dict(headers or {})))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.fail:
            return FetchResult(success=False, status_code=404)
        Path(dest).parent.mkdir(parents=True, exist_ok=True)
        Path(dest).write_bytes(self.payload)
        return FetchResult(success=True, status_code=200, bytes_written=len(self.payload))

    async def aclose(self) -> None:
        self.closed = True


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache root."""
    cache = tmp_path / "cache_root"
    cache.mkdir()
    return cache


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """A local video file owned by the caller."""
    src = tmp_path / "local" / "path" / "video.mp4"
    src.parent.mkdir(parents=True)
    src.write_bytes(b"\x00\x00\x00\x18ftypmp42 local video")
    return src


# === FIXTURES: Store and engine ===


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def local_store(tmp_cache_dir: Path, fake_fetcher: FakeFetcher) -> LocalBlobStore:
    return LocalBlobStore(tmp_cache_dir, fetcher=fake_fetcher)


@pytest.fixture
def engine(local_store: LocalBlobStore) -> CacheEngine:
    """Engine with a fresh lock map per test."""
    return CacheEngine(local_store, lock=KeyedLock())
