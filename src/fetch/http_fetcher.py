# src/fetch/http_fetcher.py — v1
"""httpx-based fetcher streaming response bodies to disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from mediacache.cache.models import FetchResult
from mediacache.fetch.base_fetcher import BaseFetcher
from mediacache.fetch.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class HttpFetcher(BaseFetcher):
    """Download over HTTP(S) with an ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_s: float | None = 120.0,
        connect_timeout_s: float = 10.0,
        chunk_size: int = 64 * 1024,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Pre-built client (tests inject one with a mock transport).
                Owned by the caller when given.
            timeout_s: Read/write/pool timeout per request.
            connect_timeout_s: Connection timeout.
            chunk_size: Bytes per streamed chunk.
            retry_configs: Retry policy; defaults to ``DEFAULT_RETRY_CONFIGS``.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s, connect=connect_timeout_s),
            follow_redirects=True,
        )
        self._chunk_size = chunk_size
        self._retry_configs = retry_configs

    async def download(
        self, url: str, dest: Path, headers: dict[str, str] | None = None
    ) -> FetchResult:
        """Download ``url`` to ``dest``, retrying transient failures."""
        return await with_retry(
            self._download_once,
            url,
            Path(dest),
            headers or {},
            label=url,
            retry_configs=self._retry_configs,
        )

    async def _download_once(
        self, url: str, dest: Path, headers: dict[str, str]
    ) -> FetchResult:
        written = 0
        async with self._client.stream("GET", url, headers=headers) as response:
            response.raise_for_status()
            await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
            fh = await asyncio.to_thread(dest.open, "wb")
            try:
                async for chunk in response.aiter_bytes(self._chunk_size):
                    await asyncio.to_thread(fh.write, chunk)
                    written += len(chunk)
            finally:
                await asyncio.to_thread(fh.close)
            status = response.status_code

        logger.debug("Downloaded %s (%d bytes, HTTP %d)", url, written, status)
        return FetchResult(success=True, status_code=status, bytes_written=written)

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()
