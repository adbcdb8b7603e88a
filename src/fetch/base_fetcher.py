# src/fetch/base_fetcher.py — v1
"""Abstract fetcher interface: retrieve remote bytes into a local file."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from mediacache.cache.models import FetchResult


class BaseFetcher(ABC):
    """Unified interface for transports that download remote resources."""

    @abstractmethod
    async def download(
        self, url: str, dest: Path, headers: dict[str, str] | None = None
    ) -> FetchResult:
        """Download ``url`` into the local file ``dest``.

        Raises on transport failure; returns ``success=False`` when the
        server answered but nothing was written.
        """

    async def aclose(self) -> None:
        """Release transport resources."""
