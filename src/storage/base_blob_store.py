# src/storage/base_blob_store.py — v1
"""Abstract blob store interface consumed by the cache engine.

Paths are store-relative and use ``/`` separators. Writes are atomic: a
failed download or copy never leaves a path that ``exists()`` reports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mediacache.cache.models import FetchResult, StoreInfo


class BaseBlobStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def exists(self, path: str) -> StoreInfo:
        """Existence and metadata of ``path``."""

    @abstractmethod
    async def ensure_directory(self, path: str) -> None:
        """Create directory ``path`` if absent. Idempotent."""

    @abstractmethod
    async def write_from_remote(
        self, url: str, dest_path: str, headers: dict[str, str] | None = None
    ) -> FetchResult:
        """Download ``url`` into ``dest_path``."""

    @abstractmethod
    async def copy_local(self, src_path: str, dest_path: str) -> None:
        """Copy a local file into ``dest_path``. The source is left untouched."""

    @abstractmethod
    async def delete_subtree(self, path: str) -> None:
        """Recursively delete ``path``. No error if absent."""

    @abstractmethod
    def uri_for(self, path: str) -> str:
        """URI handed to callers for ``path``."""

    async def aclose(self) -> None:
        """Release resources held by the store (e.g. its fetcher)."""
