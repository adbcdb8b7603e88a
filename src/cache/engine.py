# src/cache/engine.py — v1
"""Cache engine: fetch-or-reuse state machine over a blob store.

The engine keeps no index in memory. Every lookup re-derives the key and
asks the store, so the store is the only source of truth.

Flow of ``cache_item``:
    lookup identifier (no lock) -> hit: return URI
        -> miss: lock(key) -> lookup destination -> hit: return URI
                                                 -> download or copy

The first lookup always uses the raw identifier. A custom name only renames
the destination, which is what the lock and the second lookup are keyed on.
"""

from __future__ import annotations

import asyncio
import logging

from mediacache.cache.keyed_lock import KeyedLock
from mediacache.cache.keys import derive_key, effective_name, is_remote
from mediacache.cache.models import CacheEntry, CacheOptions
from mediacache.fetch.headers import build_headers, redact
from mediacache.logging.context import clear_context, set_cache_context, set_operation
from mediacache.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "cache"


class CacheEngine:
    """Content-addressed cache for remote and local binary resources.

    Public operations never raise: failures are logged and surface as
    ``None``.
    """

    def __init__(
        self,
        store: BaseBlobStore,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        lock: KeyedLock | None = None,
        fetch_timeout_s: float | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Blob store holding the cache namespace.
            namespace: Flat directory holding every entry.
            lock: Per-key lock; pass one explicitly to share it between
                engines over the same store.
            fetch_timeout_s: Upper bound on one download. ``None`` waits
                indefinitely.
        """
        self._store = store
        self._namespace = namespace
        self._lock = lock if lock is not None else KeyedLock()
        self._fetch_timeout_s = fetch_timeout_s
        self._initialized = False

    @property
    def store(self) -> BaseBlobStore:
        return self._store

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def lock(self) -> KeyedLock:
        return self._lock

    async def __aenter__(self) -> CacheEngine:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._store.aclose()

    async def initialize(self) -> None:
        """Create the cache namespace if absent.

        Not locked: ``ensure_directory`` is idempotent. Failures are logged
        and the engine stays usable.
        """
        try:
            info = await self._store.exists(self._namespace)
            if not (info.exists and info.is_directory):
                await self._store.ensure_directory(self._namespace)
                logger.debug("Created cache namespace %s", self._namespace)
            self._initialized = True
        except Exception:
            logger.exception("Failed to initialize cache namespace %s", self._namespace)

    def path_for(self, name: str, file_type: str | None = None) -> str:
        """Store path of the entry for ``name``."""
        return f"{self._namespace}/{derive_key(name, file_type)}"

    async def get_cache(
        self, name: str, file_type: str | None = None
    ) -> CacheEntry | None:
        """Return the cached entry for ``name``, or None.

        Args:
            name: URL, local path, or the custom name used when caching.
            file_type: File type used when caching; selects the extension.
        """
        try:
            path = self.path_for(name, file_type)
            info = await self._store.exists(path)
        except Exception:
            logger.exception("Cache lookup failed for %s", name)
            return None

        if not info.exists or info.is_directory:
            return None

        logger.debug(
            "[Cache Hit] %surl/name: %s",
            f"type: {file_type}, " if file_type else "",
            name,
        )
        return CacheEntry(
            uri=info.uri or self._store.uri_for(path),
            modification_time=info.modification_time,
            size=info.size,
        )

    async def cache_item(
        self, identifier: str, options: CacheOptions | None = None
    ) -> str | None:
        """Cache a remote or local resource and return its URI.

        Remote vs local is decided by the identifier's scheme (http/https
        is remote). The first lookup is by ``identifier``, so an entry
        cached under it is reused even when ``custom_name`` is set.
        Concurrent calls for the same entry download or copy
        at most once; later callers get the URI the first one produced.

        Args:
            identifier: Remote URL or local path to cache.
            options: Custom name, file type and auth token.

        Returns:
            URI of the cached file, or None if it could not be cached.
        """
        options = options or CacheOptions()
        try:
            name = effective_name(identifier, options)
            key = derive_key(name, options.file_type)
            set_cache_context(identifier, key, "lookup")

            if not self._initialized:
                await self.initialize()

            existing = await self.get_cache(identifier, options.file_type)
            if existing is not None:
                return existing.uri

            remote = is_remote(identifier)
            async with self._lock.acquire(key):
                # Another caller may have finished while we waited.
                existing = await self.get_cache(name, options.file_type)
                if existing is not None:
                    logger.debug("Cached by a concurrent caller: %s", identifier)
                    return existing.uri

                path = f"{self._namespace}/{key}"
                if remote:
                    return await self._cache_remote_item(identifier, path, options)
                return await self._cache_local_item(identifier, name, path, options)
        except Exception:
            logger.exception("Failed to cache %s", identifier)
            return None
        finally:
            clear_context()

    async def _cache_remote_item(
        self, url: str, path: str, options: CacheOptions
    ) -> str | None:
        set_operation("fetch")
        headers = build_headers(options.auth_token)
        logger.debug("Fetching %s with headers %s", url, redact(headers))
        download = self._store.write_from_remote(url, path, headers)
        try:
            if self._fetch_timeout_s is not None:
                result = await asyncio.wait_for(download, self._fetch_timeout_s)
            else:
                result = await download
        except asyncio.TimeoutError:
            logger.warning(
                "Download of %s timed out after %.1fs", url, self._fetch_timeout_s
            )
            return None

        if result.success:
            logger.info("File downloaded and cached for %s", url)
            return result.uri or self._store.uri_for(path)

        logger.warning("Unable to download and cache %s", url)
        return None

    async def _cache_local_item(
        self, src: str, name: str, path: str, options: CacheOptions
    ) -> str | None:
        set_operation("copy")
        try:
            await self._store.copy_local(src, path)
        except OSError as e:
            logger.warning("Unable to copy %s into cache: %s", src, e)
            return None

        entry = await self.get_cache(name, options.file_type)
        if entry is not None:
            logger.info("File cached for %s", src)
            return entry.uri

        logger.warning("Unable to cache %s", src)
        return None

    async def clear_cache(self) -> None:
        """Delete the whole cache namespace.

        Takes no locks. A download finishing afterwards recreates its entry.
        """
        try:
            await self._store.delete_subtree(self._namespace)
            self._initialized = False
            logger.info("Cleared cache namespace %s", self._namespace)
        except Exception:
            logger.exception("Failed to clear cache namespace %s", self._namespace)
