# src/cache/engine_factory.py — v1
"""Factory: build a ready-to-use CacheEngine from settings."""

from __future__ import annotations

from mediacache.cache.engine import CacheEngine
from mediacache.cache.keyed_lock import KeyedLock
from mediacache.config.settings import Settings
from mediacache.fetch.http_fetcher import HttpFetcher
from mediacache.fetch.retry import build_retry_configs
from mediacache.storage.store_factory import create_blob_store


def create_cache_engine(
    settings: Settings | None = None, lock: KeyedLock | None = None
) -> CacheEngine:
    """Instantiate fetcher, blob store and engine.

    Args:
        settings: Application settings. Defaults to ``Settings()``.
        lock: Shared per-key lock; a fresh one when omitted.

    Returns:
        CacheEngine; use it as an async context manager or call
        ``initialize()`` / ``aclose()``.
    """
    settings = settings or Settings()
    fetcher = HttpFetcher(
        timeout_s=settings.fetch_timeout_s,
        connect_timeout_s=settings.fetch_connect_timeout_s,
        chunk_size=settings.fetch_chunk_size,
        retry_configs=build_retry_configs(
            settings.fetch_max_retries, settings.fetch_retry_base_delay_s
        ),
    )
    store = create_blob_store(settings, fetcher=fetcher)
    return CacheEngine(
        store,
        namespace=settings.cache_namespace,
        lock=lock,
        fetch_timeout_s=settings.fetch_timeout_s,
    )
