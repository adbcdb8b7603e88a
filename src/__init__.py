# src/__init__.py — v1
"""mediacache — content-addressed local cache for images, videos and blobs."""

from mediacache.cache.engine import CacheEngine
from mediacache.cache.engine_factory import create_cache_engine
from mediacache.cache.keyed_lock import KeyedLock
from mediacache.cache.keys import derive_key
from mediacache.cache.models import CacheEntry, CacheOptions
from mediacache.version import __version__

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheOptions",
    "KeyedLock",
    "__version__",
    "create_cache_engine",
    "derive_key",
]
