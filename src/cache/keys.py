# src/cache/keys.py — v1
"""Cache key derivation.

A cache key is the SHA-256 hex digest of the item name, optionally suffixed
with the extension of its file type. The key is the storage filename; it is
never stored anywhere else.
"""

from __future__ import annotations

import hashlib
from urllib.parse import urlsplit

from mediacache.cache.models import FILE_EXTENSIONS, CacheOptions

REMOTE_SCHEMES = frozenset({"http", "https"})


def digest(identifier: str) -> str:
    """SHA-256 hex digest of the UTF-8 bytes of ``identifier``."""
    if not isinstance(identifier, str):
        raise TypeError(
            f"identifier must be str, got {type(identifier).__name__}"
        )
    return hashlib.sha256(identifier.encode("utf-8")).hexdigest()


def derive_key(identifier: str, file_type: str | None = None) -> str:
    """Derive the cache key (storage filename) for an identifier.

    Args:
        identifier: URL, local path or custom name.
        file_type: Optional file type; appends its fixed extension.

    Returns:
        ``<sha256>`` or ``<sha256>.<ext>``.

    Raises:
        ValueError: If ``file_type`` is not a known file type.
    """
    key = digest(identifier)
    if file_type is None:
        return key
    try:
        ext = FILE_EXTENSIONS[file_type]
    except KeyError:
        raise ValueError(f"Unknown file type: {file_type!r}") from None
    return f"{key}.{ext}"


def is_remote(identifier: str) -> bool:
    """True if the identifier's scheme is http or https."""
    try:
        parts = urlsplit(identifier)
    except ValueError:
        return False
    return parts.scheme in REMOTE_SCHEMES


def effective_name(identifier: str, options: CacheOptions) -> str:
    """Name hashed into the storage key: the custom name if set."""
    return options.custom_name or identifier
