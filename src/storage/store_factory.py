# src/storage/store_factory.py — v1
"""Factory: instantiate the blob store from configuration."""

from __future__ import annotations

from mediacache.config.settings import Settings
from mediacache.fetch.base_fetcher import BaseFetcher
from mediacache.storage.base_blob_store import BaseBlobStore
from mediacache.storage.local_store import LocalBlobStore


def create_blob_store(
    settings: Settings, fetcher: BaseFetcher | None = None
) -> BaseBlobStore:
    """Create the blob store selected by STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported or misconfigured.
    """
    if settings.store_backend == "local":
        return LocalBlobStore(settings.cache_root_path, fetcher=fetcher)

    if settings.store_backend == "s3":
        from mediacache.storage.s3_store import S3BlobStore
        if not settings.store_s3_bucket:
            raise ValueError("STORE_S3_BUCKET must be set when STORE_BACKEND=s3")
        return S3BlobStore(
            bucket=settings.store_s3_bucket,
            prefix=settings.store_s3_prefix,
            region=settings.store_s3_region or None,
            endpoint_url=settings.store_s3_endpoint_url or None,
            fetcher=fetcher,
        )

    raise ValueError(f"Unsupported store backend: {settings.store_backend!r}")
