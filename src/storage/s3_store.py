# src/storage/s3_store.py — v1
"""S3-compatible blob store (STORE_BACKEND=s3).

Supports AWS S3, MinIO, and other S3-compatible storage.
Requires 'boto3' package: pip install mediacache[s3].
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path

from mediacache.cache.models import FetchResult, StoreInfo
from mediacache.fetch.base_fetcher import BaseFetcher
from mediacache.storage.base_blob_store import BaseBlobStore
from mediacache.storage.local_store import local_source_path

logger = logging.getLogger(__name__)

_DELETE_BATCH = 1000


class S3BlobStore(BaseBlobStore):
    """Store blobs as objects under a key prefix."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "mediacache/",
        region: str | None = None,
        endpoint_url: str | None = None,
        fetcher: BaseFetcher | None = None,
    ) -> None:
        """Initialize S3 store.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix for all objects (e.g. "mediacache/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
            fetcher: Transport used by ``write_from_remote``.
        """
        try:
            import boto3
        except ImportError as e:
            raise ImportError(
                "boto3 package required for S3 store: pip install boto3"
            ) from e

        kwargs: dict = {}
        if region:
            kwargs["region_name"] = region
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._s3 = boto3.client("s3", **kwargs)
        self._bucket = bucket
        self._prefix = prefix.rstrip("/") + "/" if prefix else ""
        self._fetcher = fetcher

    def _full_key(self, path: str) -> str:
        """Build the full S3 key from a store path."""
        return f"{self._prefix}{path.strip('/')}"

    def uri_for(self, path: str) -> str:
        return f"s3://{self._bucket}/{self._full_key(path)}"

    async def exists(self, path: str) -> StoreInfo:
        """Object metadata, or directory semantics for a non-empty prefix."""
        key = self._full_key(path)
        try:
            head = await asyncio.to_thread(
                self._s3.head_object, Bucket=self._bucket, Key=key
            )
        except self._s3.exceptions.ClientError:
            head = None

        if head is not None:
            modified = head.get("LastModified")
            return StoreInfo(
                exists=True,
                uri=self.uri_for(path),
                modification_time=modified.timestamp() if modified else None,
                size=head.get("ContentLength"),
            )

        listing = await asyncio.to_thread(
            self._s3.list_objects_v2,
            Bucket=self._bucket, Prefix=key + "/", MaxKeys=1,
        )
        if listing.get("KeyCount", len(listing.get("Contents", []))):
            return StoreInfo(exists=True, is_directory=True, uri=self.uri_for(path))
        return StoreInfo(exists=False)

    async def ensure_directory(self, path: str) -> None:
        """Prefixes need no creation."""

    async def write_from_remote(
        self, url: str, dest_path: str, headers: dict[str, str] | None = None
    ) -> FetchResult:
        """Download to a local temp file, then upload it as one object."""
        if self._fetcher is None:
            raise RuntimeError("S3BlobStore has no fetcher configured")

        with tempfile.TemporaryDirectory(prefix="mediacache-") as tmp_dir:
            tmp = Path(tmp_dir) / "download.part"
            try:
                result = await self._fetcher.download(url, tmp, headers)
            except Exception as e:
                logger.warning("Download of %s failed: %s", url, e)
                return FetchResult(success=False)
            if not result.success:
                return result

            key = self._full_key(dest_path)
            await asyncio.to_thread(self._s3.upload_file, str(tmp), self._bucket, key)
            logger.debug("S3 upload: s3://%s/%s (%d bytes)", self._bucket, key, result.bytes_written)
        return result.model_copy(update={"uri": self.uri_for(dest_path)})

    async def copy_local(self, src_path: str, dest_path: str) -> None:
        src = local_source_path(src_path)
        if not src.is_file():
            raise FileNotFoundError(f"Local source not found: {src}")
        key = self._full_key(dest_path)
        await asyncio.to_thread(self._s3.upload_file, str(src), self._bucket, key)

    async def delete_subtree(self, path: str) -> None:
        """Delete every object under the prefix, page by page."""
        base = self._full_key(path)
        keys: list[str] = []
        token: str | None = None
        while True:
            kwargs: dict = {"Bucket": self._bucket, "Prefix": base + "/"}
            if token:
                kwargs["ContinuationToken"] = token
            response = await asyncio.to_thread(self._s3.list_objects_v2, **kwargs)
            keys.extend(obj["Key"] for obj in response.get("Contents", []))
            if not response.get("IsTruncated"):
                break
            token = response.get("NextContinuationToken")

        keys.append(base)
        for i in range(0, len(keys), _DELETE_BATCH):
            batch = keys[i : i + _DELETE_BATCH]
            await asyncio.to_thread(
                self._s3.delete_objects,
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
            )
        logger.debug("S3 delete: %d objects under s3://%s/%s", len(keys), self._bucket, base)

    async def aclose(self) -> None:
        if self._fetcher is not None:
            await self._fetcher.aclose()
