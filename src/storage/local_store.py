# src/storage/local_store.py — v1
"""Local filesystem blob store (default backend).

Blocking filesystem calls run in worker threads so the event loop stays free
while large files are copied or removed.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import stat
import uuid
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from mediacache.cache.models import FetchResult, StoreInfo
from mediacache.fetch.base_fetcher import BaseFetcher
from mediacache.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)


def local_source_path(src: str) -> Path:
    """Accept a plain path or a ``file://`` URI."""
    if src.startswith("file:"):
        return Path(url2pathname(urlsplit(src).path))
    return Path(src).expanduser()


def _temp_sibling(dest: Path) -> Path:
    return dest.with_name(f".{dest.name}.{uuid.uuid4().hex}.part")


class LocalBlobStore(BaseBlobStore):
    """Store blobs under a directory on the local filesystem."""

    def __init__(self, base_path: str | Path, fetcher: BaseFetcher | None = None) -> None:
        """Initialize with the store root.

        Args:
            base_path: Root directory; store paths resolve below it.
            fetcher: Transport used by ``write_from_remote``.
        """
        self._base = Path(base_path).expanduser().absolute()
        self._fetcher = fetcher

    @property
    def base_path(self) -> Path:
        return self._base

    def _resolve(self, path: str) -> Path:
        """Resolve a store path relative to base_path."""
        return self._base / path

    def uri_for(self, path: str) -> str:
        return self._resolve(path).as_uri()

    async def exists(self, path: str) -> StoreInfo:
        p = self._resolve(path)
        try:
            st = await asyncio.to_thread(p.stat)
        except FileNotFoundError:
            return StoreInfo(exists=False)
        return StoreInfo(
            exists=True,
            is_directory=stat.S_ISDIR(st.st_mode),
            uri=p.as_uri(),
            modification_time=st.st_mtime,
            size=st.st_size,
        )

    async def ensure_directory(self, path: str) -> None:
        p = self._resolve(path)
        await asyncio.to_thread(p.mkdir, parents=True, exist_ok=True)

    async def write_from_remote(
        self, url: str, dest_path: str, headers: dict[str, str] | None = None
    ) -> FetchResult:
        """Download into a temporary sibling, then rename into place."""
        if self._fetcher is None:
            raise RuntimeError("LocalBlobStore has no fetcher configured")

        dest = self._resolve(dest_path)
        tmp = _temp_sibling(dest)
        try:
            await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
            try:
                result = await self._fetcher.download(url, tmp, headers)
            except Exception as e:
                logger.warning("Download of %s failed: %s", url, e)
                return FetchResult(success=False)

            if not result.success:
                return result
            await asyncio.to_thread(os.replace, tmp, dest)
            return result.model_copy(update={"uri": dest.as_uri()})
        finally:
            await asyncio.to_thread(_unlink_quietly, tmp)

    async def copy_local(self, src_path: str, dest_path: str) -> None:
        """Copy then rename; the source is never moved."""
        src = local_source_path(src_path)
        dest = self._resolve(dest_path)
        tmp = _temp_sibling(dest)
        try:
            await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copy2, src, tmp)
            await asyncio.to_thread(os.replace, tmp, dest)
        finally:
            await asyncio.to_thread(_unlink_quietly, tmp)

    async def delete_subtree(self, path: str) -> None:
        await asyncio.to_thread(_remove_tree, self._resolve(path))

    async def aclose(self) -> None:
        if self._fetcher is not None:
            await self._fetcher.aclose()


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def _remove_tree(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        _unlink_quietly(path)
