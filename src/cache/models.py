# src/cache/models.py — v1
"""Cache domain models: CacheOptions, CacheEntry, StoreInfo, FetchResult."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FileType = Literal["image", "video"]

# Each file type maps to exactly one storage extension.
FILE_EXTENSIONS: dict[str, str] = {
    "image": "jpg",
    "video": "mp4",
}


class CacheOptions(BaseModel):
    """Per-call options for ``CacheEngine.cache_item``."""

    model_config = ConfigDict(frozen=True)

    custom_name: str | None = None
    """Hashed as the storage name instead of the identifier. The identifier
    is still what gets downloaded or copied."""

    file_type: FileType | None = None
    """Selects the storage extension; no extension when absent."""

    auth_token: str | None = Field(default=None, repr=False)
    """Bearer token sent with remote requests only. Never persisted."""


class CacheEntry(BaseModel):
    """Materialized state of one cached artifact."""

    uri: str
    modification_time: float | None = None
    size: int | None = None


class StoreInfo(BaseModel):
    """Existence and metadata of a path in a blob store."""

    exists: bool
    is_directory: bool = False
    uri: str | None = None
    modification_time: float | None = None
    size: int | None = None


class FetchResult(BaseModel):
    """Outcome of a download into a blob store."""

    success: bool
    uri: str | None = None
    status_code: int | None = None
    bytes_written: int = 0
