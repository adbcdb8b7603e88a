# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache location, storage backend, fetch and
logging settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    cache_root: Path = Path("~/.mediacache")
    cache_namespace: str = "cache"

    # === Blob store ===
    store_backend: Literal["local", "s3"] = "local"
    store_s3_bucket: str = ""
    store_s3_prefix: str = "mediacache/"
    store_s3_region: str = ""
    store_s3_endpoint_url: str = ""

    # === Fetch ===
    fetch_timeout_s: float | None = 120.0
    fetch_connect_timeout_s: float = 10.0
    fetch_chunk_size: int = 64 * 1024
    fetch_max_retries: int = 3
    fetch_retry_base_delay_s: float = 1.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("fetch_chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("fetch_chunk_size must be > 0")
        return v

    @field_validator("fetch_max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("fetch_max_retries must be >= 0")
        return v

    @field_validator("cache_namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:  # noqa: N805
        """The namespace is a single flat directory name."""
        v = v.strip()
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(
                "cache_namespace must be a single non-empty directory name"
            )
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fetch_timeout_s is not None and self.fetch_timeout_s <= 0:
            errors.append("FETCH_TIMEOUT_S must be positive when set")

        if errors:
            raise ConfigurationError(
                "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )
        return self

    @property
    def cache_root_path(self) -> Path:
        """Cache root with ``~`` expanded."""
        return self.cache_root.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-app config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
