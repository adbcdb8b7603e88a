# src/fetch/retry.py — v1
"""Download retry policy with exponential backoff, per error type."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)


class FetchRetryExhausted(Exception):
    """All retries exhausted for a download."""

    def __init__(self, label: str, error_type: str, attempts: int, last_error: Exception):
        self.label = label
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Fetch '{label}' failed after {attempts} attempts ({error_type}): {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=3, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=2, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=3, base_delay_s=1.0),
    "connection": RetryConfig(max_retries=3, base_delay_s=0.5),
}


def build_retry_configs(max_retries: int, base_delay_s: float) -> dict[str, RetryConfig]:
    """Uniform policy derived from settings."""
    return {
        name: RetryConfig(
            max_retries=max_retries,
            base_delay_s=base_delay_s,
            backoff_factor=cfg.backoff_factor,
            jitter=cfg.jitter,
        )
        for name, cfg in DEFAULT_RETRY_CONFIGS.items()
    }


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 429:
            return "rate_limit"
        if status >= 500:
            return "server_error"
        return "client_error"
    if isinstance(error, httpx.TimeoutException):
        return "timeout"
    if isinstance(error, httpx.TransportError):
        return "connection"
    return "unknown"


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    label: str = "unknown",
    retry_configs: dict[str, RetryConfig] | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async function with retry logic.

    Raises:
        FetchRetryExhausted: If the error is not retryable or all retries
            are exhausted.
    """
    configs = retry_configs if retry_configs is not None else DEFAULT_RETRY_CONFIGS
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1
            config = configs.get(error_type)

            if config is None or attempts > config.max_retries:
                raise FetchRetryExhausted(label, error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "Fetch '%s' — %s (attempt %d/%d), retrying in %.1fs",
                label, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
