# src/logging/context.py — v1
"""Contextual logging support — attach cache key, identifier and operation to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per cache_item call.
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)
_identifier: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "identifier", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    cache_key: str | None = None
    identifier: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        cache_key=_cache_key.get(),
        identifier=_identifier.get(),
        operation=_operation.get(),
    )


def set_cache_context(
    identifier: str, cache_key: str | None = None, operation: str | None = None
) -> None:
    """Set per-item context (called once per cache_item execution)."""
    _identifier.set(identifier)
    _cache_key.set(cache_key)
    _operation.set(operation)


def set_operation(operation: str | None) -> None:
    """Update the current operation (fetch, copy, lookup...)."""
    _operation.set(operation)


def clear_context() -> None:
    """Reset all context variables."""
    _cache_key.set(None)
    _identifier.set(None)
    _operation.set(None)
