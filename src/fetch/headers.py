# src/fetch/headers.py — v1
"""Outbound request headers."""

from __future__ import annotations


def build_headers(auth_token: str | None = None) -> dict[str, str]:
    """Default headers for a cache download, with optional bearer auth."""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


def redact(headers: dict[str, str]) -> dict[str, str]:
    """Copy of ``headers`` safe to log."""
    return {
        k: ("***" if k.lower() == "authorization" else v)
        for k, v in headers.items()
    }
