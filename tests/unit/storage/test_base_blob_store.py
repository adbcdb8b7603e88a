# tests/unit/storage/test_base_blob_store.py — v1
"""Tests for storage/base_blob_store.py — BaseBlobStore ABC."""

from __future__ import annotations

import pytest

from mediacache.storage.base_blob_store import BaseBlobStore


class TestBaseBlobStore:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseBlobStore()  # type: ignore[abstract]

    def test_has_required_methods(self):
        for method in [
            "exists", "ensure_directory", "write_from_remote",
            "copy_local", "delete_subtree", "uri_for", "aclose",
        ]:
            assert hasattr(BaseBlobStore, method)
