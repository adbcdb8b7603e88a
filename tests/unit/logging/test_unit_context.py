# tests/unit/logging/test_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from mediacache.logging.context import (
    clear_context,
    get_context,
    set_cache_context,
    set_operation,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.cache_key is None
        assert ctx.identifier is None
        assert ctx.operation is None

    def test_set_cache_context(self):
        set_cache_context("https://example.com/a.jpg", "abc", "lookup")
        ctx = get_context()
        assert ctx.identifier == "https://example.com/a.jpg"
        assert ctx.cache_key == "abc"
        assert ctx.operation == "lookup"

    def test_set_operation(self):
        set_cache_context("x", "k")
        set_operation("fetch")
        assert get_context().operation == "fetch"

    def test_as_dict_filters_none(self):
        set_cache_context("x")
        assert get_context().as_dict() == {"identifier": "x"}

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        async def worker(name):
            set_cache_context(name, name.upper())
            await asyncio.sleep(0)
            return get_context().cache_key

        assert await asyncio.gather(worker("a"), worker("b")) == ["A", "B"]
