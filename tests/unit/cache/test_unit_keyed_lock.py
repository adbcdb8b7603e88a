# tests/unit/cache/test_keyed_lock.py — v1
"""Tests for cache/keyed_lock.py — per-key mutual exclusion."""

from __future__ import annotations

import asyncio

import pytest

from mediacache.cache.keyed_lock import KeyedLock


class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_same_key_serialized(self):
        lock = KeyedLock()
        active = 0
        peak = 0

        async def critical():
            nonlocal active, peak
            async with lock.acquire("k"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(critical() for _ in range(5)))
        assert peak == 1

    @pytest.mark.asyncio
    async def test_different_keys_concurrent(self):
        lock = KeyedLock()
        entered = asyncio.Event()
        release = asyncio.Event()

        async def holder():
            async with lock.acquire("a"):
                entered.set()
                await release.wait()

        task = asyncio.create_task(holder())
        await entered.wait()
        # "b" must not wait for "a".
        await asyncio.wait_for(lock.run("b", asyncio.sleep, 0), timeout=1)
        assert lock.locked("a")
        release.set()
        await task

    @pytest.mark.asyncio
    async def test_run_returns_value(self):
        lock = KeyedLock()

        async def compute(x, y=0):
            return x + y

        assert await lock.run("k", compute, 2, y=3) == 5

    @pytest.mark.asyncio
    async def test_released_on_exception(self):
        lock = KeyedLock()

        async def boom():
            raise RuntimeError("fail")

        with pytest.raises(RuntimeError):
            await lock.run("k", boom)
        assert not lock.locked("k")
        assert await lock.run("k", asyncio.sleep, 0, result="ok") == "ok"

    @pytest.mark.asyncio
    async def test_released_on_cancel(self):
        lock = KeyedLock()
        entered = asyncio.Event()

        async def hang():
            async with lock.acquire("k"):
                entered.set()
                await asyncio.Event().wait()

        task = asyncio.create_task(hang())
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not lock.locked("k")
        assert len(lock) == 0

    @pytest.mark.asyncio
    async def test_locks_cleaned_up(self):
        lock = KeyedLock()
        await asyncio.gather(*(lock.run(f"k{i % 3}", asyncio.sleep, 0) for i in range(9)))
        assert len(lock) == 0

    @pytest.mark.asyncio
    async def test_waiters_keep_lock_alive(self):
        lock = KeyedLock()
        release = asyncio.Event()
        order: list[str] = []

        async def first():
            async with lock.acquire("k"):
                order.append("first")
                await release.wait()

        async def second():
            async with lock.acquire("k"):
                order.append("second")

        t1 = asyncio.create_task(first())
        await asyncio.sleep(0)
        t2 = asyncio.create_task(second())
        await asyncio.sleep(0)
        assert len(lock) == 1
        release.set()
        await asyncio.gather(t1, t2)
        assert order == ["first", "second"]
        assert len(lock) == 0

    def test_instances_independent(self):
        assert KeyedLock()._locks is not KeyedLock()._locks
