"""Tests for browser pool leasing, recovery and shutdown."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import pytest

from perfaudit.exceptions import PoolExhaustedError
from perfaudit.pool import BrowserPool


def test_acquire_creates_lazily_and_reuses(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=3)
        assert pool.total_count == 0

        first = await pool.acquire()
        await pool.release(first)
        second = await pool.acquire()

        assert second.process is first.process
        assert factory.create_calls == 1
        assert first.process.resets == 1
        await pool.release(second)

    asyncio.run(scenario())


def test_excess_acquirers_wait_for_release(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=2)
        first = await pool.acquire()
        await pool.acquire()

        waiter = asyncio.create_task(pool.acquire())
        for _ in range(5):
            await asyncio.sleep(0)
        assert not waiter.done()
        assert factory.live_count == 2

        await pool.release(first)
        third = await asyncio.wait_for(waiter, timeout=1)

        assert third.process is first.process
        assert pool.active_count == 2

    asyncio.run(scenario())


def test_live_handles_never_exceed_capacity(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def worker(pool: BrowserPool) -> None:
        async with pool.lease():
            await asyncio.sleep(0.001)

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=3)
        await asyncio.gather(*(worker(pool) for _ in range(20)))
        assert pool.active_count == 0

    asyncio.run(scenario())

    assert factory.max_live <= 3
    assert len(factory.created) == 3


def test_dead_handle_is_replaced_on_acquire(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        handle = await pool.acquire()
        await pool.release(handle)
        handle.process.alive = False

        replacement = await pool.acquire()

        assert replacement.process is not handle.process
        assert replacement.process.alive
        assert handle.process in factory.destroyed
        assert replacement.generation > handle.generation
        assert pool.total_count == 1

    asyncio.run(scenario())


def test_creation_retries_before_succeeding(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(fail_creates=2)

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1, max_create_attempts=3)
        handle = await pool.acquire()
        assert handle.process.alive

    asyncio.run(scenario())

    assert factory.create_calls == 3


def test_repeated_creation_failure_raises_pool_exhausted(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(fail_creates=3)

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1, max_create_attempts=3)
        with pytest.raises(PoolExhaustedError):
            await pool.acquire()

        # The slot is free again once the failures stop.
        handle = await asyncio.wait_for(pool.acquire(), timeout=1)
        assert handle.process.alive

    asyncio.run(scenario())

    assert PoolExhaustedError.retryable is True


def test_failed_reset_discards_handle(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        handle = await pool.acquire()
        handle.process.reset_fails = True

        await pool.release(handle)

        assert handle.process in factory.destroyed
        assert pool.total_count == 0
        fresh = await pool.acquire()
        assert fresh.process is not handle.process

    asyncio.run(scenario())


def test_close_all_destroys_everything_and_is_idempotent(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=3)
        leased = await pool.acquire()
        idle = await pool.acquire()
        await pool.release(idle)

        await pool.close_all()
        assert sorted(process.ident for process in factory.destroyed) == [1, 2]
        assert pool.total_count == 0

        await pool.close_all()
        assert len(factory.destroyed) == 2
        assert not leased.process.alive

    asyncio.run(scenario())


def test_pool_is_usable_after_close_all(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        await pool.acquire()
        await pool.close_all()

        handle = await asyncio.wait_for(pool.acquire(), timeout=1)
        assert handle.process.alive

    asyncio.run(scenario())


def test_stale_release_is_ignored(make_factory: Callable[..., Any], caplog: pytest.LogCaptureFixture) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        handle = await pool.acquire()
        await pool.close_all()
        replacement = await pool.acquire()

        with caplog.at_level(logging.WARNING, logger="perfaudit.pool.browser_pool"):
            await pool.release(handle)

        assert handle.process.resets == 0
        assert pool.active_count == 1
        assert replacement.in_use
        assert "stale" in caplog.text

    asyncio.run(scenario())


def test_double_release_is_ignored(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        handle = await pool.acquire()
        await pool.release(handle)
        await pool.release(handle)

        assert handle.process.resets == 1
        assert pool.stats()["idle"] == 1

    asyncio.run(scenario())


def test_lease_releases_on_error(make_factory: Callable[..., Any]) -> None:
    factory = make_factory()

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        with pytest.raises(RuntimeError):
            async with pool.lease():
                raise RuntimeError("audit blew up")
        assert pool.active_count == 0
        assert pool.total_count == 1

    asyncio.run(scenario())


def test_capacity_must_be_positive(make_factory: Callable[..., Any]) -> None:
    with pytest.raises(ValueError):
        BrowserPool(make_factory(), capacity=0)


def test_close_all_keeps_live_processes_within_capacity(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(destroy_delay=0.2)

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=2)
        await pool.acquire()
        await pool.acquire()
        waiters = [asyncio.create_task(pool.acquire()) for _ in range(2)]
        await asyncio.sleep(0)

        closing = asyncio.create_task(pool.close_all())
        await asyncio.sleep(0.05)
        assert pool.stats()["closing"] == 2
        assert factory.create_calls == 2

        await closing
        handles = await asyncio.wait_for(asyncio.gather(*waiters), timeout=2)

        assert factory.max_live <= 2
        assert sorted(handle.slot for handle in handles) == [0, 1]
        assert pool.stats()["closing"] == 0

    asyncio.run(scenario())


def test_failed_reset_frees_slot_only_after_destroy(make_factory: Callable[..., Any]) -> None:
    factory = make_factory(destroy_delay=0.1)

    async def scenario() -> None:
        pool = BrowserPool(factory, capacity=1)
        handle = await pool.acquire()
        handle.process.reset_fails = True
        waiter = asyncio.create_task(pool.acquire())
        await asyncio.sleep(0)

        await pool.release(handle)
        replacement = await asyncio.wait_for(waiter, timeout=1)

        assert factory.max_live == 1
        assert replacement.process is not handle.process
        assert not handle.process.alive

    asyncio.run(scenario())
