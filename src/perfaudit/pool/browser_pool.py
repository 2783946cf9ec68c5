"""Bounded pool of leasable browser processes.

Handles live in a fixed-size arena of slots. A slot is in exactly one of
five places at any time: the empty list, the reserved set (creation in
flight), the free list (idle handle), leased to a caller, or the closing set
(process being destroyed). A slot only returns to the empty list once its old
process is gone, so live processes never exceed capacity. Every time a
slot's process is replaced or destroyed its generation is bumped, so a
handle released after its slot was recycled is recognized as stale and
ignored.

All slot bookkeeping happens under one ``asyncio.Condition``. Process
creation, probing, reset and destruction run outside the lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Protocol

from perfaudit.constants.pool import DEFAULT_MAX_BROWSERS, DEFAULT_MAX_CREATE_ATTEMPTS
from perfaudit.exceptions import PoolClosedError, PoolExhaustedError

logger = logging.getLogger(__name__)


class HandleFactory(Protocol):
    """Creates, checks, recycles and destroys browser processes for the pool."""

    async def create(self, slot: int) -> Any:
        """Start a new process for ``slot``."""
        ...

    async def probe(self, process: Any) -> bool:
        """Return True when ``process`` still responds."""
        ...

    async def reset(self, process: Any) -> None:
        """Clear per-lease state before the process is reused."""
        ...

    async def destroy(self, process: Any) -> None:
        """Terminate ``process`` and release its resources."""
        ...


@dataclass
class BrowserHandle:
    """A lease on one pooled browser process."""

    slot: int
    generation: int
    process: Any
    created_at: float
    in_use: bool = False


class BrowserPool:
    """Fixed-capacity pool that creates browsers lazily and replaces dead ones."""

    def __init__(
        self,
        factory: HandleFactory,
        capacity: int = DEFAULT_MAX_BROWSERS,
        *,
        max_create_attempts: int = DEFAULT_MAX_CREATE_ATTEMPTS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if max_create_attempts <= 0:
            raise ValueError("max_create_attempts must be positive")
        self._factory = factory
        self._capacity = capacity
        self._max_create_attempts = max_create_attempts
        self._clock = clock

        self._slots: list[BrowserHandle | None] = [None] * capacity
        self._generations: list[int] = [0] * capacity
        self._free: deque[int] = deque()
        self._empty: list[int] = list(reversed(range(capacity)))
        self._reserved: set[int] = set()
        self._closing: set[int] = set()
        self._condition = asyncio.Condition()

    @property
    def capacity(self) -> int:
        """Maximum number of live browser processes."""
        return self._capacity

    @property
    def total_count(self) -> int:
        """Number of live handles, idle or leased."""
        return sum(1 for handle in self._slots if handle is not None)

    @property
    def active_count(self) -> int:
        """Number of handles currently leased."""
        return sum(1 for handle in self._slots if handle is not None and handle.in_use)

    def stats(self) -> dict[str, int]:
        """Snapshot of pool occupancy."""
        return {
            "capacity": self._capacity,
            "total": self.total_count,
            "active": self.active_count,
            "idle": len(self._free),
            "creating": len(self._reserved),
            "closing": len(self._closing),
        }

    async def acquire(self) -> BrowserHandle:
        """Lease a live handle, waiting while every slot is busy.

        Raises ``PoolExhaustedError`` only when creating a process fails
        ``max_create_attempts`` times in a row.
        """
        async with self._condition:
            while not self._free and not self._empty:
                await self._condition.wait()
            if self._free:
                slot = self._free.popleft()
                handle = self._slots[slot]
                assert handle is not None
                handle.in_use = True
                reuse: BrowserHandle | None = handle
            else:
                slot = self._empty.pop()
                self._reserved.add(slot)
                reuse = None

        if reuse is None:
            return await self._create_in_slot(slot)

        try:
            alive = await self._safe_probe(reuse)
        except BaseException:
            await self.release(reuse)
            raise
        if alive:
            return reuse

        logger.warning("Browser in slot %d failed its liveness probe; replacing it", slot)
        async with self._condition:
            stale = self._generations[slot] != reuse.generation
            if not stale:
                self._slots[slot] = None
                self._generations[slot] += 1
                self._reserved.add(slot)
        if stale:
            raise PoolClosedError("Browser pool was closed while probing a handle")
        # The slot stays reserved until the replacement is up.
        await self._safe_destroy(reuse.process, slot)
        return await self._create_in_slot(slot)

    async def release(self, handle: BrowserHandle) -> None:
        """Return a leased handle to the free list.

        Releases of handles whose slot has since been recycled are ignored.
        """
        async with self._condition:
            if not self._owns(handle):
                logger.warning("Ignoring release of stale browser handle (slot %d)", handle.slot)
                return

        try:
            await self._factory.reset(handle.process)
            reset_ok = True
        except Exception as exc:
            logger.warning("Failed to reset browser in slot %d, discarding it: %s", handle.slot, exc)
            reset_ok = False

        async with self._condition:
            if not self._owns(handle):
                return
            if reset_ok:
                handle.in_use = False
                self._free.append(handle.slot)
                self._condition.notify()
            else:
                self._slots[handle.slot] = None
                self._generations[handle.slot] += 1
                self._closing.add(handle.slot)

        if not reset_ok:
            await self._retire(handle.slot, handle.process)

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[BrowserHandle]:
        """Acquire a handle for the duration of a ``async with`` block."""
        handle = await self.acquire()
        try:
            yield handle
        finally:
            await self.release(handle)

    async def close_all(self) -> None:
        """Destroy every handle, leased or idle. Safe to call repeatedly.

        The pool stays usable afterwards; later acquires start new processes
        as each old one finishes exiting. Outstanding leases become stale and
        their releases are ignored.
        """
        async with self._condition:
            victims: list[BrowserHandle] = []
            for slot, handle in enumerate(self._slots):
                if handle is None:
                    continue
                victims.append(handle)
                self._slots[slot] = None
                self._generations[slot] += 1
                self._closing.add(slot)
            for slot in self._reserved:
                self._generations[slot] += 1
            self._free.clear()

        if victims:
            logger.info("Closing %d browser(s)", len(victims))
        await asyncio.gather(*(self._retire(handle.slot, handle.process) for handle in victims))

    async def _create_in_slot(self, slot: int) -> BrowserHandle:
        """Start a process in a reserved slot, retrying failed launches."""
        generation = self._generations[slot]
        created: BrowserHandle | None = None
        last_error: Exception | None = None
        try:
            for attempt in range(1, self._max_create_attempts + 1):
                try:
                    process = await self._factory.create(slot)
                except Exception as exc:
                    last_error = exc
                    logger.warning(
                        "Browser launch failed for slot %d (attempt %d/%d): %s",
                        slot,
                        attempt,
                        self._max_create_attempts,
                        exc,
                    )
                    continue
                created = BrowserHandle(
                    slot=slot,
                    generation=generation,
                    process=process,
                    created_at=self._clock(),
                    in_use=True,
                )
                break
        finally:
            async with self._condition:
                self._reserved.discard(slot)
                closed_meanwhile = self._generations[slot] != generation
                if created is None:
                    self._return_empty(slot)
                elif closed_meanwhile:
                    self._closing.add(slot)
                else:
                    self._slots[slot] = created

        if created is None:
            raise PoolExhaustedError(
                f"Could not start a browser after {self._max_create_attempts} attempt(s): {last_error}"
            ) from last_error
        if closed_meanwhile:
            await self._retire(slot, created.process)
            raise PoolClosedError("Browser pool was closed while a browser was starting")

        logger.debug("Started browser in slot %d (generation %d)", slot, generation)
        return created

    async def _retire(self, slot: int, process: Any) -> None:
        """Destroy ``process``, then hand its closing slot back to the empty list."""
        try:
            await self._safe_destroy(process, slot)
        finally:
            async with self._condition:
                self._closing.discard(slot)
                self._return_empty(slot)

    def _return_empty(self, slot: int) -> None:
        # Caller holds the lock. Lowest slot is popped first.
        self._empty.append(slot)
        self._empty.sort(reverse=True)
        self._condition.notify()

    def _owns(self, handle: BrowserHandle) -> bool:
        if not 0 <= handle.slot < self._capacity or handle.slot in self._closing:
            return False
        return (
            self._generations[handle.slot] == handle.generation
            and self._slots[handle.slot] is handle
            and handle.in_use
        )

    async def _safe_probe(self, handle: BrowserHandle) -> bool:
        try:
            return bool(await self._factory.probe(handle.process))
        except Exception as exc:
            logger.debug("Liveness probe raised for slot %d: %s", handle.slot, exc)
            return False

    async def _safe_destroy(self, process: Any, slot: int) -> None:
        try:
            await self._factory.destroy(process)
        except Exception as exc:
            logger.warning("Failed to destroy browser in slot %d: %s", slot, exc)
