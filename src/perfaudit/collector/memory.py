"""Periodic memory-pressure sampling while a batch runs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import psutil

from perfaudit.constants.collection import (
    BYTES_PER_MB,
    DEFAULT_MEMORY_CHECK_INTERVAL_SECONDS,
    DEFAULT_MEMORY_WARNING_MB,
)
from perfaudit.pool import BrowserPool

logger = logging.getLogger(__name__)


def process_tree_rss_mb() -> float:
    """Resident memory of this process and all its children, in MB.

    Browser processes are children of this one, so they are counted too.
    Children that exit while being sampled are skipped.
    """
    current = psutil.Process()
    total = current.memory_info().rss
    for child in current.children(recursive=True):
        try:
            total += child.memory_info().rss
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return total / BYTES_PER_MB


class MemoryMonitor:
    """Background task that samples memory and records threshold breaches.

    Warnings are surfaced, never acted on: the batch keeps running.
    """

    def __init__(
        self,
        pool: BrowserPool,
        *,
        interval_seconds: float = DEFAULT_MEMORY_CHECK_INTERVAL_SECONDS,
        warning_mb: float = DEFAULT_MEMORY_WARNING_MB,
        sampler: Callable[[], float] = process_tree_rss_mb,
    ) -> None:
        self.pool = pool
        self.interval_seconds = interval_seconds
        self.warning_mb = warning_mb
        self._sampler = sampler
        self._task: asyncio.Task[None] | None = None
        self.warnings: list[str] = []

    def check(self) -> str | None:
        """Take one sample; return the warning text when over threshold."""
        used_mb = self._sampler()
        logger.debug(
            "Memory %.1f MB; browsers active %d/%d",
            used_mb,
            self.pool.active_count,
            self.pool.total_count,
        )
        if used_mb <= self.warning_mb:
            return None
        message = (
            f"Memory usage {used_mb:.1f} MB exceeds {self.warning_mb} MB "
            f"({self.pool.active_count}/{self.pool.total_count} browsers active)"
        )
        logger.warning("%s", message)
        self.warnings.append(message)
        return message

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.check()
            except psutil.Error as exc:
                logger.debug("Memory sample failed: %s", exc)
