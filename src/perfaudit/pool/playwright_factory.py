"""Headless Chromium processes launched through Playwright.

Each pooled browser gets its own user data directory and a remote debugging
port, so an external audit engine can attach to it while the pool keeps
ownership of the process.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import socket
from dataclasses import dataclass
from pathlib import Path

from playwright.async_api import BrowserContext, Playwright, async_playwright

from perfaudit.constants.pool import (
    BLANK_PAGE_URL,
    CHROMIUM_LAUNCH_ARGS,
    PROBE_EXPRESSION,
    PROBE_TIMEOUT_SECONDS,
    USER_DATA_SLOT_PREFIX,
)

logger = logging.getLogger(__name__)


@dataclass
class BrowserProcess:
    """A running Chromium instance and the resources tied to it."""

    context: BrowserContext
    port: int
    user_data_dir: Path


def free_port() -> int:
    """Ask the OS for an unused local TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


class PlaywrightBrowserFactory:
    """``HandleFactory`` backed by Playwright persistent Chromium contexts."""

    def __init__(self, user_data_root: Path, *, headless: bool = True) -> None:
        self.user_data_root = user_data_root
        self.headless = headless
        self._playwright: Playwright | None = None
        self._start_lock = asyncio.Lock()

    async def create(self, slot: int) -> BrowserProcess:
        playwright = await self._ensure_started()
        user_data_dir = self.user_data_root / f"{USER_DATA_SLOT_PREFIX}{slot}"
        user_data_dir.mkdir(parents=True, exist_ok=True)
        port = free_port()
        context = await playwright.chromium.launch_persistent_context(
            str(user_data_dir),
            headless=self.headless,
            args=[*CHROMIUM_LAUNCH_ARGS, f"--remote-debugging-port={port}"],
        )
        logger.debug("Launched Chromium for slot %d on port %d", slot, port)
        return BrowserProcess(context=context, port=port, user_data_dir=user_data_dir)

    async def probe(self, process: BrowserProcess) -> bool:
        page = await process.context.new_page()
        try:
            result = await asyncio.wait_for(page.evaluate(PROBE_EXPRESSION), timeout=PROBE_TIMEOUT_SECONDS)
        finally:
            await page.close()
        return bool(result == 2)

    async def reset(self, process: BrowserProcess) -> None:
        """Close every page left open by the previous lease except blank ones."""
        for page in list(process.context.pages):
            if page.url != BLANK_PAGE_URL:
                await page.close()

    async def destroy(self, process: BrowserProcess) -> None:
        try:
            await process.context.close()
        finally:
            shutil.rmtree(process.user_data_dir, ignore_errors=True)

    async def shutdown(self) -> None:
        """Stop the Playwright driver once the pool has been closed."""
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def _ensure_started(self) -> Playwright:
        async with self._start_lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            return self._playwright
