"""Browser process pool."""

from __future__ import annotations

from perfaudit.pool.browser_pool import BrowserHandle, BrowserPool, HandleFactory
from perfaudit.pool.playwright_factory import BrowserProcess, PlaywrightBrowserFactory

__all__ = ["BrowserHandle", "BrowserPool", "BrowserProcess", "HandleFactory", "PlaywrightBrowserFactory"]
