"""Constants for the browser process pool."""

from __future__ import annotations

DEFAULT_MAX_BROWSERS: int = 5
DEFAULT_MAX_CREATE_ATTEMPTS: int = 3
DEFAULT_USER_DATA_DIR: str = ".lhdata"
USER_DATA_DIR_ENV: str = "LIGHTHOUSE_USER_DATA_DIR"
USER_DATA_SLOT_PREFIX: str = "browser-"

BLANK_PAGE_URL: str = "about:blank"
PROBE_EXPRESSION: str = "1 + 1"
PROBE_TIMEOUT_SECONDS: float = 5.0

CHROMIUM_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--disable-extensions",
)
