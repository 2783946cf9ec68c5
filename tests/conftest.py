"""Shared pytest fixtures: fake browsers, fake audit engines and a fixed clock."""

from __future__ import annotations

import asyncio
import itertools
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from perfaudit.engine import AuditOptions
from perfaudit.model import Target
from perfaudit.pool import BrowserHandle, playwright_factory


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Return root directory for test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture()
def lcp_chain_report(fixtures_root: Path) -> dict[str, Any]:
    """Report whose paint image hangs off root -> styles.css -> app.js."""
    return json.loads((fixtures_root / "reports" / "lcp_chain.json").read_text(encoding="utf-8"))


class FakeClock:
    """Manually advanced wall clock in seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@dataclass
class FakeProcess:
    ident: int
    slot: int
    alive: bool = True
    reset_fails: bool = False
    resets: int = 0


class FakeHandleFactory:
    """In-memory stand-in for a browser launcher that records every transition."""

    def __init__(self, *, fail_creates: int = 0, destroy_delay: float = 0.0) -> None:
        self.fail_creates = fail_creates
        self.destroy_delay = destroy_delay
        self.created: list[FakeProcess] = []
        self.destroyed: list[FakeProcess] = []
        self.create_calls = 0
        self.max_live = 0
        self._ids = itertools.count(1)

    @property
    def live_count(self) -> int:
        return len(self.created) - len(self.destroyed)

    async def create(self, slot: int) -> FakeProcess:
        self.create_calls += 1
        await asyncio.sleep(0)
        if self.fail_creates > 0:
            self.fail_creates -= 1
            raise RuntimeError("browser launch failed")
        process = FakeProcess(ident=next(self._ids), slot=slot)
        self.created.append(process)
        self.max_live = max(self.max_live, self.live_count)
        return process

    async def probe(self, process: FakeProcess) -> bool:
        await asyncio.sleep(0)
        return process.alive

    async def reset(self, process: FakeProcess) -> None:
        process.resets += 1
        if process.reset_fails:
            raise RuntimeError("reset failed")

    async def destroy(self, process: FakeProcess) -> None:
        await asyncio.sleep(self.destroy_delay)
        process.alive = False
        self.destroyed.append(process)


@pytest.fixture()
def make_factory() -> Callable[..., FakeHandleFactory]:
    return FakeHandleFactory


def minimal_report(url: str) -> dict[str, Any]:
    return {
        "requestedUrl": url,
        "finalUrl": url,
        "categories": {
            "performance": {
                "id": "performance",
                "title": "Performance",
                "score": 0.5,
                "auditRefs": [{"id": "largest-contentful-paint", "weight": 25}],
            }
        },
        "audits": {
            "largest-contentful-paint": {
                "id": "largest-contentful-paint",
                "title": "Largest Contentful Paint",
                "score": 0.5,
                "numericValue": 3200,
                "numericUnit": "millisecond",
            }
        },
    }


@dataclass
class FakeEngine:
    """Audit engine returning canned reports with scripted per-URL failures."""

    failures: dict[str, list[BaseException]] = field(default_factory=dict)
    delay: float = 0.0
    calls: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0
    results: dict[str, Any] = field(default_factory=dict)

    async def run(self, target: Target, handle: BrowserHandle, options: AuditOptions) -> Any:
        self.calls.append(target.url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            scripted = self.failures.get(target.url)
            if scripted:
                raise scripted.pop(0)
            if target.url in self.results:
                return self.results[target.url]
            return minimal_report(target.url)
        finally:
            self.in_flight -= 1


@pytest.fixture()
def make_engine() -> Callable[..., FakeEngine]:
    return FakeEngine


@pytest.fixture()
def sample_report() -> Callable[[str], dict[str, Any]]:
    return minimal_report


class FakePage:
    def __init__(self, url: str = "about:blank", result: Any = 2) -> None:
        self.url = url
        self.result = result
        self.closed = False

    async def evaluate(self, expression: str) -> Any:
        return self.result

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, probe_result: Any = 2) -> None:
        self.pages: list[FakePage] = [FakePage()]
        self.probe_result = probe_result
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(result=self.probe_result)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeChromium:
    def __init__(self) -> None:
        self.launches: list[dict[str, Any]] = []

    async def launch_persistent_context(self, user_data_dir: str, **kwargs: Any) -> FakeContext:
        self.launches.append({"user_data_dir": user_data_dir, **kwargs})
        return FakeContext()


class FakePlaywright:
    """Stand-in for the Playwright driver; counts how often it was started."""

    def __init__(self) -> None:
        self.chromium = FakeChromium()
        self.starts = 0
        self.stopped = False

    async def start(self) -> FakePlaywright:
        self.starts += 1
        return self

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture()
def fake_playwright(monkeypatch: pytest.MonkeyPatch) -> FakePlaywright:
    """Route ``PlaywrightBrowserFactory`` to an in-memory Chromium driver."""
    driver = FakePlaywright()
    monkeypatch.setattr(playwright_factory, "async_playwright", lambda: driver)
    return driver
