"""Single-target and batch report collection.

One collection runs strictly in order: cache check, lease a browser, run the
audit engine, persist the report, release the browser. A batch runs many of
those concurrently and partitions the targets into succeeded and failed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from perfaudit.cache import ReportCache
from perfaudit.collector.memory import MemoryMonitor
from perfaudit.collector.retry import backoff_delay, is_retryable
from perfaudit.config import AuditConfig
from perfaudit.engine import AuditEngine, AuditOptions, LighthouseCliEngine
from perfaudit.exceptions import AuditEngineError, AuditTimeoutError, PerfAuditError
from perfaudit.model import BatchResult, CollectResult, FailedTarget, Target
from perfaudit.pool import BrowserPool, PlaywrightBrowserFactory
from perfaudit.validation import validate_target

logger = logging.getLogger(__name__)


class AuditCollector:
    """Coordinates the report cache, browser pool and audit engine."""

    def __init__(
        self,
        cache: ReportCache,
        pool: BrowserPool,
        engine: AuditEngine,
        config: AuditConfig | None = None,
        *,
        memory_monitor: MemoryMonitor | None = None,
        browser_factory: PlaywrightBrowserFactory | None = None,
    ) -> None:
        self.cache = cache
        self.pool = pool
        self.engine = engine
        self.config = config or AuditConfig()
        self.options = AuditOptions(
            throttling=self.config.throttling,
            blocked_url_patterns=self.config.blocked_url_patterns,
        )
        self._memory_monitor = memory_monitor
        self._browser_factory = browser_factory

    @classmethod
    def from_config(cls, config: AuditConfig) -> AuditCollector:
        """Build a collector whose cache, browsers and engine are sized by ``config``."""
        cache = ReportCache(config.cache_dir, max_reports=config.max_reports, ttl_hours=config.ttl_hours)
        factory = PlaywrightBrowserFactory(config.user_data_dir)
        pool = BrowserPool(factory, config.max_browsers, max_create_attempts=config.max_create_attempts)
        return cls(cache, pool, LighthouseCliEngine(config.lighthouse_bin), config, browser_factory=factory)

    async def aclose(self) -> None:
        """Destroy every pooled browser, then stop the browser driver."""
        await self.pool.close_all()
        if self._browser_factory is not None:
            await self._browser_factory.shutdown()

    async def collect_one(self, target: Target, *, force_refresh: bool = False) -> CollectResult:
        """Collect one target, reusing a fresh cached report unless forced.

        Raises ``ValidationError`` before touching any resource when the target
        is malformed. Engine, pool and cache failures propagate as typed errors.
        """
        target = validate_target(target)

        if not force_refresh:
            cached = self.cache.find(target, max_age_hours=self.config.collect_max_age_hours)
            if cached is not None:
                logger.debug("Cache hit for %s (%s)", target.url, cached.id)
                return CollectResult.from_entry(cached, cached=True)

        handle = await self.pool.acquire()
        try:
            try:
                report = await asyncio.wait_for(
                    self.engine.run(target, handle, self.options),
                    timeout=self.config.attempt_timeout_seconds,
                )
            except TimeoutError as exc:
                raise AuditTimeoutError(
                    f"Audit of {target.url} exceeded {self.config.attempt_timeout_seconds:g}s"
                ) from exc
            except PerfAuditError:
                raise
            except Exception as exc:
                raise AuditEngineError(f"Audit engine failed for {target.url}: {exc}") from exc
            if not isinstance(report, dict) or not report:
                raise AuditEngineError(f"Audit engine returned no usable report for {target.url}")
            entry = self.cache.insert(target, report)
        finally:
            await self.pool.release(handle)

        logger.info("Collected %s (%s, %s)", target.url, target.device, ",".join(target.categories))
        return CollectResult.from_entry(entry, cached=False)

    async def collect_batch(
        self,
        targets: Iterable[Target],
        *,
        concurrency: int | None = None,
        force_refresh: bool = False,
    ) -> BatchResult:
        """Collect many targets with bounded concurrency and per-item retry.

        Never raises for an individual target: every input lands in exactly
        one of ``succeeded`` or ``failed``.
        """
        items = list(targets)
        limit = self.config.concurrency if concurrency is None else concurrency
        if limit <= 0:
            raise ValueError("concurrency must be positive")
        semaphore = asyncio.Semaphore(limit)

        monitor = self._memory_monitor or MemoryMonitor(
            self.pool,
            interval_seconds=self.config.memory_check_interval_seconds,
            warning_mb=self.config.memory_warning_mb,
        )
        warnings_before = len(monitor.warnings)

        async def run_item(target: Target) -> CollectResult | FailedTarget:
            async with semaphore:
                return await self._collect_with_retry(target, force_refresh=force_refresh)

        logger.info("Starting batch of %d target(s) with concurrency %d", len(items), limit)
        monitor.start()
        try:
            outcomes = await asyncio.gather(*(run_item(target) for target in items))
        finally:
            await monitor.stop()

        succeeded = tuple(outcome for outcome in outcomes if isinstance(outcome, CollectResult))
        failed = tuple(outcome for outcome in outcomes if isinstance(outcome, FailedTarget))
        logger.info("Batch finished: %d succeeded, %d failed", len(succeeded), len(failed))
        return BatchResult(
            succeeded=succeeded,
            failed=failed,
            memory_warnings=tuple(monitor.warnings[warnings_before:]),
        )

    async def _collect_with_retry(self, target: Target, *, force_refresh: bool) -> CollectResult | FailedTarget:
        max_attempts = self.config.max_attempts
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self.collect_one(target, force_refresh=force_refresh)
            except PerfAuditError as exc:
                if is_retryable(exc) and attempt < max_attempts:
                    delay = backoff_delay(attempt, self.config.retry_backoff_seconds)
                    logger.warning(
                        "Attempt %d/%d for %s failed (%s); retrying in %.1fs",
                        attempt,
                        max_attempts,
                        getattr(target, "url", target),
                        exc,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("Giving up on %s after %d attempt(s): %s", getattr(target, "url", target), attempt, exc)
                return FailedTarget(
                    target=target,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    attempts=attempt,
                )
