"""Lighthouse CLI adapter that audits through a pooled browser's debugging port."""

from __future__ import annotations

import asyncio
import json
import logging

from perfaudit.constants.engine import (
    DEFAULT_LIGHTHOUSE_BIN,
    DEFAULT_THROTTLING,
    DESKTOP_SCREEN,
    MOBILE_SCREEN,
)
from perfaudit.engine.base import AuditOptions
from perfaudit.engine.normalize import normalize_report
from perfaudit.exceptions import AuditEngineError
from perfaudit.model import Target
from perfaudit.pool import BrowserHandle
from perfaudit.types import JsonObject

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 500


def _flag_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_args(target: Target, port: int, options: AuditOptions, *, binary: str = DEFAULT_LIGHTHOUSE_BIN) -> list[str]:
    """Build the lighthouse command line for one audit."""
    screen = MOBILE_SCREEN if target.device == "mobile" else DESKTOP_SCREEN
    throttling = DEFAULT_THROTTLING if options.throttling is None else options.throttling

    args = [
        binary,
        target.url,
        f"--port={port}",
        "--output=json",
        "--output-path=stdout",
        "--quiet",
        f"--only-categories={','.join(target.categories)}",
        f"--form-factor={target.device}",
    ]
    args.extend(f"--screenEmulation.{key}={_flag_value(value)}" for key, value in screen.items())
    args.extend(f"--throttling.{key}={_flag_value(value)}" for key, value in sorted(throttling.items()))
    args.extend(f"--blocked-url-patterns={pattern}" for pattern in options.blocked_url_patterns)
    return args


class LighthouseCliEngine:
    """``AuditEngine`` that shells out to the ``lighthouse`` CLI."""

    def __init__(self, binary: str = DEFAULT_LIGHTHOUSE_BIN) -> None:
        self.binary = binary

    async def run(self, target: Target, handle: BrowserHandle, options: AuditOptions) -> JsonObject:
        port = getattr(handle.process, "port", None)
        if not isinstance(port, int):
            raise AuditEngineError(f"Browser in slot {handle.slot} exposes no debugging port")

        args = build_args(target, port, options, binary=self.binary)
        logger.debug("Running %s for %s on port %d", self.binary, target.url, port)
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AuditEngineError(f"Failed to start {self.binary}: {exc}") from exc

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace").strip()[-STDERR_TAIL_CHARS:]
            raise AuditEngineError(f"{self.binary} exited with code {proc.returncode} for {target.url}: {tail}")
        if not stdout.strip():
            raise AuditEngineError(f"{self.binary} produced no output for {target.url}")
        try:
            raw = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise AuditEngineError(f"{self.binary} produced invalid JSON for {target.url}: {exc}") from exc
        return normalize_report(raw)
