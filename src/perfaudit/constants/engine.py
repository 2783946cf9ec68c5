"""Constants for the external audit engine adapter."""

from __future__ import annotations

DEFAULT_LIGHTHOUSE_BIN: str = "lighthouse"

MOBILE_SCREEN: dict[str, int | float | bool] = {
    "mobile": True,
    "width": 360,
    "height": 640,
    "deviceScaleFactor": 2,
    "disabled": False,
}
DESKTOP_SCREEN: dict[str, int | float | bool] = {
    "mobile": False,
    "width": 1920,
    "height": 1080,
    "deviceScaleFactor": 1,
    "disabled": False,
}

DEFAULT_THROTTLING: dict[str, float] = {
    "rttMs": 40,
    "throughputKbps": 10240,
    "cpuSlowdownMultiplier": 4,
    "requestLatencyMs": 0,
    "downloadThroughputKbps": 10240,
    "uploadThroughputKbps": 10240,
}

AUDIT_KEEP_FIELDS: tuple[str, ...] = (
    "displayValue",
    "explanation",
    "errorMessage",
    "warnings",
    "details",
    "numericValue",
    "numericUnit",
    "metricSavings",
)
