"""Config loading and normalization for audit collection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from perfaudit.config.model import AuditConfig
from perfaudit.constants.config import CONFIG_ALLOWED_KEYS, CONFIG_FILENAME
from perfaudit.constants.pool import USER_DATA_DIR_ENV
from perfaudit.exceptions import ConfigError


def load_config(root: Path, config_path: Path | None = None) -> AuditConfig:
    """Load and validate config from ``perfaudit.yaml`` or an explicit path.

    Relative directories in the file resolve against ``root``. The
    ``LIGHTHOUSE_USER_DATA_DIR`` environment variable overrides
    ``user_data_dir`` when set.
    """
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        raw: dict[str, Any] = {}
    else:
        raw = _read_yaml_mapping(path)

    unknown = sorted(set(raw) - CONFIG_ALLOWED_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    defaults = AuditConfig()
    user_data_dir = _resolve_dir(root, raw.get("user_data_dir", defaults.user_data_dir), "user_data_dir")
    env_user_data_dir = os.environ.get(USER_DATA_DIR_ENV)
    if env_user_data_dir:
        user_data_dir = Path(env_user_data_dir).resolve()

    max_reports = _positive_int(raw.get("max_reports", defaults.max_reports), "max_reports")
    max_browsers = _positive_int(raw.get("max_browsers", defaults.max_browsers), "max_browsers")
    concurrency = _positive_int(raw.get("concurrency", defaults.concurrency), "concurrency")
    max_attempts = _positive_int(raw.get("max_attempts", defaults.max_attempts), "max_attempts")
    max_create_attempts = _positive_int(
        raw.get("max_create_attempts", defaults.max_create_attempts), "max_create_attempts"
    )
    memory_warning_mb = _positive_int(raw.get("memory_warning_mb", defaults.memory_warning_mb), "memory_warning_mb")

    lighthouse_bin = raw.get("lighthouse_bin", defaults.lighthouse_bin)
    if not isinstance(lighthouse_bin, str) or not lighthouse_bin.strip():
        raise ConfigError("lighthouse_bin must be a non-empty string")

    return AuditConfig(
        cache_dir=_resolve_dir(root, raw.get("cache_dir", defaults.cache_dir), "cache_dir"),
        max_reports=max_reports,
        ttl_hours=_positive_number(raw.get("ttl_hours", defaults.ttl_hours), "ttl_hours"),
        collect_max_age_hours=_non_negative_number(
            raw.get("collect_max_age_hours", defaults.collect_max_age_hours), "collect_max_age_hours"
        ),
        max_browsers=max_browsers,
        user_data_dir=user_data_dir,
        concurrency=concurrency,
        max_attempts=max_attempts,
        retry_backoff_seconds=_non_negative_number(
            raw.get("retry_backoff_seconds", defaults.retry_backoff_seconds), "retry_backoff_seconds"
        ),
        attempt_timeout_seconds=_positive_number(
            raw.get("attempt_timeout_seconds", defaults.attempt_timeout_seconds), "attempt_timeout_seconds"
        ),
        memory_check_interval_seconds=_positive_number(
            raw.get("memory_check_interval_seconds", defaults.memory_check_interval_seconds),
            "memory_check_interval_seconds",
        ),
        memory_warning_mb=memory_warning_mb,
        max_create_attempts=max_create_attempts,
        lighthouse_bin=lighthouse_bin.strip(),
        throttling=_throttling(raw.get("throttling")),
        blocked_url_patterns=tuple(_ensure_string_list(raw.get("blocked_url_patterns", []), "blocked_url_patterns")),
    )


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file at {path}: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")
    return raw


def _resolve_dir(root: Path, value: Any, key_name: str) -> Path:
    if isinstance(value, Path):
        candidate = value
    elif isinstance(value, str) and value.strip():
        candidate = Path(value.strip())
    else:
        raise ConfigError(f"{key_name} must be a non-empty path string")
    return candidate if candidate.is_absolute() else (root / candidate)


def _positive_int(value: Any, key_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{key_name} must be a positive integer")
    return value


def _positive_number(value: Any, key_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{key_name} must be a positive number")
    return float(value)


def _non_negative_number(value: Any, key_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"{key_name} must be a non-negative number")
    return float(value)


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _throttling(value: Any) -> dict[str, float] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError("throttling must be a mapping")
    throttling: dict[str, float] = {}
    for key, number in value.items():
        if not isinstance(key, str):
            raise ConfigError("throttling keys must be strings")
        throttling[key] = _non_negative_number(number, f"throttling.{key}")
    return throttling
