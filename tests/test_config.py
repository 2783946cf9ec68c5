"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from perfaudit.config import AuditConfig, load_config
from perfaudit.exceptions import ConfigError


def _write(root: Path, content: str) -> Path:
    config_path = root / "perfaudit.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_load_config_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIGHTHOUSE_USER_DATA_DIR", raising=False)

    loaded = load_config(tmp_path)
    defaults = AuditConfig()

    assert loaded.max_reports == defaults.max_reports
    assert loaded.max_browsers == 5
    assert loaded.collect_max_age_hours == 1.0
    assert loaded.cache_dir == tmp_path.resolve() / ".lhdata" / "reports"
    assert loaded.user_data_dir == tmp_path.resolve() / ".lhdata"
    assert loaded.throttling is None


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    _write(tmp_path, "")

    assert load_config(tmp_path).concurrency == AuditConfig().concurrency


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path, tmp_path / "elsewhere.yaml")


def test_values_are_read_and_dirs_resolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIGHTHOUSE_USER_DATA_DIR", raising=False)
    _write(
        tmp_path,
        "\n".join(
            [
                "cache_dir: store/reports",
                "user_data_dir: /var/tmp/browsers",
                "max_reports: 10",
                "ttl_hours: 0.5",
                "collect_max_age_hours: 0",
                "concurrency: 2",
                "retry_backoff_seconds: 0",
                "lighthouse_bin: ' /opt/lh/bin/lighthouse '",
                "blocked_url_patterns: ['*.doubleclick.net', '  ']",
                "throttling:",
                "  rttMs: 150",
                "  cpuSlowdownMultiplier: 1",
                "",
            ]
        ),
    )

    loaded = load_config(tmp_path)

    assert loaded.cache_dir == tmp_path.resolve() / "store" / "reports"
    assert loaded.user_data_dir == Path("/var/tmp/browsers")
    assert loaded.max_reports == 10
    assert loaded.ttl_hours == 0.5
    assert loaded.collect_max_age_hours == 0.0
    assert loaded.concurrency == 2
    assert loaded.retry_backoff_seconds == 0.0
    assert loaded.lighthouse_bin == "/opt/lh/bin/lighthouse"
    assert loaded.blocked_url_patterns == ("*.doubleclick.net",)
    assert loaded.throttling == {"rttMs": 150.0, "cpuSlowdownMultiplier": 1.0}


def test_env_overrides_user_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path, "user_data_dir: from-file\n")
    monkeypatch.setenv("LIGHTHOUSE_USER_DATA_DIR", str(tmp_path / "from-env"))

    assert load_config(tmp_path).user_data_dir == (tmp_path / "from-env").resolve()


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "max_reports: 5\npool_size: 3\n")

    with pytest.raises(ConfigError, match="pool_size"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("yaml_content", "expected_match"),
    [
        ("max_reports: 0\n", "max_reports"),
        ("max_browsers: true\n", "max_browsers"),
        ("concurrency: 2.5\n", "concurrency"),
        ("ttl_hours: -1\n", "ttl_hours"),
        ("retry_backoff_seconds: -0.5\n", "retry_backoff_seconds"),
        ("cache_dir: ''\n", "cache_dir"),
        ("lighthouse_bin: 42\n", "lighthouse_bin"),
        ("blocked_url_patterns: '*.ads.net'\n", "blocked_url_patterns"),
        ("throttling: [1, 2]\n", "throttling"),
        ("throttling:\n  rttMs: fast\n", "throttling.rttMs"),
    ],
    ids=[
        "zero_max_reports",
        "bool_max_browsers",
        "float_concurrency",
        "negative_ttl",
        "negative_backoff",
        "empty_cache_dir",
        "non_string_binary",
        "string_patterns",
        "list_throttling",
        "non_numeric_throttling",
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, yaml_content: str, expected_match: str) -> None:
    _write(tmp_path, yaml_content)

    with pytest.raises(ConfigError, match=expected_match):
        load_config(tmp_path)


def test_non_mapping_document_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "max_reports: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(tmp_path)
