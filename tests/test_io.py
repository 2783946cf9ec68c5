"""Tests for JSON IO helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from perfaudit.io import load_json_object, remove_quietly, write_json_atomic


def test_write_json_atomic_cleans_temp_file_on_error(tmp_path: Path) -> None:
    out_path = tmp_path / "report.json"
    temp_prefix = ".tmp-"
    temp_suffix = ".json"

    with pytest.raises(TypeError):
        write_json_atomic(
            path=out_path,
            payload={"bad": object()},
            temp_prefix=temp_prefix,
            temp_suffix=temp_suffix,
        )

    leftovers = [
        item for item in tmp_path.iterdir() if item.name.startswith(temp_prefix) and item.name.endswith(temp_suffix)
    ]
    assert not leftovers
    assert not out_path.exists()


def test_write_json_atomic_creates_parent_dirs(tmp_path: Path) -> None:
    out_path = tmp_path / "nested" / "dir" / "index.json"

    write_json_atomic(path=out_path, payload={"version": 1}, temp_prefix=".t-", temp_suffix=".tmp")

    assert load_json_object(out_path) == {"version": 1}


def test_load_json_object_requires_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="Expected a JSON object"):
        load_json_object(path)


def test_remove_quietly_reports_whether_file_existed(tmp_path: Path) -> None:
    path = tmp_path / "payload.json"
    path.write_text("{}", encoding="utf-8")

    assert remove_quietly(path) is True
    assert remove_quietly(path) is False
