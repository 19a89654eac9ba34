from __future__ import annotations

import json
from pathlib import Path

import pytest

from airport_sync.errors import MalformedVersionError
from airport_sync.versioning import bump_patch, bumped_record, read_version_record, render_record


@pytest.mark.parametrize(
    ("current", "expected"),
    [("1.2.3", "1.2.4"), ("0.0.0", "0.0.1"), ("10.20.99", "10.20.100")],
)
def test_bump_patch(current: str, expected: str) -> None:
    assert bump_patch(current) == expected


@pytest.mark.parametrize("value", ["1.2.x", "1.2", "1.2.3.4", "-1.2.3", "v1.2.3", "", None, 123])
def test_bump_patch_rejects_malformed(value) -> None:
    with pytest.raises(MalformedVersionError):
        bump_patch(value)


def test_read_version_record_defaults_when_missing(tmp_path: Path) -> None:
    assert read_version_record(tmp_path / "package.json") == {"version": "0.0.0"}


def test_read_version_record_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(MalformedVersionError):
        read_version_record(path)


def test_bumped_record_preserves_other_keys() -> None:
    record = {"name": "airports", "version": "2.0.9", "files": ["airports.json"]}
    updated = bumped_record(record)
    assert updated == {"name": "airports", "version": "2.0.10", "files": ["airports.json"]}
    assert record["version"] == "2.0.9"
    assert list(updated) == ["name", "version", "files"]


def test_bumped_record_without_version_starts_at_zero() -> None:
    assert bumped_record({"name": "airports"})["version"] == "0.0.1"


def test_render_record_has_trailing_newline() -> None:
    rendered = render_record({"version": "1.0.0"})
    assert rendered.endswith(b"}\n")
    assert json.loads(rendered) == {"version": "1.0.0"}
