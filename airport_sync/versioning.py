"""Read and bump the persisted ``{"version": "MAJOR.MINOR.PATCH"}`` record."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .errors import MalformedVersionError

DEFAULT_VERSION = "0.0.0"
_VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


def parse_version(value: Any) -> tuple[int, int, int]:
    if not isinstance(value, str):
        raise MalformedVersionError(value)
    match = _VERSION_PATTERN.match(value.strip())
    if match is None:
        raise MalformedVersionError(value)
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def bump_patch(value: Any) -> str:
    """Return ``value`` with PATCH incremented by one."""

    major, minor, patch = parse_version(value)
    return f"{major}.{minor}.{patch + 1}"


def read_version_record(path: Path) -> dict[str, Any]:
    """Load the version record; a missing file starts from 0.0.0."""

    if not path.exists():
        return {"version": DEFAULT_VERSION}
    try:
        record = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedVersionError(path.read_text(encoding="utf-8", errors="replace")[:80]) from exc
    if not isinstance(record, dict):
        raise MalformedVersionError(record)
    return record


def bumped_record(record: dict[str, Any]) -> dict[str, Any]:
    updated = dict(record)
    updated["version"] = bump_patch(record.get("version") or DEFAULT_VERSION)
    return updated


def render_record(record: dict[str, Any]) -> bytes:
    return (json.dumps(record, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


__all__ = [
    "DEFAULT_VERSION",
    "bump_patch",
    "bumped_record",
    "parse_version",
    "read_version_record",
    "render_record",
]
