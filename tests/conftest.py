"""Pytest configuration providing shared fixtures for the sync pipeline."""

from __future__ import annotations

import time
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Iterable

import pytest

from airport_sync.config import SyncConfig
from airport_sync.engine import Page
from airport_sync.errors import FetchError


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep logs, .env lookups and env overrides inside the test's tmp dir."""

    monkeypatch.setenv("AIRPORT_SYNC_HOME", str(tmp_path))
    for name in ("API_KEY", "API_URL"):
        # setenv first so teardown also undoes values written by load_dotenv.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


def make_records(count: int, start: int = 0) -> list[dict[str, Any]]:
    return [
        {
            "id": f"ap-{index:04d}",
            "name": f"Airport {index:04d}",
            "iata": None if index % 7 == 0 else f"A{index:02d}",
            "elevation": index * 3,
            "location": {"lat": 1.5, "lon": -2.25},
        }
        for index in range(start, start + count)
    ]


class FakeSource:
    """In-memory paginated source with failure and latency injection."""

    def __init__(
        self,
        records: list[dict[str, Any]],
        page_size: int,
        declared_total: int | None = None,
        fail_offsets: Iterable[int] = (),
        delay: float = 0.0,
    ) -> None:
        self.records = records
        self.page_size = page_size
        self.declared_total = len(records) if declared_total is None else declared_total
        self.fail_offsets = set(fail_offsets)
        self.delay = delay
        self.calls: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._lock = Lock()

    def fetch(self, offset: int) -> Page:
        with self._lock:
            self.calls.append(offset)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if offset in self.fail_offsets:
                raise FetchError(
                    f"Failed to fetch airports (offset {offset}): 500 Internal Server Error",
                    status_code=500,
                    reason="Internal Server Error",
                    offset=offset,
                )
            items = tuple(self.records[offset : offset + self.page_size])
            return Page(offset=offset, items=items, count=len(items), total_count=self.declared_total)
        finally:
            with self._lock:
                self.in_flight -= 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def records_factory() -> Callable[..., list[dict[str, Any]]]:
    return make_records


@pytest.fixture
def fake_source() -> Callable[..., FakeSource]:
    return FakeSource


@pytest.fixture
def sample_config(tmp_path: Path) -> Callable[..., SyncConfig]:
    def _builder(**overrides: Any) -> SyncConfig:
        base: dict[str, Any] = {
            "api_url": "https://api.example.test",
            "api_key": "test-key",
            "page_size": 10,
            "max_concurrency": 3,
            "json_path": tmp_path / "airports.json",
            "csv_path": tmp_path / "airports.csv",
            "version_path": tmp_path / "package.json",
        }
        base.update(overrides)
        return SyncConfig(**base)

    return _builder
