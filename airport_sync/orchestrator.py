"""Sync orchestrator wiring together fetching, fan-out, reassembly, change-gate and publish."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

import structlog

from .config import SyncConfig, require_api_key
from .engine import ChangeGate, Page, PageFetcher, WorkerPool, reassemble, remaining_offsets
from .errors import FetchError
from .logging_conf import configure_logging
from .publisher import SnapshotPublisher
from .ui import ProgressReporter

# Server errors (>= 500) are always retryable on top of these.
RETRYABLE_STATUS_CODES = frozenset({408, 429})


class SupportsFetch(Protocol):
    def fetch(self, offset: int) -> Page: ...

    def close(self) -> None: ...


FetcherFactory = Callable[[SyncConfig, str], SupportsFetch]


@dataclass(slots=True)
class SyncSummary:
    """Outcome of one run, rendered by the CLI."""

    declared_total: int
    fetched: int
    pages: int
    json_changed: bool
    csv_changed: bool
    version: str | None = None
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return self.json_changed or self.csv_changed

    @property
    def written(self) -> bool:
        return self.version is not None

    @property
    def count_mismatch(self) -> bool:
        return self.fetched != self.declared_total


def is_retryable(error: FetchError) -> bool:
    if error.status_code is None:
        return True
    return error.status_code in RETRYABLE_STATUS_CODES or error.status_code >= 500


class SyncOrchestrator:
    """Run fetch first page → fan out → reassemble → compare → publish."""

    def __init__(
        self,
        config: SyncConfig,
        fetcher_factory: FetcherFactory | None = None,
        publisher: SnapshotPublisher | None = None,
        progress_enabled: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.logger = configure_logging().bind(component="orchestrator", resource=config.resource)
        self._fetcher_factory = fetcher_factory or self._default_fetcher
        self.publisher = publisher or SnapshotPublisher(
            config.json_path, config.csv_path, config.version_path, logger=self.logger
        )
        self.change_gate = ChangeGate(config.json_path, config.csv_path)
        self.progress_enabled = progress_enabled
        self._sleep = sleep

    def _default_fetcher(self, config: SyncConfig, api_key: str) -> SupportsFetch:
        return PageFetcher(config, api_key, logger=self.logger)

    def run(self, *, dry_run: bool = False) -> SyncSummary:
        api_key = require_api_key(self.config)
        fetcher = self._fetcher_factory(self.config, api_key)
        progress = ProgressReporter(enabled=self.progress_enabled, label=self.config.resource)
        self.logger.info(
            "sync_started",
            page_size=self.config.page_size,
            max_concurrency=self.config.max_concurrency,
        )
        try:
            first_page = self._fetch_page(fetcher, 0)
            offsets = remaining_offsets(first_page.total_count, self.config.page_size)
            self.logger.info(
                "first_page_fetched",
                declared_total=first_page.total_count,
                total_pages=len(offsets) + 1,
            )
            progress.start(len(offsets) + 1)
            progress.advance(first_page.offset, first_page.count)

            def _on_page(page: Page) -> None:
                progress.advance(page.offset, page.count)
                self.logger.info("page_fetched", offset=page.offset, count=page.count)

            pool = WorkerPool(self.config.max_concurrency, logger=self.logger)
            pages = pool.run(offsets, lambda offset: self._fetch_page(fetcher, offset), on_page=_on_page)
        finally:
            progress.close()
            fetcher.close()

        records = reassemble(first_page, pages, logger=self.logger)
        change_set = self.change_gate.evaluate(records)
        summary = SyncSummary(
            declared_total=first_page.total_count,
            fetched=len(records),
            pages=len(pages) + 1,
            json_changed=change_set.json_changed,
            csv_changed=change_set.csv_changed,
            dry_run=dry_run,
        )

        if not change_set.changed:
            self.logger.info("no_changes", records=len(records))
            return summary
        if dry_run:
            self.logger.info(
                "dry_run_skip_publish",
                json_changed=change_set.json_changed,
                csv_changed=change_set.csv_changed,
            )
            return summary

        summary.version = self.publisher.publish(change_set)
        return summary

    def _fetch_page(self, fetcher: SupportsFetch, offset: int) -> Page:
        attempt = 0
        while True:
            try:
                return fetcher.fetch(offset)
            except FetchError as exc:
                if attempt >= self.config.max_retries or not is_retryable(exc):
                    raise
                delay = self.config.retry_backoff * (2**attempt)
                attempt += 1
                self.logger.warning(
                    "fetch_retry",
                    offset=offset,
                    attempt=attempt,
                    delay=delay,
                    error=str(exc),
                )
                self._sleep(delay)


__all__ = ["RETRYABLE_STATUS_CODES", "SyncOrchestrator", "SyncSummary", "is_retryable"]
