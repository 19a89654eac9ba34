"""Bounded worker pool draining a fixed queue of page offsets."""

from __future__ import annotations

import math
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from threading import Lock
from typing import Callable, Iterable

import structlog

from .fetcher import Page


def remaining_offsets(total: int, page_size: int) -> list[int]:
    """Offsets of every page after the first for ``total`` records."""

    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if total <= 0:
        return []
    total_pages = math.ceil(total / page_size)
    return [page * page_size for page in range(1, total_pages)]


class OffsetQueue:
    """Immutable list of offsets plus a lock-guarded claim cursor."""

    def __init__(self, offsets: Iterable[int]) -> None:
        self._offsets = tuple(offsets)
        self._cursor = 0
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._offsets)

    @property
    def remaining(self) -> int:
        with self._lock:
            return len(self._offsets) - self._cursor

    def claim(self) -> int | None:
        with self._lock:
            if self._cursor >= len(self._offsets):
                return None
            offset = self._offsets[self._cursor]
            self._cursor += 1
            return offset

    def close(self) -> None:
        """Abandon every offset not yet claimed."""
        with self._lock:
            self._cursor = len(self._offsets)


class WorkerPool:
    """Run ``fetch`` over a set of offsets with at most ``max_concurrency`` threads."""

    def __init__(self, max_concurrency: int, logger: structlog.BoundLogger | None = None) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency
        self.logger = logger or structlog.get_logger("airport_sync.worker_pool")

    def run(
        self,
        offsets: Iterable[int],
        fetch: Callable[[int], Page],
        on_page: Callable[[Page], None] | None = None,
    ) -> list[Page]:
        """Fetch every offset exactly once and return pages in arrival order.

        The first failure closes the queue and is re-raised immediately.
        In-flight fetches on other workers are neither cancelled nor awaited;
        whatever they produce afterwards is discarded.
        """

        queue = OffsetQueue(offsets)
        if not len(queue):
            return []

        pages: list[Page] = []
        state_lock = Lock()
        failures: list[Exception] = []

        def _worker() -> None:
            try:
                while True:
                    offset = queue.claim()
                    if offset is None:
                        return
                    page = fetch(offset)
                    with state_lock:
                        if failures:
                            return
                        pages.append(page)
                    if on_page is not None:
                        on_page(page)
            except Exception as exc:
                with state_lock:
                    failures.append(exc)
                queue.close()
                raise

        workers = min(self.max_concurrency, len(queue))
        self.logger.debug("worker_pool_started", workers=workers, offsets=len(queue))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sync-worker")
        futures = [executor.submit(_worker) for _ in range(workers)]
        wait(futures, return_when=FIRST_EXCEPTION)

        with state_lock:
            first_failure = failures[0] if failures else None
            collected = list(pages)
        if first_failure is not None:
            executor.shutdown(wait=False, cancel_futures=True)
            self.logger.debug("worker_pool_aborted", error=str(first_failure))
            raise first_failure
        executor.shutdown(wait=True)
        return collected


__all__ = ["OffsetQueue", "WorkerPool", "remaining_offsets"]
