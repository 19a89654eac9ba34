"""Reassemble out-of-order pages into the ordered dataset."""

from __future__ import annotations

import warnings
from typing import Iterable

import structlog

from ..errors import CountMismatchWarning
from .fetcher import Page, Record


def reassemble(
    first_page: Page,
    pages: Iterable[Page],
    logger: structlog.BoundLogger | None = None,
) -> list[Record]:
    """Sort pages by offset and concatenate their items.

    A length that differs from the first page's declared total is reported
    but never fatal; the source may change between requests.
    """

    logger = logger or structlog.get_logger("airport_sync.reassembler")
    ordered = sorted([first_page, *pages], key=lambda page: page.offset)
    offsets = [page.offset for page in ordered]
    if len(set(offsets)) != len(offsets):
        raise ValueError(f"Duplicate page offsets in reassembly: {offsets}")

    records: list[Record] = []
    for page in ordered:
        records.extend(page.items)

    expected = first_page.total_count
    if len(records) != expected:
        logger.warning("count_mismatch", expected=expected, fetched=len(records))
        warnings.warn(
            f"Expected {expected} records but fetched {len(records)}.",
            CountMismatchWarning,
            stacklevel=2,
        )
    return records


__all__ = ["reassemble"]
