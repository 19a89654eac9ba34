"""Engine components orchestrating fetch → fan-out → reassemble → change-gate."""

from .change_gate import ChangeGate, ChangeSet
from .fetcher import Page, PageFetcher, Record
from .reassembler import reassemble
from .worker_pool import OffsetQueue, WorkerPool, remaining_offsets

__all__ = [
    "ChangeGate",
    "ChangeSet",
    "OffsetQueue",
    "Page",
    "PageFetcher",
    "Record",
    "WorkerPool",
    "reassemble",
    "remaining_offsets",
]
