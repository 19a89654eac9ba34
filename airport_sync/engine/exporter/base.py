"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..fetcher import Record


class BaseExporter(ABC):
    """Uniform contract turning the ordered dataset into snapshot bytes."""

    name: str = "base"

    @abstractmethod
    def encode(self, records: Sequence[Record]) -> bytes:
        """Serialise the full dataset deterministically."""


__all__ = ["BaseExporter"]
