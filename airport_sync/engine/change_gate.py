"""Byte-exact change detection against the previous snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .exporter import CsvExporter, JsonExporter
from .fetcher import Record


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Freshly encoded snapshot plus the per-encoding change decision."""

    new_json: bytes = field(repr=False)
    new_csv: bytes = field(repr=False)
    json_changed: bool
    csv_changed: bool

    @property
    def changed(self) -> bool:
        return self.json_changed or self.csv_changed


def read_bytes_if_exists(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


class ChangeGate:
    """Encode the dataset and compare each encoding with what is on disk."""

    def __init__(
        self,
        json_path: Path,
        csv_path: Path,
        json_exporter: JsonExporter | None = None,
        csv_exporter: CsvExporter | None = None,
    ) -> None:
        self.json_path = json_path
        self.csv_path = csv_path
        self.json_exporter = json_exporter or JsonExporter()
        self.csv_exporter = csv_exporter or CsvExporter()

    def evaluate(self, records: Sequence[Record]) -> ChangeSet:
        new_json = self.json_exporter.encode(records)
        new_csv = self.csv_exporter.encode(records)
        # A missing prior file never equals new bytes, so it counts as a change.
        prior_json = read_bytes_if_exists(self.json_path)
        prior_csv = read_bytes_if_exists(self.csv_path)
        return ChangeSet(
            new_json=new_json,
            new_csv=new_csv,
            json_changed=prior_json != new_json,
            csv_changed=prior_csv != new_csv,
        )


__all__ = ["ChangeGate", "ChangeSet", "read_bytes_if_exists"]
