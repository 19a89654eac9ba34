"""Snapshot encodings: pretty JSON and flat CSV."""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from ..fetcher import Record
from .base import BaseExporter

_NEEDS_QUOTING = re.compile(r'[",\r\n]')


class JsonExporter(BaseExporter):
    """Pretty-printed JSON array, field order preserved per record."""

    name = "json"

    def encode(self, records: Sequence[Record]) -> bytes:
        return json.dumps(list(records), indent=2, ensure_ascii=False).encode("utf-8")

    def decode(self, payload: bytes) -> list[Record]:
        data = json.loads(payload.decode("utf-8"))
        if not isinstance(data, list):
            raise ValueError("JSON snapshot must contain an array of records")
        return data


class CsvExporter(BaseExporter):
    """Tabular snapshot whose header is the first record's field names."""

    name = "csv"

    def encode(self, records: Sequence[Record]) -> bytes:
        if not records:
            return b""
        fieldnames = list(records[0].keys())
        lines = [",".join(self.quote(str(key)) for key in fieldnames)]
        for record in records:
            lines.append(",".join(self.quote(self.cell(record.get(key))) for key in fieldnames))
        # Rows are newline separated, not newline terminated.
        return "\n".join(lines).encode("utf-8")

    @staticmethod
    def cell(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        return str(value)

    @staticmethod
    def quote(text: str) -> str:
        if _NEEDS_QUOTING.search(text):
            return '"' + text.replace('"', '""') + '"'
        return text


__all__ = ["CsvExporter", "JsonExporter"]
