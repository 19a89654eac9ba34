from __future__ import annotations

from pathlib import Path

from airport_sync.engine import ChangeGate
from airport_sync.engine.exporter import CsvExporter, JsonExporter


def _gate(tmp_path: Path) -> ChangeGate:
    return ChangeGate(tmp_path / "airports.json", tmp_path / "airports.csv")


def test_missing_prior_snapshot_counts_as_change(tmp_path: Path, records_factory) -> None:
    change_set = _gate(tmp_path).evaluate(records_factory(3))
    assert change_set.json_changed
    assert change_set.csv_changed
    assert change_set.changed


def test_identical_snapshot_is_unchanged(tmp_path: Path, records_factory) -> None:
    records = records_factory(5)
    (tmp_path / "airports.json").write_bytes(JsonExporter().encode(records))
    (tmp_path / "airports.csv").write_bytes(CsvExporter().encode(records))

    change_set = _gate(tmp_path).evaluate(records)
    assert not change_set.changed
    assert change_set.new_json == (tmp_path / "airports.json").read_bytes()


def test_comparison_is_byte_exact(tmp_path: Path, records_factory) -> None:
    records = records_factory(2)
    (tmp_path / "airports.json").write_bytes(JsonExporter().encode(records) + b"\n")
    (tmp_path / "airports.csv").write_bytes(CsvExporter().encode(records))

    change_set = _gate(tmp_path).evaluate(records)
    assert change_set.json_changed
    assert not change_set.csv_changed
    assert change_set.changed


def test_key_order_difference_is_a_change(tmp_path: Path) -> None:
    (tmp_path / "airports.json").write_bytes(JsonExporter().encode([{"b": 1, "a": 2}]))
    (tmp_path / "airports.csv").write_bytes(CsvExporter().encode([{"a": 2, "b": 1}]))

    change_set = _gate(tmp_path).evaluate([{"a": 2, "b": 1}])
    assert change_set.json_changed
    assert not change_set.csv_changed


def test_change_gate_never_writes(tmp_path: Path, records_factory) -> None:
    _gate(tmp_path).evaluate(records_factory(4))
    assert not (tmp_path / "airports.json").exists()
    assert not (tmp_path / "airports.csv").exists()
