from airport_sync.engine.exporter import CsvExporter, JsonExporter


def test_json_exporter_round_trip(records_factory):
    records = records_factory(12)
    exporter = JsonExporter()
    payload = exporter.encode(records)
    decoded = exporter.decode(payload)
    assert decoded == records
    assert [list(item.keys()) for item in decoded] == [list(item.keys()) for item in records]


def test_json_exporter_pretty_prints_without_trailing_newline():
    payload = JsonExporter().encode([{"name": "Zürich", "id": 1}])
    assert payload.decode("utf-8") == '[\n  {\n    "name": "Zürich",\n    "id": 1\n  }\n]'


def test_csv_exporter_header_follows_first_record():
    payload = CsvExporter().encode(
        [
            {"name": "Alpha", "id": 1, "iata": "AAA"},
            {"id": 2, "name": "Beta", "extra": "ignored"},
        ]
    )
    lines = payload.decode("utf-8").split("\n")
    assert lines == ["name,id,iata", "Alpha,1,AAA", "Beta,2,"]


def test_csv_exporter_escapes_separators_quotes_and_newlines():
    payload = CsvExporter().encode(
        [
            {"id": 1, "note": 'He said "hi", ok'},
            {"id": 2, "note": "line one\nline two"},
            {"id": 3, "note": "a,b"},
        ]
    )
    text = payload.decode("utf-8")
    assert '1,"He said ""hi"", ok"' in text
    assert '2,"line one\nline two"' in text
    assert '3,"a,b"' in text


def test_csv_exporter_flattens_structured_values_and_nulls():
    payload = CsvExporter().encode(
        [{"id": 7, "location": {"lat": 1.5, "lon": -2}, "tags": ["x", "y"], "iata": None, "active": True}]
    )
    lines = payload.decode("utf-8").split("\n")
    assert lines[0] == "id,location,tags,iata,active"
    assert lines[1] == '7,"{""lat"":1.5,""lon"":-2}","[""x"",""y""]",,true'


def test_csv_exporter_empty_dataset():
    assert CsvExporter().encode([]) == b""
    assert JsonExporter().encode([]) == b"[]"


def test_csv_exporter_quotes_carriage_returns():
    assert CsvExporter().encode([{"a": "x\ry"}]) == b'a\n"x\ry"'


def test_csv_exporter_single_column_null_is_empty_cell():
    assert CsvExporter().encode([{"iata": "AAA"}, {"iata": None}]) == b"iata\nAAA\n"
