"""Tests for the CSV parse loop: records, row errors and accounting."""

import pytest

from src.exceptions import CsvSourceError
from src.pipeline.csv_ingest import parse_bookstores, parse_rows
from src.pipeline.csv_ingest.parser import RowError


def test_parse_bookstores_valid_rows(write_csv, csv_row):
    path = write_csv(
        [
            csv_row(),
            csv_row(name="Another Story", place_id="place-2", state="Ontario"),
        ]
    )
    result = parse_bookstores(path)
    assert [record.name for record in result.records] == [
        "Bellwoods Books",
        "Another Story",
    ]
    assert result.errors == []
    assert result.records[0].sat_hours == "10:00-17:00"


def test_parse_bookstores_bad_row_is_recorded_and_parsing_continues(write_csv, csv_row):
    rows = [
        csv_row(),
        csv_row(name="", place_id="place-2"),
        csv_row(name="Third", place_id="place-3"),
    ]
    result = parse_bookstores(write_csv(rows))
    assert [record.name for record in result.records] == ["Bellwoods Books", "Third"]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert isinstance(error, RowError)
    assert error.row == 2
    assert error.message.startswith("Row 2:")
    assert "name" in error.message
    assert error.raw["place_id"] == "place-2"


def test_every_row_accounted_for(write_csv, csv_row):
    rows = [
        csv_row(place_id="a"),
        csv_row(place_id=""),
        csv_row(place_id="b", latitude=""),
        csv_row(place_id="c", city=""),
        csv_row(place_id="d"),
    ]
    result = parse_bookstores(write_csv(rows))
    assert len(result.records) + len(result.errors) == len(rows)
    assert result.total_rows == len(rows)
    assert [error.row for error in result.errors] == [2, 3, 4]


def test_duplicate_place_id_is_rejected(write_csv, csv_row):
    rows = [csv_row(), csv_row(name="Copy")]
    result = parse_bookstores(write_csv(rows))
    assert len(result.records) == 1
    assert "duplicate place_id" in result.errors[0].message
    assert result.errors[0].row == 2


def test_unparseable_coordinates_keep_source_text(write_csv, csv_row):
    result = parse_bookstores(write_csv([csv_row(latitude="unknown")]))
    assert result.records[0].lat == "unknown"


def test_parse_bookstores_missing_file_raises(tmp_path):
    with pytest.raises(CsvSourceError):
        parse_bookstores(tmp_path / "missing.csv")


def test_parse_bookstores_header_only(write_csv):
    result = parse_bookstores(write_csv([]))
    assert result.records == []
    assert result.errors == []


def test_parse_rows_empty():
    assert parse_rows([]).total_rows == 0


def test_line_with_unquoted_comma_is_a_row_error(tmp_path):
    path = tmp_path / "unquoted.csv"
    path.write_text(
        "name,street,city,state,postal_code,latitude,longitude,place_id\n"
        "A,1 Main St,Toronto,ON,M1M 1M1,43.65,-79.38,p1\n"
        "B,2 Main St, Unit 4,Toronto,ON,M2M 2M2,43.66,-79.39,p2\n"
        "C,3 Main St,Ottawa,ON,K1K 1K1,45.42,-75.70,p3\n",
        encoding="utf-8",
    )
    result = parse_bookstores(path)
    assert [record.name for record in result.records] == ["A", "C"]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.row == 2
    assert "expected 8 fields, found 9" in error.message
    assert error.raw["name"] == "B"
    assert error.raw["_extra_1"] == "p2"
    assert result.total_rows == 3


def test_accepted_rows_carry_quality_warnings(write_csv, csv_row):
    rows = [
        csv_row(),
        csv_row(place_id="place-2", latitude="200", site="bellwoods.example"),
    ]
    result = parse_bookstores(write_csv(rows))
    assert len(result.records) == 2
    assert result.errors == []
    assert [(w.row, w.field) for w in result.warnings] == [
        (2, "lat"),
        (2, "website"),
    ]
    assert "out of range" in result.warnings[0].message


def test_header_warnings_come_first(csv_row, write_csv):
    header = [
        "name",
        "street",
        "city",
        "state",
        "postal_code",
        "latitude",
        "longitude",
        "place_id",
        "city",
    ]
    result = parse_bookstores(write_csv([csv_row()], header=header))
    assert len(result.records) == 1
    assert result.warnings[0].row is None
    assert 'Duplicate header "city"' in result.warnings[0].message
