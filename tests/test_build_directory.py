"""Tests for the build_directory command line entrypoint."""

import io
import json

import pytest
from rich.console import Console

import src.build_directory as cli
import src.config as project_config
from src.exceptions import UserInputError


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch, tmp_path):
    monkeypatch.setattr(project_config, "PROJECT_ROOT", tmp_path / "root")


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def _output(console):
    return console.file.getvalue()


@pytest.fixture
def csv_path(write_csv, csv_row):
    return write_csv(
        [
            csv_row(),
            csv_row(
                name="Munro's Books",
                place_id="place-2",
                city="Victoria",
                state="BC",
                latitude="48.4245",
                longitude="-123.3656",
                rating="4.8",
            ),
            csv_row(name="", place_id="place-3"),
        ]
    )


def test_parse_location():
    location = cli.parse_location(" 43.65 , -79.38 ")
    assert (location.lat, location.lng) == (43.65, -79.38)
    for bad in ("43.65", "north,west", "1,2,3", "91,0"):
        with pytest.raises(UserInputError):
            cli.parse_location(bad)


def test_main_builds_and_prints_summary(tmp_path, csv_path, console):
    out_dir = tmp_path / "out"
    code = cli.main(["--csv", str(csv_path), "--output", str(out_dir)], console=console)
    assert code == 0
    text = _output(console)
    assert "Ontario" in text and "British Columbia" in text
    assert "2 stores loaded" in text
    assert "Row 3:" in text
    assert "matching stores" not in text
    payload = json.loads((out_dir / "bookstores.json").read_text(encoding="utf-8"))
    assert len(payload["data"]) == 2


def test_main_search_with_filters(tmp_path, csv_path, console):
    code = cli.main(
        [
            "--csv",
            str(csv_path),
            "--output",
            str(tmp_path / "out"),
            "--query",
            "munro",
            "--min-rating",
            "4.5",
        ],
        console=console,
    )
    assert code == 0
    text = _output(console)
    assert "1 matching stores" in text
    assert "munros-books-victoria-bc" in text


def test_main_distance_search(tmp_path, csv_path, console):
    code = cli.main(
        [
            "--csv",
            str(csv_path),
            "--output",
            str(tmp_path / "out"),
            "--near",
            "43.6532,-79.3832",
            "--max-distance",
            "10",
        ],
        console=console,
    )
    assert code == 0
    text = _output(console)
    assert "1 matching stores" in text
    assert "bellwoods-books-toronto-on" in text


def test_main_bad_location_returns_error(tmp_path, csv_path, console):
    code = cli.main(
        ["--csv", str(csv_path), "--output", str(tmp_path / "out"), "--near", "here"],
        console=console,
    )
    assert code == 1
    assert "Expected LAT,LNG" in _output(console)
    assert not (tmp_path / "out").exists()


def test_main_missing_csv_returns_error(tmp_path, console):
    code = cli.main(
        ["--csv", str(tmp_path / "missing.csv"), "--output", str(tmp_path / "out")],
        console=console,
    )
    assert code == 1


def test_wants_search_only_for_query_or_filters():
    parser = cli.build_parser()
    assert cli.wants_search(parser.parse_args([])) is False
    assert cli.wants_search(parser.parse_args(["--query", "books"])) is True
    assert cli.wants_search(parser.parse_args(["--open-late"])) is True
