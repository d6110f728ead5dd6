"""Tests for the chordbox command line (click CliRunner, files under tmp_path)."""

import json

import pytest
from click.testing import CliRunner

from chordbox import __version__
from chordbox.cli import main


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_draw_writes_svg(tmp_path) -> None:
    out = tmp_path / "c.svg"
    result = CliRunner().invoke(main, ["draw", "x32010", "-o", str(out)])
    assert result.exit_code == 0, result.output
    svg = out.read_text(encoding="utf-8")
    assert 'id="c"' in svg
    assert svg.count("<circle") == 5


def test_draw_with_barre_and_position(tmp_path) -> None:
    out = tmp_path / "bm.svg"
    result = CliRunner().invoke(
        main,
        ["draw", "x-1-3-3-2-1", "--position", "2", "--barre", "1:5:1", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    svg = out.read_text(encoding="utf-8")
    assert 'rx="' in svg
    assert ">2</text>" in svg


def test_draw_no_tuning(tmp_path) -> None:
    out = tmp_path / "d.svg"
    result = CliRunner().invoke(main, ["draw", "xx0232", "--no-tuning", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "<text" not in out.read_text(encoding="utf-8")


def test_draw_bad_barre_option(tmp_path) -> None:
    result = CliRunner().invoke(
        main, ["draw", "133211", "--barre", "one:six", "-o", str(tmp_path / "f.svg")]
    )
    assert result.exit_code == 2
    assert "FROM:TO:FRET" in result.output


def test_draw_barre_outside_board(tmp_path) -> None:
    out = tmp_path / "f.svg"
    result = CliRunner().invoke(main, ["draw", "0003", "--barre", "1:6:1", "-o", str(out)])
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert not out.exists()


def test_draw_bad_shape(tmp_path) -> None:
    result = CliRunner().invoke(main, ["draw", "x3?010", "-o", str(tmp_path / "c.svg")])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_sheet_writes_html_next_to_input(tmp_path) -> None:
    src = tmp_path / "songbook.json"
    src.write_text(
        json.dumps({"title": "Songbook", "chords": [{"name": "Em", "shape": "022000"}]}),
        encoding="utf-8",
    )
    result = CliRunner().invoke(main, ["sheet", str(src)])
    assert result.exit_code == 0, result.output
    html = (tmp_path / "songbook.html").read_text(encoding="utf-8")
    assert "<h1>Songbook</h1>" in html
    assert "<figcaption>Em</figcaption>" in html


@pytest.mark.parametrize(
    "document",
    [
        {"chords": "nope"},
        {"chords": [{"name": "C", "chord": [[None, 1]]}]},
        {"chords": [{"name": "C", "chord": 5}]},
        {"chords": [{"name": "C", "chord": [], "position": None}]},
        {"chords": [{"name": "C", "chord": [], "tuning": 7}]},
    ],
)
def test_sheet_invalid_document(tmp_path, document: dict) -> None:
    src = tmp_path / "bad.json"
    src.write_text(json.dumps(document), encoding="utf-8")
    result = CliRunner().invoke(main, ["sheet", str(src), "-o", str(tmp_path / "out.html")])
    assert result.exit_code == 1
    assert "Could not render sheet" in result.output


def test_sheet_read_error_reported_as_read_failure(tmp_path, monkeypatch) -> None:
    import chordbox.sheet_exporter

    def _unreadable(path: str) -> None:
        raise PermissionError(13, "Permission denied", path)

    src = tmp_path / "locked.json"
    src.write_text("{}", encoding="utf-8")
    monkeypatch.setattr(chordbox.sheet_exporter, "load_chord_sheet", _unreadable)

    result = CliRunner().invoke(main, ["sheet", str(src), "-o", str(tmp_path / "out.html")])

    assert result.exit_code == 1
    assert "Could not read sheet file" in result.output
    assert "Could not write output file" not in result.output
    assert not (tmp_path / "out.html").exists()


def test_draw_spaced_tuning(tmp_path) -> None:
    out = tmp_path / "g.svg"
    result = CliRunner().invoke(
        main, ["draw", "320003", "--tuning", "D G D G B D", "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").count("</text>") == 6
