"""Unit tests for ChordSheetExporter and chord sheet loading."""

import json

import pytest

from chordbox.chord_models import InvalidChordError
from chordbox.sheet_exporter import ChordSheet, ChordSheetExporter, load_chord_sheet


def _sample_sheet() -> dict:
    return {
        "title": "Campfire",
        "params": {"numFrets": 4},
        "chords": [
            {"name": "C", "shape": "x32010"},
            {
                "name": "F",
                "chord": [[6, 1], [5, 3, "3"], [4, 3, "4"], [3, 2, "2"]],
                "barres": [{"fromString": 1, "toString": 6, "fret": 1}],
            },
        ],
    }


def test_build_html_title_in_title_tag() -> None:
    exporter = ChordSheetExporter()
    html = exporter.build_html("My Songs", [("C", "<svg></svg>")])
    assert "<title>My Songs</title>" in html


def test_build_html_title_in_h1() -> None:
    exporter = ChordSheetExporter()
    html = exporter.build_html("My Songs", [("C", "<svg></svg>")])
    assert "<h1>My Songs</h1>" in html


def test_build_html_empty_title_no_h1() -> None:
    exporter = ChordSheetExporter()
    html = exporter.build_html("", [("C", "<svg></svg>")])
    assert "<h1>" not in html


def test_build_html_escapes_title_and_names() -> None:
    exporter = ChordSheetExporter()
    html = exporter.build_html("Rock & Roll", [("<C>", "<svg></svg>")])
    assert "Rock &amp; Roll" in html
    assert "<figcaption>&lt;C&gt;</figcaption>" in html


def test_build_html_one_figure_per_chord() -> None:
    exporter = ChordSheetExporter()
    cards = [("C", "<svg>1</svg>"), ("G", "<svg>2</svg>"), ("D", "<svg>3</svg>")]
    html = exporter.build_html("Test", cards)
    assert html.count('<figure class="chord">') == 3


def test_build_html_is_valid_html_skeleton() -> None:
    exporter = ChordSheetExporter()
    html = exporter.build_html("Skeleton", [])
    assert html.startswith("<!DOCTYPE html>")
    assert "</html>" in html
    assert "@media print" in html


def test_render_uses_sheet_title_and_params() -> None:
    sheet = ChordSheet.from_dict(_sample_sheet())
    html = ChordSheetExporter().render(sheet)
    assert "<h1>Campfire</h1>" in html
    assert 'id="chord-1-c"' in html
    assert 'id="chord-2-f"' in html
    # Four frets: five fret lines and six strings per diagram.
    first_svg = html.split('<figure class="chord">')[1].split("</figure>")[0]
    assert first_svg.count("<line") == 11 + 2  # grid plus the muted-string cross


def test_render_title_override() -> None:
    sheet = ChordSheet.from_dict(_sample_sheet())
    html = ChordSheetExporter(title="Override").render(sheet)
    assert "<h1>Override</h1>" in html


def test_render_rejects_chord_outside_board() -> None:
    data = _sample_sheet()
    data["params"] = {"numStrings": 4}
    sheet = ChordSheet.from_dict(data)
    with pytest.raises(InvalidChordError):
        ChordSheetExporter().render(sheet)


@pytest.mark.parametrize(
    "data",
    [[], {"title": "x"}, {"chords": [1]}, {"chords": [], "params": []}],
)
def test_sheet_from_dict_rejects_malformed(data: object) -> None:
    with pytest.raises(ValueError):
        ChordSheet.from_dict(data)


def test_load_chord_sheet_invalid_json(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_chord_sheet(str(path))


def test_export_writes_html(tmp_path) -> None:
    src = tmp_path / "sheet.json"
    src.write_text(json.dumps(_sample_sheet()), encoding="utf-8")
    out = tmp_path / "sheet.html"

    ChordSheetExporter().export(str(src), str(out))

    content = out.read_text(encoding="utf-8")
    assert content.startswith("<!DOCTYPE html>")
    assert content.count("<svg") == 2


@pytest.mark.parametrize(
    "chord",
    [
        {"name": "C", "chord": [[None, 1]]},
        {"name": "C", "chord": 5},
        {"name": "C", "chord": [], "position": None},
        {"name": "C", "chord": [], "tuning": 7},
    ],
)
def test_sheet_from_dict_rejects_bad_chord_fields(chord: dict) -> None:
    with pytest.raises(ValueError):
        ChordSheet.from_dict({"chords": [chord]})


def test_export_with_spaced_tuning_string(tmp_path) -> None:
    src = tmp_path / "sheet.json"
    src.write_text(
        json.dumps({"chords": [{"name": "D", "shape": "xx0232", "tuning": "D A D G B E"}]}),
        encoding="utf-8",
    )
    out = tmp_path / "sheet.html"

    ChordSheetExporter().export(str(src), str(out))

    content = out.read_text(encoding="utf-8")
    assert content.count("</text>") == 6
    assert "> </text>" not in content
