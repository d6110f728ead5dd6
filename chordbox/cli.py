"""chordbox CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from chordbox import __version__
from chordbox.canvas import SvgCanvas
from chordbox.chord_box import ChordBox
from chordbox.chord_models import (
    STANDARD_TUNING,
    Barre,
    ChordRequest,
    parse_shape,
    parse_tuning,
)

MAX_FRETS = 24


def _parse_barre(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[Barre]:
    """Turn ``FROM:TO:FRET`` option values into barres."""
    barres = []
    for value in values:
        parts = value.split(":")
        if len(parts) != 3 or not all(p.strip().isdigit() for p in parts):
            raise click.BadParameter(f"'{value}' is not FROM:TO:FRET (e.g. 1:6:1).")
        from_string, to_string, fret = (int(p) for p in parts)
        barres.append(Barre(from_string=from_string, to_string=to_string, fret=fret))
    return barres


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordbox")
@click.option("--verbose", "-v", is_flag=True, help="Log layout details to stderr.")
def main(verbose: bool) -> None:
    """chordbox — chord diagram renderer for stringed instruments."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ── draw subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("shape")
@click.option(
    "--output",
    "-o",
    default="chord.svg",
    show_default=True,
    metavar="PATH",
    help="Destination SVG file path.",
)
@click.option(
    "--position",
    type=click.IntRange(0, MAX_FRETS),
    default=0,
    show_default=True,
    help="Starting fret. 0 or 1 draws the nut; higher values print the number beside the grid.",
)
@click.option(
    "--position-text",
    type=click.IntRange(0, MAX_FRETS),
    default=0,
    show_default=True,
    help="Fret row the position number is aligned with.",
)
@click.option(
    "--barre",
    "barres",
    multiple=True,
    callback=_parse_barre,
    metavar="FROM:TO:FRET",
    help="Barre across strings FROM..TO at FRET. Repeatable.",
)
@click.option(
    "--tuning",
    default=" ".join(STANDARD_TUNING),
    show_default=True,
    help="Space-separated string names, lowest string first.",
)
@click.option("--no-tuning", is_flag=True, help="Hide the tuning row.")
@click.option("--frets", type=click.IntRange(1, MAX_FRETS), default=5, show_default=True)
@click.option("--width", type=click.FloatRange(min=1), default=100, show_default=True)
@click.option("--height", type=click.FloatRange(min=1), default=120, show_default=True)
def draw(
    shape: str,
    output: str,
    position: int,
    position_text: int,
    barres: list[Barre],
    tuning: str,
    no_tuning: bool,
    frets: int,
    width: float,
    height: float,
) -> None:
    """
    Draw one chord diagram as SVG.

    SHAPE lists frets from the lowest string up, x for muted strings.
    Separate tokens with dashes when a fret is 10 or higher.

    \b
    Examples:
      chordbox draw x32010 -o c.svg
      chordbox draw 133211 --barre 1:6:1 -o f.svg
      chordbox draw x-10-12-12-11-10 --position 10 --position-text 1
    """
    try:
        chord = parse_shape(shape)
        request = ChordRequest(
            chord=chord,
            position=position,
            position_text=position_text,
            barres=tuple(barres),
            tuning=() if no_tuning else parse_tuning(tuning),
        )
        canvas = SvgCanvas(Path(output).stem)
        box = ChordBox(
            canvas,
            num_strings=len(chord),
            num_frets=frets,
            width=width,
            height=height,
        )
        box.draw(request)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not draw chord — {exc}", err=True)
        sys.exit(1)

    try:
        canvas.save(output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write SVG file — {exc}", err=True)
        sys.exit(1)

    click.echo(f"Done!  Wrote '{output}'.")


# ── sheet subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("sheet_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination HTML file path. Defaults to SHEET_FILE with an .html suffix.",
)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Title shown in the page header. Defaults to the sheet's own title.",
)
def sheet(sheet_file: str, output: str | None, title: str | None) -> None:
    """
    Render a JSON chord sheet as an HTML page of chord diagrams.

    \b
    SHEET_FILE layout:
      {"title": "Songbook", "params": {"numFrets": 4},
       "chords": [{"name": "C", "shape": "x32010"},
                  {"name": "F", "chord": [[6, 1], [5, 3], [4, 3], [3, 2]],
                   "barres": [{"fromString": 1, "toString": 6, "fret": 1}]}]}
    """
    from chordbox.sheet_exporter import ChordSheetExporter, load_chord_sheet

    sheet_path = Path(sheet_file)
    resolved_output = output if output is not None else str(sheet_path.with_suffix(".html"))

    click.echo(f"chordbox v{__version__}")
    click.echo(f"  Sheet  : {sheet_file}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    try:
        chord_sheet = load_chord_sheet(sheet_file)
    except OSError as exc:
        click.echo(f"  ERROR: Could not read sheet file — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not render sheet — {exc}", err=True)
        sys.exit(1)

    exporter = ChordSheetExporter(title=title)
    try:
        exporter.write(chord_sheet, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not render sheet — {exc}", err=True)
        sys.exit(1)

    click.echo(f"Done!  Open '{resolved_output}' in any browser.")
