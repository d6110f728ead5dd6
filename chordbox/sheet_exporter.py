"""ChordSheetExporter: renders a list of chords into a self-contained HTML page."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from chordbox.canvas import SvgCanvas
from chordbox.chord_box import ChordBox
from chordbox.chord_models import ChordBoxParams, ChordRequest

logger = logging.getLogger(__name__)


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _element_id(name: str, index: int) -> str:
    slug = re.sub(r"[^\w-]+", "-", name.strip().lower()).strip("-")
    return f"chord-{index}-{slug}" if slug else f"chord-{index}"


@dataclass(frozen=True)
class ChordSheetEntry:
    """One named chord on a sheet."""

    name: str
    request: ChordRequest


@dataclass(frozen=True)
class ChordSheet:
    """A titled collection of chords sharing one board configuration."""

    title: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    entries: list[ChordSheetEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ChordSheet:
        """
        Raises:
            ValueError: If the document is not a chord sheet.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Chord sheet must be a JSON object.")
        chords = data.get("chords")
        if not isinstance(chords, list):
            raise ValueError("Chord sheet needs a 'chords' list.")
        params = data.get("params", {})
        if not isinstance(params, Mapping):
            raise ValueError("Chord sheet 'params' must be an object.")

        entries = []
        for idx, item in enumerate(chords, start=1):
            if not isinstance(item, Mapping):
                raise ValueError(f"Chord #{idx} must be an object.")
            entries.append(
                ChordSheetEntry(
                    name=str(item.get("name", "")),
                    request=ChordRequest.from_dict(item),
                )
            )
        return cls(title=str(data.get("title", "")), params=dict(params), entries=entries)


def load_chord_sheet(path: str) -> ChordSheet:
    """
    Read a chord sheet JSON document.

    Raises:
        ValueError: If the file is not valid JSON or not a chord sheet.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    return ChordSheet.from_dict(data)


class ChordSheetExporter:
    """
    Render chord sheets to HTML, one inline SVG card per chord.

    Each chord gets its own :class:`ChordBox` so diagrams never share canvas
    state.
    """

    def __init__(
        self, title: str | None = None, params: Mapping[str, Any] | None = None
    ) -> None:
        """
        Args:
            title:  Page title. Defaults to the title stored in each sheet.
            params: Board overrides applied on top of each sheet's own params.
        """
        self.title = title
        self.params: dict[str, Any] = dict(params or {})

    def resolve_params(self, sheet: ChordSheet) -> ChordBoxParams:
        return ChordBoxParams.from_overrides({**sheet.params, **self.params})

    def render_svg(
        self, entry: ChordSheetEntry, params: ChordBoxParams, index: int = 1
    ) -> str:
        """Draw one chord and return its SVG markup."""
        canvas = SvgCanvas(_element_id(entry.name, index))
        box = ChordBox(canvas, params)
        box.draw(entry.request)
        return canvas.to_svg()

    def render(self, sheet: ChordSheet) -> str:
        """
        Raises:
            InvalidChordError: If any chord does not fit the board.
        """
        params = self.resolve_params(sheet)
        title = self.title if self.title is not None else sheet.title
        cards = []
        for idx, entry in enumerate(sheet.entries, start=1):
            logger.debug("rendering chord #%d %r", idx, entry.name)
            cards.append((entry.name, self.render_svg(entry, params, idx)))
        return self.build_html(title, cards)

    def build_html(self, title: str, cards: list[tuple[str, str]]) -> str:
        """
        Wrap ``(name, svg)`` pairs in a self-contained HTML document.

        Each SVG is placed in its own ``.chord`` figure with the escaped chord
        name as caption. The stylesheet lays the figures out as a wrapping
        grid and keeps figures whole when printing.
        """
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        figures = "\n".join(
            f'    <figure class="chord">{svg}<figcaption>{_escape_html(name)}</figcaption></figure>'
            for name, svg in cards
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: -apple-system, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
      background: #fff;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      margin-bottom: 2rem;
      color: #222;
    }}
    .sheet {{
      display: flex;
      flex-wrap: wrap;
      gap: 1.5rem;
      justify-content: center;
    }}
    .chord {{
      margin: 0;
      text-align: center;
    }}
    .chord figcaption {{
      font-size: 1.1rem;
      color: #444;
    }}
    @media print {{
      body {{
        padding: 0;
      }}
      .chord {{
        break-inside: avoid;
        page-break-inside: avoid;
      }}
    }}
  </style>
</head>
<body>
{heading}  <div class="sheet">
{figures}
  </div>
</body>
</html>"""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export(self, sheet_path: str, output_path: str) -> None:
        """
        Render a chord sheet JSON file into HTML and write it to disk.

        Raises:
            ValueError: If the sheet or one of its chords is invalid.
            OSError: If the input cannot be read or the output cannot be written.
        """
        self.write(load_chord_sheet(sheet_path), output_path)

    def write(self, sheet: ChordSheet, output_path: str) -> None:
        """
        Render a loaded chord sheet and write the HTML to ``output_path``.

        Raises:
            ValueError: If one of the chords is invalid.
            OSError: If the output file cannot be written.
        """
        content = self.render(sheet)

        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
