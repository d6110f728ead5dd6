"""Canvas collaborators that receive the primitive drawing commands of a chord box."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Union

import svgwrite


class Canvas(ABC):
    """
    Abstract 2D drawing surface.

    Coordinates are in pixels with the origin at the top-left corner. Every
    primitive returns nothing; the chord box never reads back from a canvas.
    """

    @abstractmethod
    def size(self, width: float, height: float) -> None:
        """Allocate the drawing surface."""

    @abstractmethod
    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, stroke: str, stroke_width: float
    ) -> None:
        """Draw a straight segment."""

    @abstractmethod
    def circle(
        self, cx: float, cy: float, r: float, *, stroke: str, stroke_width: float, fill: str
    ) -> None:
        """Draw a circle centred on ``(cx, cy)``."""

    @abstractmethod
    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: str,
        radius: float = 0,
        stroke: str | None = None,
        stroke_width: float = 0,
    ) -> None:
        """Draw a rectangle with its top-left corner at ``(x, y)``."""

    @abstractmethod
    def text(
        self,
        x: float,
        y: float,
        msg: str,
        *,
        family: str,
        size: float,
        style: str,
        weight: str,
        stroke: str,
        stroke_width: float,
        fill: str,
    ) -> None:
        """Draw ``msg`` centred on ``(x, y)``."""


# ── Recorded commands ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SizeCommand:
    width: float
    height: float


@dataclass(frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float


@dataclass(frozen=True)
class CircleCommand:
    cx: float
    cy: float
    r: float
    stroke: str
    stroke_width: float
    fill: str


@dataclass(frozen=True)
class RectCommand:
    x: float
    y: float
    width: float
    height: float
    fill: str
    radius: float
    stroke: str | None
    stroke_width: float


@dataclass(frozen=True)
class TextCommand:
    x: float
    y: float
    msg: str
    family: str
    size: float
    style: str
    weight: str
    stroke: str
    stroke_width: float
    fill: str


DrawCommand = Union[SizeCommand, LineCommand, CircleCommand, RectCommand, TextCommand]
CommandT = TypeVar("CommandT", SizeCommand, LineCommand, CircleCommand, RectCommand, TextCommand)


class RecordingCanvas(Canvas):
    """Canvas that keeps every call as a command record, in call order."""

    def __init__(self) -> None:
        self.commands: list[DrawCommand] = []

    def of_type(self, kind: type[CommandT]) -> list[CommandT]:
        """Return the recorded commands of one kind, in call order."""
        return [cmd for cmd in self.commands if isinstance(cmd, kind)]

    def clear(self) -> None:
        self.commands.clear()

    def size(self, width: float, height: float) -> None:
        self.commands.append(SizeCommand(width, height))

    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, stroke: str, stroke_width: float
    ) -> None:
        self.commands.append(LineCommand(x1, y1, x2, y2, stroke, stroke_width))

    def circle(
        self, cx: float, cy: float, r: float, *, stroke: str, stroke_width: float, fill: str
    ) -> None:
        self.commands.append(CircleCommand(cx, cy, r, stroke, stroke_width, fill))

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: str,
        radius: float = 0,
        stroke: str | None = None,
        stroke_width: float = 0,
    ) -> None:
        self.commands.append(RectCommand(x, y, width, height, fill, radius, stroke, stroke_width))

    def text(
        self,
        x: float,
        y: float,
        msg: str,
        *,
        family: str,
        size: float,
        style: str,
        weight: str,
        stroke: str,
        stroke_width: float,
        fill: str,
    ) -> None:
        self.commands.append(
            TextCommand(x, y, msg, family, size, style, weight, stroke, stroke_width, fill)
        )


class SvgCanvas(Canvas):
    """
    Canvas backed by an ``svgwrite.Drawing``.

    The drawing is created with validation off: chord boxes use free-form CSS
    font values such as ``font-style: light`` that the SVG validator rejects.
    """

    def __init__(self, element_id: str | None = None) -> None:
        self.element_id = element_id
        self._dwg = svgwrite.Drawing(debug=False)
        if element_id:
            self._dwg["id"] = element_id

    def size(self, width: float, height: float) -> None:
        self._dwg["width"] = width
        self._dwg["height"] = height
        self._dwg.viewbox(0, 0, width, height)

    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, stroke: str, stroke_width: float
    ) -> None:
        self._dwg.add(
            self._dwg.line(start=(x1, y1), end=(x2, y2), stroke=stroke, stroke_width=stroke_width)
        )

    def circle(
        self, cx: float, cy: float, r: float, *, stroke: str, stroke_width: float, fill: str
    ) -> None:
        self._dwg.add(
            self._dwg.circle(
                center=(cx, cy), r=r, stroke=stroke, stroke_width=stroke_width, fill=fill
            )
        )

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: str,
        radius: float = 0,
        stroke: str | None = None,
        stroke_width: float = 0,
    ) -> None:
        extra: dict[str, object] = {"fill": fill, "stroke_width": stroke_width}
        if radius:
            extra["rx"] = radius
            extra["ry"] = radius
        if stroke is not None:
            extra["stroke"] = stroke
        self._dwg.add(self._dwg.rect(insert=(x, y), size=(width, height), **extra))

    def text(
        self,
        x: float,
        y: float,
        msg: str,
        *,
        family: str,
        size: float,
        style: str,
        weight: str,
        stroke: str,
        stroke_width: float,
        fill: str,
    ) -> None:
        self._dwg.add(
            self._dwg.text(
                msg,
                insert=(x, y),
                text_anchor="middle",
                dominant_baseline="central",
                font_family=family,
                font_size=size,
                font_style=style,
                font_weight=weight,
                stroke=stroke,
                stroke_width=stroke_width,
                fill=fill,
            )
        )

    def to_svg(self) -> str:
        """Serialise the drawing to an SVG document string (no XML declaration)."""
        return str(self._dwg.tostring())

    def save(self, output_path: str) -> None:
        """
        Write the drawing to ``output_path``.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(self.to_svg())
