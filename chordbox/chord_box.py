"""ChordBox: lays out a chord diagram and issues drawing commands to a canvas."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from chordbox.canvas import Canvas, SvgCanvas
from chordbox.chord_models import (
    MUTE,
    STANDARD_TUNING,
    Barre,
    ChordBoxParams,
    ChordMetrics,
    ChordRequest,
    FingerMarker,
    InvalidChordError,
    barres_from,
    markers_from,
    parse_tuning,
)

logger = logging.getLogger(__name__)

#: Labels are drawn only for chords with more than this many markers, unless
#: a marker sets ``show_label`` explicitly.
LABEL_MARKER_THRESHOLD = 2

LABEL_FONT_SCALE = 0.55
LABEL_STROKE_WIDTH = 0.7
MUTE_ASPECT = 0.8
TUNING_OFFSET_SCALE = 0.66


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_int(value: Any, name: str) -> None:
    if not _is_int(value):
        raise InvalidChordError(f"{name} must be an integer, got {value!r}.")


class ChordBox:
    """
    Computes the geometry of one chord diagram and draws it on a canvas.

    Draw order is fixed: bridge or position number, strings, frets, tuning
    labels, finger markers, barres.

    Usage::

        box = ChordBox("c-major", width=100, height=120)
        box.draw(chord=[(5, 3, "3"), (4, 2, "2"), (2, 1, "1"), (6, "x")])
        svg = box.canvas.to_svg()
    """

    def __init__(
        self,
        sel: Canvas | str | None = None,
        params: ChordBoxParams | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        """
        Args:
            sel:       Mount target. A :class:`Canvas` is drawn on directly;
                       anything else becomes the id of a new :class:`SvgCanvas`.
            params:    A ready configuration, or a mapping of overrides.
            overrides: Further configuration overrides (snake_case or camelCase).

        Raises:
            InvalidConfigError: Before any canvas is touched, if the merged
                                configuration is not drawable.
        """
        if isinstance(params, ChordBoxParams):
            if overrides:
                merged = {**vars(params), **overrides}
                params = ChordBoxParams.from_overrides(merged)
            else:
                params.validate()
        else:
            params = ChordBoxParams.from_overrides(params, **overrides)

        self.sel = sel
        self.params: ChordBoxParams = params
        self.metrics: ChordMetrics = ChordMetrics.from_params(params)
        logger.debug("chord box metrics: %s", self.metrics)

        self.canvas: Canvas = sel if isinstance(sel, Canvas) else SvgCanvas(sel)
        self.canvas.size(params.width, params.height)

        # Last drawn request
        self.chord: tuple[FingerMarker, ...] = ()
        self.position = 0
        self.position_text = 0
        self.barres: tuple[Barre, ...] = ()
        self.tuning: tuple[str, ...] = STANDARD_TUNING

    @property
    def num_strings(self) -> int:
        return self.params.num_strings

    @property
    def num_frets(self) -> int:
        return self.params.num_frets

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _validate(self, request: ChordRequest) -> None:
        _check_int(request.position, "position")
        _check_int(request.position_text, "position_text")
        if request.position < 0:
            raise InvalidChordError(f"position must not be negative, got {request.position}.")
        if request.position_text < 0:
            raise InvalidChordError(
                f"position_text must not be negative, got {request.position_text}."
            )
        for marker in request.chord:
            self._check_string(marker.string, "string")
            if marker.muted:
                continue
            if not _is_int(marker.fret):
                raise InvalidChordError(
                    f"fret must be an integer or '{MUTE}', got {marker.fret!r}."
                )
            if marker.fret < 0:
                raise InvalidChordError(
                    f"fret must not be negative, got {marker.fret} on string {marker.string}."
                )
        for barre in request.barres:
            self._check_string(barre.from_string, "from_string")
            self._check_string(barre.to_string, "to_string")
            _check_int(barre.fret, "barre fret")
            if barre.fret < 1:
                raise InvalidChordError(f"barre fret must be at least 1, got {barre.fret}.")

    def _check_string(self, string: int, name: str) -> None:
        _check_int(string, name)
        if not 1 <= string <= self.num_strings:
            raise InvalidChordError(
                f"{name} must be between 1 and {self.num_strings}, got {string}."
            )

    def _shift(self) -> int:
        # Diagrams drawn at position 1 with the label on row 1 are shifted up
        # by one fret so that fret 1 sits on the nut row.
        if self.position == 1 and self.position_text == 1:
            return self.position_text
        return 0

    def _fret_spacing(self) -> float:
        if len(self.tuning) == 0:
            return self.metrics.open_fret_spacing
        return self.metrics.fret_spacing

    def _column(self, string: int) -> int:
        return self.num_strings - string

    def _show_label(self, marker: FingerMarker) -> bool:
        if not marker.label or marker.muted:
            return False
        if marker.show_label is not None:
            return marker.show_label
        return len(self.chord) > LABEL_MARKER_THRESHOLD

    def _draw_text(self, x: float, y: float, msg: Any, **attrs: Any) -> None:
        text_attrs: dict[str, Any] = {
            "family": self.params.font_family,
            "size": self.metrics.font_size,
            "style": self.params.font_style,
            "weight": self.params.font_weight,
            "stroke": self.params.text_color,
            "stroke_width": 1,
            "fill": self.params.text_color,
        }
        text_attrs.update(attrs)
        self.canvas.text(x, y, f"{msg}", **text_attrs)

    def _draw_line(
        self, x: float, y: float, new_x: float, new_y: float, color: str, width: float
    ) -> None:
        self.canvas.line(x, y, new_x, new_y, stroke=color, stroke_width=width)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def draw(
        self,
        request: ChordRequest | None = None,
        *,
        chord: Iterable[Any] | None = None,
        position: int | None = None,
        barres: Iterable[Any] | None = None,
        position_text: int | None = None,
        tuning: Iterable[str] | None = None,
    ) -> None:
        """
        Draw one chord.

        Pass either a :class:`ChordRequest` or its fields as keywords. Chord
        entries may be :class:`FingerMarker` values or ``(string, fret,
        label?)`` tuples; barres may be :class:`Barre` values or mappings.

        Raises:
            InvalidChordError: If a string index is outside ``1..num_strings``,
                               a fret is negative, a barre sits below fret 1,
                               or an index, fret or position is not an integer.
                               Nothing is drawn in that case.
        """
        if request is None:
            request = ChordRequest(
                chord=markers_from(chord or ()),
                position=position or 0,
                position_text=position_text or 0,
                barres=barres_from(barres or ()),
                tuning=parse_tuning(tuning),
            )
        self._validate(request)

        self.chord = request.chord
        self.position = request.position
        self.position_text = request.position_text
        self.barres = request.barres
        self.tuning = request.tuning

        logger.debug(
            "drawing chord: %d markers, %d barres, position %d",
            len(self.chord),
            len(self.barres),
            self.position,
        )

        params = self.params
        m = self.metrics
        spacing = m.spacing
        fret_spacing = self._fret_spacing()

        # Draw guitar bridge
        if self.position <= 1:
            from_x = m.x - params.stroke_width / 2
            from_y = m.y - m.bridge_stroke_width
            self.canvas.rect(
                from_x,
                from_y,
                m.x + spacing * (self.num_strings - 1) - from_x + params.stroke_width / 2,
                m.y - from_y,
                fill=params.bridge_color,
                stroke_width=0,
            )
        else:
            # Draw position number
            self._draw_text(
                m.x - spacing / 3 - m.font_size / 2,
                m.y + fret_spacing * self.position_text + fret_spacing / 2,
                self.position,
            )

        # Draw strings
        for i in range(self.num_strings):
            self._draw_line(
                m.x + spacing * i,
                m.y,
                m.x + spacing * i,
                m.y + fret_spacing * self.num_frets,
                params.string_color,
                params.string_width,
            )

        # Draw frets
        for i in range(self.num_frets + 1):
            self._draw_line(
                m.x,
                m.y + fret_spacing * i,
                m.x + spacing * (self.num_strings - 1),
                m.y + fret_spacing * i,
                params.fret_color,
                params.fret_width,
            )

        # Draw tuning keys
        if params.show_tuning and len(self.tuning) != 0:
            for i in range(min(self.num_strings, len(self.tuning))):
                self._draw_text(
                    m.x + spacing * i,
                    m.y + self.num_frets * fret_spacing + m.font_size * TUNING_OFFSET_SCALE,
                    self.tuning[i],
                )

        for marker in self.chord:
            self.light_up(marker)

        for barre in self.barres:
            self.light_bar(barre)

    def light_up(self, marker: FingerMarker) -> None:
        """Draw one finger marker: an X for a muted string, else a circle."""
        params = self.params
        m = self.metrics
        fret_spacing = self._fret_spacing()

        fret_num = 0 if marker.muted else int(marker.fret) - self._shift()
        x = m.x + m.spacing * self._column(marker.string)
        y = m.y + fret_spacing * fret_num
        if fret_num == 0:
            y -= m.bridge_stroke_width
        cy = y - fret_spacing / 2

        if marker.muted:
            y_offset = m.circle_radius
            x_offset = y_offset * MUTE_ASPECT
            self._draw_line(
                x - x_offset, cy - y_offset, x + x_offset, cy + y_offset,
                params.stroke_color, params.stroke_width,
            )
            self._draw_line(
                x + x_offset, cy - y_offset, x - x_offset, cy + y_offset,
                params.stroke_color, params.stroke_width,
            )
        else:
            self.canvas.circle(
                x,
                cy,
                m.circle_radius,
                stroke=params.stroke_color,
                stroke_width=params.stroke_width,
                fill=params.stroke_color if fret_num > 0 else params.bg_color,
            )

        if self._show_label(marker):
            color = params.label_color if fret_num != 0 else params.stroke_color
            self._draw_text(
                x,
                cy,
                marker.label,
                weight=params.label_weight,
                size=m.font_size * LABEL_FONT_SCALE,
                stroke=color,
                stroke_width=LABEL_STROKE_WIDTH,
                fill=color,
            )

    def light_bar(self, barre: Barre) -> None:
        """Draw one barre as a rounded bar across its string span."""
        m = self.metrics
        fret_spacing = self._fret_spacing()
        fret_num = barre.fret - self._shift()

        left, right = sorted((self._column(barre.from_string), self._column(barre.to_string)))
        x = m.x + m.spacing * left - m.bar_shift_x
        x_to = m.x + m.spacing * right + m.bar_shift_x

        y = m.y + fret_spacing * (fret_num - 1) + fret_spacing / 4
        y_to = m.y + fret_spacing * (fret_num - 1) + (fret_spacing / 4) * 3

        self.canvas.rect(
            x,
            y,
            x_to - x,
            y_to - y,
            fill=self.params.stroke_color,
            radius=m.barre_radius,
        )
