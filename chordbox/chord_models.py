"""Data models for chord diagram layout: configuration, metrics and requests."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any, Final, Union

logger = logging.getLogger(__name__)

#: Fret value meaning "string not played".
MUTE: Final[str] = "x"

STANDARD_TUNING: Final[tuple[str, ...]] = ("E", "A", "D", "G", "B", "E")

DEFAULT_FONT_FAMILY: Final[str] = (
    '-apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, '
    'sans-serif, "Apple Color Emoji", "Segoe UI Emoji", "Segoe UI Symbol"'
)

Fret = Union[int, str]


class ChordBoxError(ValueError):
    """Base class for chord diagram errors."""


class InvalidConfigError(ChordBoxError):
    """Raised when a configuration value cannot produce a drawable board."""


class InvalidChordError(ChordBoxError):
    """Raised when a chord request references strings or frets that do not exist."""


# Style fields that fall back to ``default_color`` / ``stroke_width`` unless
# explicitly overridden.
_COLOR_INHERITED: Final[tuple[str, ...]] = (
    "bridge_color",
    "string_color",
    "fret_color",
    "stroke_color",
    "text_color",
)
_WIDTH_INHERITED: Final[tuple[str, ...]] = ("string_width", "fret_width")


def _snake_case(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


@dataclass(frozen=True)
class ChordBoxParams:
    """
    Board geometry and style of one chord diagram.

    Build instances with :meth:`from_overrides` so that the inherited style
    fields (colours and line widths) pick up ``default_color`` and
    ``stroke_width``.
    """

    num_strings: int = 6
    num_frets: int = 5
    x: float = 0
    y: float = 0
    width: float = 100
    height: float = 120
    stroke_width: float = 1
    show_tuning: bool = True
    default_color: str = "#666"
    bg_color: str = "#fff"
    label_color: str = "#fff"
    font_family: str = DEFAULT_FONT_FAMILY
    font_style: str = "light"
    font_weight: str = "100"
    label_weight: str = "100"
    font_size: float | None = None
    circle_radius: float | None = None
    bridge_color: str = "#666"
    string_color: str = "#666"
    fret_color: str = "#666"
    stroke_color: str = "#666"
    text_color: str = "#666"
    string_width: float = 1
    fret_width: float = 1

    @classmethod
    def from_overrides(
        cls, overrides: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> ChordBoxParams:
        """
        Merge caller overrides onto the defaults.

        Keys may be snake_case (``num_strings``) or camelCase (``numStrings``).
        Unknown keys are ignored.

        Raises:
            InvalidConfigError: If the merged configuration is not drawable.
        """
        known = {f.name for f in fields(cls)}
        merged: dict[str, Any] = {}
        for key, value in {**(overrides or {}), **kwargs}.items():
            name = _snake_case(key)
            if name not in known:
                logger.debug("ignoring unknown chord box parameter %r", key)
                continue
            merged[name] = value

        default_color = merged.get("default_color", cls.default_color)
        stroke_width = merged.get("stroke_width", cls.stroke_width)
        for name in _COLOR_INHERITED:
            merged.setdefault(name, default_color)
        for name in _WIDTH_INHERITED:
            merged.setdefault(name, stroke_width)

        params = cls(**merged)
        params.validate()
        return params

    def validate(self) -> None:
        """
        Raises:
            InvalidConfigError: Naming the first field whose value is unusable.
        """
        for name in ("num_strings", "num_frets"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfigError(f"{name} must be a positive integer, got {value!r}.")
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value <= 0:
                raise InvalidConfigError(f"{name} must be greater than 0, got {value!r}.")
        if self.stroke_width < 0:
            raise InvalidConfigError(
                f"stroke_width must not be negative, got {self.stroke_width!r}."
            )
        for name in ("font_size", "circle_radius"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidConfigError(f"{name} must be greater than 0, got {value!r}.")


@dataclass(frozen=True)
class ChordMetrics:
    """Pixel metrics derived once from a :class:`ChordBoxParams`."""

    width: float
    height: float
    spacing: float
    fret_spacing: float
    open_fret_spacing: float
    x: float
    y: float
    circle_radius: float
    barre_radius: float
    font_size: float
    bar_shift_x: float
    bridge_stroke_width: float

    @classmethod
    def from_params(cls, params: ChordBoxParams) -> ChordMetrics:
        # The board takes three quarters of the canvas; the rest is margin
        # for the position number, tuning labels and outer finger markers.
        width = params.width * 0.75
        height = params.height * 0.75
        spacing = width / params.num_strings
        fret_spacing = height / (params.num_frets + 2)

        return cls(
            width=width,
            height=height,
            spacing=spacing,
            fret_spacing=fret_spacing,
            open_fret_spacing=height / (params.num_frets + 1),
            x=params.x + params.width * 0.15 + spacing / 2,
            y=params.y + params.height * 0.15 + fret_spacing,
            circle_radius=params.circle_radius or width / 20,
            barre_radius=width / 25,
            font_size=params.font_size or math.ceil(width / 8),
            bar_shift_x=width / 28,
            bridge_stroke_width=math.ceil(height / 36),
        )


@dataclass(frozen=True)
class FingerMarker:
    """
    A fretted or muted string.

    Attributes:
        string:     1-indexed string number (mirrored to a visual column).
        fret:       Fret number (0 = open) or :data:`MUTE`.
        label:      Optional finger label drawn inside the marker.
        show_label: Force the label on or off. ``None`` keeps the legacy
                    rule: labels show only when the chord has more than two
                    markers.
    """

    string: int
    fret: Fret
    label: str | None = None
    show_label: bool | None = None

    @property
    def muted(self) -> bool:
        return self.fret == MUTE


@dataclass(frozen=True)
class Barre:
    """One finger across an inclusive span of strings at a single fret."""

    from_string: int
    to_string: int
    fret: int


@dataclass(frozen=True)
class ChordRequest:
    """Everything one ``ChordBox.draw`` call needs."""

    chord: tuple[FingerMarker, ...] = ()
    position: int = 0
    position_text: int = 0
    barres: tuple[Barre, ...] = ()
    tuning: tuple[str, ...] = STANDARD_TUNING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChordRequest:
        """
        Build a request from the JSON shape used by chord sheets.

        ``chord`` is a list of ``[string, fret, label?]`` entries; a compact
        ``shape`` string (``"x32010"``) may be given instead.

        Raises:
            InvalidChordError: If an entry cannot be interpreted.
        """
        if "shape" in data:
            chord = parse_shape(str(data["shape"]))
        else:
            chord = markers_from(_entry_list(data.get("chord", []), "chord"))

        barres = barres_from(_entry_list(data.get("barres", []), "barres"))

        return cls(
            chord=chord,
            position=_to_int(data.get("position", 0), "position"),
            position_text=_to_int(
                data.get("positionText", data.get("position_text", 0)), "positionText"
            ),
            barres=barres,
            tuning=parse_tuning(data.get("tuning")),
        )


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidChordError(f"{name} must be an integer, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidChordError(f"{name} must be an integer, got {value!r}.") from exc


def _entry_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise InvalidChordError(f"{name} must be a list, got {value!r}.")
    return list(value)


def parse_tuning(value: Any) -> tuple[str, ...]:
    """
    Normalise a tuning to string names.

    ``None`` means standard tuning. A string holding whitespace is split on it
    (``"E A D G B E"``); any other string is one name per character
    (``"DADGAD"``).

    Raises:
        InvalidChordError: If ``value`` is neither a string nor a list of names.
    """
    if value is None:
        return STANDARD_TUNING
    if isinstance(value, str):
        return tuple(value.split()) if re.search(r"\s", value) else tuple(value)
    if not isinstance(value, Iterable) or isinstance(value, (bytes, Mapping)):
        raise InvalidChordError(f"tuning must be a list of string names, got {value!r}.")
    return tuple(str(name) for name in value)


def _marker_from_entry(entry: Any) -> FingerMarker:
    if isinstance(entry, FingerMarker):
        return entry
    if isinstance(entry, Mapping):
        if "string" not in entry or "fret" not in entry:
            raise InvalidChordError(f"Chord entry needs string and fret, got {entry!r}.")
        return FingerMarker(
            string=_to_int(entry["string"], "string"),
            fret=_parse_fret(entry["fret"]),
            label=entry.get("label"),
            show_label=entry.get("showLabel", entry.get("show_label")),
        )
    if isinstance(entry, (str, bytes)) or not isinstance(entry, Iterable):
        raise InvalidChordError(f"Chord entry must be [string, fret, label?], got {entry!r}.")
    items = list(entry)
    if len(items) not in (2, 3):
        raise InvalidChordError(f"Chord entry must be [string, fret, label?], got {entry!r}.")
    label = str(items[2]) if len(items) == 3 and items[2] is not None else None
    return FingerMarker(
        string=_to_int(items[0], "string"), fret=_parse_fret(items[1]), label=label
    )


def _barre_from_entry(entry: Any) -> Barre:
    if isinstance(entry, Barre):
        return entry
    if not isinstance(entry, Mapping) or "fret" not in entry:
        raise InvalidChordError(f"Barre must be {{fromString, toString, fret}}, got {entry!r}.")
    return Barre(
        from_string=_to_int(entry.get("fromString", entry.get("from_string")), "fromString"),
        to_string=_to_int(entry.get("toString", entry.get("to_string")), "toString"),
        fret=_to_int(entry["fret"], "fret"),
    )


def _parse_fret(value: Any) -> Fret:
    if isinstance(value, str):
        token = value.strip().lower()
        if token == MUTE:
            return MUTE
        if not token.isdigit():
            raise InvalidChordError(f"Fret must be a number or '{MUTE}', got {value!r}.")
        return int(token)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidChordError(f"Fret must be a number or '{MUTE}', got {value!r}.")
    return value


def parse_shape(shape: str) -> tuple[FingerMarker, ...]:
    """
    Parse a compact chord shape, lowest-pitched string first.

    ``"x32010"`` is a C major chord on six strings. Separate tokens with
    ``-``, ``,`` or spaces to write frets of 10 or more
    (``"x-10-12-12-11-10"``).

    Raises:
        InvalidChordError: If the shape is empty or holds an invalid token.
    """
    text = shape.strip()
    tokens = re.split(r"[-,\s]+", text) if re.search(r"[-,\s]", text) else list(text)
    tokens = [t for t in tokens if t]
    if not tokens:
        raise InvalidChordError("Chord shape must not be empty.")

    num_strings = len(tokens)
    return tuple(
        FingerMarker(string=num_strings - idx, fret=_parse_fret(token))
        for idx, token in enumerate(tokens)
    )


def markers_from(entries: Iterable[Any]) -> tuple[FingerMarker, ...]:
    """Normalise ``(string, fret, label?)`` tuples or markers to :class:`FingerMarker`."""
    return tuple(_marker_from_entry(entry) for entry in entries)


def barres_from(entries: Iterable[Any]) -> tuple[Barre, ...]:
    """Normalise barre mappings or :class:`Barre` values."""
    return tuple(_barre_from_entry(entry) for entry in entries)
