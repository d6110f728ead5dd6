"""chordbox: chord diagram layout for stringed instruments."""

from chordbox.canvas import Canvas, RecordingCanvas, SvgCanvas
from chordbox.chord_box import ChordBox
from chordbox.chord_models import (
    MUTE,
    STANDARD_TUNING,
    Barre,
    ChordBoxError,
    ChordBoxParams,
    ChordMetrics,
    ChordRequest,
    FingerMarker,
    InvalidChordError,
    InvalidConfigError,
    parse_shape,
)

__version__ = "0.1.0"

__all__ = [
    "MUTE",
    "STANDARD_TUNING",
    "Barre",
    "Canvas",
    "ChordBox",
    "ChordBoxError",
    "ChordBoxParams",
    "ChordMetrics",
    "ChordRequest",
    "FingerMarker",
    "InvalidChordError",
    "InvalidConfigError",
    "RecordingCanvas",
    "SvgCanvas",
    "parse_shape",
]
