"""Chord Lens - recognise chords from sets of sounding MIDI notes."""

from .chord_detector import ChordDetector, classify
from .chord_templates import (
    ChordTemplate,
    QualityFamily,
    all_templates_in_precedence_order,
    score_template,
)
from .held_notes import HeldNoteTracker
from .note_types import ChordChange, ChordDetectionResult, DetectorSettings

__version__ = "0.1.0"

__all__ = [
    "ChordChange",
    "ChordDetectionResult",
    "ChordDetector",
    "ChordTemplate",
    "DetectorSettings",
    "HeldNoteTracker",
    "QualityFamily",
    "all_templates_in_precedence_order",
    "classify",
    "score_template",
]
