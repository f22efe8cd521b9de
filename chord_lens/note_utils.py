"""Utility functions for working with MIDI note numbers and note names."""

import numbers
import re
from typing import Iterable, List, Tuple

import numpy as np

from .logger import get_logger

# Get logger for this module
logger = get_logger(__name__)

MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127
DEFAULT_OCTAVE = 4

NOTE_NAMES_SHARPS = ("C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯", "A", "A♯", "B")
NOTE_NAMES_FLATS = ("C", "D♭", "D", "E♭", "E", "F", "G♭", "G", "A♭", "A", "B♭", "B")

LETTER_PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTAL_OFFSETS = {"#": 1, "♯": 1, "b": -1, "♭": -1}

# This pattern matches:
# - Note letter (A-G, case insensitive)
# - Any number of accidentals (#, ♯, b, ♭)
# - Optional octave number, possibly negative (C-1 is MIDI note 0)
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#♯b♭]*)(-?[0-9]+)?$")


def note_name(pitch_class: int, use_flats: bool = False) -> str:
    """Return the octave-less name of a pitch class.

    Args:
        pitch_class: Any integer; it is reduced modulo 12
        use_flats: If True, spell black keys with flats (e.g., 'B♭') instead of sharps

    Returns:
        Note name without octave (e.g., 'C', 'F♯')
    """
    names = NOTE_NAMES_FLATS if use_flats else NOTE_NAMES_SHARPS
    return names[pitch_class % 12]


def midi_to_note_name(midi_note: int, use_flats: bool = False) -> str:
    """Convert a MIDI note number to a name in Scientific Pitch Notation.

    Note:
        - Middle C (60) is C4
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    octave = (midi_note // 12) - 1
    return f"{note_name(midi_note, use_flats)}{octave}"


def parse_note_name(name: str) -> int:
    """Parse a note name such as 'C4', 'F#2', 'B♭3' or 'e' into a MIDI number.

    A missing octave means octave 4. Accidentals are applied after the letter,
    so 'Cb4' is 59 and 'B#3' is 60.

    Raises:
        ValueError: If the name can't be parsed or falls outside 0-127
    """
    match = NOTE_PATTERN.match(str(name).strip())
    if not match:
        raise ValueError(f"Invalid note name: {name!r}")

    letter, accidentals, octave = match.groups()
    pitch = LETTER_PITCH_CLASSES[letter.upper()]
    pitch += sum(ACCIDENTAL_OFFSETS[a] for a in accidentals)
    octave_number = int(octave) if octave is not None else DEFAULT_OCTAVE

    midi_note = (octave_number + 1) * 12 + pitch
    if not MIDI_NOTE_MIN <= midi_note <= MIDI_NOTE_MAX:
        raise ValueError(f"Note {name!r} is outside the MIDI range")
    return midi_note


def parse_note(token: str) -> int:
    """Parse either a plain MIDI number ('60') or a note name ('C4')."""
    token = str(token).strip()
    if token.isdigit():
        midi_note = int(token)
        if midi_note > MIDI_NOTE_MAX:
            raise ValueError(f"MIDI note {midi_note} is outside the MIDI range")
        return midi_note
    return parse_note_name(token)


def is_valid_midi_note(note) -> bool:
    """True for integers (not bools) in the MIDI note range."""
    return (
        isinstance(note, numbers.Integral)
        and not isinstance(note, bool)
        and MIDI_NOTE_MIN <= note <= MIDI_NOTE_MAX
    )


def sanitize_notes(notes: Iterable) -> List[int]:
    """Drop anything that isn't a MIDI note number, keeping the rest as ints."""
    valid = []
    for note in notes:
        if is_valid_midi_note(note):
            valid.append(int(note))
        else:
            logger.warning(f"Ignoring invalid MIDI note: {note!r}")
    return valid


def pitch_classes(notes: Iterable[int]) -> List[int]:
    """Reduce note numbers to their distinct pitch classes, ascending."""
    values = np.asarray(list(notes), dtype=np.int64)
    if values.size == 0:
        return []
    return [int(pc) for pc in np.unique(values % 12)]


def bass_pitch_class(notes: Iterable[int]) -> int:
    """Pitch class of the numerically lowest note.

    Raises:
        ValueError: If no notes are given
    """
    values = np.asarray(list(notes), dtype=np.int64)
    if values.size == 0:
        raise ValueError("Cannot find the bass of an empty note set")
    return int(values.min() % 12)


def intervals_from_root(pcs: Iterable[int], root: int) -> Tuple[int, ...]:
    """Semitone distances (1-11) from root to every other pitch class."""
    return tuple(sorted({(pc - root) % 12 for pc in pcs if pc != root}))
