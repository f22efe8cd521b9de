"""Tracks held notes from note-on/note-off messages and follows the chord."""

from typing import Callable, FrozenSet, Optional, Set

from .chord_detector import ChordDetector
from .core.events import ChordEvents
from .core.interfaces import IChordDetector, INoteTracker
from .logger import get_logger
from .note_types import ChordDetectionResult
from .note_utils import is_valid_midi_note

logger = get_logger(__name__)


class HeldNoteTracker(INoteTracker):
    """Keeps the set of currently held notes and re-classifies on every change.

    Chord-changed listeners only fire when the chord name actually changes,
    so adding a doubled octave to a held triad stays silent. Not thread-safe.
    """

    def __init__(self, detector: Optional[IChordDetector] = None) -> None:
        self._detector = detector or ChordDetector()
        self._active_notes: Set[int] = set()
        self._current_chord: Optional[ChordDetectionResult] = None
        self.events = ChordEvents()

    @property
    def active_notes(self) -> FrozenSet[int]:
        return frozenset(self._active_notes)

    @property
    def current_chord(self) -> Optional[ChordDetectionResult]:
        return self._current_chord

    def on_chord_changed(
        self, callback: Callable[[Optional[ChordDetectionResult]], None]
    ) -> None:
        self.events.on_chord_changed(callback)

    def note_on(self, note: int, velocity: int = 100) -> Optional[ChordDetectionResult]:
        """Register a pressed note; velocity 0 counts as a release.

        Raises:
            ValueError: If the note isn't a MIDI note number
        """
        if not is_valid_midi_note(note):
            raise ValueError(f"Invalid MIDI note: {note!r}")
        if velocity == 0:
            return self.note_off(note)

        if note not in self._active_notes:
            self._active_notes.add(note)
            self._update()
        return self._current_chord

    def note_off(self, note: int) -> Optional[ChordDetectionResult]:
        """Register a released note. Releasing a note that isn't held is a no-op."""
        if note in self._active_notes:
            self._active_notes.discard(note)
            self._update()
        return self._current_chord

    def clear(self) -> None:
        """Release every held note (e.g. on an 'all notes off' message)."""
        if self._active_notes:
            self._active_notes.clear()
            self._update()

    def _update(self) -> None:
        notes = self.active_notes
        self.events.emit_notes_changed(notes)

        result = self._detector.classify(notes) if notes else None
        previous = self._current_chord
        self._current_chord = result

        previous_name = previous.chord_name if previous else None
        new_name = result.chord_name if result else None
        if new_name != previous_name:
            logger.debug(f"Chord changed: {previous_name} -> {new_name}")
            self.events.emit_chord_changed(result)
