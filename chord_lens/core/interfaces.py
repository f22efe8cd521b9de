"""Defines the core interfaces for the Chord Lens application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Iterable, Optional

from ..note_types import ChordDetectionResult


class IChordDetector(ABC):
    """Interface for chord classification algorithms."""

    @abstractmethod
    def classify(self, notes: Iterable[int]) -> Optional[ChordDetectionResult]:
        """Classify a set of sounding MIDI notes, or return None if no chord fits."""
        pass


class INoteTracker(ABC):
    """Interface for components that follow which notes are held down."""

    @abstractmethod
    def note_on(self, note: int, velocity: int = 100) -> Optional[ChordDetectionResult]:
        """Register a pressed note and return the chord now sounding."""
        pass

    @abstractmethod
    def note_off(self, note: int) -> Optional[ChordDetectionResult]:
        """Register a released note and return the chord now sounding."""
        pass

    @abstractmethod
    def on_chord_changed(
        self, callback: Callable[[Optional[ChordDetectionResult]], None]
    ) -> None:
        """Set a callback to be invoked when the sounding chord changes."""
        pass

    @property
    @abstractmethod
    def active_notes(self) -> FrozenSet[int]:
        """Notes currently held."""
        pass
