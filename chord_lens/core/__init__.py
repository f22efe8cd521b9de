"""Core components for the Chord Lens application."""

# Import interfaces for easier access
from .interfaces import (
    IChordDetector,
    INoteTracker,
)

__all__ = ["IChordDetector", "INoteTracker"]
