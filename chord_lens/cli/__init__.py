"""Command-line interface for Chord Lens."""

from .main import main

__all__ = ["main"]
