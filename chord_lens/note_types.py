"""Type definitions for the Chord Lens project."""

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChordDetectionResult:
    """Represents a recognised chord with its properties."""

    chord_name: str  # Display name (e.g., 'C Major', 'G 7/B')
    root_note: str  # Root note name (e.g., 'C', 'F♯')
    notes: Tuple[str, ...]  # Pitch-class names present, ordered by pitch class
    confidence: float  # Detection confidence (0-1)
    bass_note: str = ""  # Name of the lowest sounding pitch class
    template: str = ""  # Catalog quality name (e.g., 'Major', 'm7♭5')

    @property
    def is_inversion(self) -> bool:
        """True when the bass differs from the root (slash chord)."""
        return bool(self.bass_note) and self.bass_note != self.root_note

    def __str__(self):
        return self.chord_name


@dataclass(frozen=True)
class DetectorSettings:
    """Tunable thresholds used when choosing between candidate roots.

    The defaults encode a strong bias toward root-position readings and are
    empirical; change them only together with the detector tests.
    """

    min_root_confidence: float = 0.5  # Bass-as-root result must exceed this
    root_position_bonus: float = 1.1  # Multiplier applied to a bass-as-root result
    alternative_root_threshold: float = 0.6  # Search other roots below this score
    inversion_margin: float = 1.5  # Alternative root must beat best by this factor
    min_fit_score: float = 0.5  # Adjusted template score needed for a root to match
    use_flats: bool = False  # Spell black keys with flats instead of sharps

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectorSettings":
        """Build settings from a config section, ignoring unknown keys.

        A value that cannot be read as its field's type is logged and the
        field keeps its default.
        """
        defaults = cls()
        values = {}
        for field in fields(cls):
            if field.name not in config:
                continue
            value = config[field.name]
            try:
                values[field.name] = _coerce_setting(value, getattr(defaults, field.name))
            except (TypeError, ValueError):
                logger.error(
                    f"Invalid value for setting '{field.name}': {value!r}, using default"
                )
        return cls(**values)


def _coerce_setting(value: Any, default: Any) -> Any:
    """Convert a config value to the type of the field's default."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ValueError(f"expected a boolean, got {value!r}")

    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


@dataclass(frozen=True)
class ChordChange:
    """A chord change found while scanning a note stream."""

    time: float  # Seconds from the start of the stream
    result: Optional[ChordDetectionResult]  # None when the chord stops sounding

    @property
    def chord_name(self) -> str:
        return self.result.chord_name if self.result is not None else "N.C."
