"""Chord quality catalog and per-template fit scoring.

The catalog is an ordered tuple: when two templates score the same for a set
of intervals, the one declared first wins. More specific qualities therefore
come before their subsets (6/9 before 6, 7sus4 before sus4).
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import AbstractSet, Callable, FrozenSet, List, Optional, Tuple


# Interval values, in semitones above the root
NINTH = 2
MINOR_THIRD = 3
MAJOR_THIRD = 4
PERFECT_FIFTH = 7
MINOR_SEVENTH = 10
MAJOR_SEVENTH = 11

THIRDS = frozenset({MINOR_THIRD, MAJOR_THIRD})
SEVENTHS = frozenset({MINOR_SEVENTH, MAJOR_SEVENTH})

MISSING_FIFTH_FACTOR = 0.95
UNEXPECTED_INTERVAL_PENALTY = 0.15


class QualityFamily(Enum):
    """Broad family a chord quality belongs to."""

    POWER = auto()
    TRIAD = auto()
    SUSPENDED = auto()
    ADDED_TONE = auto()  # add and sixth chords, no seventh
    SEVENTH = auto()
    ALTERED = auto()  # altered dominants
    EXTENSION = auto()  # 9/11/13 chords, seventh implied


@dataclass(frozen=True)
class ChordTemplate:
    """A chord quality's interval signature."""

    name: str
    required: FrozenSet[int]
    optional: FrozenSet[int]
    confidence: float
    family: QualityFamily
    extended: bool = False  # Carries a 9th, 11th or 13th, so a seventh is implied
    ninth: bool = False  # Carries some kind of ninth

    @property
    def expected(self) -> FrozenSet[int]:
        return self.required | self.optional

    @property
    def fifth_required(self) -> bool:
        """Power and suspended chords are defined by their fifth."""
        return self.family in (QualityFamily.POWER, QualityFamily.SUSPENDED)


def _template(name, required, optional, confidence, family, extended=False, ninth=False):
    return ChordTemplate(
        name=name,
        required=frozenset(required),
        optional=frozenset(optional),
        confidence=confidence,
        family=family,
        extended=extended,
        ninth=ninth,
    )


_F = QualityFamily

CHORD_TEMPLATES: Tuple[ChordTemplate, ...] = (
    # Sus chords with 7th, ahead of the plain sus triads
    _template("7sus4", {5, 7, 10}, {2}, 0.9, _F.SUSPENDED),
    _template("7sus2", {2, 7, 10}, (), 0.88, _F.SUSPENDED),
    # Add & 6 chords (no 7th), most specific first
    _template("6/9", {4, 7, 9, 2}, {5}, 0.95, _F.ADDED_TONE, ninth=True),
    _template("m6/9", {3, 7, 9, 2}, {5}, 0.94, _F.ADDED_TONE, ninth=True),
    _template("6", {4, 7, 9}, (), 0.93, _F.ADDED_TONE),
    _template("m6", {3, 7, 9}, (), 0.92, _F.ADDED_TONE),
    _template("add9", {4, 7, 2}, (), 0.88, _F.ADDED_TONE, ninth=True),
    _template("madd9", {3, 7, 2}, (), 0.88, _F.ADDED_TONE, ninth=True),
    _template("add11", {4, 7, 5}, (), 0.86, _F.ADDED_TONE),
    # Altered dominants, ahead of the regular 7ths
    _template("7♭5", {4, 6, 10}, {2, 5, 9}, 0.9, _F.ALTERED),
    _template("7♯5", {4, 8, 10}, {2, 5}, 0.9, _F.ALTERED),
    _template("7♭9", {4, 7, 10, 1}, {5, 9}, 0.9, _F.ALTERED, extended=True, ninth=True),
    _template("7♯9", {4, 7, 10, 3}, {5, 9}, 0.9, _F.ALTERED, extended=True, ninth=True),
    _template("7♯11", {4, 7, 10, 6}, {2, 9}, 0.9, _F.ALTERED, extended=True),
    _template("7♭13", {4, 10, 8}, {7, 2}, 0.9, _F.ALTERED, extended=True),
    _template("7(♭9,♭13)", {4, 10, 1, 8}, {7}, 0.88, _F.ALTERED, extended=True, ninth=True),
    _template("7(♭9,♯11)", {4, 10, 1, 6}, {7}, 0.88, _F.ALTERED, extended=True, ninth=True),
    _template("7(♯9,♭13)", {4, 10, 3, 8}, {7}, 0.88, _F.ALTERED, extended=True, ninth=True),
    # Diminished-family sevenths
    _template("dim7", {3, 6, 9}, (), 0.92, _F.SEVENTH),
    _template("m7♭5", {3, 6, 10}, {2, 5, 9}, 0.9, _F.SEVENTH),
    # Extensions (7th implied)
    _template("maj13♯11", {4, 11, 6, 9}, {2, 5, 7}, 0.97, _F.EXTENSION, extended=True),
    _template("maj13", {4, 7, 11, 9}, {2, 5}, 0.96, _F.EXTENSION, extended=True),
    _template("m13", {3, 7, 10, 9}, {2, 5}, 0.96, _F.EXTENSION, extended=True),
    _template("13", {4, 7, 10, 9}, {2, 5}, 0.96, _F.EXTENSION, extended=True),
    _template("maj7♯11", {4, 7, 11, 6}, {2}, 0.93, _F.EXTENSION, extended=True),
    _template("maj11", {4, 7, 11, 2, 5}, {9}, 0.95, _F.EXTENSION, extended=True),
    _template("m11", {3, 7, 10, 5}, {2, 9}, 0.94, _F.EXTENSION, extended=True),
    _template("11", {5, 7, 10, 2}, (), 0.94, _F.EXTENSION, extended=True),  # 9sus4
    _template("maj9", {4, 7, 11, 2}, {5}, 0.96, _F.EXTENSION, extended=True, ninth=True),
    _template("m9", {3, 7, 10, 2}, {5}, 0.96, _F.EXTENSION, extended=True, ninth=True),
    _template("9", {4, 7, 10, 2}, {5}, 0.96, _F.EXTENSION, extended=True, ninth=True),
    # Regular sevenths
    _template("mMaj7", {3, 7, 11}, {2, 5, 9}, 0.95, _F.SEVENTH),
    _template("maj7", {4, 7, 11}, {2, 5, 9}, 0.95, _F.SEVENTH),
    _template("m7", {3, 7, 10}, {2, 5, 9}, 0.95, _F.SEVENTH),
    _template("7", {4, 7, 10}, {2, 5, 9}, 0.95, _F.SEVENTH),
    # Sus triads, after the add chords
    _template("sus24", {2, 5, 7}, (), 0.75, _F.SUSPENDED),
    _template("sus4", {5, 7}, (), 0.7, _F.SUSPENDED),
    _template("sus2", {2, 7}, (), 0.7, _F.SUSPENDED),
    # Core triads
    _template("Aug", {4, 8}, (), 0.8, _F.TRIAD),
    _template("Dim", {3, 6}, (), 0.8, _F.TRIAD),
    _template("Minor", {3, 7}, (), 0.85, _F.TRIAD),
    _template("Major", {4, 7}, (), 0.85, _F.TRIAD),
    # Power chord, lowest precedence
    _template("5", {7}, (), 0.8, _F.POWER),
)

_TEMPLATES_BY_NAME = {template.name: template for template in CHORD_TEMPLATES}


def all_templates_in_precedence_order() -> List[ChordTemplate]:
    """Return the catalog in the order templates are tried."""
    return list(CHORD_TEMPLATES)


def find_template(name: str) -> Optional[ChordTemplate]:
    """Look up a template by its quality name (e.g. 'm7♭5')."""
    return _TEMPLATES_BY_NAME.get(name)


# Family guards: each returns True when the template must be rejected for
# the given interval set.
Guard = Callable[[AbstractSet[int], ChordTemplate], bool]


def seventh_in_added_tone(intervals: AbstractSet[int], template: ChordTemplate) -> bool:
    """Add and sixth chords give way to a seventh-chord reading."""
    return template.family is QualityFamily.ADDED_TONE and bool(intervals & SEVENTHS)


def extension_without_seventh(intervals: AbstractSet[int], template: ChordTemplate) -> bool:
    """A 9th, 11th or 13th chord needs its seventh."""
    return template.extended and not intervals & SEVENTHS


def third_in_suspended(intervals: AbstractSet[int], template: ChordTemplate) -> bool:
    """A sounding third rules out a suspension."""
    return template.family is QualityFamily.SUSPENDED and bool(intervals & THIRDS)


FAMILY_GUARDS: Tuple[Guard, ...] = (
    seventh_in_added_tone,
    extension_without_seventh,
    third_in_suspended,
)


def is_excluded(intervals: AbstractSet[int], template: ChordTemplate) -> bool:
    return any(guard(intervals, template) for guard in FAMILY_GUARDS)


def _fit_score(intervals: AbstractSet[int], template: ChordTemplate) -> float:
    if is_excluded(intervals, template):
        return 0.0

    unexpected = intervals - template.expected

    # A fully voiced ninth chord beats a partial reading of the same notes
    if (
        template.ninth
        and NINTH in intervals
        and intervals & THIRDS
        and not unexpected
    ):
        return 1.0

    if not unexpected and template.required <= intervals:
        return 1.0

    penalty = len(unexpected) * UNEXPECTED_INTERVAL_PENALTY
    return min(max(1.0 - penalty, 0.0), 1.0)


def score_template(intervals: AbstractSet[int], template: ChordTemplate) -> float:
    """Score how well an interval set fits a chord template.

    Args:
        intervals: Semitone distances (1-11) of the sounding pitch classes from the root
        template: The chord quality to test

    Returns:
        A score from 0.0 (no match) to 1.0 (perfect match)
    """
    intervals = frozenset(intervals)
    missing = template.required - intervals
    if missing:
        # Only a missing fifth is tolerated, and not where it defines the chord
        if missing != {PERFECT_FIFTH} or template.fifth_required:
            return 0.0
        return _fit_score(intervals, template) * MISSING_FIFTH_FACTOR

    return _fit_score(intervals, template)
