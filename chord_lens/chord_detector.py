"""Chord classification from a set of sounding MIDI notes.

The detector reduces the notes to pitch classes, tries candidate roots
(preferring the bass) and scores each against the chord template catalog.
It keeps no state between calls, so one instance can be shared freely.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .chord_templates import (
    PERFECT_FIFTH,
    ChordTemplate,
    all_templates_in_precedence_order,
    score_template,
)
from .core.interfaces import IChordDetector
from .logger import get_logger
from .note_types import ChordDetectionResult, DetectorSettings
from .note_utils import (
    bass_pitch_class,
    intervals_from_root,
    note_name,
    pitch_classes,
    sanitize_notes,
)

logger = get_logger(__name__)

POWER_CHORD_CONFIDENCE = 0.8
INVERTED_POWER_CHORD_CONFIDENCE = 0.75
COMPLETENESS_WEIGHT = 0.1
MAX_COMPLETENESS_INTERVALS = 10

# Triad names are spelled out after a space, the power chord attaches directly
_SUFFIXES = {
    "Major": " Major",
    "Minor": " Minor",
    "Dim": " Dim",
    "Aug": " Aug",
    "5": "5",
}


@dataclass(frozen=True)
class TemplateMatch:
    """Best template found for one candidate root."""

    template: ChordTemplate
    fit_score: float  # Raw fit, used for the confidence
    adjusted_score: float  # Fit weighted by how many notes the template explains

    @property
    def confidence(self) -> float:
        return min(max(self.template.confidence * self.fit_score, 0.0), 1.0)


def format_chord_name(root: str, template_name: str, bass: Optional[str] = None) -> str:
    """Build a display name such as 'C Major', 'D m7' or 'C Major/G'."""
    suffix = _SUFFIXES.get(template_name, f" {template_name}")
    name = f"{root}{suffix}"
    if bass is not None and bass != root:
        name = f"{name}/{bass}"
    return name


class ChordDetector(IChordDetector):
    """Recognises chords from sets of simultaneously sounding notes."""

    def __init__(
        self,
        settings: Optional[DetectorSettings] = None,
        templates: Optional[Sequence[ChordTemplate]] = None,
    ) -> None:
        """Initialize the detector.

        Args:
            settings: Root-selection thresholds, or None for the defaults
            templates: Ordered chord catalog, or None for the built-in one
        """
        self.settings = settings or DetectorSettings()
        if templates is None:
            templates = all_templates_in_precedence_order()
        self.templates = tuple(templates)

    def classify(self, notes: Iterable[int]) -> Optional[ChordDetectionResult]:
        """Classify a set of sounding MIDI notes.

        Args:
            notes: MIDI note numbers (0-127); order and octave duplicates don't matter

        Returns:
            The recognised chord, or None when nothing fits well enough
        """
        midi_notes = sanitize_notes(notes)
        if not midi_notes:
            return None

        pcs = pitch_classes(midi_notes)
        bass = bass_pitch_class(midi_notes)

        if len(pcs) < 2:
            logger.debug(f"Single pitch class {pcs}, no chord")
            return None
        if len(pcs) == 2:
            return self._classify_power_chord(pcs, bass)
        return self._find_best_chord(pcs, bass)

    def _name(self, pitch_class: int) -> str:
        return note_name(pitch_class, self.settings.use_flats)

    def _note_names(self, pcs: Iterable[int]) -> tuple:
        return tuple(self._name(pc) for pc in sorted(pcs))

    def _classify_power_chord(
        self, pcs: List[int], bass: int
    ) -> Optional[ChordDetectionResult]:
        """Two pitch classes only make a chord when they are a fifth apart."""
        for root in [bass] + [pc for pc in pcs if pc != bass]:
            other = next(pc for pc in pcs if pc != root)
            if (other - root) % 12 != PERFECT_FIFTH:
                continue

            root_name = self._name(root)
            confidence = (
                POWER_CHORD_CONFIDENCE if root == bass else INVERTED_POWER_CHORD_CONFIDENCE
            )
            logger.debug(f"Power chord on {root_name} (confidence {confidence})")
            return ChordDetectionResult(
                chord_name=f"{root_name}5",
                root_note=root_name,
                notes=self._note_names(pcs),
                confidence=confidence,
                bass_note=self._name(bass),
                template="5",
            )

        logger.debug(f"Two pitch classes {pcs} are not a fifth apart")
        return None

    def _find_best_chord(
        self, pcs: List[int], bass: int
    ) -> Optional[ChordDetectionResult]:
        """Pick a root, strongly preferring the bass over inversion readings."""
        settings = self.settings
        best_result = None
        best_score = 0.0

        bass_result = self.analyze_root(pcs, bass, bass)
        if bass_result is not None and bass_result.confidence > settings.min_root_confidence:
            best_result = bass_result
            best_score = bass_result.confidence * settings.root_position_bonus

        if best_score < settings.alternative_root_threshold:
            for root in pcs:
                if root == bass:
                    continue
                result = self.analyze_root(pcs, root, bass)
                if result is None:
                    continue
                if result.confidence > best_score * settings.inversion_margin:
                    logger.debug(
                        f"Accepting {result.chord_name} ({result.confidence:.3f}) "
                        f"over score {best_score:.3f}"
                    )
                    best_result = result
                    best_score = result.confidence

        if best_result is None:
            logger.debug(f"No chord found for pitch classes {pcs}")
        return best_result

    def match_templates(self, intervals: Iterable[int]) -> Optional[TemplateMatch]:
        """Find the template that best explains a set of intervals above a root.

        Templates are tried in catalog order and a later one only wins with a
        strictly higher adjusted score.
        """
        intervals = frozenset(intervals)
        best: Optional[TemplateMatch] = None

        for template in self.templates:
            fit = score_template(intervals, template)
            if fit <= 0.0:
                continue
            completeness = len(template.required) / min(
                max(len(intervals), 1), MAX_COMPLETENESS_INTERVALS
            )
            adjusted = fit * (1.0 + completeness * COMPLETENESS_WEIGHT)
            if best is None or adjusted > best.adjusted_score:
                best = TemplateMatch(template, fit, adjusted)

        if best is None or best.adjusted_score < self.settings.min_fit_score:
            return None
        return best

    def analyze_root(
        self, pcs: Sequence[int], root: int, bass: int
    ) -> Optional[ChordDetectionResult]:
        """Classify the pitch classes as a chord built on the given root."""
        match = self.match_templates(intervals_from_root(pcs, root))
        if match is None:
            return None

        template = match.template
        root_name = self._name(root)
        bass_name = self._name(bass)
        logger.debug(
            f"Root {root_name}: {template.name} "
            f"(fit {match.fit_score:.3f}, adjusted {match.adjusted_score:.3f})"
        )
        return ChordDetectionResult(
            chord_name=format_chord_name(root_name, template.name, bass_name),
            root_note=root_name,
            notes=self._note_names(pcs),
            confidence=match.confidence,
            bass_note=bass_name,
            template=template.name,
        )


_default_detector = ChordDetector()


def classify(notes: Iterable[int]) -> Optional[ChordDetectionResult]:
    """Classify notes with a shared detector using the default settings."""
    return _default_detector.classify(notes)
