"""Chord changes in a Standard MIDI File."""

from collections import Counter
from typing import Iterable, List, Optional

import mido

from .core.interfaces import IChordDetector
from .held_notes import HeldNoteTracker
from .logger import get_logger
from .note_types import ChordChange

logger = get_logger(__name__)

DEFAULT_TEMPO = 500000  # 120 bpm
DRUM_CHANNEL = 9  # Channel 10, zero-based


class _ChordScanner:
    """Feeds note events into a tracker and records its chord over time."""

    def __init__(self, detector: Optional[IChordDetector]) -> None:
        self.tracker = HeldNoteTracker(detector)
        self.changes: List[ChordChange] = []
        # The same pitch may be held on several channels at once
        self._holders: Counter = Counter()

    def note_on(self, note: int) -> None:
        self._holders[note] += 1
        self.tracker.note_on(note)

    def note_off(self, note: int) -> None:
        if self._holders[note] == 0:
            return
        self._holders[note] -= 1
        if self._holders[note] == 0:
            self.tracker.note_off(note)

    def record(self, time: float) -> None:
        """Record the tracker's chord if it differs from the last one recorded."""
        result = self.tracker.current_chord
        last = self.changes[-1].result if self.changes else None
        last_name = last.chord_name if last else None
        new_name = result.chord_name if result else None
        if new_name != last_name:
            self.changes.append(ChordChange(time=round(time, 6), result=result))


def scan_messages(
    messages: Iterable[mido.Message],
    ticks_per_beat: int,
    detector: Optional[IChordDetector] = None,
    channels: Optional[Iterable[int]] = None,
    ignore_drums: bool = True,
) -> List[ChordChange]:
    """Find chord changes in a merged stream of MIDI messages.

    Args:
        messages: Messages with delta times in ticks (e.g. from mido.merge_tracks)
        ticks_per_beat: Resolution of the delta times
        detector: Chord detector to use, or None for the default one
        channels: Zero-based channels to listen to, or None for all
        ignore_drums: Skip channel 10 unless it's listed in channels

    Returns:
        Chord changes in time order; a None result marks where a chord stops
    """
    wanted = set(channels) if channels is not None else None
    scanner = _ChordScanner(detector)
    tempo = DEFAULT_TEMPO
    time_sec = 0.0

    for msg in messages:
        if msg.time:
            # Everything at the previous timestamp has been applied
            scanner.record(time_sec)
            time_sec += mido.tick2second(msg.time, ticks_per_beat, tempo)

        if msg.is_meta:
            if msg.type == "set_tempo":
                tempo = msg.tempo
            continue

        if msg.type not in ("note_on", "note_off"):
            continue
        if wanted is not None and msg.channel not in wanted:
            continue
        if wanted is None and ignore_drums and msg.channel == DRUM_CHANNEL:
            continue

        if msg.type == "note_on" and msg.velocity > 0:
            scanner.note_on(msg.note)
        else:
            scanner.note_off(msg.note)

    scanner.record(time_sec)
    logger.info(f"Found {len(scanner.changes)} chord changes over {time_sec:.2f}s")
    return scanner.changes


def scan_midi_file(
    path: str,
    detector: Optional[IChordDetector] = None,
    channels: Optional[Iterable[int]] = None,
    ignore_drums: bool = True,
) -> List[ChordChange]:
    """Find chord changes in a MIDI file.

    Raises:
        OSError: If the file can't be read
    """
    mid = mido.MidiFile(path)
    logger.info(f"Scanning {path} ({len(mid.tracks)} tracks, {mid.ticks_per_beat} tpb)")
    return scan_messages(
        mido.merge_tracks(mid.tracks),
        mid.ticks_per_beat,
        detector=detector,
        channels=channels,
        ignore_drums=ignore_drums,
    )
