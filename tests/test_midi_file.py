import os
import tempfile
import unittest

import mido

from chord_lens.midi_file import scan_messages, scan_midi_file

TPB = 480


def chord_track(chords, channel=0, tempo=500000):
    """Build a track playing each chord for one beat, back to back."""
    track = mido.MidiTrack()
    track.append(mido.MetaMessage("set_tempo", tempo=tempo, time=0))
    for notes in chords:
        for note in notes:
            track.append(mido.Message("note_on", note=note, velocity=80, channel=channel, time=0))
        for index, note in enumerate(notes):
            track.append(
                mido.Message(
                    "note_off", note=note, velocity=0, channel=channel,
                    time=TPB if index == 0 else 0,
                )
            )
    return track


def summary(changes):
    return [(change.time, change.chord_name) for change in changes]


class TestScanMidiFile(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "song.mid")

    def tearDown(self):
        self.tmpdir.cleanup()

    def save(self, *tracks):
        mid = mido.MidiFile(ticks_per_beat=TPB)
        mid.tracks.extend(tracks)
        mid.save(self.path)

    def test_chord_progression(self):
        self.save(chord_track([(60, 64, 67), (57, 60, 64), (55, 59, 62, 65)]))
        changes = scan_midi_file(self.path)
        self.assertEqual(
            summary(changes),
            [(0.0, "C Major"), (0.5, "A Minor"), (1.0, "G 7"), (1.5, "N.C.")],
        )
        self.assertIsNone(changes[-1].result)
        self.assertAlmostEqual(changes[2].result.confidence, 0.95)

    def test_tempo_is_honoured(self):
        self.save(chord_track([(60, 64, 67), (57, 60, 64)], tempo=1000000))
        self.assertEqual(
            summary(scan_midi_file(self.path)),
            [(0.0, "C Major"), (1.0, "A Minor"), (2.0, "N.C.")],
        )

    def test_repeated_chord_is_one_change(self):
        self.save(chord_track([(60, 64, 67), (48, 64, 67, 72)]))
        self.assertEqual(
            summary(scan_midi_file(self.path)), [(0.0, "C Major"), (1.0, "N.C.")]
        )

    def test_drums_ignored(self):
        self.save(
            chord_track([(60, 64, 67)]),
            chord_track([(36, 38, 42)], channel=9),
        )
        self.assertEqual(
            summary(scan_midi_file(self.path)), [(0.0, "C Major"), (0.5, "N.C.")]
        )

    def test_channel_filter(self):
        self.save(
            chord_track([(60, 64, 67)]),
            chord_track([(62, 65, 69)], channel=1),
        )
        self.assertEqual(
            summary(scan_midi_file(self.path, channels=[1])),
            [(0.0, "D Minor"), (0.5, "N.C.")],
        )

    def test_missing_file(self):
        with self.assertRaises(OSError):
            scan_midi_file(os.path.join(self.tmpdir.name, "missing.mid"))


class TestScanMessages(unittest.TestCase):
    def test_note_held_on_two_channels(self):
        messages = [
            mido.Message("note_on", note=60, velocity=90, channel=0, time=0),
            mido.Message("note_on", note=60, velocity=90, channel=1, time=0),
            mido.Message("note_on", note=67, velocity=90, channel=0, time=0),
            mido.Message("note_off", note=60, channel=0, time=TPB),
            mido.Message("note_off", note=67, channel=0, time=TPB),
        ]
        changes = scan_messages(messages, TPB)
        self.assertEqual(summary(changes), [(0.0, "C5"), (1.0, "N.C.")])

    def test_empty_stream(self):
        self.assertEqual(scan_messages([], TPB), [])


if __name__ == "__main__":
    unittest.main()
