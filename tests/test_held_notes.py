import unittest

from chord_lens.chord_detector import ChordDetector
from chord_lens.held_notes import HeldNoteTracker
from chord_lens.note_types import DetectorSettings


class TestHeldNoteTracker(unittest.TestCase):
    def setUp(self):
        self.tracker = HeldNoteTracker()
        self.changes = []
        self.tracker.on_chord_changed(
            lambda result: self.changes.append(result.chord_name if result else None)
        )

    def play(self, *notes):
        for note in notes:
            self.tracker.note_on(note)

    def test_chord_appears_once_complete(self):
        self.play(60, 64)
        self.assertIsNone(self.tracker.current_chord)
        result = self.tracker.note_on(67)
        self.assertEqual(result.chord_name, "C Major")
        self.assertEqual(self.changes, ["C Major"])
        self.assertEqual(self.tracker.active_notes, frozenset({60, 64, 67}))

    def test_doubling_does_not_fire_again(self):
        self.play(60, 64, 67, 72)
        self.assertEqual(self.changes, ["C Major"])

    def test_release_changes_chord(self):
        self.play(60, 64, 67, 70)
        self.assertEqual(self.tracker.current_chord.chord_name, "C 7")
        self.tracker.note_off(70)
        self.tracker.note_off(64)
        self.assertEqual(self.changes, ["C Major", "C 7", "C Major", "C5"])

    def test_zero_velocity_releases(self):
        self.play(60, 64, 67)
        self.tracker.note_on(67, velocity=0)
        self.assertNotIn(67, self.tracker.active_notes)
        self.assertEqual(self.changes, ["C Major", None])

    def test_releasing_unheld_note_is_noop(self):
        self.play(60, 64, 67)
        result = self.tracker.note_off(50)
        self.assertEqual(result.chord_name, "C Major")
        self.assertEqual(self.changes, ["C Major"])

    def test_clear(self):
        self.play(57, 60, 64)
        self.tracker.clear()
        self.assertEqual(self.tracker.active_notes, frozenset())
        self.assertIsNone(self.tracker.current_chord)
        self.assertEqual(self.changes, ["A Minor", None])

    def test_invalid_note_rejected(self):
        with self.assertRaises(ValueError):
            self.tracker.note_on(128)
        with self.assertRaises(ValueError):
            self.tracker.note_on(-1)

    def test_notes_changed_event(self):
        seen = []
        self.tracker.events.on_notes_changed(seen.append)
        self.play(60, 67)
        self.tracker.note_off(60)
        self.assertEqual(seen, [frozenset({60}), frozenset({60, 67}), frozenset({67})])

    def test_failing_listener_is_logged(self):
        def broken(result):
            raise RuntimeError("boom")

        self.tracker.on_chord_changed(broken)
        with self.assertLogs("chord_lens.core.events", level="ERROR"):
            self.play(60, 64, 67)
        self.assertEqual(self.changes, ["C Major"])

    def test_custom_detector(self):
        tracker = HeldNoteTracker(ChordDetector(DetectorSettings(use_flats=True)))
        for note in (63, 67, 70):
            tracker.note_on(note)
        self.assertEqual(tracker.current_chord.chord_name, "E♭ Major")


if __name__ == "__main__":
    unittest.main()
