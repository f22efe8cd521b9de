import json
import os
import tempfile
import unittest

from chord_lens.core.config import ConfigManager
from chord_lens.core.factory import ComponentFactory
from chord_lens.held_notes import HeldNoteTracker
from chord_lens.note_types import DetectorSettings


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_dir = self.tmpdir.name

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_defaults_written(self):
        manager = ConfigManager(self.config_dir)
        config_file = os.path.join(self.config_dir, "chord_detector.json")
        self.assertTrue(os.path.exists(config_file))
        with open(config_file) as f:
            self.assertEqual(json.load(f)["inversion_margin"], 1.5)
        self.assertEqual(manager.detector_settings(), DetectorSettings())

    def test_update_persists(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("chord_detector", {"use_flats": True}))
        reloaded = ConfigManager(self.config_dir)
        self.assertTrue(reloaded.get_config("chord_detector")["use_flats"])
        self.assertTrue(reloaded.detector_settings().use_flats)

    def test_unknown_section(self):
        manager = ConfigManager(self.config_dir)
        with self.assertLogs("chord_lens.core.config", level="ERROR"):
            self.assertFalse(manager.update_config("nope", {"a": 1}))
        with self.assertLogs("chord_lens.core.config", level="ERROR"):
            self.assertFalse(manager.reset_config("nope"))

    def test_reset(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("chord_detector", {"inversion_margin": 3.0})
        manager.reset_config("chord_detector")
        self.assertEqual(manager.get_config("chord_detector")["inversion_margin"], 1.5)

    def test_missing_keys_filled(self):
        with open(os.path.join(self.config_dir, "chord_detector.json"), "w") as f:
            json.dump({"min_fit_score": 0.6}, f)
        config = ConfigManager(self.config_dir).get_config("chord_detector")
        self.assertEqual(config["min_fit_score"], 0.6)
        self.assertEqual(config["root_position_bonus"], 1.1)

    def test_corrupt_file_falls_back(self):
        with open(os.path.join(self.config_dir, "chord_detector.json"), "w") as f:
            f.write("{not json")
        with self.assertLogs("chord_lens.core.config", level="ERROR"):
            manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.detector_settings(), DetectorSettings())

    def test_get_config_returns_copy(self):
        manager = ConfigManager(self.config_dir)
        manager.get_config("scanner")["ignore_drums"] = False
        self.assertTrue(manager.get_config("scanner")["ignore_drums"])


class TestDetectorSettings(unittest.TestCase):
    def test_from_config_ignores_unknown_keys(self):
        settings = DetectorSettings.from_config({"inversion_margin": 2.0, "colour": "red"})
        self.assertEqual(settings.inversion_margin, 2.0)
        self.assertEqual(settings.root_position_bonus, 1.1)

    def test_from_config_coerces_types(self):
        settings = DetectorSettings.from_config(
            {"inversion_margin": "2", "min_fit_score": 1, "use_flats": "True"}
        )
        self.assertEqual(settings.inversion_margin, 2.0)
        self.assertIsInstance(settings.min_fit_score, float)
        self.assertTrue(settings.use_flats)

    def test_from_config_bad_values_keep_defaults(self):
        settings = DetectorSettings.from_config(
            {
                "inversion_margin": None,
                "min_root_confidence": "high",
                "root_position_bonus": True,
                "min_fit_score": float("nan"),
                "use_flats": "false",
                "alternative_root_threshold": [0.6],
            }
        )
        self.assertEqual(settings, DetectorSettings())


class TestComponentFactory(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.factory = ComponentFactory(ConfigManager(self.tmpdir.name))

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_detector_uses_overrides(self):
        detector = self.factory.create_chord_detector(use_flats=True)
        self.assertEqual(detector.classify({61, 65, 68}).chord_name, "D♭ Major")

    def test_detector_uses_config(self):
        self.factory.config_manager.update_config("chord_detector", {"use_flats": True})
        detector = self.factory.create_chord_detector()
        self.assertTrue(detector.settings.use_flats)

    def test_note_tracker(self):
        tracker = self.factory.create_note_tracker()
        self.assertIsInstance(tracker, HeldNoteTracker)
        for note in (62, 65, 69):
            tracker.note_on(note)
        self.assertEqual(tracker.current_chord.chord_name, "D Minor")

    def test_bad_config_values_still_classify(self):
        config_file = os.path.join(self.tmpdir.name, "chord_detector.json")
        with open(config_file, "w") as f:
            json.dump({"inversion_margin": None, "use_flats": "false"}, f)
        factory = ComponentFactory(ConfigManager(self.tmpdir.name))

        detector = factory.create_chord_detector()
        self.assertEqual(detector.classify({55, 60, 64}).chord_name, "C Major/G")
        self.assertEqual(detector.classify({61, 65, 68}).chord_name, "C♯ Major")

    def test_unknown_implementation(self):
        with self.assertRaises(ValueError):
            self.factory.create_chord_detector("fancy")
        with self.assertRaises(ValueError):
            self.factory.create_note_tracker("fancy")


if __name__ == "__main__":
    unittest.main()
