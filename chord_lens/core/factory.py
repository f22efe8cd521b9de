"""Factory for creating Chord Lens components."""

from typing import Optional, Dict, Type

from ..logger import get_logger
from ..chord_detector import ChordDetector
from ..held_notes import HeldNoteTracker
from ..note_types import DetectorSettings
from .config import ConfigManager
from .interfaces import IChordDetector, INoteTracker

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Chord Lens components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.chord_detector_classes: Dict[str, Type[IChordDetector]] = {
            "default": ChordDetector,
        }

        self.note_tracker_classes: Dict[str, Type[INoteTracker]] = {
            "default": HeldNoteTracker,
        }

    def create_chord_detector(
        self, implementation: str = "default", **kwargs
    ) -> IChordDetector:
        """Create a chord detector.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Settings overriding the 'chord_detector' configuration

        Returns:
            Chord detector instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.chord_detector_classes:
            raise ValueError(f"Unknown chord detector implementation: {implementation}")

        # Get default configuration and override with provided parameters
        config = self.config_manager.get_config("chord_detector")
        config.update(kwargs)

        cls = self.chord_detector_classes[implementation]
        instance = cls(settings=DetectorSettings.from_config(config))

        logger.info(f"Created chord detector: {implementation}")
        return instance

    def create_note_tracker(
        self, implementation: str = "default", **kwargs
    ) -> INoteTracker:
        """Create a held-note tracker.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Settings passed on to the tracker's chord detector

        Returns:
            Note tracker instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.note_tracker_classes:
            raise ValueError(f"Unknown note tracker implementation: {implementation}")

        cls = self.note_tracker_classes[implementation]
        instance = cls(detector=self.create_chord_detector(**kwargs))

        logger.info(f"Created note tracker: {implementation}")
        return instance
