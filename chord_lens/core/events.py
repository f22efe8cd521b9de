"""Event system for Chord Lens components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class ChordEventType(Enum):
    """Event types for chord tracking."""

    NOTES_CHANGED = auto()
    CHORD_CHANGED = auto()


class EventEmitter:
    """Event emitter for Chord Lens components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback, if present."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)
            logger.debug(f"Removed listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Listener errors are logged and do not stop the other listeners.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class ChordEvents:
    """Event emitter specifically for chord tracking events."""

    def __init__(self):
        """Initialize the chord events."""
        self._emitter = EventEmitter()

    def on_chord_changed(self, callback: Callable) -> None:
        """Register a callback for chord change events.

        Args:
            callback: Function called with the new ChordDetectionResult (or None)
        """
        self._emitter.on(ChordEventType.CHORD_CHANGED, callback)

    def on_notes_changed(self, callback: Callable) -> None:
        """Register a callback called with the frozenset of held notes."""
        self._emitter.on(ChordEventType.NOTES_CHANGED, callback)

    def emit_chord_changed(self, result) -> None:
        self._emitter.emit(ChordEventType.CHORD_CHANGED, result)

    def emit_notes_changed(self, notes) -> None:
        self._emitter.emit(ChordEventType.NOTES_CHANGED, notes)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
