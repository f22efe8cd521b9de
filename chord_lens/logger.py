"""Centralized lazy-loading logger access for Chord Lens."""
import logging
from typing import Dict

# Module-level cache for loggers
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a lazily initialized logger with the given name.

    Levels and handlers are applied later by
    :func:`chord_lens.logging_config.setup_logging`, so this is safe to call
    at import time.

    Args:
        name: The full module name (e.g., 'chord_lens.chord_detector')

    Returns:
        A logger instance
    """
    if name not in _logger_cache:
        logger = logging.getLogger(name)
        _logger_cache[name] = logger
    return _logger_cache[name]
