"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_timeline_order,
    validate_art_size,
    validate_frame_rate,
    validate_duration,
    validate_output_path,
    sanitize_filename,
)
from .fonts import get_font

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_timeline_order",
    "validate_art_size",
    "validate_frame_rate",
    "validate_duration",
    "validate_output_path",
    "sanitize_filename",
    "get_font",
]
