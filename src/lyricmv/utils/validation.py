"""Validation utilities."""

import re
from pathlib import Path

from ..config import ART_AREA_RANGE, OUTPUT_EXTENSION
from ..exceptions import InputValidationError



def validate_timeline_order(lines) -> None:
    """Validate that lines have positive durations, ascending starts and no overlap."""
    prev = None
    for idx, line in enumerate(lines):
        start = line.start_time
        end = line.end_time
        if start < 0:
            raise InputValidationError(
                f"Line {idx + 1} starts before zero ({start:.2f}s)"
            )
        if not start < end:
            raise InputValidationError(
                f"Line {idx + 1} must end after it starts ({start:.2f}s -> {end:.2f}s)"
            )
        if prev is not None:
            if start < prev.start_time:
                raise InputValidationError(
                    f"Line {idx + 1} starts before previous line "
                    f"({start:.2f}s < {prev.start_time:.2f}s)"
                )
            if start < prev.end_time:
                raise InputValidationError(
                    f"Line {idx + 1} overlaps previous line "
                    f"({start:.2f}s < {prev.end_time:.2f}s)"
                )
        prev = line


def validate_art_size(fraction: float) -> float:
    """Validate the cover-art share of the frame width."""
    low, high = ART_AREA_RANGE
    if not low <= fraction <= high:
        raise InputValidationError(f"Art area must be between {low} and {high}")
    return fraction


def validate_frame_rate(frame_rate: float) -> float:
    """Validate export frame rate."""
    if frame_rate <= 0 or frame_rate > 120:
        raise InputValidationError("Frame rate must be between 0 and 120")
    return frame_rate


def validate_duration(duration: float) -> float:
    """Validate export duration in seconds."""
    if duration <= 0:
        raise InputValidationError("Duration must be positive")
    return duration


def validate_output_path(path: str) -> Path:
    """Validate and normalize output path."""
    output_path = Path(path)

    # Check if parent directory exists or can be created
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InputValidationError(f"Cannot create output directory: {e}")

    if output_path.suffix.lower() != OUTPUT_EXTENSION:
        raise InputValidationError(f"Output file must have {OUTPUT_EXTENSION} extension")

    return output_path


def sanitize_filename(name: str) -> str:
    """Remove invalid characters from filename."""
    sanitized = re.sub(r'[<>:"/\\|?*]', "", name)
    return sanitized[:100].strip()
