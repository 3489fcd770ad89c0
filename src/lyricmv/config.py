"""Configuration settings for lyricmv."""

import os
from pathlib import Path
from typing import Tuple

from .exceptions import ConfigError

# Directories
DEFAULT_OUTPUT_DIR = Path.cwd()

# Video settings (can be overridden via environment variables)
VIDEO_WIDTH = int(os.getenv("LYRICMV_VIDEO_WIDTH", "1280"))
VIDEO_HEIGHT = int(os.getenv("LYRICMV_VIDEO_HEIGHT", "720"))
FPS = int(os.getenv("LYRICMV_FPS", "30"))

# Resolution presets
RESOLUTION_PRESETS = {
    "480p": (854, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080),
}

# Colors (RGB tuples)
class Colors:
    LYRIC_BASE = (156, 163, 175)  # dim text under the karaoke sweep
    LYRIC_SIDE = (209, 213, 219)  # previous / next lines
    HIGHLIGHT_START = (253, 224, 71)
    HIGHLIGHT_MID = (255, 255, 255)
    HIGHLIGHT_END = (251, 191, 36)

# Font settings (can be overridden via environment variables)
FONT_SIZE = int(os.getenv("LYRICMV_FONT_SIZE", "48"))
SIDE_LINE_SCALE = 0.6
SIDE_LINE_OPACITY = 0.7
LINE_GAP = 16  # vertical pixels between stacked lyric lines
LYRICS_PADDING = 32  # horizontal padding inside the lyrics region

# Layout
ART_AREA_RANGE = (0.20, 0.60)
DEFAULT_ART_AREA = 0.40
ART_MARGIN = 30

# Background processing
DARKEN_FACTOR = 0.4  # 60% black overlay
CROSSFADE_SECONDS = 1.0

# Scene segmentation
SCENE_MAX_LINES = 4
SCENE_MAX_SECONDS = 15.0

# Export
MAX_FRAME_FAILURE_RATE = float(os.getenv("LYRICMV_MAX_FRAME_FAILURE_RATE", "0.05"))
DECODE_WORKERS = int(os.getenv("LYRICMV_DECODE_WORKERS", "4"))
RENDER_WORKERS = int(os.getenv("LYRICMV_RENDER_WORKERS", str(min(8, os.cpu_count() or 4))))
FRAME_IMAGE_FORMAT = "jpg"
FRAME_JPEG_QUALITY = 90

# Encoder (fixed, never decided per call)
VIDEO_CODEC = "libx264"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"
PIXEL_FORMAT = "yuv420p"
ENCODER_PRESET = "medium"
OUTPUT_EXTENSION = ".mp4"

# Image generation
IMAGE_MODEL = os.getenv("LYRICMV_IMAGE_MODEL", "imagen-4.0-generate-001")
IMAGE_ASPECT_RATIO = "16:9"
IMAGE_MIME_TYPE = "image/jpeg"


def validate_config() -> None:
    """Validate configuration values."""
    if VIDEO_WIDTH <= 0 or VIDEO_HEIGHT <= 0:
        raise ConfigError("Invalid video dimensions")

    if FPS <= 0:
        raise ConfigError("Invalid FPS value")

    if FONT_SIZE <= 0:
        raise ConfigError("Invalid font size")

    if not (0.0 <= MAX_FRAME_FAILURE_RATE <= 1.0):
        raise ConfigError("Frame failure rate must be between 0 and 1")

    if DECODE_WORKERS <= 0 or RENDER_WORKERS <= 0:
        raise ConfigError("Worker counts must be positive")

    if not (0.0 < ART_AREA_RANGE[0] <= DEFAULT_ART_AREA <= ART_AREA_RANGE[1] < 1.0):
        raise ConfigError("Invalid art area range")


def get_output_dir() -> Path:
    """Get output directory from environment or default."""
    output_dir = os.getenv("LYRICMV_OUTPUT_DIR")
    if output_dir:
        return Path(output_dir)
    return DEFAULT_OUTPUT_DIR


def get_api_key() -> str | None:
    """Return the Gemini API key from the environment, if any."""
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")


# Validate config on import
validate_config()


def parse_resolution(resolution_str: str) -> Tuple[int, int]:
    """Parse ``"WIDTHxHEIGHT"`` or a preset name (``480p``, ``720p``, ``1080p``).

    Raises:
        ValueError: If the string is neither
    """
    value = resolution_str.lower().strip()
    if value in RESOLUTION_PRESETS:
        return RESOLUTION_PRESETS[value]

    width, sep, height = value.partition("x")
    if sep and width.isdigit() and height.isdigit() and int(width) > 0 and int(height) > 0:
        return int(width), int(height)

    raise ValueError(
        f"Invalid resolution: {resolution_str}. Use 'WIDTHxHEIGHT' (e.g., '1280x720') "
        f"or one of: {', '.join(RESOLUTION_PRESETS)}"
    )
