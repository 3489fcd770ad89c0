"""Core functionality modules.

Models are imported eagerly; the render and scene stacks pull in imaging,
MoviePy and google-genai, so import them from their own packages.
"""

from .models import (
    BackgroundBlend,
    BackgroundRecord,
    FontPreset,
    LyricLine,
    PlaybackState,
    Scene,
    StyleConfig,
    Timeline,
)

__all__ = [
    "BackgroundBlend",
    "BackgroundRecord",
    "FontPreset",
    "LyricLine",
    "PlaybackState",
    "Scene",
    "StyleConfig",
    "Timeline",
]
