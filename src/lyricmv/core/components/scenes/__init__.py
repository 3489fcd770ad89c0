"""Scene segmentation and background generation."""

from .segmenter import segment
from .generator import (
    GeminiImageGenerator,
    ImageGenerator,
    build_scene_prompt,
    generate_backgrounds,
)

__all__ = [
    "segment",
    "GeminiImageGenerator",
    "ImageGenerator",
    "build_scene_prompt",
    "generate_backgrounds",
]
