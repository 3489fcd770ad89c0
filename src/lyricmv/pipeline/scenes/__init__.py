"""Scene subsystem facade."""

from ...core.components.scenes import (
    GeminiImageGenerator,
    ImageGenerator,
    generate_backgrounds,
    segment,
)

__all__ = [
    "GeminiImageGenerator",
    "ImageGenerator",
    "generate_backgrounds",
    "segment",
]
