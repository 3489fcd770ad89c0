"""Custom exceptions for lyricmv."""

class LyricMVError(Exception):
    """Base exception for lyricmv."""
    pass

class ConfigError(LyricMVError):
    """Invalid configuration value."""
    pass

class InputValidationError(LyricMVError):
    """Malformed or empty lyric timeline, or invalid render parameters."""
    pass

class SceneGenerationError(LyricMVError):
    """Error generating a background image for one scene."""
    pass

class ImageDecodeError(LyricMVError):
    """A referenced image could not be decoded."""

    def __init__(self, image_ref: str, reason: str):
        self.image_ref = image_ref
        super().__init__(f"Could not decode image {_short_ref(image_ref)}: {reason}")

class RenderError(LyricMVError):
    """Error rendering a single frame."""
    pass

class FrameFailureRateError(RenderError):
    """Too many frames failed to render."""
    pass

class EncodingError(LyricMVError):
    """Error encoding the final video."""
    pass

class ExportCancelled(LyricMVError):
    """Export was cancelled by the caller."""
    pass


def _short_ref(image_ref: str, limit: int = 60) -> str:
    # data URIs can be megabytes long
    if len(image_ref) <= limit:
        return image_ref
    return image_ref[:limit] + "..."
