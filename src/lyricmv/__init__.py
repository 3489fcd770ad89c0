"""lyricmv - render lyric music videos from audio, a cover image and timed lyrics."""

__version__ = "0.3.0"
