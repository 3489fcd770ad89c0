"""Interactive preview: a cooperative per-tick sampler over a monotonic clock."""

import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from ....config import FONT_SIZE, VIDEO_WIDTH, VIDEO_HEIGHT
from ....utils.logging import get_logger
from ...models import BackgroundRecord, StyleConfig, Timeline
from .frame_renderer import render_frame
from .image_cache import ImageCache
from .layout import LayoutCache
from .timeline import TimelineSample, sample_timeline

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreviewFrame:
    """What the preview shows on one display tick."""

    time: float
    sample: TimelineSample
    image: np.ndarray


class PreviewPlayer:
    """Plays a timeline against a clock, rendering on demand.

    The host drives it: call :meth:`tick` once per display refresh. Nothing
    runs between ticks. Position while playing is derived from the clock, so
    a slow tick never makes lyrics drift behind the audio.
    """

    def __init__(
        self,
        timeline: Timeline,
        backgrounds: Sequence[BackgroundRecord],
        cover_image_ref: str,
        style: StyleConfig,
        images: ImageCache,
        duration: float,
        clock: Callable[[], float] = time.monotonic,
        width: int = VIDEO_WIDTH,
        height: int = VIDEO_HEIGHT,
        font_size: int = FONT_SIZE,
    ):
        self.timeline = timeline
        self.backgrounds = list(backgrounds)
        self.cover_image_ref = cover_image_ref
        self.style = style
        self.images = images
        self.duration = duration
        self.width = width
        self.height = height
        self.font_size = font_size
        self._clock = clock
        self._anchor_position = 0.0
        self._anchor_clock: Optional[float] = None
        self._layout_cache: LayoutCache = {}

    @property
    def is_playing(self) -> bool:
        return self._anchor_clock is not None

    @property
    def position(self) -> float:
        if self._anchor_clock is None:
            return self._anchor_position
        elapsed = self._clock() - self._anchor_clock
        return min(self.duration, max(0.0, self._anchor_position + elapsed))

    def play(self) -> None:
        if self.is_playing:
            return
        # Restart from the top when play is pressed at the end
        if self._anchor_position >= self.duration - 0.1:
            self._anchor_position = 0.0
        self._anchor_clock = self._clock()

    def pause(self) -> None:
        self._anchor_position = self.position
        self._anchor_clock = None

    def seek(self, t: float) -> None:
        self._anchor_position = min(self.duration, max(0.0, t))
        if self._anchor_clock is not None:
            self._anchor_clock = self._clock()

    def set_style(self, style: StyleConfig) -> None:
        self.style = style

    def set_backgrounds(self, backgrounds: Sequence[BackgroundRecord]) -> None:
        self.backgrounds = list(backgrounds)

    def sample(self, t: float) -> TimelineSample:
        return sample_timeline(t, self.timeline, self.backgrounds, self.cover_image_ref)

    def frame_at(self, t: float) -> PreviewFrame:
        """Render the preview for an arbitrary time, playing or not."""
        sample = self.sample(t)
        image = render_frame(
            t,
            sample.playback,
            sample.background,
            self.style,
            self.cover_image_ref,
            self.images,
            width=self.width,
            height=self.height,
            font_size=self.font_size,
            layout_cache=self._layout_cache,
        )
        return PreviewFrame(time=t, sample=sample, image=image)

    def tick(self) -> PreviewFrame:
        """Sample the clock once and render the frame for that instant."""
        t = self.position
        if self.is_playing and t >= self.duration:
            logger.debug("Preview reached end of track")
            self._anchor_position = self.duration
            self._anchor_clock = None
        return self.frame_at(t)
