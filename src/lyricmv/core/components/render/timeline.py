"""Timeline queries: which lyrics and backgrounds are visible at time t.

Every function here is pure. The preview player and the exporter both go
through :func:`sample_timeline`, so a frame exported at ``t`` shows exactly
what the preview shows at ``t``.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ....config import CROSSFADE_SECONDS
from ...models import (
    BackgroundBlend,
    BackgroundRecord,
    LyricLine,
    PlaybackState,
    Timeline,
)


@dataclass(frozen=True)
class TimelineSample:
    """Query results for one instant."""

    time: float
    playback: PlaybackState
    background: BackgroundBlend


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def query_playback(t: float, lines: Sequence[LyricLine]) -> PlaybackState:
    """Return the previous, current and next sung lines at time ``t``."""
    sung = [line for line in lines if not line.is_blank]
    if not sung:
        return PlaybackState()

    if t < sung[0].start_time:
        return PlaybackState(next=sung[0])

    last = sung[-1]
    if t >= last.end_time:
        return PlaybackState(prev=last)

    for i, line in enumerate(sung):
        if line.start_time <= t < line.end_time:
            return PlaybackState(
                prev=sung[i - 1] if i > 0 else None,
                current=line,
                next=sung[i + 1] if i + 1 < len(sung) else None,
            )

    # Between two lines: show the one just sung and the one coming up.
    for i in range(len(sung) - 1, -1, -1):
        if sung[i].end_time <= t:
            return PlaybackState(
                prev=sung[i],
                next=sung[i + 1] if i + 1 < len(sung) else None,
            )

    return PlaybackState()


def crossfade_weight(
    t: float, next_start: float, window: float = CROSSFADE_SECONDS
) -> float:
    """Linear fade that reaches 1.0 exactly at ``next_start``."""
    return _clamp01((t - (next_start - window)) / window)


def query_background(
    t: float,
    backgrounds: Sequence[BackgroundRecord],
    cover_image_ref: str,
    last_lyric_end_time: float,
) -> BackgroundBlend:
    """Return the background image(s) at ``t`` and the cross-fade weight.

    Falls back to the cover image whenever no generated background applies,
    so the result always names an image.
    """
    if not backgrounds:
        return BackgroundBlend(current_image_ref=cover_image_ref)

    if t < backgrounds[0].start_time:
        return BackgroundBlend(current_image_ref=cover_image_ref)

    if t >= last_lyric_end_time:
        return BackgroundBlend(current_image_ref=backgrounds[-1].image_ref)

    for i, record in enumerate(backgrounds):
        if record.start_time <= t < record.end_time:
            upcoming = backgrounds[i + 1] if i + 1 < len(backgrounds) else None
            if upcoming is None:
                return BackgroundBlend(current_image_ref=record.image_ref)
            blend = 0.0
            if t > upcoming.start_time - CROSSFADE_SECONDS:
                blend = crossfade_weight(t, upcoming.start_time)
            return BackgroundBlend(
                current_image_ref=record.image_ref,
                next_image_ref=upcoming.image_ref,
                blend_weight=blend,
            )

    # Gap left by a failed scene: hold the most recent background.
    for record in reversed(backgrounds):
        if t >= record.end_time:
            return BackgroundBlend(current_image_ref=record.image_ref)

    return BackgroundBlend(current_image_ref=cover_image_ref)


def karaoke_progress(t: float, line: Optional[LyricLine]) -> float:
    """Fraction of ``line`` already sung at ``t``, clamped to [0, 1]."""
    if line is None:
        return 0.0
    duration = line.end_time - line.start_time
    if duration <= 0:
        return 0.0
    return _clamp01((t - line.start_time) / duration)


def sample_timeline(
    t: float,
    timeline: Timeline,
    backgrounds: Sequence[BackgroundRecord],
    cover_image_ref: str,
) -> TimelineSample:
    """Resolve lyrics and background for one instant."""
    return TimelineSample(
        time=t,
        playback=query_playback(t, timeline.sung_lines),
        background=query_background(
            t, backgrounds, cover_image_ref, timeline.last_end_time
        ),
    )
