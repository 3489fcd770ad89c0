"""Offline export: render every frame, then encode frames plus audio with MoviePy."""

from __future__ import annotations

import math
import shutil
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from moviepy import AudioFileClip, ImageSequenceClip
from PIL import Image

from ....config import (
    VIDEO_WIDTH,
    VIDEO_HEIGHT,
    FONT_SIZE,
    MAX_FRAME_FAILURE_RATE,
    DECODE_WORKERS,
    RENDER_WORKERS,
    FRAME_IMAGE_FORMAT,
    FRAME_JPEG_QUALITY,
    VIDEO_CODEC,
    AUDIO_CODEC,
    AUDIO_BITRATE,
    PIXEL_FORMAT,
    ENCODER_PRESET,
    OUTPUT_EXTENSION,
)
from ....exceptions import (
    EncodingError,
    ExportCancelled,
    FrameFailureRateError,
    InputValidationError,
    RenderError,
)
from ....utils.logging import get_logger
from ....utils.validation import (
    sanitize_filename,
    validate_duration,
    validate_frame_rate,
)
from ...models import BackgroundRecord, LyricLine, StyleConfig, Timeline
from .frame_renderer import render_frame
from .image_cache import ImageCache
from .layout import LayoutCache
from .timeline import sample_timeline

logger = get_logger(__name__)

ProgressFn = Callable[[int, int], None]
WarningFn = Callable[[str], None]


class CancelToken:
    """Cooperative cancellation flag checked between frames."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ExportCancelled("Export cancelled")


@dataclass
class ExportResult:
    """Outcome of a completed export."""

    output_path: Path
    total_frames: int
    rendered_frames: int
    skipped_frames: int
    warnings: List[str] = field(default_factory=list)


def default_output_name(song_title: str, artist: str) -> str:
    """File name of the exported video: ``"{title} - {artist}.mp4"``."""
    name = sanitize_filename(f"{song_title} - {artist}") or "lyric video"
    return f"{name}{OUTPUT_EXTENSION}"


def frame_count(duration: float, frame_rate: float) -> int:
    return int(math.floor(duration * frame_rate))


def collect_image_refs(
    cover_image_ref: str, backgrounds: Sequence[BackgroundRecord]
) -> List[str]:
    """Every distinct image the export may draw, cover first."""
    refs = [cover_image_ref] + [record.image_ref for record in backgrounds]
    return list(dict.fromkeys(refs))


def _as_timeline(lines: Union[Timeline, Sequence[LyricLine]]) -> Timeline:
    if isinstance(lines, Timeline):
        return lines
    return Timeline.from_lines(lines)


def _encode(
    frame_paths: List[str],
    audio_path: str,
    frame_rate: float,
    output_path: Path,
) -> float:
    """Mux the ordered frame files with the audio track; returns encoded duration."""
    audio = None
    video = None
    try:
        audio = AudioFileClip(str(audio_path))
        video = ImageSequenceClip(frame_paths, fps=frame_rate)
        duration = min(len(frame_paths) / frame_rate, audio.duration)
        video = video.with_duration(duration).with_audio(audio.subclipped(0, duration))
        video.write_videofile(
            str(output_path),
            fps=frame_rate,
            codec=VIDEO_CODEC,
            audio_codec=AUDIO_CODEC,
            audio_bitrate=AUDIO_BITRATE,
            preset=ENCODER_PRESET,
            ffmpeg_params=["-pix_fmt", PIXEL_FORMAT],
            temp_audiofile_path=str(output_path.parent),
            logger=None,
        )
        return duration
    except Exception as e:
        raise EncodingError(f"Video encoding failed: {e}") from e
    finally:
        if video is not None:
            video.close()
        if audio is not None:
            audio.close()


def export_video(
    lines: Union[Timeline, Sequence[LyricLine]],
    backgrounds: Sequence[BackgroundRecord],
    audio_path: str,
    duration: float,
    frame_rate: float,
    style: StyleConfig,
    cover_image_ref: str,
    output_path: Union[str, Path],
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    font_size: Optional[int] = None,
    on_progress: Optional[ProgressFn] = None,
    on_warning: Optional[WarningFn] = None,
    cancel_token: Optional[CancelToken] = None,
    max_failure_rate: float = MAX_FRAME_FAILURE_RATE,
    workers: int = RENDER_WORKERS,
    decode_workers: int = DECODE_WORKERS,
    work_dir: Optional[Path] = None,
) -> ExportResult:
    """Render the whole timeline frame by frame and encode it with the audio.

    Frame ``i`` shows time ``i / frame_rate`` and goes through the same
    timeline sampling as the preview. Frames render in parallel but are
    collected strictly in index order. The output file only appears once
    encoding has succeeded.

    Raises:
        InputValidationError: empty timeline or invalid parameters
        ImageDecodeError: a cover/background image cannot be decoded
        FrameFailureRateError: too many frames failed to render
        EncodingError: the encoder failed
        ExportCancelled: ``cancel_token`` was triggered
    """
    timeline = _as_timeline(lines)
    timeline.require_lyrics()
    validate_duration(duration)
    validate_frame_rate(frame_rate)
    if not 0.0 <= max_failure_rate <= 1.0:
        raise InputValidationError("Failure rate threshold must be between 0 and 1")
    total_frames = frame_count(duration, frame_rate)
    if total_frames <= 0:
        raise InputValidationError("Duration is shorter than one frame")

    video_width = width or VIDEO_WIDTH
    video_height = height or VIDEO_HEIGHT
    lyrics_font_size = font_size or FONT_SIZE
    token = cancel_token or CancelToken()
    final_path = Path(output_path)
    backgrounds = list(backgrounds)

    logger.info("Rendering lyric video...")
    logger.info(
        f"Resolution: {video_width}x{video_height}, FPS: {frame_rate}, "
        f"Frames: {total_frames}, Backgrounds: {len(backgrounds)}"
    )

    warnings: List[str] = []

    def warn(message: str) -> None:
        logger.warning(message)
        warnings.append(message)
        if on_warning is not None:
            on_warning(message)

    with tempfile.TemporaryDirectory(prefix="lyricmv-", dir=work_dir) as tmp, ImageCache(
        video_width, video_height
    ) as images:
        tmp_dir = Path(tmp)
        images.preload(collect_image_refs(cover_image_ref, backgrounds), decode_workers)
        token.raise_if_cancelled()

        layout_cache: LayoutCache = {}

        def render_to_file(index: int) -> str:
            frame_time = index / frame_rate
            sample = sample_timeline(frame_time, timeline, backgrounds, cover_image_ref)
            frame = render_frame(
                frame_time,
                sample.playback,
                sample.background,
                style,
                cover_image_ref,
                images,
                width=video_width,
                height=video_height,
                font_size=lyrics_font_size,
                layout_cache=layout_cache,
            )
            path = tmp_dir / f"frame-{index:06d}.{FRAME_IMAGE_FORMAT}"
            Image.fromarray(frame).save(path, quality=FRAME_JPEG_QUALITY)
            return str(path)

        frame_paths: List[Optional[str]] = [None] * total_frames
        failed = 0
        last_good: Optional[str] = None
        window = max(1, workers) * 2

        with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
            for window_start in range(0, total_frames, window):
                indices = range(window_start, min(window_start + window, total_frames))
                futures = [pool.submit(render_to_file, i) for i in indices]
                try:
                    for index, future in zip(indices, futures):
                        token.raise_if_cancelled()
                        try:
                            path = future.result()
                        except RenderError as e:
                            failed += 1
                            warn(f"Frame {index} skipped: {e}")
                            if failed / total_frames > max_failure_rate:
                                raise FrameFailureRateError(
                                    f"{failed} of {total_frames} frames failed to render"
                                ) from e
                            path = last_good
                        else:
                            last_good = path
                        frame_paths[index] = path
                        if on_progress is not None:
                            on_progress(index, total_frames)
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        if last_good is None:
            raise FrameFailureRateError("No frames could be rendered")
        # Leading failures hold the first frame that did render
        first_good = next(p for p in frame_paths if p is not None)
        ordered = [p if p is not None else first_good for p in frame_paths]

        token.raise_if_cancelled()
        logger.info(f"Encoding {total_frames} frames with audio...")
        tmp_output = tmp_dir / f"output{OUTPUT_EXTENSION}"
        encoded_duration = _encode(ordered, audio_path, frame_rate, tmp_output)
        token.raise_if_cancelled()

        final_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(tmp_output), str(final_path))

    logger.info(f"Done! Output: {final_path} ({encoded_duration:.1f}s)")
    return ExportResult(
        output_path=final_path,
        total_frames=total_frames,
        rendered_frames=total_frames - failed,
        skipped_frames=failed,
        warnings=warnings,
    )


class ExportJob:
    """Handle for an export running on a background worker thread."""

    def __init__(self, future: Future, cancel_token: CancelToken):
        self._future = future
        self.cancel_token = cancel_token

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next frame boundary."""
        self.cancel_token.cancel()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> ExportResult:
        """Wait for the export; re-raises its failure."""
        return self._future.result(timeout)


def start_export(*args, **kwargs) -> ExportJob:
    """Run :func:`export_video` off the calling thread."""
    token = kwargs.pop("cancel_token", None) or CancelToken()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lyricmv-export")
    future = executor.submit(export_video, *args, cancel_token=token, **kwargs)
    executor.shutdown(wait=False)
    return ExportJob(future, token)
