"""Timeline queries, frame compositing, preview and export."""

from .timeline import (
    TimelineSample,
    crossfade_weight,
    karaoke_progress,
    query_background,
    query_playback,
    sample_timeline,
)
from .image_cache import ImageCache, decode_image_ref
from .frame_renderer import render_frame
from .preview import PreviewFrame, PreviewPlayer
from .progress import ConsoleProgressBar
from .video_writer import (
    CancelToken,
    ExportJob,
    ExportResult,
    collect_image_refs,
    default_output_name,
    export_video,
    start_export,
)

__all__ = [
    "TimelineSample",
    "crossfade_weight",
    "karaoke_progress",
    "query_background",
    "query_playback",
    "sample_timeline",
    "ImageCache",
    "decode_image_ref",
    "render_frame",
    "PreviewFrame",
    "PreviewPlayer",
    "ConsoleProgressBar",
    "CancelToken",
    "ExportJob",
    "ExportResult",
    "collect_image_refs",
    "default_output_name",
    "export_video",
    "start_export",
]
