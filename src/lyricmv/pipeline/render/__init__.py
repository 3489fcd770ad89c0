"""Render subsystem facade."""

from ...core.components.render import (
    CancelToken,
    ExportJob,
    ExportResult,
    ImageCache,
    PreviewPlayer,
    default_output_name,
    export_video,
    render_frame,
    sample_timeline,
    start_export,
)

__all__ = [
    "CancelToken",
    "ExportJob",
    "ExportResult",
    "ImageCache",
    "PreviewPlayer",
    "default_output_name",
    "export_video",
    "render_frame",
    "sample_timeline",
    "start_export",
]
