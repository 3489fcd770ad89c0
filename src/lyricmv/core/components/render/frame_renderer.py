"""Frame rendering for lyric videos."""

from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np
from PIL import Image, ImageEnhance

from ....config import (
    VIDEO_WIDTH,
    VIDEO_HEIGHT,
    FONT_SIZE,
    LINE_GAP,
    SIDE_LINE_SCALE,
    SIDE_LINE_OPACITY,
    DARKEN_FACTOR,
    Colors,
)
from ....utils.fonts import get_font
from ...models import BackgroundBlend, LyricLine, PlaybackState, StyleConfig
from .image_cache import ImageCache
from .layout import (
    LayoutCache,
    LineLayout,
    art_geometry,
    circle_mask,
    lyrics_region,
    measure_line,
)
from .render_text import draw_karaoke_line, draw_line_text
from .timeline import karaoke_progress

MIN_FONT_SIZE = 12


@dataclass(frozen=True)
class PlacedLine:
    """A lyric line with its final font, measurement and role."""

    line: LyricLine
    layout: LineLayout
    is_current: bool


def _fit_line(
    text: str,
    size: int,
    preset: str,
    max_width: int,
    layout_cache: Optional[LayoutCache],
) -> LineLayout:
    """Measure ``text``, shrinking the font until it fits ``max_width``."""
    layout = measure_line(text, get_font(size, preset), layout_cache)
    while layout.width > max_width and size > MIN_FONT_SIZE:
        size = max(MIN_FONT_SIZE, int(size * 0.9))
        layout = measure_line(text, get_font(size, preset), layout_cache)
    return layout


def compose_background(
    blend: BackgroundBlend,
    images: ImageCache,
    width: int,
    height: int,
) -> Image.Image:
    """Cover-fit current background, cross-fade the next one, then darken."""
    frame = images.fitted(blend.current_image_ref, width, height)
    if blend.blend_weight > 0 and blend.next_image_ref:
        upcoming = images.fitted(blend.next_image_ref, width, height)
        weight = float(blend.blend_weight)
        frame = cv2.addWeighted(frame, 1.0 - weight, upcoming, weight, 0.0)
    img = Image.fromarray(np.ascontiguousarray(frame))
    return ImageEnhance.Brightness(img).enhance(DARKEN_FACTOR)


def draw_cover_art(
    img: Image.Image,
    cover_image_ref: str,
    images: ImageCache,
    style: StyleConfig,
) -> None:
    """Circle-masked cover inset centered in the left art region."""
    geometry = art_geometry(img.width, img.height, style.art_area_fraction)
    if geometry.diameter <= 0:
        return
    art = Image.fromarray(
        images.fitted(cover_image_ref, geometry.diameter, geometry.diameter)
    )
    img.paste(art, (geometry.left, geometry.top), circle_mask(geometry.diameter))


def layout_lyrics(
    playback: PlaybackState,
    style: StyleConfig,
    max_width: int,
    font_size: int = FONT_SIZE,
    layout_cache: Optional[LayoutCache] = None,
) -> List[PlacedLine]:
    """Measure the visible lines in display order; absent lines are dropped."""
    preset = style.font_family.value
    side_size = max(MIN_FONT_SIZE, int(font_size * SIDE_LINE_SCALE))
    placed: List[PlacedLine] = []
    for line, is_current in (
        (playback.prev, False),
        (playback.current, True),
        (playback.next, False),
    ):
        if line is None:
            continue
        size = font_size if is_current else side_size
        layout = _fit_line(line.text, size, preset, max_width, layout_cache)
        placed.append(PlacedLine(line=line, layout=layout, is_current=is_current))
    return placed


def draw_lyrics(
    img: Image.Image,
    t: float,
    playback: PlaybackState,
    style: StyleConfig,
    font_size: int = FONT_SIZE,
    layout_cache: Optional[LayoutCache] = None,
) -> None:
    """Stack the visible lines, centered in the lyrics region."""
    geometry = art_geometry(img.width, img.height, style.art_area_fraction)
    x0, x1 = lyrics_region(img.width, geometry.region_width)
    placed = layout_lyrics(playback, style, x1 - x0, font_size, layout_cache)
    if not placed:
        return

    total_height = sum(p.layout.height for p in placed) + LINE_GAP * (len(placed) - 1)
    y = (img.height - total_height) // 2
    center_x = (x0 + x1) / 2.0
    for p in placed:
        x = int(round(center_x - p.layout.width / 2.0))
        if p.is_current:
            draw_karaoke_line(img, p.layout, x, y, karaoke_progress(t, p.line))
        else:
            draw_line_text(img, p.layout, x, y, Colors.LYRIC_SIDE, SIDE_LINE_OPACITY)
        y += p.layout.height + LINE_GAP


def render_frame(
    t: float,
    playback: PlaybackState,
    blend: BackgroundBlend,
    style: StyleConfig,
    cover_image_ref: str,
    images: ImageCache,
    width: Optional[int] = None,
    height: Optional[int] = None,
    font_size: Optional[int] = None,
    layout_cache: Optional[LayoutCache] = None,
) -> np.ndarray:
    """Render a single frame at the given time.

    Raises RenderError when an image the frame needs is not in ``images``.
    """
    video_width = width or VIDEO_WIDTH
    video_height = height or VIDEO_HEIGHT

    img = compose_background(blend, images, video_width, video_height)
    draw_cover_art(img, cover_image_ref, images, style)
    draw_lyrics(img, t, playback, style, font_size or FONT_SIZE, layout_cache)

    return np.array(img)
