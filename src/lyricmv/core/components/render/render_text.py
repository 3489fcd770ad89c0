"""Text and highlight rendering primitives for lyric lines."""

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw

from ....config import Colors
from .layout import LineLayout


def _text_mask(layout: LineLayout, opacity: float = 1.0) -> Image.Image:
    mask = Image.new("L", (layout.width, layout.height), 0)
    ImageDraw.Draw(mask).text(
        (-layout.offset_x, 0),
        layout.text,
        font=layout.font,
        fill=int(round(255 * opacity)),
    )
    return mask


@lru_cache(maxsize=64)
def _gradient_strip(width: int, height: int) -> Image.Image:
    """Horizontal highlight gradient spanning the full measured text width."""
    stops = [0.0, 0.5, 1.0]
    colors = np.array(
        [Colors.HIGHLIGHT_START, Colors.HIGHLIGHT_MID, Colors.HIGHLIGHT_END],
        dtype=np.float64,
    )
    xs = np.linspace(0.0, 1.0, width)
    row = np.stack([np.interp(xs, stops, colors[:, c]) for c in range(3)], axis=-1)
    strip = np.broadcast_to(row, (height, width, 3)).round().astype(np.uint8)
    return Image.fromarray(np.ascontiguousarray(strip))


def highlight_width(total_width: int, progress: float) -> int:
    """Pixel columns of a line already revealed at ``progress``."""
    progress = max(0.0, min(1.0, progress))
    return int(total_width * progress)


def draw_line_text(
    img: Image.Image,
    layout: LineLayout,
    x: int,
    y: int,
    color: tuple,
    opacity: float = 1.0,
) -> None:
    """Draw a whole line in a flat color."""
    if layout.width <= 0:
        return
    img.paste(color, (x, y, x + layout.width, y + layout.height), _text_mask(layout, opacity))


def draw_highlight_sweep(
    img: Image.Image,
    layout: LineLayout,
    x: int,
    y: int,
    progress: float,
) -> int:
    """Draw the gradient text clipped to the revealed part of the line.

    Returns the clip width in pixels.
    """
    clip = highlight_width(layout.width, progress)
    if clip <= 0:
        return 0
    mask = np.array(_text_mask(layout))
    mask[:, clip:] = 0
    img.paste(
        _gradient_strip(layout.width, layout.height),
        (x, y),
        Image.fromarray(mask),
    )
    return clip


def draw_karaoke_line(
    img: Image.Image,
    layout: LineLayout,
    x: int,
    y: int,
    progress: float,
) -> int:
    """Dim base text first, then the highlighted sweep on top."""
    draw_line_text(img, layout, x, y, Colors.LYRIC_BASE)
    return draw_highlight_sweep(img, layout, x, y, progress)
