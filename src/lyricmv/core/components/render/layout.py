"""Layout helpers: frame regions and lyric line measurement."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ....config import ART_MARGIN, LYRICS_PADDING

FontType = ImageFont.ImageFont | ImageFont.FreeTypeFont
LayoutCache = Dict[Tuple[str, int, str], "LineLayout"]


@dataclass(frozen=True)
class ArtGeometry:
    """Placement of the circular cover inset inside the left region."""

    region_width: int
    diameter: int
    left: int
    top: int


@dataclass(frozen=True)
class LineLayout:
    """Measured text of one lyric line."""

    text: str
    font: FontType
    width: int
    height: int
    offset_x: int  # left side bearing to cancel when drawing at x


def art_geometry(width: int, height: int, art_area_fraction: float) -> ArtGeometry:
    region_width = int(round(width * art_area_fraction))
    diameter = min(region_width, height) - 2 * ART_MARGIN
    diameter = max(diameter, 0)
    return ArtGeometry(
        region_width=region_width,
        diameter=diameter,
        left=(region_width - diameter) // 2,
        top=(height - diameter) // 2,
    )


def lyrics_region(width: int, art_region_width: int) -> Tuple[int, int]:
    """Horizontal extent (x0, x1) usable for lyric text."""
    return art_region_width + LYRICS_PADDING, width - LYRICS_PADDING


@lru_cache(maxsize=16)
def circle_mask(diameter: int, supersample: int = 4) -> Image.Image:
    """Anti-aliased circular mask of the given diameter."""
    big = diameter * supersample
    mask = Image.new("L", (big, big), 0)
    ImageDraw.Draw(mask).ellipse([0, 0, big - 1, big - 1], fill=255)
    return mask.resize((diameter, diameter), Image.Resampling.LANCZOS)


def measure_line(
    text: str,
    font: FontType,
    layout_cache: Optional[LayoutCache] = None,
) -> LineLayout:
    """Return cached line layout or compute and store it."""
    key = (text, int(getattr(font, "size", 0)), str(getattr(font, "path", "")))
    if layout_cache is not None and key in layout_cache:
        return layout_cache[key]

    left, _top, right, _bottom = font.getbbox(text)
    ascent, descent = font.getmetrics()
    layout = LineLayout(
        text=text,
        font=font,
        width=max(0, int(right - left)),
        height=int(ascent + descent),
        offset_x=int(left),
    )

    if layout_cache is not None:
        layout_cache[key] = layout
    return layout
