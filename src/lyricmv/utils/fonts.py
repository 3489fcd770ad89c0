"""Font utilities for cross-platform font loading."""

import os
import sys
from functools import lru_cache

from PIL import ImageFont

from ..config import FONT_SIZE


# Platform-specific font paths in order of preference
FONT_PATHS = {
    'darwin': [  # macOS
        "/System/Library/Fonts/PingFang.ttc",
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial Unicode.ttf",
        "/Library/Fonts/Arial.ttf",
    ],
    'linux': [
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    ],
    'win32': [  # Windows
        "C:/Windows/Fonts/msjhbd.ttc",
        "C:/Windows/Fonts/arialbd.ttf",
        "C:/Windows/Fonts/segoeuib.ttf",
    ],
}

# Preferred files for each lyric font preset, tried before platform fonts.
# Keys are FontPreset values.
PRESET_FONT_PATHS = {
    "sans": [
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
        "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
        "/Library/Fonts/NotoSansTC-Bold.otf",
    ],
    "serif": [
        "/usr/share/fonts/opentype/noto/NotoSerifCJK-Bold.ttc",
        "/usr/share/fonts/noto-cjk/NotoSerifCJK-Bold.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf",
        "/Library/Fonts/NotoSerifTC-Bold.otf",
    ],
    "calligraphy": [
        "/usr/share/fonts/truetype/ma-shan-zheng/MaShanZheng-Regular.ttf",
        "/Library/Fonts/MaShanZheng-Regular.ttf",
    ],
    "handwriting": [
        "/usr/share/fonts/truetype/long-cang/LongCang-Regular.ttf",
        "/Library/Fonts/LongCang-Regular.ttf",
    ],
    "rounded": [
        "/usr/share/fonts/truetype/zcool/ZCOOLKuaiLe-Regular.ttf",
        "/Library/Fonts/ZCOOLKuaiLe-Regular.ttf",
    ],
}


def _get_platform_fonts() -> list[str]:
    """Get font paths for the current platform."""
    platform = sys.platform
    if platform.startswith('linux'):
        platform = 'linux'
    return FONT_PATHS.get(platform, FONT_PATHS['linux'])


def _candidate_paths(preset: str) -> list[str]:
    candidates = list(PRESET_FONT_PATHS.get(preset, []))
    candidates += _get_platform_fonts()
    for platform_fonts in FONT_PATHS.values():
        candidates += platform_fonts
    return candidates


@lru_cache(maxsize=32)
def get_font(size: int = FONT_SIZE, preset: str = "sans") -> ImageFont.FreeTypeFont:
    """
    Get a suitable font for rendering, with cross-platform support.

    Args:
        size: Font size in pixels (default from config)
        preset: Font preset name (see FontPreset)

    Returns:
        PIL ImageFont object
    """
    for path in _candidate_paths(str(preset)):
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue

    # Last resort: PIL default font
    return ImageFont.load_default(size=size)
