"""Data models for timed lyrics, scenes, backgrounds and render style."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from ..config import ART_AREA_RANGE, DEFAULT_ART_AREA
from ..exceptions import InputValidationError
from ..utils.validation import validate_art_size, validate_timeline_order


@dataclass(frozen=True)
class LyricLine:
    """A single lyric line with its display interval in seconds."""

    text: str
    start_time: float
    end_time: float

    @property
    def is_blank(self) -> bool:
        """Blank lines mark intentional silence; they keep their slot but are never shown."""
        return not self.text.strip()

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class Timeline:
    """Immutable, time-ordered lyric lines for one session."""

    lines: Tuple[LyricLine, ...] = ()
    sung_lines: Tuple[LyricLine, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        validate_timeline_order(lines)
        object.__setattr__(self, "lines", lines)
        object.__setattr__(
            self, "sung_lines", tuple(line for line in lines if not line.is_blank)
        )

    @classmethod
    def from_lines(cls, lines: Iterable[LyricLine]) -> "Timeline":
        """Build a timeline, raising InputValidationError on broken ordering."""
        return cls(lines=tuple(lines))

    @property
    def last_end_time(self) -> float:
        """End of the final line, silent lines included."""
        return self.lines[-1].end_time if self.lines else 0.0

    def require_lyrics(self) -> None:
        if not self.sung_lines:
            raise InputValidationError("Timeline has no lyric lines to display")

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Scene:
    """A contiguous run of sung lines that share one generated background."""

    lines: Tuple[LyricLine, ...]

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("Scene must contain at least one line")

    @property
    def start_time(self) -> float:
        return self.lines[0].start_time

    @property
    def end_time(self) -> float:
        return self.lines[-1].end_time

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


@dataclass(frozen=True)
class BackgroundRecord:
    """A generated background image and the interval it covers."""

    image_ref: str
    start_time: float
    end_time: float


@dataclass(frozen=True)
class PlaybackState:
    """Lyric lines visible at one instant."""

    prev: Optional[LyricLine] = None
    current: Optional[LyricLine] = None
    next: Optional[LyricLine] = None


@dataclass(frozen=True)
class BackgroundBlend:
    """Background image(s) visible at one instant."""

    current_image_ref: str
    next_image_ref: Optional[str] = None
    blend_weight: float = 0.0


class FontPreset(str, Enum):
    """Lyric font presets offered to the user."""

    SANS = "sans"
    SERIF = "serif"
    CALLIGRAPHY = "calligraphy"
    HANDWRITING = "handwriting"
    ROUNDED = "rounded"


@dataclass(frozen=True)
class StyleConfig:
    """User-chosen layout and font, passed explicitly into every render call."""

    art_area_fraction: float = DEFAULT_ART_AREA
    font_family: FontPreset = FontPreset.SANS

    def __post_init__(self) -> None:
        validate_art_size(self.art_area_fraction)
        object.__setattr__(self, "font_family", FontPreset(self.font_family))

    @classmethod
    def from_percent(cls, art_size: int, font_family: str = "sans") -> "StyleConfig":
        """Build from the slider value the UI shows (20-60)."""
        low, high = ART_AREA_RANGE
        if not low * 100 <= art_size <= high * 100:
            raise InputValidationError(
                f"Art size must be between {int(low * 100)} and {int(high * 100)} percent"
            )
        return cls(art_area_fraction=art_size / 100.0, font_family=FontPreset(font_family))
