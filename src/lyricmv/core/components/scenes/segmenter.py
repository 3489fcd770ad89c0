"""Group sung lyric lines into scenes, one generated background each."""

from typing import Iterable, List

from ....config import SCENE_MAX_LINES, SCENE_MAX_SECONDS
from ....utils.logging import get_logger
from ...models import LyricLine, Scene

logger = get_logger(__name__)


def segment(
    lines: Iterable[LyricLine],
    max_lines: int = SCENE_MAX_LINES,
    max_seconds: float = SCENE_MAX_SECONDS,
) -> List[Scene]:
    """Split sung lines into contiguous scenes.

    A pending scene is closed as soon as it holds ``max_lines`` lines or its
    summed line durations reach ``max_seconds``. The check runs after each
    line is appended, so a single long line still forms its own scene and is
    never split. Blank lines are skipped.
    """
    scenes: List[Scene] = []
    pending: List[LyricLine] = []
    pending_duration = 0.0

    for line in lines:
        if line.is_blank:
            continue
        pending.append(line)
        pending_duration += line.end_time - line.start_time
        if len(pending) >= max_lines or pending_duration >= max_seconds:
            scenes.append(Scene(lines=tuple(pending)))
            pending = []
            pending_duration = 0.0

    if pending:
        scenes.append(Scene(lines=tuple(pending)))

    logger.debug(f"Segmented lyrics into {len(scenes)} scenes")
    return scenes
