"""JSON serialization for timelines and background lists."""

import json
from pathlib import Path
from typing import List, Union

from ..exceptions import InputValidationError
from .models import BackgroundRecord, LyricLine, Timeline

PathLike = Union[str, Path]


def _get_time(item: dict, snake: str, camel: str) -> float:
    value = item.get(snake, item.get(camel))
    if value is None:
        raise InputValidationError(f"Missing '{snake}' in {item!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InputValidationError(f"Invalid '{snake}' value: {value!r}") from e


def lines_to_json(lines: List[LyricLine]) -> List[dict]:
    """Convert LyricLine objects into JSON-serializable dicts."""
    return [
        {"text": line.text, "start_time": line.start_time, "end_time": line.end_time}
        for line in lines
    ]


def lines_from_json(data: List[dict]) -> List[LyricLine]:
    """Convert JSON data back into LyricLine objects.

    Accepts ``start_time``/``end_time`` as well as ``startTime``/``endTime``.
    """
    lines: List[LyricLine] = []
    for item in data:
        lines.append(LyricLine(
            text=str(item.get("text", "")),
            start_time=_get_time(item, "start_time", "startTime"),
            end_time=_get_time(item, "end_time", "endTime"),
        ))
    return lines


def backgrounds_to_json(records: List[BackgroundRecord]) -> List[dict]:
    return [
        {"image_ref": r.image_ref, "start_time": r.start_time, "end_time": r.end_time}
        for r in records
    ]


def backgrounds_from_json(data: List[dict]) -> List[BackgroundRecord]:
    records = [
        BackgroundRecord(
            image_ref=str(item.get("image_ref") or item.get("url") or ""),
            start_time=_get_time(item, "start_time", "startTime"),
            end_time=_get_time(item, "end_time", "endTime"),
        )
        for item in data
    ]
    for record in records:
        if not record.image_ref:
            raise InputValidationError("Background entry without an image reference")
    return sorted(records, key=lambda r: r.start_time)


def _read_json(filepath: PathLike):
    path = Path(filepath)
    if not path.exists():
        raise InputValidationError(f"File not found: {filepath}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InputValidationError(f"Invalid JSON in {filepath}: {e}") from e


def load_timeline(filepath: PathLike) -> Timeline:
    """Load and validate a timed-lyrics file.

    The file holds either a list of lines or ``{"lines": [...]}``.
    """
    data = _read_json(filepath)
    if isinstance(data, dict):
        data = data.get("lines", [])
    if not isinstance(data, list):
        raise InputValidationError(f"Expected a list of lyric lines in {filepath}")
    return Timeline.from_lines(lines_from_json(data))


def save_timeline(filepath: PathLike, timeline: Timeline) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump({"lines": lines_to_json(list(timeline.lines))}, f, ensure_ascii=False, indent=2)


def load_backgrounds(filepath: PathLike) -> List[BackgroundRecord]:
    data = _read_json(filepath)
    if isinstance(data, dict):
        data = data.get("backgrounds", [])
    return backgrounds_from_json(data)


def save_backgrounds(filepath: PathLike, records: List[BackgroundRecord]) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump({"backgrounds": backgrounds_to_json(records)}, f, ensure_ascii=False, indent=2)
