import json

import pytest

from lyricmv.core.models import BackgroundRecord, LyricLine, Timeline
from lyricmv.core.serialization import (
    backgrounds_from_json,
    lines_from_json,
    load_backgrounds,
    load_timeline,
    save_backgrounds,
    save_timeline,
)
from lyricmv.exceptions import InputValidationError


def test_lines_from_json_accepts_camel_case():
    lines = lines_from_json([{"text": "hi", "startTime": 1, "endTime": "2.5"}])
    assert lines == [LyricLine("hi", 1.0, 2.5)]


def test_lines_from_json_missing_time():
    with pytest.raises(InputValidationError):
        lines_from_json([{"text": "hi", "start_time": 1.0}])


def test_lines_from_json_bad_time():
    with pytest.raises(InputValidationError):
        lines_from_json([{"text": "hi", "start_time": "soon", "end_time": 2.0}])


def test_backgrounds_from_json_sorts_and_accepts_url():
    records = backgrounds_from_json([
        {"url": "b.jpg", "startTime": 5, "endTime": 9},
        {"image_ref": "a.jpg", "start_time": 0, "end_time": 5},
    ])
    assert [r.image_ref for r in records] == ["a.jpg", "b.jpg"]


def test_backgrounds_from_json_requires_ref():
    with pytest.raises(InputValidationError):
        backgrounds_from_json([{"start_time": 0, "end_time": 5}])


def test_timeline_file_round_trip(temp_dir, timeline):
    path = temp_dir / "lyrics.json"
    save_timeline(path, timeline)
    assert load_timeline(path) == timeline


def test_load_timeline_accepts_bare_list(temp_dir):
    path = temp_dir / "lyrics.json"
    path.write_text(json.dumps([{"text": "a", "start_time": 0, "end_time": 1}]))
    assert len(load_timeline(path)) == 1


def test_load_timeline_validates_order(temp_dir):
    path = temp_dir / "lyrics.json"
    path.write_text(json.dumps([
        {"text": "a", "start_time": 2, "end_time": 3},
        {"text": "b", "start_time": 0, "end_time": 1},
    ]))
    with pytest.raises(InputValidationError):
        load_timeline(path)


def test_load_timeline_missing_file(temp_dir):
    with pytest.raises(InputValidationError, match="File not found"):
        load_timeline(temp_dir / "nope.json")


def test_load_timeline_invalid_json(temp_dir):
    path = temp_dir / "broken.json"
    path.write_text("{not json")
    with pytest.raises(InputValidationError, match="Invalid JSON"):
        load_timeline(path)


def test_load_timeline_rejects_non_list(temp_dir):
    path = temp_dir / "lyrics.json"
    path.write_text(json.dumps({"lines": "nope"}))
    with pytest.raises(InputValidationError):
        load_timeline(path)


def test_backgrounds_file_round_trip(temp_dir):
    records = [BackgroundRecord("data:image/jpeg;base64,AAAA", 0.0, 4.0)]
    path = temp_dir / "backgrounds.json"
    save_backgrounds(path, records)
    assert json.loads(path.read_text())["backgrounds"][0]["end_time"] == 4.0
    assert load_backgrounds(path) == records
