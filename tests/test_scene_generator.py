import base64
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from lyricmv.core.components.scenes import (
    GeminiImageGenerator,
    build_scene_prompt,
    generate_backgrounds,
    segment,
)
from lyricmv.core.models import LyricLine, Scene
from lyricmv.exceptions import SceneGenerationError


class FakeGenerator:
    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def generate(self, scene_text, song_title, artist):
        self.calls.append((scene_text, song_title, artist))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _scenes(count):
    return [
        Scene(lines=(LyricLine(f"scene {i}", i * 10.0, i * 10.0 + 8.0),))
        for i in range(count)
    ]


def test_build_scene_prompt_mentions_song_and_lyrics():
    prompt = build_scene_prompt("we are young", "Young", "Fun")
    assert '"Young"' in prompt
    assert "Fun" in prompt
    assert "we are young" in prompt
    assert "16:9" in prompt


def test_generate_backgrounds_one_record_per_scene():
    generator = FakeGenerator(["a.jpg", "b.jpg", "c.jpg"])
    records = generate_backgrounds(_scenes(3), generator, "Song", "Artist", 60.0)

    assert [r.image_ref for r in records] == ["a.jpg", "b.jpg", "c.jpg"]
    assert (records[0].start_time, records[0].end_time) == (0.0, 8.0)
    assert (records[1].start_time, records[1].end_time) == (10.0, 18.0)
    assert generator.calls[0] == ("scene 0", "Song", "Artist")


def test_last_record_extends_to_track_end():
    records = generate_backgrounds(_scenes(2), FakeGenerator(["a", "b"]), "S", "A", 42.0)
    assert records[-1].start_time == 10.0
    assert records[-1].end_time == 42.0


def test_failed_scene_is_skipped():
    generator = FakeGenerator(["a", RuntimeError("quota"), "c"])
    records = generate_backgrounds(_scenes(3), generator, "S", "A", 30.0)
    assert [r.image_ref for r in records] == ["a", "c"]
    assert records[0].end_time == 8.0
    assert records[1].start_time == 20.0


def test_empty_result_is_skipped():
    records = generate_backgrounds(_scenes(2), FakeGenerator([None, "b"]), "S", "A", 30.0)
    assert [r.image_ref for r in records] == ["b"]


def test_all_scenes_failing_gives_no_records():
    generator = FakeGenerator([SceneGenerationError("x"), SceneGenerationError("y")])
    assert generate_backgrounds(_scenes(2), generator, "S", "A", 30.0) == []


def test_progress_reports():
    events = []
    generate_backgrounds(
        _scenes(4), FakeGenerator(["a", "b", "c", "d"]), "S", "A", 50.0,
        on_progress=lambda percent, message: events.append((percent, message)),
    )
    percents = [p for p, _ in events]
    assert percents[:2] == [5, 10]
    assert percents[2:6] == [10, 31, 52, 73]
    assert percents[-1] == 100
    assert events[2][1] == "Generating image for scene 1/4..."
    assert percents == sorted(percents)


def test_works_with_segmented_lyrics():
    lines = [LyricLine(f"l{i}", i * 1.0, i * 1.0 + 1.0) for i in range(6)]
    records = generate_backgrounds(
        segment(lines), FakeGenerator(["a", "b"]), "S", "A", 10.0
    )
    assert [(r.start_time, r.end_time) for r in records] == [(0.0, 4.0), (4.0, 10.0)]


# =============================================================================
# Gemini image generator
# =============================================================================


def _response(image_bytes):
    image = SimpleNamespace(image=SimpleNamespace(image_bytes=image_bytes))
    return SimpleNamespace(generated_images=[image] if image_bytes is not None else [])


def test_gemini_requires_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(SceneGenerationError):
        GeminiImageGenerator()


def test_gemini_returns_data_uri():
    with patch("lyricmv.core.components.scenes.generator.genai") as mock_genai:
        client = MagicMock()
        client.models.generate_images.return_value = _response(b"jpegbytes")
        mock_genai.Client.return_value = client

        generator = GeminiImageGenerator(api_key="key", model="imagen-test")
        ref = generator.generate("lyrics", "Song", "Artist")

    mock_genai.Client.assert_called_once_with(api_key="key")
    kwargs = client.models.generate_images.call_args.kwargs
    assert kwargs["model"] == "imagen-test"
    assert "lyrics" in kwargs["prompt"]
    assert ref == "data:image/jpeg;base64," + base64.b64encode(b"jpegbytes").decode()


def test_gemini_writes_files_to_output_dir(temp_dir):
    with patch("lyricmv.core.components.scenes.generator.genai") as mock_genai:
        client = mock_genai.Client.return_value
        client.models.generate_images.return_value = _response(b"abc")

        generator = GeminiImageGenerator(api_key="key", output_dir=temp_dir / "images")
        first = generator.generate("one", "S", "A")
        second = generator.generate("two", "S", "A")

    assert first.endswith("scene_001.jpg")
    assert second.endswith("scene_002.jpg")
    assert (temp_dir / "images" / "scene_001.jpg").read_bytes() == b"abc"


def test_gemini_no_images_returns_none():
    with patch("lyricmv.core.components.scenes.generator.genai") as mock_genai:
        mock_genai.Client.return_value.models.generate_images.return_value = _response(None)
        generator = GeminiImageGenerator(api_key="key")
        assert generator.generate("one", "S", "A") is None


def test_gemini_request_failure_raises():
    with patch("lyricmv.core.components.scenes.generator.genai") as mock_genai:
        mock_genai.Client.return_value.models.generate_images.side_effect = RuntimeError("boom")
        generator = GeminiImageGenerator(api_key="key")
        with pytest.raises(SceneGenerationError, match="boom"):
            generator.generate("one", "S", "A")


@pytest.mark.network
def test_gemini_live_generation():
    generator = GeminiImageGenerator()
    ref = generator.generate("Sunrise over an empty highway", "Road", "Test")
    assert ref is None or ref.startswith("data:image/")
