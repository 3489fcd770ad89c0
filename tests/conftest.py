"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary files and directories
- Timed lyric lines and timelines
- Cover and background images on disk
- MoviePy clip stand-ins for export tests
"""

import json
import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from PIL import Image

from lyricmv.core.models import BackgroundRecord, LyricLine, StyleConfig, Timeline


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)

# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_audio_file(temp_dir):
    """Create a mock audio file."""
    audio_file = temp_dir / "test_audio.mp3"
    audio_file.write_bytes(b"fake audio data")
    return audio_file


# =============================================================================
# Lyrics Fixtures
# =============================================================================


@pytest.fixture
def sample_lines():
    """Three sung lines with a gap between the second and third."""
    return [
        LyricLine("Hello darkness", 1.0, 3.0),
        LyricLine("my old friend", 3.0, 5.0),
        LyricLine("I've come to talk", 6.0, 8.0),
    ]


@pytest.fixture
def timeline(sample_lines):
    return Timeline.from_lines(sample_lines)


@pytest.fixture
def lyrics_json(temp_dir, sample_lines):
    """Timed lyrics written the way the CLI expects them."""
    path = temp_dir / "lyrics.json"
    path.write_text(json.dumps({
        "lines": [
            {"text": l.text, "start_time": l.start_time, "end_time": l.end_time}
            for l in sample_lines
        ]
    }))
    return path


@pytest.fixture
def style():
    return StyleConfig()


# =============================================================================
# Image Fixtures
# =============================================================================


def _write_image(path: Path, color, size=(64, 48)) -> Path:
    Image.new("RGB", size, color).save(path, format="JPEG")
    return path


@pytest.fixture
def cover_path(temp_dir):
    return _write_image(temp_dir / "cover.jpg", (200, 40, 40), size=(64, 64))


@pytest.fixture
def background_paths(temp_dir):
    return [
        _write_image(temp_dir / "bg1.jpg", (40, 200, 40)),
        _write_image(temp_dir / "bg2.jpg", (40, 40, 200)),
    ]


@pytest.fixture
def sample_backgrounds(background_paths):
    """Two backgrounds meeting at 5.0s."""
    return [
        BackgroundRecord(str(background_paths[0]), 1.0, 5.0),
        BackgroundRecord(str(background_paths[1]), 5.0, 10.0),
    ]


# =============================================================================
# Encoder Fixtures
# =============================================================================


@pytest.fixture
def fake_moviepy():
    """Stand-ins for the MoviePy clips; write_videofile creates the file."""
    vw = "lyricmv.core.components.render.video_writer"
    with patch(f"{vw}.AudioFileClip") as audio_cls, patch(f"{vw}.ImageSequenceClip") as video_cls:
        audio = audio_cls.return_value
        audio.duration = 60.0
        video = video_cls.return_value
        video.with_duration.return_value = video
        video.with_audio.return_value = video
        seen = {}

        def write(path, **kwargs):
            seen["frames_exist"] = all(Path(p).exists() for p in video_cls.call_args[0][0])
            seen["kwargs"] = kwargs
            Path(path).write_bytes(b"fake mp4")

        video.write_videofile.side_effect = write
        yield SimpleNamespace(
            audio_cls=audio_cls, video_cls=video_cls, audio=audio, video=video, seen=seen
        )
