import lyricmv.utils.fonts as fonts
from lyricmv.core.models import FontPreset


def test_every_preset_has_candidates():
    for preset in FontPreset:
        assert preset.value in fonts.PRESET_FONT_PATHS


def test_get_font_is_cached():
    assert fonts.get_font(20, "serif") is fonts.get_font(20, "serif")


def test_get_font_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(fonts.os.path, "exists", lambda path: False)
    fonts.get_font.cache_clear()
    try:
        font = fonts.get_font(23, "calligraphy")
        assert font.getbbox("Hello")[2] > 0
    finally:
        fonts.get_font.cache_clear()


def test_preset_candidates_come_first():
    candidates = fonts._candidate_paths("rounded")
    assert candidates[: len(fonts.PRESET_FONT_PATHS["rounded"])] == fonts.PRESET_FONT_PATHS["rounded"]
