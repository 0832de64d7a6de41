import pytest
from app.core.config import DEFAULT_PRELOAD_KEYWORDS, Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.audio_upload_dir == "uploads/audio_reviews"
    assert s.catalog_provider == "imdbapi"
    assert s.preload_keywords == DEFAULT_PRELOAD_KEYWORDS
    assert s.preload_max_pages == 3


@pytest.mark.parametrize(
    "raw,expected",
    [
        ('["http://localhost:5173"]', ["http://localhost:5173"]),
        ("[http://a, http://b]", ["http://a", "http://b"]),
        ("http://a, http://b", ["http://a", "http://b"]),
        ("*", ["*"]),
        ("", []),
    ],
)
def test_cors_origins_formats(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings(_env_file=None).cors_origins == expected


def test_preload_keywords_from_env(monkeypatch):
    monkeypatch.setenv("PRELOAD_KEYWORDS", "alien, predator")
    assert Settings(_env_file=None).preload_keywords == ["alien", "predator"]


@pytest.mark.parametrize("raw", ["../outside", "/", ""])
def test_upload_dir_must_stay_inside_media_root(monkeypatch, raw):
    monkeypatch.setenv("AUDIO_UPLOAD_DIR", raw)
    with pytest.raises(ValueError):
        Settings(_env_file=None)
