"""Tests for configuration loading."""

from aiimg.config import (
    AI_KEYWORDS,
    SMARTPHONE_BRANDS,
    get_config,
    load_config,
    reset_config,
)


def test_defaults():
    config = load_config()
    assert config.detection.metadata_timeout_seconds == 2.0
    assert config.detection.enable_lineage is False
    assert config.metadata.smartphone_brands == SMARTPHONE_BRANDS
    assert config.metadata.ai_keywords == AI_KEYWORDS
    assert config.metadata.smartphone_suppressed_keywords == ["ai"]
    assert config.extraction.use_exiftool is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("AIIMG_METADATA_TIMEOUT", "5")
    monkeypatch.setenv("AIIMG_ENABLE_LINEAGE", "yes")
    monkeypatch.setenv("AIIMG_AI_KEYWORDS", "Midjourney, flux ,")
    monkeypatch.setenv("AIIMG_EXIFTOOL_TIMEOUT", "10")

    config = load_config()
    assert config.detection.metadata_timeout_seconds == 5.0
    assert config.detection.enable_lineage is True
    assert config.metadata.ai_keywords == ["midjourney", "flux"]
    assert config.extraction.exiftool_timeout_seconds == 10


def test_yaml_file(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "detection:\n"
        "  metadata_timeout_seconds: 0.5\n"
        "metadata:\n"
        "  smartphone_brands: [nothing]\n"
        "extraction:\n"
        "  use_exiftool: false\n"
    )
    monkeypatch.setattr("aiimg.config.CONFIG_LOCATIONS", [tmp_path / "missing.yaml", path])

    config = load_config()
    assert config.detection.metadata_timeout_seconds == 0.5
    assert config.metadata.smartphone_brands == ["nothing"]
    assert config.metadata.ai_keywords == AI_KEYWORDS
    assert config.extraction.use_exiftool is False


def test_env_beats_yaml(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("detection:\n  metadata_timeout_seconds: 0.5\n")
    monkeypatch.setattr("aiimg.config.CONFIG_LOCATIONS", [path])
    monkeypatch.setenv("AIIMG_METADATA_TIMEOUT", "3")
    assert load_config().detection.metadata_timeout_seconds == 3.0


def test_global_config_cached(monkeypatch):
    first = get_config()
    assert get_config() is first

    monkeypatch.setenv("AIIMG_METADATA_TIMEOUT", "7")
    assert get_config().detection.metadata_timeout_seconds == 2.0
    reset_config()
    assert get_config().detection.metadata_timeout_seconds == 7.0
