"""Configuration management for aiimg.

Supports loading configuration from:
1. Environment variables (AIIMG_*)
2. Config file (~/.aiimg/config.yaml)
3. Default values

Example config file (~/.aiimg/config.yaml):
    detection:
      metadata_timeout_seconds: 2.0
      enable_lineage: false
    metadata:
      smartphone_brands: [xiaomi, samsung, apple, google, pixel]
      smartphone_suppressed_keywords: [ai]
    extraction:
      use_exiftool: true
      exiftool_timeout_seconds: 30
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Config file search locations (in priority order)
CONFIG_LOCATIONS = [
    Path.home() / ".aiimg" / "config.yaml",
    Path.home() / ".config" / "aiimg" / "config.yaml",
    Path(".aiimg.yaml"),
]

SMARTPHONE_BRANDS = [
    "xiaomi",
    "samsung",
    "apple",
    "google",
    "pixel",
    "huawei",
    "oppo",
    "vivo",
    "oneplus",
    "mediatek",
    "qualcomm",
    "realme",
    "redmi",
    "infinix",
    "tecno",
]

AI_KEYWORDS = [
    "midjourney",
    "dall-e",
    "stable diffusion",
    "generative",
    "synthetic",
    "deepmind",
    "synthid",
]

FORENSIC_FIELDS = ["Software", "Make", "Model", "XPKeywords"]
FORENSIC_KEYWORDS = ["gemini", "deepmind", "synthid", "midjourney"]


@dataclass
class DetectionConfig:
    """Detection configuration."""

    metadata_timeout_seconds: float = 2.0
    enable_lineage: bool = False


@dataclass
class MetadataConfig:
    """Keyword lists used by the metadata detector."""

    smartphone_brands: list[str] = field(default_factory=lambda: list(SMARTPHONE_BRANDS))
    ai_keywords: list[str] = field(default_factory=lambda: list(AI_KEYWORDS))
    forensic_fields: list[str] = field(default_factory=lambda: list(FORENSIC_FIELDS))
    forensic_keywords: list[str] = field(default_factory=lambda: list(FORENSIC_KEYWORDS))
    # Keywords ignored on smartphone images ("AI Camera", "AI Scene")
    smartphone_suppressed_keywords: list[str] = field(default_factory=lambda: ["ai"])


@dataclass
class ExtractionConfig:
    """Tag extraction configuration."""

    use_exiftool: bool = True
    exiftool_timeout_seconds: int = 30


@dataclass
class AiimgConfig:
    """Main configuration for aiimg."""

    detection: DetectionConfig = field(default_factory=DetectionConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from YAML file if available."""
    try:
        import yaml
    except ImportError:
        return {}

    for config_path in CONFIG_LOCATIONS:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                    return data if data else {}
            except Exception:
                continue
    return {}


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with AIIMG_ prefix."""
    return os.environ.get(f"AIIMG_{key}", default)


def _parse_bool(value: str | None) -> bool | None:
    """Parse boolean from string."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str | None) -> list[str] | None:
    """Parse a comma-separated list from string."""
    if value is None:
        return None
    return [item.strip().lower() for item in value.split(",") if item.strip()]


def load_config() -> AiimgConfig:
    """Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (AIIMG_*)
    2. Config file (~/.aiimg/config.yaml)
    3. Default values
    """
    file_config = _load_yaml_config()

    # Detection config
    detection_config = file_config.get("detection", {}) or {}
    detection = DetectionConfig(
        metadata_timeout_seconds=float(
            _get_env("METADATA_TIMEOUT") or detection_config.get("metadata_timeout_seconds", 2.0)
        ),
        enable_lineage=(
            _parse_bool(_get_env("ENABLE_LINEAGE"))
            if _get_env("ENABLE_LINEAGE")
            else bool(detection_config.get("enable_lineage", False))
        ),
    )

    # Metadata keyword lists
    metadata_config = file_config.get("metadata", {}) or {}
    defaults = MetadataConfig()
    metadata = MetadataConfig(
        smartphone_brands=_parse_list(_get_env("SMARTPHONE_BRANDS"))
        or metadata_config.get("smartphone_brands", defaults.smartphone_brands),
        ai_keywords=_parse_list(_get_env("AI_KEYWORDS"))
        or metadata_config.get("ai_keywords", defaults.ai_keywords),
        forensic_fields=metadata_config.get("forensic_fields", defaults.forensic_fields),
        forensic_keywords=metadata_config.get("forensic_keywords", defaults.forensic_keywords),
        smartphone_suppressed_keywords=metadata_config.get(
            "smartphone_suppressed_keywords", defaults.smartphone_suppressed_keywords
        ),
    )

    # Extraction config
    extraction_config = file_config.get("extraction", {}) or {}
    extraction = ExtractionConfig(
        use_exiftool=(
            _parse_bool(_get_env("USE_EXIFTOOL"))
            if _get_env("USE_EXIFTOOL")
            else bool(extraction_config.get("use_exiftool", True))
        ),
        exiftool_timeout_seconds=int(
            _get_env("EXIFTOOL_TIMEOUT") or extraction_config.get("exiftool_timeout_seconds", 30)
        ),
    )

    return AiimgConfig(
        detection=detection,
        metadata=metadata,
        extraction=extraction,
    )


# Global config instance (lazy loaded)
_config: AiimgConfig | None = None


def get_config() -> AiimgConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
