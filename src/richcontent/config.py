"""
Configuration for richcontent.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/richcontent/config.toml) if exists
3. Environment variables (RICHCONTENT_*) override file
4. CLI flags override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

AD_UNITS = ("home", "article1", "article2", "article3", "ros")


@dataclass
class RenderConfig:
    """Display composition settings."""
    viewport_width: int = 390  # used when the caller gives no width
    image_margin: int = 40  # images are capped at viewport - margin
    video_margin: int = 36
    embed_title_length: int = 120  # embedded link card titles are cut here
    bullet: str = "• "
    text_size: str = "Medium"  # Small / Medium / Large
    base_font_size: float = 19.0


@dataclass
class SlotConfig:
    """Monetization slot placement."""
    first_threshold: int = 7  # more valid paragraphs than this -> first slot
    first_ordinal: int = 3  # slot goes after this valid paragraph
    second_threshold: int = 16
    second_ordinal: int = 11
    first_unit: str = "article1"
    second_unit: str = "article2"
    network_unit: str = "ros"
    units: tuple[str, ...] = AD_UNITS


@dataclass
class VideoConfig:
    """Recognized video hosts for embeds."""
    hosts: tuple[str, ...] = ("youtube.com", "youtube-nocookie.com", "youtu.be")


@dataclass
class Config:
    """Root config with all settings."""
    render: RenderConfig = field(default_factory=RenderConfig)
    slots: SlotConfig = field(default_factory=SlotConfig)
    video: VideoConfig = field(default_factory=VideoConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "richcontent" / "config.toml"
    return Path.home() / ".config" / "richcontent" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            config = Config()

    # env var overrides
    config = _apply_env(config)

    return config


_TOML_FIELDS: dict[str, dict[str, type]] = {
    "render": {
        "viewport_width": int,
        "image_margin": int,
        "video_margin": int,
        "embed_title_length": int,
        "bullet": str,
        "text_size": str,
        "base_font_size": float,
    },
    "slots": {
        "first_threshold": int,
        "first_ordinal": int,
        "second_threshold": int,
        "second_ordinal": int,
        "first_unit": str,
        "second_unit": str,
        "network_unit": str,
        "units": tuple,
    },
    "video": {
        "hosts": tuple,
    },
}


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    for section, fields in _TOML_FIELDS.items():
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for attr, conv in fields.items():
            if attr in values:
                setattr(target, attr, conv(values[attr]))
    return config


def _split_list(val: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in val.split(",") if part.strip())


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, object]] = {
        "RICHCONTENT_VIEWPORT_WIDTH": ("render", "viewport_width", int),
        "RICHCONTENT_IMAGE_MARGIN": ("render", "image_margin", int),
        "RICHCONTENT_VIDEO_MARGIN": ("render", "video_margin", int),
        "RICHCONTENT_EMBED_TITLE_LENGTH": ("render", "embed_title_length", int),
        "RICHCONTENT_TEXT_SIZE": ("render", "text_size", str),
        "RICHCONTENT_FIRST_THRESHOLD": ("slots", "first_threshold", int),
        "RICHCONTENT_SECOND_THRESHOLD": ("slots", "second_threshold", int),
        "RICHCONTENT_NETWORK_UNIT": ("slots", "network_unit", str),
        "RICHCONTENT_VIDEO_HOSTS": ("video", "hosts", _split_list),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                setattr(getattr(config, section), attr, conv(val))

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    _config = None
