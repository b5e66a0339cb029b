"""Configuration management for the batch transcoder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import MEDIA_EXTENSIONS, VIDEO_EXTENSIONS

LOG = logging.getLogger(__name__)


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: ConverterConfig | None = None

    @classmethod
    def get_instance(cls) -> ConverterConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            # Try to load from default config file (look in working directory)
            config_path = Path.cwd() / "config.yaml"
            if config_path.exists():
                cls._instance = ConverterConfig.load_from_file(config_path)
            else:
                cls._instance = ConverterConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


def _normalize_extensions(extensions: list[str]) -> list[str]:
    """Lower-case extensions and make sure each starts with a dot."""
    return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions]


@dataclass
class DiscoveryConfig:
    """Extension sets used when scanning input paths."""

    media_extensions: list[str] = field(default_factory=lambda: list(MEDIA_EXTENSIONS))
    video_extensions: list[str] = field(default_factory=lambda: list(VIDEO_EXTENSIONS))


@dataclass
class ConversionConfig:
    """Engine invocation settings."""

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    dedup_flags: list[str] = field(default_factory=lambda: ["-gifflags", "transdiff"])


@dataclass
class GlobalConfig:
    """Global settings."""

    log_level: str = "WARNING"


@dataclass
class ConverterConfig:
    """Main configuration class."""

    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> ConverterConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            return cls._from_dict(data)
        except (OSError, yaml.YAMLError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ConverterConfig:
        """Create config from dictionary."""
        return cls(
            discovery=cls._parse_discovery_config(data.get("discovery") or {}),
            conversion=cls._parse_conversion_config(data.get("conversion") or {}),
            global_=cls._parse_global_config(data.get("global") or {}),
        )

    @classmethod
    def _parse_discovery_config(cls, discovery_data: dict[str, Any]) -> DiscoveryConfig:
        """Parse discovery configuration."""
        return DiscoveryConfig(
            media_extensions=_normalize_extensions(discovery_data.get("media_extensions", list(MEDIA_EXTENSIONS))),
            video_extensions=_normalize_extensions(discovery_data.get("video_extensions", list(VIDEO_EXTENSIONS))),
        )

    @classmethod
    def _parse_conversion_config(cls, conversion_data: dict[str, Any]) -> ConversionConfig:
        """Parse conversion configuration."""
        dedup_flags = conversion_data.get("dedup_flags", ["-gifflags", "transdiff"])
        if not isinstance(dedup_flags, list):
            LOG.warning("Invalid dedup_flags %r, expected a list. Using defaults.", dedup_flags)
            dedup_flags = ["-gifflags", "transdiff"]

        return ConversionConfig(
            ffmpeg_path=str(conversion_data.get("ffmpeg_path", "ffmpeg")),
            ffprobe_path=str(conversion_data.get("ffprobe_path", "ffprobe")),
            dedup_flags=[str(flag) for flag in dedup_flags],
        )

    @classmethod
    def _parse_global_config(cls, global_data: dict[str, Any]) -> GlobalConfig:
        """Parse global configuration."""
        log_level = str(global_data.get("log_level", "WARNING")).upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_levels:
            LOG.warning(
                "Invalid log level '%s'. Using 'WARNING'. Valid options: %s",
                log_level,
                ", ".join(sorted(valid_levels)),
            )
            log_level = "WARNING"

        return GlobalConfig(log_level=log_level)


def get_config() -> ConverterConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
