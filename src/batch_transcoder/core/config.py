"""Configuration access with per-invocation overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..config import ConverterConfig
from ..config import get_config as _get_global_config
from .base import WorkflowMode

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Command line options that can override configuration."""

    overwrite: bool = False
    strict: bool = False


class ConfigManager:
    """Configuration manager with per-invocation overrides."""

    def __init__(self, config_path: Path | None = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to config file

        """
        self._config = ConverterConfig.load_from_file(config_path) if config_path else _get_global_config()
        self._overrides: dict[str, Any] = {}

    @property
    def config(self) -> ConverterConfig:
        """Get the base configuration."""
        return self._config

    def get_value(self, key_path: str, default: object = None) -> object:
        """Get configuration value with override support."""
        if key_path in self._overrides:
            return self._overrides[key_path]

        try:
            value = self._config
            for part in key_path.split("."):
                value = getattr(value, part)
        except AttributeError:
            return default
        else:
            return value

    def set_override(self, key_path: str, value: object) -> None:
        """Set a temporary configuration override."""
        self._overrides[key_path] = value

    def apply_run_options(self, options: RunOptions) -> None:
        """Apply command line options as configuration overrides."""
        self.set_override("run.overwrite", options.overwrite)
        self.set_override("run.strict", options.strict)

    def extensions_for(self, mode: WorkflowMode) -> list[str]:
        """Accepted extensions for the given workflow mode."""
        key = "discovery.video_extensions" if mode is WorkflowMode.VIDEO else "discovery.media_extensions"
        extensions = self.get_value(key, [])
        if isinstance(extensions, (str, bytes)) or not hasattr(extensions, "__iter__"):
            LOG.warning("Ignoring malformed extension list for %s: %r", mode.value, extensions)
            return []
        return list(extensions)

