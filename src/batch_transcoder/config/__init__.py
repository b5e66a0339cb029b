"""Configuration management for the batch transcoder."""

from __future__ import annotations

from .constants import *  # noqa: F403, F401
from .settings import ConverterConfig, get_config

__all__ = [
    "ConverterConfig",
    "get_config",
]
