"""Batch Transcoder - interactive and scripted batch media conversion with FFmpeg."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "Batch media conversion driven by FFmpeg"

# Public API exports
from .config import ConverterConfig, get_config
from .core import (
    BatchOrchestrator,
    BatchRun,
    ConfigManager,
    ConversionError,
    ConversionResult,
    ConversionSettings,
    ConversionStatus,
    Converter,
    ConverterError,
    FFmpegEngine,
    FFmpegError,
    MediaFile,
    PromptSession,
    WorkflowMode,
    discover_media_files,
)

__all__ = [
    # Configuration
    "ConverterConfig",
    "get_config",
    "ConfigManager",
    # Core functionality
    "BatchOrchestrator",
    "Converter",
    "FFmpegEngine",
    "PromptSession",
    "discover_media_files",
    # Enums and data classes
    "BatchRun",
    "ConversionResult",
    "ConversionSettings",
    "ConversionStatus",
    "MediaFile",
    "WorkflowMode",
    # Exceptions
    "ConverterError",
    "ConversionError",
    "FFmpegError",
]
