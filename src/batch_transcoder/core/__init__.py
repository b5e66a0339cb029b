"""Core building blocks of the batch converter."""

from .base import (
    ConversionError,
    ConversionResult,
    ConversionSettings,
    ConversionStatus,
    ConversionTask,
    ConverterError,
    DiscoveryError,
    FileAccessError,
    MediaFile,
    NoMediaFilesError,
    UsageError,
    UserCancelled,
    UserExit,
    ValidationError,
    WorkflowMode,
)
from .batch import BatchOrchestrator, BatchRun, OverwritePolicy
from .config import ConfigManager, RunOptions
from .discovery import discover_media_files
from .ffmpeg import Converter, FFmpegEngine, FFmpegError, FFmpegProbe, build_output_options
from .prompts import OverwriteDecision, PromptSession

__all__ = [
    "BatchOrchestrator",
    "BatchRun",
    "ConfigManager",
    "ConversionError",
    "ConversionResult",
    "ConversionSettings",
    "ConversionStatus",
    "ConversionTask",
    "Converter",
    "ConverterError",
    "DiscoveryError",
    "FFmpegEngine",
    "FFmpegError",
    "FFmpegProbe",
    "FileAccessError",
    "MediaFile",
    "NoMediaFilesError",
    "OverwriteDecision",
    "OverwritePolicy",
    "PromptSession",
    "RunOptions",
    "UsageError",
    "UserCancelled",
    "UserExit",
    "ValidationError",
    "WorkflowMode",
    "build_output_options",
    "discover_media_files",
]
