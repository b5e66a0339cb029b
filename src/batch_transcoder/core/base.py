"""Base data types and exceptions for batch conversion."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..config.constants import AUTO, FPS_MAX, FPS_MIN, OUTPUT_FORMATS, SCALE_MAX, SCALE_MIN

LOG = logging.getLogger(__name__)

# Plain ASCII decimals only; float()/int() also accept "1_0", "1e0" and "inf"
SCALE_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?|\.[0-9]+")
FPS_PATTERN = re.compile(r"[0-9]+")


class ConversionStatus(Enum):
    """Outcome of a single file in a batch."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class WorkflowMode(Enum):
    """Which CLI flow drives the batch; selects the accepted extension set."""

    GENERAL = "general"
    VIDEO = "video"

    @property
    def interactive(self) -> bool:
        return self is WorkflowMode.VIDEO


class ConverterError(Exception):
    """Base exception for converter errors."""

    exit_code = 1

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause


class UsageError(ConverterError):
    """Bad command line arguments."""


class ValidationError(ConverterError):
    """Rejected prompt or argument value."""


class DiscoveryError(ConverterError):
    """An input path could not be scanned."""


class NoMediaFilesError(ConverterError):
    """Discovery finished without finding anything to convert."""


class ConversionError(ConverterError):
    """The engine failed to convert a file."""


class FileAccessError(ConversionError):
    """A source or output file could not be read after conversion."""


class UserCancelled(ConverterError):
    """The user cancelled the batch."""


class UserExit(ConverterError):
    """The user chose to exit; not an error."""

    exit_code = 0


def parse_scale(value: str) -> str:
    """
    Validate a scale answer.

    Returns ``"auto"`` for an empty answer or ``auto``, otherwise the
    answer itself when it is a plain decimal within the accepted range.
    Raises ``ValidationError`` for anything else.
    """
    value = value.strip()
    if value in ("", AUTO):
        return AUTO
    if not SCALE_PATTERN.fullmatch(value) or not SCALE_MIN <= float(value) <= SCALE_MAX:
        msg = f'Please enter a number between {SCALE_MIN} and {SCALE_MAX}, or "{AUTO}" for source dimensions.'
        raise ValidationError(msg)
    return value


def parse_fps(value: str) -> str:
    """Validate an FPS answer: ``auto`` or a whole number within the accepted range."""
    value = value.strip()
    if value in ("", AUTO):
        return AUTO
    if not FPS_PATTERN.fullmatch(value) or not FPS_MIN <= int(value) <= FPS_MAX:
        msg = f'Please enter a number between {FPS_MIN} and {FPS_MAX}, or "{AUTO}" for source FPS.'
        raise ValidationError(msg)
    return str(int(value))


@dataclass(frozen=True)
class ConversionSettings:
    """Validated scale/fps/format triple, fixed for one batch run."""

    scale: str = AUTO
    fps: str = AUTO
    format: str = "gif"

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", parse_scale(str(self.scale)))
        object.__setattr__(self, "fps", parse_fps(str(self.fps)))
        if self.format not in OUTPUT_FORMATS:
            msg = f"Invalid format '{self.format}'. Valid formats: {', '.join(OUTPUT_FORMATS)}."
            raise ValidationError(msg)

    @property
    def scale_is_auto(self) -> bool:
        return self.scale == AUTO

    @property
    def fps_is_auto(self) -> bool:
        return self.fps == AUTO


@dataclass(frozen=True)
class MediaFile:
    """A discovered media file."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def size(self) -> int:
        """Current size on disk, read on every access."""
        return self.path.stat().st_size

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ConversionTask:
    """One source file and the output it converts to."""

    source: MediaFile
    output: Path

    @classmethod
    def for_file(cls, source: MediaFile, settings: ConversionSettings) -> ConversionTask:
        """Output lives next to the source with the target format's extension."""
        return cls(source=source, output=source.directory / f"{source.stem}.{settings.format}")


@dataclass
class ConversionResult:
    """Result of converting (or skipping) one file."""

    source_file: Path
    status: ConversionStatus
    message: str = ""
    output_file: Path | None = None
    original_size: int | None = None
    new_size: int | None = None
    processing_time: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)
