"""Media file discovery over user supplied paths."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from .base import DiscoveryError, MediaFile
from .formatting import format_file_size, highlight, log_with_timestamp

if TYPE_CHECKING:
    from collections.abc import Iterable

LOG = logging.getLogger(__name__)


def _is_accepted(path: Path, extensions: frozenset[str]) -> bool:
    return path.suffix.lower() in extensions


def scan_path(path: Path, extensions: Iterable[str]) -> list[MediaFile]:
    """
    Collect accepted media files from a single input path.

    Directories are scanned one level deep, in listing order. A path that
    does not exist raises ``FileNotFoundError``.
    """
    accepted = frozenset(ext.lower() for ext in extensions)
    stats = path.stat()

    if stat.S_ISDIR(stats.st_mode):
        found = []
        for entry in os.listdir(path):
            entry_path = path / entry
            if entry_path.is_file() and _is_accepted(entry_path, accepted):
                found.append(MediaFile(entry_path))
        return found

    if stat.S_ISREG(stats.st_mode) and _is_accepted(path, accepted):
        return [MediaFile(path)]
    return []


def discover_media_files(
    paths: Iterable[str | Path],
    extensions: Iterable[str],
    *,
    strict: bool = False,
) -> list[MediaFile]:
    """
    Discover media files across all input paths, preserving input order.

    Args:
        paths: Files or directories to scan
        extensions: Accepted suffixes, compared case-insensitively
        strict: Propagate ``FileNotFoundError`` instead of skipping the path

    Returns:
        Ordered list of discovered media files

    """
    extensions = tuple(extensions)
    paths = list(paths)
    media_files: list[MediaFile] = []

    for raw_path in paths:
        path = Path(raw_path)
        log_with_timestamp(f"Checking path: {highlight(path, 'bright_yellow')}")
        try:
            media_files.extend(scan_path(path, extensions))
        except OSError as e:
            if strict:
                raise
            error = DiscoveryError(f"Cannot scan {path}: {e}", file_path=path, cause=e)
            LOG.warning("%s", error)
            log_with_timestamp(f"Skipping path {highlight(path)}: {escape(str(e))}", "error")

    LOG.info("Found %d media files in %d paths", len(media_files), len(paths))
    return media_files


def log_file_tree(media_files: list[MediaFile], title: str = "Media files found") -> None:
    """Log discovered files as a tree: dimmed directory, bright name, cyan extension."""
    log_with_timestamp(f"[bright_white]{escape(title)}[/bright_white]:", "highlight")

    for index, media_file in enumerate(media_files):
        symbol = "└──" if index == len(media_files) - 1 else "├──"
        directory = escape(f"{media_file.directory}{os.sep}")
        extension = media_file.path.suffix.lstrip(".")
        log_with_timestamp(
            f" [bright_blue]{symbol}[/bright_blue] [dim]{directory}[/dim]"
            f"[bright_white]{escape(media_file.stem)}[/bright_white].{highlight(extension)}"
        )


def log_directory_tree(directory: Path, level: int = 0) -> None:
    """Recursively log a directory's contents with file sizes."""
    indent = " " * (level * 2)

    for item in sorted(os.listdir(directory)):
        full_path = directory / item
        if full_path.is_dir():
            log_with_timestamp(f"{indent}- {escape(item)}/", "info")
            log_directory_tree(full_path, level + 1)
        else:
            size = format_file_size(full_path.stat().st_size)
            log_with_timestamp(f"{indent}- {escape(item)} {size}")
