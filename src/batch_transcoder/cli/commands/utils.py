"""Utility CLI commands."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from ...core.discovery import log_directory_tree
from ...core.ffmpeg import FFmpegError, FFmpegProbe
from ...core.formatting import highlight, log_with_timestamp

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class UtilityCommands:
    """Utility command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize utility commands handler."""
        self.config_manager = config_manager

    def add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add utility subcommands to parser."""
        subparsers = parser.add_subparsers(dest="util_command", help="Utility commands")

        tree_parser = subparsers.add_parser("tree", help="Print a directory tree with file sizes")
        tree_parser.add_argument("path", type=Path, help="Directory to print")

        subparsers.add_parser("check", help="Check that ffmpeg and ffprobe are installed")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle utility command execution."""
        if not hasattr(args, "util_command") or args.util_command is None:
            LOG.error("No utility command specified")
            return 1

        if args.util_command == "tree":
            return self._handle_tree(args)
        if args.util_command == "check":
            return self._handle_check(args)
        LOG.error("Unknown utility command: %s", args.util_command)
        return 1

    def _handle_tree(self, args: argparse.Namespace) -> int:
        if not args.path.is_dir():
            LOG.error("Not a directory: %s", args.path)
            return 1
        try:
            log_directory_tree(args.path)
        except OSError:
            LOG.exception("Could not list %s", args.path)
            return 1
        return 0

    def _handle_check(self, _args: argparse.Namespace) -> int:
        conversion = self.config_manager.config.conversion
        for exe in (conversion.ffmpeg_path, conversion.ffprobe_path):
            location = shutil.which(exe)
            if location:
                log_with_timestamp(f"{highlight(exe, 'bright_green')}: {highlight(location, 'dim')}")
            else:
                log_with_timestamp(f"{highlight(exe, 'bright_red')}: not found in PATH", "error")

        try:
            FFmpegProbe.check_availability(conversion.ffmpeg_path, conversion.ffprobe_path)
        except FFmpegError:
            return 1
        return 0
