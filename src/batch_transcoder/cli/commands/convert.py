"""Non-interactive and interactive conversion commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...config.constants import OUTPUT_FORMATS
from ...core import (
    BatchOrchestrator,
    ConversionSettings,
    Converter,
    PromptSession,
    UsageError,
    ValidationError,
    WorkflowMode,
)
from ...core.formatting import log_with_timestamp
from ..failure_table import print_failure_table
from ..progress import FileProgressBar

if TYPE_CHECKING:
    import argparse

    from ...core import BatchRun, ConfigManager

LOG = logging.getLogger(__name__)

MIN_CONVERT_TOKENS = 4


def parse_convert_tokens(tokens: list[str]) -> tuple[list[Path], ConversionSettings]:
    """
    Split ``PATH... FORMAT SCALE FPS`` into input paths and validated settings.

    Raises:
        UsageError: fewer than four tokens or an invalid format/scale/fps

    """
    if len(tokens) < MIN_CONVERT_TOKENS:
        msg = "Usage: batch-transcoder convert <inputPaths>... <outputFormat> <scale> <fps>"
        raise UsageError(msg)

    *paths, output_format, scale, fps = tokens
    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        msg = f"Invalid format. Valid formats: {', '.join(OUTPUT_FORMATS)}."
        raise UsageError(msg)

    try:
        settings = ConversionSettings(scale=scale, fps=fps, format=output_format)
    except ValidationError as e:
        raise UsageError(str(e), cause=e) from e

    return [Path(p) for p in paths], settings


def existing_directories(tokens: list[str]) -> list[Path]:
    """Keep only arguments that name existing directories."""
    directories = []
    for token in tokens:
        path = Path(token)
        if path.is_dir():
            directories.append(path)
        else:
            LOG.debug("Ignoring non-directory argument: %s", token)
    return directories


class ConvertCommands:
    """Handlers for ``convert`` and ``interactive``."""

    def __init__(self, config_manager: ConfigManager) -> None:
        self.config_manager = config_manager

    def add_convert_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "tokens",
            nargs="*",
            metavar="ARG",
            help="Input paths followed by FORMAT SCALE FPS "
            f"(format: {', '.join(OUTPUT_FORMATS)}; scale/fps may be 'auto')",
        )
        parser.add_argument("--overwrite", action="store_true", help="Overwrite existing output files")
        parser.add_argument(
            "--strict", action="store_true", help="Abort when an input path does not exist instead of skipping it"
        )

    def add_interactive_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("directories", nargs="*", help="Directories to scan for videos")
        parser.add_argument(
            "--strict", action="store_true", help="Abort when an input path does not exist instead of skipping it"
        )

    def _build_orchestrator(self, mode: WorkflowMode, prompts: PromptSession | None = None) -> BatchOrchestrator:
        return BatchOrchestrator(
            converter=Converter(config=self.config_manager.config.conversion),
            mode=mode,
            extensions=self.config_manager.extensions_for(mode),
            prompts=prompts,
            progress=FileProgressBar(),
            strict=bool(self.config_manager.get_value("run.strict", default=False)),
        )

    def handle_convert(self, args: argparse.Namespace) -> int:
        """Convert everything under the given paths with the given settings."""
        try:
            input_paths, settings = parse_convert_tokens(args.tokens)
        except UsageError as e:
            log_with_timestamp(str(e), "error")
            return e.exit_code

        orchestrator = self._build_orchestrator(WorkflowMode.GENERAL)
        overwrite = bool(self.config_manager.get_value("run.overwrite", default=False))
        batch = orchestrator.run(input_paths, settings, overwrite=overwrite)
        return self._report(batch)

    def handle_interactive(self, args: argparse.Namespace) -> int:
        """Prompt for settings and convert the videos in the given directories."""
        input_paths = existing_directories(args.directories)
        orchestrator = self._build_orchestrator(WorkflowMode.VIDEO, PromptSession())
        batch = orchestrator.run(input_paths)
        return self._report(batch)

    @staticmethod
    def _report(batch: BatchRun) -> int:
        if batch.failed:
            print_failure_table(batch.failed)
        LOG.info(
            "Converted %d/%d files (%d skipped, %d failed)",
            batch.completed,
            batch.total,
            len(batch.skipped),
            len(batch.failed),
        )
        return 0
