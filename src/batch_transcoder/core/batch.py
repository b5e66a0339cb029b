"""Batch orchestration: settings, discovery, overwrite policy and per-file conversion."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.markup import escape

from ..config.constants import ERROR_MESSAGE_TRUNCATE_LENGTH
from .base import (
    ConversionError,
    ConversionResult,
    ConversionSettings,
    ConversionStatus,
    ConversionTask,
    NoMediaFilesError,
    UserCancelled,
    WorkflowMode,
)
from .discovery import discover_media_files, log_file_tree
from .ffmpeg import close_progress
from .formatting import highlight, log_with_timestamp
from .prompts import OverwriteDecision, overwrite_menu

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from .base import MediaFile
    from .ffmpeg import Converter
    from .prompts import PromptSession

LOG = logging.getLogger(__name__)


@dataclass
class OverwritePolicy:
    """Session flags; once set, later files are not prompted."""

    overwrite_all: bool = False
    skip_all: bool = False


@dataclass
class BatchRun:
    """Outcomes of one pass over the discovered files."""

    settings: ConversionSettings
    total: int
    policy: OverwritePolicy = field(default_factory=OverwritePolicy)
    results: list[ConversionResult] = field(default_factory=list)
    completed: int = 0
    started_at: float = field(default_factory=time.time)
    elapsed: float = 0.0

    def record(self, result: ConversionResult) -> None:
        self.results.append(result)
        if result.status is ConversionStatus.SUCCESS:
            self.completed += 1

    def finish(self) -> None:
        self.elapsed = time.time() - self.started_at

    @property
    def failed(self) -> list[ConversionResult]:
        return [r for r in self.results if r.status is ConversionStatus.FAILED]

    @property
    def skipped(self) -> list[ConversionResult]:
        return [r for r in self.results if r.status is ConversionStatus.SKIPPED]


def _error_reason(error: ConversionError) -> str:
    """Short failure reason for the log line and the failure table."""
    message = str(error)
    if len(message) > ERROR_MESSAGE_TRUNCATE_LENGTH:
        return message[:ERROR_MESSAGE_TRUNCATE_LENGTH] + "..."
    return message


def _skipped(task: ConversionTask, message: str) -> ConversionResult:
    return ConversionResult(
        source_file=task.source.path,
        status=ConversionStatus.SKIPPED,
        message=message,
        output_file=task.output,
    )


class BatchOrchestrator:
    """
    Top-level control loop for one invocation.

    Interactive mode (``WorkflowMode.VIDEO``) prompts for settings, confirms
    the start and asks what to do with existing outputs; a declined start or
    an invalid format restarts from the settings prompts with a fresh run.
    General mode takes its settings up front and skips existing outputs
    unless asked to overwrite them.
    """

    def __init__(
        self,
        converter: Converter,
        mode: WorkflowMode,
        extensions: Iterable[str],
        *,
        prompts: PromptSession | None = None,
        progress: Callable[[str, float], None] | None = None,
        strict: bool = False,
    ) -> None:
        if mode.interactive and prompts is None:
            msg = "Interactive mode requires a prompt session"
            raise ValueError(msg)
        self.converter = converter
        self.mode = mode
        self.extensions = tuple(extensions)
        self.prompts = prompts
        self.progress = progress
        self.strict = strict

    def discover(self, input_paths: list[Path]) -> list[MediaFile]:
        media_files = discover_media_files(input_paths, self.extensions, strict=self.strict)
        if not media_files:
            log_with_timestamp("No media files found.", "error")
            msg = "No media files found."
            raise NoMediaFilesError(msg)
        title = "Video files found" if self.mode.interactive else "Media files found"
        log_file_tree(media_files, title)
        return media_files

    def run(
        self,
        input_paths: list[Path],
        settings: ConversionSettings | None = None,
        *,
        overwrite: bool = False,
    ) -> BatchRun:
        """Run the whole workflow and return the final batch."""
        if self.mode.interactive:
            return self._run_interactive(input_paths)
        if settings is None:
            msg = "General mode requires conversion settings"
            raise ValueError(msg)

        _log_settings(input_paths, settings.scale, settings.fps, settings.format)
        media_files = self.discover(input_paths)
        batch = BatchRun(settings=settings, total=len(media_files), policy=OverwritePolicy(overwrite_all=overwrite))
        return self.process_files(media_files, batch)

    def _run_interactive(self, input_paths: list[Path]) -> BatchRun:
        while True:
            scale = self.prompts.prompt_scale()
            fps = self.prompts.prompt_fps()
            output_format = self.prompts.prompt_format()
            _log_settings(input_paths, scale, fps, output_format)

            if output_format is None:
                log_with_timestamp("Invalid format. Restarting.", "error")
                continue

            settings = ConversionSettings(scale=scale, fps=fps, format=output_format)
            media_files = self.discover(input_paths)

            if not self.prompts.prompt_start_conversion():
                log_with_timestamp("Restarting conversion process.", "info")
                continue

            batch = BatchRun(settings=settings, total=len(media_files))
            return self.process_files(media_files, batch)

    def process_files(self, media_files: list[MediaFile], batch: BatchRun) -> BatchRun:
        """Convert files in order; one failure never stops the batch."""
        for media_file in media_files:
            task = ConversionTask.for_file(media_file, batch.settings)
            batch.record(self._process_task(task, batch))

        batch.finish()
        log_with_timestamp(f"All files processed. Total time: {highlight(f'{batch.elapsed:.2f}')} seconds.", "info")
        LOG.info(
            "Batch finished: %d converted, %d skipped, %d failed",
            batch.completed,
            len(batch.skipped),
            len(batch.failed),
        )
        return batch

    def _process_task(self, task: ConversionTask, batch: BatchRun) -> ConversionResult:
        policy = batch.policy
        output_name = task.output.name

        if task.output.exists() and not policy.overwrite_all and not policy.skip_all:
            if not self.mode.interactive:
                log_with_timestamp(f"File {highlight(output_name)} exists. Skipping.", "warning")
                return _skipped(task, "Output exists")

            code = self.prompts.prompt_overwrite_decision(overwrite_menu(escape(output_name)))
            decision = OverwriteDecision.from_code(code)

            if decision is OverwriteDecision.CANCEL:
                log_with_timestamp("Process canceled by user.", "error")
                msg = "Process canceled by user"
                raise UserCancelled(msg, file_path=task.source.path)
            if decision is OverwriteDecision.OVERWRITE_ALL:
                policy.overwrite_all = True
            elif decision is OverwriteDecision.SKIP_ALL:
                policy.skip_all = True
            elif decision is OverwriteDecision.SKIP:
                log_with_timestamp(f"Skipping {escape(output_name)}", "warning")
                return _skipped(task, "Skipped by user")
            elif decision is OverwriteDecision.INVALID:
                log_with_timestamp(f"No valid option chosen, skipping {escape(output_name)}", "warning")
                return _skipped(task, f"Invalid overwrite option {code!r}")

        if policy.skip_all:
            LOG.debug("Skip-all active, not converting %s", task.source.path)
            return _skipped(task, "Skipped remaining files")

        try:
            result = self.converter.convert(task.source, task.output, batch.settings, self.progress)
        except ConversionError as e:
            reason = _error_reason(e)
            log_with_timestamp(f"Failed to convert {escape(str(task.source))}: {escape(reason)}", "error")
            return ConversionResult(
                source_file=task.source.path,
                status=ConversionStatus.FAILED,
                message=reason,
                output_file=task.output,
                metadata={"error": type(e).__name__},
            )
        finally:
            close_progress(self.progress)

        log_with_timestamp(f"Completed {batch.completed + 1} out of {batch.total} files.", "info")
        return result


def _log_settings(input_paths: list[Path], scale: str, fps: str, output_format: str | None) -> None:
    log_with_timestamp(f"Input paths: {highlight(', '.join(str(p) for p in input_paths))}")
    log_with_timestamp(f"Scale: {highlight(scale)}")
    log_with_timestamp(f"FPS: {highlight(fps)}")
    log_with_timestamp(f"Format: {highlight(output_format)}")
