"""FFmpeg integration: probing, option building and progress-reporting conversion."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import threading
import time
from typing import TYPE_CHECKING, Any, ClassVar

from .base import ConversionError, ConversionResult, ConversionStatus, FileAccessError, MediaFile
from .formatting import format_file_size, highlight, log_with_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ..config.settings import ConversionConfig
    from .base import ConversionSettings

LOG = logging.getLogger(__name__)

DEFAULT_DEDUP_FLAGS = ("-gifflags", "transdiff")
OVERWRITE_FLAG = "-y"
MICROSECONDS = 1_000_000
PROGRESS_KEYS = ("out_time_us", "out_time_ms")


class FFmpegError(ConversionError):
    """FFmpeg-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class FFmpegProbe:
    """ffprobe wrapper with a per-file cache keyed on modification time."""

    _probe_cache: ClassVar[dict[tuple[Path, float], dict[str, Any]]] = {}

    @staticmethod
    def check_availability(ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe") -> None:
        """Check if FFmpeg tools are available."""
        missing = [exe for exe in (ffmpeg_path, ffprobe_path) if not shutil.which(exe)]

        if missing:
            error_msg = f"Missing FFmpeg executables: {', '.join(missing)}"
            LOG.error(error_msg)
            raise FFmpegError(error_msg)

    @classmethod
    def probe_media(cls, file_path: Path, ffprobe_path: str = "ffprobe") -> dict[str, Any]:
        """Probe media file for container metadata."""
        try:
            cache_key = (file_path, file_path.stat().st_mtime)
        except OSError:
            cache_key = None
        if cache_key in cls._probe_cache:
            return cls._probe_cache[cache_key]

        cmd = [ffprobe_path, "-v", "quiet", "-print_format", "json", "-show_format", str(file_path)]

        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=30,
                encoding="utf-8",
                errors="replace",
            )
            probe_data = json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            error_details = e.stderr or e.stdout or "No error output"
            msg = f"ffprobe failed for {file_path}: {error_details.strip()}"
            raise FFmpegError(
                msg, command=cmd, return_code=e.returncode, file_path=file_path, stderr=e.stderr
            ) from e
        except subprocess.TimeoutExpired as e:
            msg = f"ffprobe timed out for {file_path}"
            raise FFmpegError(msg, command=cmd, file_path=file_path) from e
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON from ffprobe for {file_path}: {e}"
            raise FFmpegError(msg, command=cmd, file_path=file_path) from e
        except OSError as e:
            msg = f"Could not run ffprobe: {e}"
            raise FFmpegError(msg, command=cmd, file_path=file_path) from e

        if cache_key is not None:
            cls._probe_cache[cache_key] = probe_data
        return probe_data

    @classmethod
    def get_duration(cls, file_path: Path, ffprobe_path: str = "ffprobe") -> float:
        """Container duration in seconds; 0.0 for stills or when probing fails."""
        try:
            data = cls.probe_media(file_path, ffprobe_path)
        except FFmpegError as e:
            LOG.warning("Could not probe duration of %s: %s", file_path, e)
            return 0.0

        try:
            return float(data.get("format", {}).get("duration", 0.0))
        except (TypeError, ValueError):
            return 0.0


def scale_filter(settings: ConversionSettings) -> str:
    """Scale by a ratio, keeping both dimensions even for yuv420 encoders."""
    if settings.scale_is_auto:
        return ""
    return f"scale=trunc(iw*{settings.scale}/2)*2:-2"


def fps_filter(settings: ConversionSettings) -> str:
    if settings.fps_is_auto:
        return ""
    return f"fps={settings.fps}"


def build_output_options(
    settings: ConversionSettings,
    dedup_flags: tuple[str, ...] | list[str] = DEFAULT_DEDUP_FLAGS,
) -> list[str]:
    """
    Build the ordered output option list for one conversion.

    Order is: scale filter, de-duplication flags, overwrite flag, fps filter.
    FFmpeg applies only the last ``-vf`` of an output, so present filters are
    joined into one chain at the position of the first one.
    """
    scale = scale_filter(settings)
    fps = fps_filter(settings)
    chain = ",".join(f for f in (scale, fps) if f)

    options: list[str] = []
    if scale:
        options.extend(["-vf", chain])
    options.extend(dedup_flags)
    options.append(OVERWRITE_FLAG)
    if fps and not scale:
        options.extend(["-vf", chain])
    return options


def parse_progress_seconds(line: str) -> float | None:
    """Extract the output timestamp from one ``-progress`` key=value line."""
    key, _, value = line.strip().partition("=")
    if key not in PROGRESS_KEYS:
        return None
    try:
        return int(value) / MICROSECONDS
    except ValueError:
        return None


def close_progress(progress: object) -> None:
    """Finish an in-place progress display so the next console line starts clean."""
    close = getattr(progress, "close", None)
    if close is not None:
        close()


class FFmpegEngine:
    """Runs one ffmpeg conversion and reports progress percentages."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe") -> None:
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

    def build_command(self, input_path: Path, options: list[str], output_path: Path) -> list[str]:
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "error",
            "-nostats",
            "-progress",
            "pipe:1",
            "-i",
            str(input_path),
            *options,
            str(output_path),
        ]

    def run(
        self,
        input_path: Path,
        options: list[str],
        output_path: Path,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        """
        Convert ``input_path`` to ``output_path``, blocking until ffmpeg exits.

        Raises:
            FFmpegError: ffmpeg could not be started or exited non-zero

        """
        duration = FFmpegProbe.get_duration(input_path, self.ffprobe_path)
        command = self.build_command(input_path, options, output_path)
        LOG.info("Running FFmpeg command: %s", " ".join(command))
        start_time = time.time()

        try:
            process = subprocess.Popen(  # noqa: S603
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            msg = f"Could not start FFmpeg: {e}"
            raise FFmpegError(msg, command=command, file_path=input_path) from e

        # stderr is drained on a side thread so a chatty ffmpeg cannot block on a full pipe
        stderr_chunks: list[str] = []
        stderr_reader = threading.Thread(target=lambda: stderr_chunks.append(process.stderr.read()), daemon=True)
        stderr_reader.start()

        try:
            for line in process.stdout:
                if line.startswith("progress=end"):
                    if on_progress:
                        on_progress(100.0)
                    continue
                seconds = parse_progress_seconds(line)
                if seconds is not None and duration > 0 and on_progress:
                    on_progress(min(100.0, max(0.0, seconds / duration * 100)))
        except BaseException:
            # Ctrl-C or a failing callback: never leave ffmpeg writing a partial output
            LOG.warning("Stopping FFmpeg for %s", input_path)
            process.kill()
            process.wait()
            raise

        return_code = process.wait()
        stderr_reader.join()
        stderr = "".join(stderr_chunks).strip()
        LOG.debug("FFmpeg finished in %.2fs with code %d", time.time() - start_time, return_code)

        if return_code != 0:
            error_msg = f"FFmpeg failed with return code {return_code}"
            if stderr:
                error_msg += f": {stderr.splitlines()[-1]}"
            raise FFmpegError(
                error_msg,
                command=command,
                return_code=return_code,
                stderr=stderr,
                file_path=input_path,
            )


class Converter:
    """Drives the engine for one file at a time and maps its outcome to a result."""

    def __init__(self, engine: FFmpegEngine | None = None, config: ConversionConfig | None = None) -> None:
        if engine is None:
            engine = FFmpegEngine(config.ffmpeg_path, config.ffprobe_path) if config else FFmpegEngine()
        self.engine = engine
        self.dedup_flags = tuple(config.dedup_flags) if config else DEFAULT_DEDUP_FLAGS

    def convert(
        self,
        source: MediaFile,
        output: Path,
        settings: ConversionSettings,
        on_progress: Callable[[str, float], None] | None = None,
    ) -> ConversionResult:
        """
        Convert one file and log the before/after sizes.

        Raises:
            ConversionError: the engine reported an error
            FileAccessError: either file could not be stat'ed afterwards

        """
        options = build_output_options(settings, self.dedup_flags)
        engine_progress = (lambda percent: on_progress(source.name, percent)) if on_progress else None
        start_time = time.time()

        try:
            self.engine.run(source.path, options, output, engine_progress)
        except ConversionError as e:
            close_progress(on_progress)
            log_with_timestamp(f"An error occurred: {highlight(e, 'bright_red')}", "error")
            raise

        close_progress(on_progress)

        try:
            original_size = source.size
            new_size = output.stat().st_size
        except OSError as e:
            msg = f"Cannot read file size after converting {source.name}: {e}"
            raise FileAccessError(msg, file_path=source.path, cause=e) from e

        log_with_timestamp(
            f"Finished processing {highlight(source.name, 'bright_green')} "
            f"[dim](src: {format_file_size(original_size)}, output: {format_file_size(new_size)})[/dim]"
        )

        return ConversionResult(
            source_file=source.path,
            status=ConversionStatus.SUCCESS,
            message=f"Converted to {settings.format}",
            output_file=output,
            original_size=original_size,
            new_size=new_size,
            processing_time=time.time() - start_time,
            metadata={"format": settings.format, "scale": settings.scale, "fps": settings.fps},
        )
