"""Main CLI interface for the batch transcoder."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.constants import VERBOSE_LOGGING_THRESHOLD
from ..core import ConfigManager, ConverterError, RunOptions
from .commands import ConvertCommands, UtilityCommands

LOG = logging.getLogger(__name__)


class BatchTranscoderCLI:
    """Main CLI interface."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)
        self.convert_commands = ConvertCommands(self.config_manager)
        self.utility_commands = UtilityCommands(self.config_manager)

    @staticmethod
    def setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
        """Setup logging based on verbosity level."""
        level_map = {
            1: logging.INFO,
            2: logging.DEBUG,
        }

        level = level_map.get(verbosity, logging.DEBUG) if verbosity else getattr(logging, default_level)

        log_format = (
            "%(levelname)s: %(name)s: %(message)s"
            if verbosity >= VERBOSE_LOGGING_THRESHOLD
            else "%(levelname)s: %(message)s"
        )

        logging.basicConfig(level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)])

        # Set FFmpeg logs to higher level to reduce noise
        if verbosity < VERBOSE_LOGGING_THRESHOLD:
            logging.getLogger("batch_transcoder.core.ffmpeg").setLevel(logging.WARNING)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog="batch-transcoder",
            description="Batch media conversion driven by FFmpeg",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Convert every media file in two folders to GIF at half size, 15 fps
  batch-transcoder convert ./clips ./more gif 0.5 15

  # Keep source dimensions and frame rate, overwrite existing outputs
  batch-transcoder convert movie.mp4 webm auto auto --overwrite

  # Answer prompts for scale, fps and format
  batch-transcoder interactive ./clips

  # Show a directory tree with file sizes
  batch-transcoder utils tree ./clips
            """,
        )

        # Global options
        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for info, -vv for debug)",
        )

        parser.add_argument("--config", type=Path, help="Path to configuration file")

        subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

        convert_parser = subparsers.add_parser("convert", help="Convert files with settings given as arguments")
        self.convert_commands.add_convert_arguments(convert_parser)

        interactive_parser = subparsers.add_parser("interactive", help="Prompt for settings, then convert videos")
        self.convert_commands.add_interactive_arguments(interactive_parser)

        utils_parser = subparsers.add_parser("utils", help="Utility commands")
        self.utility_commands.add_subcommands(utils_parser)

        return parser

    @staticmethod
    def create_run_options(args: argparse.Namespace) -> RunOptions:
        """Create run options from CLI arguments."""
        return RunOptions(
            overwrite=getattr(args, "overwrite", False),
            strict=getattr(args, "strict", False),
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)

        # Update config manager if custom config provided
        if getattr(parsed_args, "config", None):
            self.config_manager = ConfigManager(parsed_args.config)
            self.convert_commands.config_manager = self.config_manager
            self.utility_commands.config_manager = self.config_manager

        self.setup_logging(parsed_args.verbose, self.config_manager.config.global_.log_level)

        self.config_manager.apply_run_options(self.create_run_options(parsed_args))

        try:
            if parsed_args.command == "convert":
                return self.convert_commands.handle_convert(parsed_args)
            if parsed_args.command == "interactive":
                return self.convert_commands.handle_interactive(parsed_args)
            if parsed_args.command == "utils":
                return self.utility_commands.handle_command(parsed_args)
            parser.error(f"Unknown command: {parsed_args.command}")

        except KeyboardInterrupt:
            LOG.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except ConverterError as e:
            LOG.info("Stopped: %s", e)
            return e.exit_code
        except FileNotFoundError as e:
            LOG.error("Input path not found: %s", e)  # noqa: TRY400
            return 1
        except Exception as e:
            LOG.exception(f"Unexpected error: {e}")
            return 1

        return 0


def main() -> int:
    """Entry point for the CLI."""
    cli = BatchTranscoderCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
