"""Failure table shown at the end of a batch."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core import ConversionResult

# Constants for table formatting
MAX_FILENAME_LENGTH = 37
FILENAME_TRUNCATE_LENGTH = 34
MAX_ERROR_MSG_LENGTH = 32
ERROR_MSG_TRUNCATE_LENGTH = 29


def print_failure_table(failed_results: list[ConversionResult]) -> None:
    """
    Print a simple table of the files that failed to convert.

    Args:
        failed_results: ConversionResult objects with FAILED status

    """
    if not failed_results:
        return

    print("\n" + "=" * 80)
    print(f"{'CONVERSION FAILURES':^80}")
    print("=" * 80)
    print(f"Total failed: {len(failed_results)} files\n")

    print(f"{'FILE':<40} | {'ERROR':<35}")
    print("-" * 80)

    for result in failed_results:
        filename = result.source_file.name
        if len(filename) > MAX_FILENAME_LENGTH:
            filename = filename[:FILENAME_TRUNCATE_LENGTH] + "..."

        error_msg = result.message or "Unknown error"
        if len(error_msg) > MAX_ERROR_MSG_LENGTH:
            error_msg = error_msg[:ERROR_MSG_TRUNCATE_LENGTH] + "..."

        print(f"{filename:<40} | {error_msg:<35}")

    print("\nTIP: Run with -vv to see the full FFmpeg command and error output\n")
