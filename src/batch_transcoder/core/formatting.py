"""Console formatting helpers: timestamps, sizes, percentages."""

from __future__ import annotations

import time

from rich.console import Console
from rich.markup import escape

from ..config.constants import BYTES_PER_KB

# Display styles selectable by tag; unknown tags fall back to "default"
STYLES = {
    "default": "bright_white",
    "plain": "white",
    "info": "bright_cyan",
    "success": "bright_green",
    "warning": "bright_yellow",
    "error": "bright_red",
    "muted": "dim",
    "highlight": "bold bright_white on green",
}

console = Console(highlight=False, soft_wrap=True)


def current_time() -> str:
    """Wall-clock time as HH:MM:SS."""
    return time.strftime("%H:%M:%S")


def log_with_timestamp(message: str, style: str = "default") -> None:
    """
    Print one user-facing line prefixed with the current time.

    Args:
        message: Rich markup; escape untrusted text with ``rich.markup.escape``
        style: One of ``STYLES``; unknown values use the default style

    """
    line_style = STYLES.get(style, STYLES["default"])
    console.print(f"[dim]{current_time()}[/dim] [bright_green]▶[/bright_green] [{line_style}]{message}[/]")


def format_file_size(size: int) -> str:
    """Render a byte count as bytes, KB or MB (two decimals)."""
    kilobytes = size / BYTES_PER_KB
    megabytes = kilobytes / BYTES_PER_KB

    if megabytes > 1:
        return f"{megabytes:.2f} MB"
    if kilobytes > 1:
        return f"{kilobytes:.2f} KB"
    return f"{size} bytes"


def format_percentage(percent: float) -> str:
    return f"{percent:.2f}%"


def highlight(text: object, style: str = "bright_cyan") -> str:
    """Wrap escaped text in a markup style for embedding in a log line."""
    return f"[{style}]{escape(str(text))}[/{style}]"
