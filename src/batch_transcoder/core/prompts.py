"""Blocking interactive prompts with validation and retry."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..config.constants import FORMAT_MENU, FPS_MAX, FPS_MIN
from .base import UserCancelled, UserExit, ValidationError, parse_fps, parse_scale
from .formatting import console, log_with_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable

LOG = logging.getLogger(__name__)


class OverwriteDecision(Enum):
    """Per-file answer when the output already exists."""

    CANCEL = "0"
    OVERWRITE = "1"
    OVERWRITE_ALL = "2"
    SKIP = "3"
    SKIP_ALL = "4"
    INVALID = "invalid"

    @classmethod
    def from_code(cls, code: str) -> OverwriteDecision:
        try:
            return cls(code)
        except ValueError:
            return cls.INVALID


FORMAT_LABELS = {"gif": "GIF", "mp4": "MP4", "webm": "WebM", "mov": "MOV", "avi": "AVI"}

OVERWRITE_LABELS = {
    OverwriteDecision.OVERWRITE: ("Overwrite", "info"),
    OverwriteDecision.OVERWRITE_ALL: ("Overwrite all", "info"),
    OverwriteDecision.SKIP: ("Skip this file", "warning"),
    OverwriteDecision.SKIP_ALL: ("Skip all remaining files", "warning"),
    OverwriteDecision.CANCEL: ("Cancel", "error"),
}


class PromptSession:
    """Reads answers one line at a time from an injectable reader."""

    def __init__(self, reader: Callable[[], str] | None = None) -> None:
        self._reader = reader or (lambda: console.input(""))

    def _read(self) -> str:
        try:
            return self._reader().strip()
        except EOFError as e:
            msg = "Input closed"
            raise UserCancelled(msg, cause=e) from e

    @staticmethod
    def _show(message: str) -> None:
        for line in message.split("\n"):
            log_with_timestamp(line)

    def _ask_until_valid(self, question: str, parse: Callable[[str], str], label: str) -> str:
        while True:
            log_with_timestamp(question)
            answer = self._read()
            try:
                return parse(answer)
            except ValidationError as e:
                LOG.debug("Rejected %s answer %r", label, answer)
                log_with_timestamp(
                    f"[bright_red]Invalid {label} value.[/bright_red] [on red]{e}[/on red]",
                    "plain",
                )

    def prompt_scale(self) -> str:
        return self._ask_until_valid(
            'Enter the scale (e.g., 0.25, 1, 1.5, 2, 3) [bright_cyan]or[/bright_cyan] "auto" for source '
            "dimensions [bright_cyan]or[/bright_cyan] Enter for default: ",
            parse_scale,
            "scale",
        )

    def prompt_fps(self) -> str:
        return self._ask_until_valid(
            f'Enter the FPS ({FPS_MIN}-{FPS_MAX}) [bright_cyan]or[/bright_cyan] "auto" for source FPS '
            "[bright_cyan]or[/bright_cyan] Enter for default: ",
            parse_fps,
            "FPS",
        )

    def prompt_format(self) -> str | None:
        """Return the selected output format, or None for an invalid choice."""
        lines = ["[bright_yellow]Select the output format:[/bright_yellow]"]
        lines.extend(f"- Press {key} for {FORMAT_LABELS[fmt]}" for key, fmt in FORMAT_MENU.items())
        self._show("\n".join(lines))

        answer = self._read()
        selected = FORMAT_MENU.get(answer)
        if selected is None:
            log_with_timestamp("[bright_white]Invalid format selected. Please select a valid option.[/]", "error")
        return selected

    def prompt_start_conversion(self) -> bool:
        """
        Ask whether to start.

        Returns True to start, False to restart the settings prompts.
        Raises ``UserExit`` when the user chooses to exit.
        """
        while True:
            self._show(
                "[bright_yellow]Ready to start the conversion?[/bright_yellow]\n"
                "- Press 1 to start now\n"
                "- Press 2 to restart the process\n"
                "- Press 3 to exit"
            )
            answer = self._read()
            if answer == "1":
                return True
            if answer == "2":
                return False
            if answer == "3":
                log_with_timestamp("[bright_white]Exiting the process. [on red]Goodbye![/on red][/]", "error")
                msg = "Exit requested"
                raise UserExit(msg)
            log_with_timestamp("[bright_white]Invalid selection. [on yellow]Please choose a valid option.[/][/]", "error")

    def prompt_overwrite_decision(self, message: str) -> str:
        """Show the overwrite menu and return the raw answer code."""
        self._show(message)
        answer = self._read()

        decision = OverwriteDecision.from_code(answer)
        if decision is OverwriteDecision.INVALID:
            log_with_timestamp("[bright_white]Invalid option selected[/]", "error")
        else:
            label, style = OVERWRITE_LABELS[decision]
            log_with_timestamp(f"[bright_white]Option selected:[/bright_white] {label}", style)
        return answer


def overwrite_menu(output_name: str) -> str:
    """Build the overwrite prompt for an existing output file (markup-escaped name expected)."""
    return (
        f"File [bright_cyan]{output_name}[/bright_cyan] already exists.\n"
        "- Press 1 to overwrite\n"
        "- Press 2 to overwrite all\n"
        "- Press 3 to skip this file\n"
        "- Press 4 to skip all remaining files\n"
        "- Press 0 to cancel"
    )
