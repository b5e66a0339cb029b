"""In-place per-file progress display."""

from __future__ import annotations

from tqdm import tqdm

from ..core.formatting import format_percentage


class FileProgressBar:
    """
    Progress callback rendering one tqdm bar per file.

    Called as ``progress(file_name, percent)``; a new file name replaces the
    current bar. ``close()`` is called by the orchestrator after each file.
    """

    def __init__(self, *, disable: bool = False) -> None:
        self.disable = disable
        self._bar: tqdm | None = None
        self._name: str | None = None

    def __call__(self, file_name: str, percent: float) -> None:
        if self._bar is None or file_name != self._name:
            self.close()
            self._bar = tqdm(
                total=100,
                desc=f"Processing {file_name}",
                bar_format="{desc} |{bar}| {postfix} [{elapsed}<{remaining}]",
                leave=False,
                disable=self.disable,
            )
            self._name = file_name

        self._bar.update(max(0.0, percent - self._bar.n))
        self._bar.set_postfix_str(f"{format_percentage(percent)} complete")

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
        self._bar = None
        self._name = None
