"""Shared fixtures: a fake FFmpeg engine and scripted prompt input."""

from __future__ import annotations

from pathlib import Path

import pytest

from batch_transcoder.core import Converter, FFmpegError


class FakeEngine:
    """Stands in for FFmpegEngine: records calls and writes a small output file."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, list[str], Path]] = []
        self.fail_for: set[str] = set()
        self.progress_steps = (25.0, 100.0)

    def run(self, input_path, options, output_path, on_progress=None) -> None:
        self.calls.append((input_path, list(options), output_path))
        if input_path.name in self.fail_for:
            raise FFmpegError("Conversion failed (simulated)", return_code=1, file_path=input_path)
        for percent in self.progress_steps:
            if on_progress:
                on_progress(percent)
        output_path.write_bytes(b"converted output")

    @property
    def converted_names(self) -> list[str]:
        return [call[0].name for call in self.calls]


def scripted_reader(answers):
    """Reader returning the given answers in order, then signalling end of input."""
    remaining = iter(answers)

    def read() -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return read


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def converter(fake_engine: FakeEngine) -> Converter:
    return Converter(engine=fake_engine)


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Directory with two videos, an image, a text file and a subfolder."""
    folder = tmp_path / "media"
    folder.mkdir()
    (folder / "clip.mp4").write_bytes(b"x" * 2048)
    (folder / "photo.JPG").write_bytes(b"x" * 512)
    (folder / "notes.txt").write_text("not media")
    (folder / "Other.MP4").write_bytes(b"x" * 4096)
    nested = folder / "nested"
    nested.mkdir()
    (nested / "deep.mp4").write_bytes(b"x" * 100)
    return folder
