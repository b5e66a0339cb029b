"""Tests for the batch orchestrator: overwrite policy, restarts and failure handling."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from conftest import scripted_reader

from batch_transcoder.config.constants import MEDIA_EXTENSIONS, VIDEO_EXTENSIONS
from batch_transcoder.core import (
    BatchOrchestrator,
    ConversionSettings,
    ConversionStatus,
    NoMediaFilesError,
    PromptSession,
    UserCancelled,
    UserExit,
    WorkflowMode,
)

GIF_DEFAULTS = ["", "", "1", "1"]  # scale, fps, format (GIF), start


@pytest.fixture
def three_dirs(tmp_path: Path) -> list[Path]:
    """dir1/a.mp4, dir2/b.mp4 and dir3/c.mp4, one video per directory so order is fixed."""
    dirs = []
    for index, name in enumerate("abc", start=1):
        folder = tmp_path / f"dir{index}"
        folder.mkdir()
        (folder / f"{name}.mp4").write_bytes(b"x" * 1000)
        dirs.append(folder)
    return dirs


def interactive(converter, answers, progress=None) -> BatchOrchestrator:
    return BatchOrchestrator(
        converter,
        WorkflowMode.VIDEO,
        VIDEO_EXTENSIONS,
        prompts=PromptSession(scripted_reader(answers)),
        progress=progress,
    )


def general(converter, progress=None) -> BatchOrchestrator:
    return BatchOrchestrator(converter, WorkflowMode.GENERAL, MEDIA_EXTENSIONS, progress=progress)


def test_skip_all_stops_remaining_conversions(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")

    batch = interactive(converter, [*GIF_DEFAULTS, "4"]).run(three_dirs)

    assert fake_engine.converted_names == ["a.mp4"]
    assert batch.completed == 1
    assert [r.source_file.name for r in batch.skipped] == ["b.mp4", "c.mp4"]
    assert (three_dirs[1] / "b.gif").read_bytes() == b"old"


def test_overwrite_all_is_not_asked_again(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")
    (three_dirs[2] / "c.gif").write_bytes(b"old")

    batch = interactive(converter, [*GIF_DEFAULTS, "2"]).run(three_dirs)

    assert fake_engine.converted_names == ["a.mp4", "b.mp4", "c.mp4"]
    assert batch.completed == 3
    assert batch.policy.overwrite_all


def test_overwrite_once_asks_again_for_next_file(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")
    (three_dirs[2] / "c.gif").write_bytes(b"old")

    batch = interactive(converter, [*GIF_DEFAULTS, "1", "3"]).run(three_dirs)

    assert fake_engine.converted_names == ["a.mp4", "b.mp4"]
    assert [r.message for r in batch.skipped] == ["Skipped by user"]


def test_cancel_aborts_the_batch(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")

    with pytest.raises(UserCancelled) as excinfo:
        interactive(converter, [*GIF_DEFAULTS, "0"]).run(three_dirs)

    assert excinfo.value.exit_code == 1
    assert fake_engine.converted_names == ["a.mp4"]


def test_invalid_overwrite_code_skips_only_that_file(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")

    batch = interactive(converter, [*GIF_DEFAULTS, "9"]).run(three_dirs)

    assert fake_engine.converted_names == ["a.mp4", "c.mp4"]
    assert batch.skipped[0].source_file.name == "b.mp4"
    assert batch.skipped[0].message == "Invalid overwrite option '9'"


def test_invalid_format_restarts_prompts(fake_engine, converter, three_dirs, capsys) -> None:
    answers = ["", "", "9", "0.5", "10", "3", "1"]

    batch = interactive(converter, answers).run(three_dirs)

    assert "Invalid format. Restarting." in capsys.readouterr().out
    assert batch.settings == ConversionSettings(scale="0.5", fps="10", format="webm")
    assert (three_dirs[0] / "a.webm").exists()
    assert fake_engine.calls[0][1] == ["-vf", "scale=trunc(iw*0.5/2)*2:-2,fps=10", "-gifflags", "transdiff", "-y"]


def test_declined_start_restarts_with_new_settings(fake_engine, converter, three_dirs, capsys) -> None:
    answers = ["", "", "1", "2", "2", "24", "1", "1"]

    batch = interactive(converter, answers).run(three_dirs)

    assert "Restarting conversion process." in capsys.readouterr().out
    assert batch.settings.fps == "24"
    assert batch.completed == 3


def test_exit_at_start_prompt(fake_engine, converter, three_dirs) -> None:
    with pytest.raises(UserExit) as excinfo:
        interactive(converter, ["", "", "1", "3"]).run(three_dirs)

    assert excinfo.value.exit_code == 0
    assert fake_engine.calls == []


def test_interactive_mode_requires_prompts(converter) -> None:
    with pytest.raises(ValueError, match="prompt session"):
        BatchOrchestrator(converter, WorkflowMode.VIDEO, VIDEO_EXTENSIONS)


def test_failure_does_not_stop_batch(fake_engine, converter, three_dirs) -> None:
    fake_engine.fail_for.add("a.mp4")

    batch = general(converter).run(three_dirs, ConversionSettings(format="webm"))

    assert batch.completed == 2
    assert batch.total == 3
    failed = batch.failed
    assert [r.source_file.name for r in failed] == ["a.mp4"]
    assert failed[0].status is ConversionStatus.FAILED
    assert failed[0].metadata["error"] == "FFmpegError"
    assert fake_engine.converted_names == ["a.mp4", "b.mp4", "c.mp4"]


def test_no_media_files_raises(converter, tmp_path: Path, capsys) -> None:
    with pytest.raises(NoMediaFilesError):
        general(converter).run([tmp_path], ConversionSettings())

    assert "No media files found." in capsys.readouterr().out


def test_general_mode_skips_existing_output(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")

    batch = general(converter).run(three_dirs, ConversionSettings())

    assert fake_engine.converted_names == ["a.mp4", "c.mp4"]
    assert batch.skipped[0].message == "Output exists"


def test_general_mode_overwrite_flag(fake_engine, converter, three_dirs) -> None:
    (three_dirs[1] / "b.gif").write_bytes(b"old")

    batch = general(converter).run(three_dirs, ConversionSettings(), overwrite=True)

    assert batch.completed == 3
    assert (three_dirs[1] / "b.gif").read_bytes() == b"converted output"


def test_progress_receives_updates_and_is_closed(fake_engine, converter, three_dirs) -> None:
    events: list[tuple[str, str | None]] = []
    progress = MagicMock(side_effect=lambda name, _pct: events.append(("update", name)))
    progress.close.side_effect = lambda: events.append(("close", None))
    fake_engine.fail_for.add("b.mp4")

    general(converter, progress=progress).run(three_dirs, ConversionSettings())

    progress.assert_any_call("a.mp4", 100.0)
    assert progress.close.call_count >= 3
    last_a = max(i for i, event in enumerate(events) if event == ("update", "a.mp4"))
    first_c = events.index(("update", "c.mp4"))
    assert ("close", None) in events[last_a:first_c]
    assert events[-1] == ("close", None)


def test_completion_summary_is_logged(converter, three_dirs, capsys) -> None:
    general(converter).run(three_dirs, ConversionSettings())

    out = capsys.readouterr().out
    assert "Completed 3 out of 3 files." in out
    assert "All files processed. Total time:" in out
