"""Tests for media file discovery."""

import logging
import os
from pathlib import Path

import pytest

from batch_transcoder.config.constants import MEDIA_EXTENSIONS, VIDEO_EXTENSIONS
from batch_transcoder.core.discovery import discover_media_files, log_directory_tree, log_file_tree, scan_path


def _listing(folder: Path, suffixes: tuple[str, ...]) -> list[Path]:
    return [folder / name for name in os.listdir(folder) if Path(name).suffix.lower() in suffixes]


def test_directory_scan_keeps_listing_order_and_ignores_case(tmp_path: Path) -> None:
    for name in ("a.mp4", "b.txt", "c.MP4"):
        (tmp_path / name).write_bytes(b"data")

    general = discover_media_files([tmp_path], MEDIA_EXTENSIONS)
    video = discover_media_files([tmp_path], VIDEO_EXTENSIONS)

    expected = [tmp_path / name for name in os.listdir(tmp_path) if name != "b.txt"]
    assert [m.path for m in general] == expected
    assert [m.path for m in video] == expected


def test_general_mode_includes_images(media_dir: Path) -> None:
    found = discover_media_files([media_dir], MEDIA_EXTENSIONS)

    assert [m.path for m in found] == _listing(media_dir, MEDIA_EXTENSIONS)
    assert {m.name for m in found} == {"clip.mp4", "photo.JPG", "Other.MP4"}


def test_video_mode_only_mp4(media_dir: Path) -> None:
    found = discover_media_files([media_dir], VIDEO_EXTENSIONS)

    assert {m.name for m in found} == {"clip.mp4", "Other.MP4"}


def test_subdirectories_are_not_descended(media_dir: Path) -> None:
    (media_dir / "folder.mp4").mkdir()

    found = discover_media_files([media_dir], VIDEO_EXTENSIONS)

    assert "deep.mp4" not in {m.name for m in found}
    assert "folder.mp4" not in {m.name for m in found}


def test_discovery_is_repeatable(media_dir: Path) -> None:
    first = discover_media_files([media_dir], MEDIA_EXTENSIONS)
    second = discover_media_files([media_dir], MEDIA_EXTENSIONS)

    assert first == second


def test_results_follow_input_path_order(tmp_path: Path) -> None:
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.mkdir()
    second.mkdir()
    (first / "x.mp4").write_bytes(b"1")
    (second / "y.mp4").write_bytes(b"2")
    single = tmp_path / "z.avi"
    single.write_bytes(b"3")

    found = discover_media_files([second, single, first], MEDIA_EXTENSIONS)

    assert [m.name for m in found] == ["y.mp4", "z.avi", "x.mp4"]


def test_file_argument_filtered_by_extension(media_dir: Path) -> None:
    assert scan_path(media_dir / "clip.mp4", VIDEO_EXTENSIONS)[0].name == "clip.mp4"
    assert scan_path(media_dir / "notes.txt", MEDIA_EXTENSIONS) == []
    assert scan_path(media_dir / "photo.JPG", VIDEO_EXTENSIONS) == []


def test_missing_path_raises_in_strict_mode(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_media_files([tmp_path / "missing"], MEDIA_EXTENSIONS, strict=True)


def test_missing_path_is_skipped_and_reported(
    media_dir: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        found = discover_media_files([tmp_path / "missing", media_dir], VIDEO_EXTENSIONS)

    assert {m.name for m in found} == {"clip.mp4", "Other.MP4"}
    assert any("missing" in record.getMessage() for record in caplog.records)


def test_media_file_size_is_read_from_disk(media_dir: Path) -> None:
    clip = scan_path(media_dir / "clip.mp4", VIDEO_EXTENSIONS)[0]
    assert clip.size == 2048

    (media_dir / "clip.mp4").write_bytes(b"y" * 10)
    assert clip.size == 10


def test_log_file_tree_marks_last_entry(media_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    found = discover_media_files([media_dir], VIDEO_EXTENSIONS)
    capsys.readouterr()

    log_file_tree(found, "Video files found")

    lines = capsys.readouterr().out.splitlines()
    assert "Video files found" in lines[0]
    assert "├──" in lines[1]
    assert "└──" in lines[-1]


def test_log_directory_tree_shows_sizes(media_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_directory_tree(media_dir)

    out = capsys.readouterr().out
    assert "- nested/" in out
    assert "- deep.mp4 100 bytes" in out
    assert "- Other.MP4 4.00 KB" in out
