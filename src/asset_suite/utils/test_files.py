import os
from pathlib import Path

import pytest

from asset_suite.utils.files import (
    ensure_directory,
    find_first_media_file,
    find_media_files,
    is_stale,
    is_stale_variants,
)

VIDEO_EXTENSIONS = [".mp4", ".mov"]


def _touch(path: Path, mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def source(tmp_path: Path) -> Path:
    return _touch(tmp_path / "src" / "clip.mp4", mtime=1_000_000)


def test_is_stale_missing_output(source, tmp_path):
    assert is_stale(source, tmp_path / "out" / "clip.mp4")


def test_is_stale_older_output(source, tmp_path):
    assert is_stale(source, _touch(tmp_path / "out.mp4", mtime=999_000))


def test_is_stale_same_or_newer_output(source, tmp_path):
    assert not is_stale(source, _touch(tmp_path / "same.mp4", mtime=1_000_000))
    assert not is_stale(source, _touch(tmp_path / "newer.mp4", mtime=1_001_000))


def test_variants_directory_absent(source, tmp_path):
    assert is_stale_variants(source, tmp_path / "missing", "firstframe--", ".webp")


def test_variants_without_matches(source, tmp_path):
    out = tmp_path / "out"
    _touch(out / "firstframe--1-0s.png", mtime=2_000_000)
    _touch(out / "poster--1-0s.webp", mtime=2_000_000)
    assert is_stale_variants(source, out, "firstframe--", ".webp")


def test_variants_all_older(source, tmp_path):
    out = tmp_path / "out"
    _touch(out / "firstframe--1-0s.webp", mtime=900_000)
    _touch(out / "firstframe--2-5s.webp", mtime=950_000)
    assert is_stale_variants(source, out, "firstframe--", ".webp")


def test_variants_one_fresh(source, tmp_path):
    out = tmp_path / "out"
    _touch(out / "firstframe--1-0s.webp", mtime=900_000)
    _touch(out / "firstframe--2-5s.webp", mtime=1_000_000)
    assert not is_stale_variants(source, out, "firstframe--", ".webp")


def test_stat_errors_propagate(tmp_path):
    out = tmp_path / "out"
    _touch(out / "firstframe--1-0s.webp")
    with pytest.raises(FileNotFoundError):
        is_stale_variants(tmp_path / "gone.mp4", out, "firstframe--", ".webp")


def test_find_first_prefers_top_level_files(tmp_path):
    _touch(tmp_path / "a_sub" / "intro.mp4")
    _touch(tmp_path / "notes.txt")
    _touch(tmp_path / "z_reel.MOV")
    assert find_first_media_file(tmp_path, VIDEO_EXTENSIONS) == tmp_path / "z_reel.MOV"


def test_find_first_searches_subdirectories(tmp_path):
    _touch(tmp_path / "notes.txt")
    _touch(tmp_path / "b" / "second.mp4")
    _touch(tmp_path / "a" / "deeper" / "first.mov")
    assert find_first_media_file(tmp_path, VIDEO_EXTENSIONS) == tmp_path / "a" / "deeper" / "first.mov"


def test_find_first_none(tmp_path):
    _touch(tmp_path / "notes.txt")
    assert find_first_media_file(tmp_path, VIDEO_EXTENSIONS) is None


def test_find_media_files_recursive(tmp_path):
    _touch(tmp_path / "one.mp4")
    _touch(tmp_path / "skip.avi")
    _touch(tmp_path / "nested" / "two.mov")
    found = find_media_files(tmp_path, VIDEO_EXTENSIONS)
    assert [p.relative_to(tmp_path).as_posix() for p in found] == ["nested/two.mov", "one.mp4"]


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_directory(target) == target
    assert target.is_dir()
    ensure_directory(target)
