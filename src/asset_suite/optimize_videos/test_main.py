"""Integration tests for optimize-videos — FFmpeg is replaced by the fake engine."""

import os
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from asset_suite.cli import app
from asset_suite.config import AGGRESSIVE_PROFILE, STANDARD_PROFILE
from asset_suite.optimize_videos.main import optimize_videos
from asset_suite.utils.engine import EngineError

runner = CliRunner()

MODULE = "asset_suite.optimize_videos.main"


@contextmanager
def _mock_ffmpeg(engine):
    with patch(f"{MODULE}.FFmpegEngine", return_value=engine), \
            patch(f"{MODULE}.check_ffmpeg", return_value="6.1"), \
            patch(f"{MODULE}.check_ffprobe", return_value="6.1"):
        yield


def _make_videos(root: Path) -> None:
    (root / "clips").mkdir(parents=True)
    for name in ("showreel.mov", "clips/intro.mkv"):
        (root / name).write_bytes(b"\x00" * 4096)
    (root / "clips" / "cover.jpg").write_bytes(b"\xff\xd8")


def test_standard_profile_output_layout(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)

    summary = optimize_videos(src, out, fake_engine, STANDARD_PROFILE)

    assert len(summary.compressed) == 2
    assert (out / "showreel.mp4").exists()
    assert (out / "clips" / "intro.mp4").exists()
    assert {call[4] for call in fake_engine.compress_calls} == {"standard"}
    assert {(call[2], call[3]) for call in fake_engine.compress_calls} == {(1920, 1080)}


def test_aggressive_profile_suffix(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)

    optimize_videos(src, out, fake_engine, AGGRESSIVE_PROFILE)

    assert (out / "showreel--extra-compressed.mp4").exists()
    assert (out / "clips" / "intro--extra-compressed.mp4").exists()


def test_up_to_date_outputs_are_skipped(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)
    optimize_videos(src, out, fake_engine, STANDARD_PROFILE)
    stale = out / "showreel.mp4"
    os.utime(stale, (stale.stat().st_atime - 3600, stale.stat().st_mtime - 3600))

    summary = optimize_videos(src, out, fake_engine, STANDARD_PROFILE)

    assert summary.compressed == [src / "showreel.mov"]
    assert summary.skipped == [src / "clips" / "intro.mkv"]


def test_cli_failure_exit_code(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)
    fake_engine.compress_error = EngineError("FFmpeg compression failed", "Unknown encoder")

    with _mock_ffmpeg(fake_engine):
        result = runner.invoke(app, ["optimize-videos", str(src), str(out)])

    assert result.exit_code == 1
    assert len(fake_engine.compress_calls) == 2


def test_cli_crf_override(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)

    with _mock_ffmpeg(fake_engine), patch(f"{MODULE}.optimize_videos", wraps=optimize_videos) as wrapped:
        result = runner.invoke(app, ["optimize-videos", str(src), str(out), "--profile", "aggressive", "--crf", "30"])

    assert result.exit_code == 0, result.output
    profile = wrapped.call_args.args[3]
    assert profile.name == "aggressive"
    assert profile.crf == 30
    assert profile.preset == "slow"


def test_failed_compression_leaves_no_output_and_is_retried(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)
    fake_engine.compress_error = EngineError("FFmpeg compression failed", "Conversion failed!")
    fake_engine.partial_bytes = b"\x00" * 100

    first = optimize_videos(src, out, fake_engine, STANDARD_PROFILE)

    assert len(first.failed) == 2
    assert not (out / "showreel.mp4").exists()
    assert [p for p in out.rglob("*") if p.is_file()] == []

    fake_engine.compress_error = None
    second = optimize_videos(src, out, fake_engine, STANDARD_PROFILE)

    assert len(second.compressed) == 2
    assert second.skipped == []
    assert (out / "showreel.mp4").stat().st_size == 1024


def test_failed_recompression_keeps_previous_output(fake_engine, tmp_path):
    src, out = tmp_path / "vid", tmp_path / "assets"
    _make_videos(src)
    optimize_videos(src, out, fake_engine, STANDARD_PROFILE)
    previous = out / "showreel.mp4"
    os.utime(previous, (previous.stat().st_atime - 3600, previous.stat().st_mtime - 3600))
    fake_engine.compress_error = EngineError("FFmpeg compression failed", "Conversion failed!")
    fake_engine.partial_bytes = b"\x00" * 100

    summary = optimize_videos(src, out, fake_engine, STANDARD_PROFILE)

    assert summary.failed == [src / "showreel.mov"]
    assert previous.stat().st_size == 1024
    assert not (out / "showreel.mp4.part").exists()
