"""Shared fixtures: an in-memory stand-in for the FFmpeg engine."""

from pathlib import Path
from typing import Callable, List

import pytest

from asset_suite.config import FrameOutputSettings, StableFrameSettings, VideoProfile
from asset_suite.utils.video import VideoInfo


def ssim_output(similarity: float) -> str:
    """Diagnostic text as printed by FFmpeg's ssim filter."""
    return (
        f"[Parsed_ssim_0 @ 0x5581] SSIM Y:{similarity:.6f} (12.3) U:{similarity:.6f} (13.1) "
        f"V:{similarity:.6f} (13.4) All:{similarity:.6f} (12.7)\n"
    )


class FakeEngine:
    """Records calls and writes placeholder files instead of running FFmpeg."""

    def __init__(self):
        self.info = VideoInfo(width=1920, height=1080, duration=20.0, size=4_000_000, fps=30.0)
        self.burst_count = 4
        self.burst_error: Exception | None = None
        self.similarities: List[str] = []
        self.similarity_error: Exception | None = None
        self.extract_error: Exception | None = None
        self.extract_writes = True
        self.compress_error: Exception | None = None
        # Bytes written to the output before a configured error is raised, like an interrupted encode
        self.partial_bytes: bytes | None = None

        self.probe_calls: List[Path] = []
        self.burst_calls: List[tuple] = []
        self.burst_dirs: List[Path] = []
        self.similarity_calls: List[tuple] = []
        self.extract_calls: List[tuple] = []
        self.compress_calls: List[tuple] = []

    @property
    def call_count(self) -> int:
        return (
            len(self.probe_calls) + len(self.burst_calls) + len(self.similarity_calls)
            + len(self.extract_calls) + len(self.compress_calls)
        )

    def _write_partial(self, output: Path) -> None:
        if self.partial_bytes is not None:
            output.write_bytes(self.partial_bytes)

    def probe(self, source: Path) -> VideoInfo:
        self.probe_calls.append(source)
        return self.info

    def sample_burst(self, source: Path, start: float, end: float, output_dir: Path, settings: StableFrameSettings) -> List[Path]:
        self.burst_calls.append((source, start, end))
        self.burst_dirs.append(output_dir)
        if self.burst_error is not None:
            raise self.burst_error
        paths = []
        for i in range(1, self.burst_count + 1):
            path = output_dir / f"frame_{i:03d}.jpg"
            path.write_bytes(b"\xff\xd8fake")
            paths.append(path)
        return paths

    def compute_similarity(self, frame_a: Path, frame_b: Path) -> str:
        self.similarity_calls.append((frame_a, frame_b))
        if self.similarity_error is not None:
            raise self.similarity_error
        assert frame_a.exists() and frame_b.exists()
        return self.similarities.pop(0) if self.similarities else ""

    def extract_frame(self, source: Path, timestamp: float, output: Path, width: int, height: int, settings: FrameOutputSettings) -> None:
        self.extract_calls.append((source, timestamp, output, width, height))
        if self.extract_error is not None:
            self._write_partial(output)
            raise self.extract_error
        if self.extract_writes:
            output.write_bytes(b"RIFF\x00\x00\x00\x00WEBPfake")

    def compress_video(
        self,
        source: Path,
        output: Path,
        width: int,
        height: int,
        profile: VideoProfile,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        self.compress_calls.append((source, output, width, height, profile.name))
        if self.compress_error is not None:
            self._write_partial(output)
            raise self.compress_error
        if on_progress is not None:
            on_progress(self.info.duration)
        output.write_bytes(b"\x00" * 1024)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def ssim() -> Callable[[float], str]:
    return ssim_output


@pytest.fixture
def video_dir(tmp_path: Path) -> Path:
    """An input folder holding one (fake) video."""
    folder = tmp_path / "vid"
    folder.mkdir()
    (folder / "showreel.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return folder
