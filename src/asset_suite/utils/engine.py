"""Transcoding engine interface and its FFmpeg implementation.

Every FFmpeg invocation made by the tools goes through a ``TranscodingEngine``
so the frame selection logic can be exercised with an in-memory fake.
"""

import logging
import re
import threading
from pathlib import Path
from typing import Callable, List, Protocol

import ffmpeg

from asset_suite.config import FrameOutputSettings, StableFrameSettings, VideoProfile
from asset_suite.utils.video import VideoInfo, get_video_info

logger = logging.getLogger(__name__)

BURST_PATTERN = "frame_%03d.jpg"


class EngineError(RuntimeError):
    """The transcoding engine exited with a non-zero status."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class TranscodingEngine(Protocol):
    def probe(self, source: Path) -> VideoInfo:
        ...

    def sample_burst(
        self, source: Path, start: float, end: float, output_dir: Path, settings: StableFrameSettings
    ) -> List[Path]:
        ...

    def compute_similarity(self, frame_a: Path, frame_b: Path) -> str:
        ...

    def extract_frame(
        self, source: Path, timestamp: float, output: Path, width: int, height: int, settings: FrameOutputSettings
    ) -> None:
        ...

    def compress_video(
        self,
        source: Path,
        output: Path,
        width: int,
        height: int,
        profile: VideoProfile,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        ...


def _run(stream, description: str) -> tuple[bytes, bytes]:
    """Run an ffmpeg-python stream, converting failures into EngineError.

    OSError (ffmpeg binary missing) is left to propagate.
    """
    logger.debug(f"FFmpeg command: {' '.join(ffmpeg.compile(stream))}")
    try:
        return ffmpeg.run(stream, capture_stdout=True, capture_stderr=True)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode(errors='ignore') if e.stderr else ''
        raise EngineError(f"FFmpeg {description} failed", stderr) from e


def _drain(pipe, chunks: List[bytes]) -> None:
    for line in iter(pipe.readline, b''):
        chunks.append(line)


class FFmpegEngine:
    """TranscodingEngine backed by the ffmpeg/ffprobe binaries."""

    def probe(self, source: Path) -> VideoInfo:
        return get_video_info(str(source))

    def sample_burst(
        self, source: Path, start: float, end: float, output_dir: Path, settings: StableFrameSettings
    ) -> List[Path]:
        stream = (
            ffmpeg
            .input(str(source))
            .output(
                str(output_dir / BURST_PATTERN),
                ss=start,
                t=end - start,
                vf=f"scale={settings.sample_width}:{settings.sample_height},fps={settings.sample_fps:g}",
                **{'q:v': settings.sample_quality},
            )
            .overwrite_output()
        )
        _run(stream, "burst sampling")
        return sorted(output_dir.glob("frame_*.jpg"))

    def compute_similarity(self, frame_a: Path, frame_b: Path) -> str:
        stream = (
            ffmpeg
            .filter([ffmpeg.input(str(frame_a)), ffmpeg.input(str(frame_b))], 'ssim', stats_file='-')
            .output('-', f='null')
        )
        _, stderr = _run(stream, "similarity computation")
        return stderr.decode(errors='ignore')

    def extract_frame(
        self, source: Path, timestamp: float, output: Path, width: int, height: int, settings: FrameOutputSettings
    ) -> None:
        stream = (
            ffmpeg
            .input(str(source))
            .output(
                str(output),
                f='webp',
                vframes=1,
                ss=timestamp,
                vf=f"scale={width}:{height}:flags=lanczos",
                vcodec='libwebp',
                quality=settings.quality,
                preset=settings.preset,
                lossless=0,
                map_metadata=-1,
            )
            .overwrite_output()
        )
        _run(stream, "frame extraction")

    def compress_video(
        self,
        source: Path,
        output: Path,
        width: int,
        height: int,
        profile: VideoProfile,
        on_progress: Callable[[float], None] | None = None,
    ) -> None:
        output_kwargs = {
            'f': 'mp4',
            'vcodec': profile.codec,
            'crf': profile.crf,
            'preset': profile.preset,
            'profile:v': profile.profile,
            'level': profile.level,
            'maxrate': profile.max_bitrate,
            'bufsize': profile.buffer_size,
            'vf': f"scale={width}:{height}:flags=lanczos",
            'acodec': profile.audio_codec,
            'b:a': profile.audio_bitrate,
            'ar': profile.audio_sample_rate,
            'map_metadata': -1,
            'movflags': '+faststart',
        }
        if profile.tune:
            output_kwargs['tune'] = profile.tune
        output_kwargs.update(profile.encoder_options)

        stream = (
            ffmpeg
            .input(str(source))
            .output(str(output), **output_kwargs)
            .global_args('-v', 'error', '-nostats', '-progress', 'pipe:1')
            .overwrite_output()
        )
        logger.debug(f"FFmpeg command: {' '.join(ffmpeg.compile(stream))}")

        process = ffmpeg.run_async(stream, pipe_stdout=True, pipe_stderr=True)

        # Both pipes must be drained concurrently or FFmpeg can block on a full stderr buffer
        stderr_chunks: List[bytes] = []
        stderr_thread = threading.Thread(target=_drain, args=(process.stderr, stderr_chunks))
        stderr_thread.start()

        pattern = re.compile(r'out_time_(?:ms|us)=(\d+)')
        for lineb in iter(process.stdout.readline, b''):
            match = pattern.search(lineb.decode('utf-8', errors='ignore'))
            if match and on_progress is not None:
                on_progress(int(match.group(1)) / 1_000_000)

        returncode = process.wait()
        stderr_thread.join()
        if returncode != 0:
            stderr = b''.join(stderr_chunks).decode(errors='ignore')
            raise EngineError("FFmpeg compression failed", stderr)
