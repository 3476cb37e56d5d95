#!/usr/bin/env python3
"""
Compress a tree of videos to web-friendly H.264 MP4, skipping up-to-date outputs
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from asset_suite.config import VIDEO_EXTENSIONS, VIDEO_PROFILES, VideoProfile
from asset_suite.utils.cli import console
from asset_suite.utils.dependencies import check_ffmpeg, check_ffprobe
from asset_suite.utils.engine import EngineError, FFmpegEngine, TranscodingEngine
from asset_suite.utils.files import ensure_directory, find_media_files, is_stale
from asset_suite.utils.frames import partial_path, scaled_height

logger = logging.getLogger(__name__)


@dataclass
class CompressionSummary:
    compressed: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)


def plan_compressions(
    input_dir: Path, output_dir: Path, profile: VideoProfile
) -> Tuple[List[Tuple[Path, Path]], List[Path]]:
    pending: List[Tuple[Path, Path]] = []
    skipped: List[Path] = []
    for input_path in find_media_files(input_dir, VIDEO_EXTENSIONS):
        relative = input_path.relative_to(input_dir)
        output_path = output_dir / relative.parent / profile.output_name(relative.stem)
        if is_stale(input_path, output_path):
            pending.append((input_path, output_path))
        else:
            skipped.append(input_path)
    return pending, skipped


def compress_video(engine: TranscodingEngine, input_path: Path, output_path: Path, profile: VideoProfile) -> bool:
    """Compress one video, returning False (and logging) on failure."""
    video_info = engine.probe(input_path)
    height = scaled_height(video_info, profile.target_width)

    logger.info(f"Processing: {input_path.name}")
    logger.info(f"  Original: {video_info.width}x{video_info.height}, {video_info.size / 1024 / 1024:.1f}MB")
    logger.info(f"  Target: {profile.target_width}x{height}, CRF={profile.crf}, preset={profile.preset}")

    start_time = time.monotonic()
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Compressing {input_path.name}", total=video_info.duration or None)
        partial = partial_path(output_path)
        try:
            engine.compress_video(
                input_path,
                partial,
                profile.target_width,
                height,
                profile,
                on_progress=lambda seconds: progress.update(task, completed=seconds),
            )
            partial.replace(output_path)
        except EngineError as e:
            logger.error(f"FFmpeg failed for {input_path.name}: {e}")
            if e.stderr:
                logger.error(f"Error details: {e.stderr[-200:]}")
            return False
        finally:
            partial.unlink(missing_ok=True)

    output_size = output_path.stat().st_size
    ratio = (video_info.size - output_size) / video_info.size * 100 if video_info.size > 0 else 0
    logger.info(f"  Compressed in {time.monotonic() - start_time:.1f}s")
    logger.info(
        f"  Size: {video_info.size / 1024 / 1024:.1f}MB → {output_size / 1024 / 1024:.1f}MB ({ratio:.1f}% smaller)"
    )
    return True


def optimize_videos(
    input_dir: Path, output_dir: Path, engine: TranscodingEngine, profile: VideoProfile
) -> CompressionSummary:
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory does not exist: {input_dir.resolve()}")

    ensure_directory(output_dir)
    pending, skipped = plan_compressions(input_dir, output_dir, profile)
    summary = CompressionSummary(skipped=skipped)

    logger.info(f"Found {len(pending) + len(skipped)} video(s) total")
    logger.info(f"{len(pending)} file(s) need compression, {len(skipped)} already up-to-date")
    for path in skipped:
        logger.debug(f"Skipped: {path.relative_to(input_dir)}")

    for input_path, output_path in pending:
        ensure_directory(output_path.parent)
        try:
            ok = compress_video(engine, input_path, output_path, profile)
        except RuntimeError as e:
            logger.error(f"Error processing {input_path}: {e}")
            ok = False
        (summary.compressed if ok else summary.failed).append(input_path)

    return summary


def main(input_dir: str, output_dir: str, profile: str = "standard", crf: int | None = None) -> CompressionSummary:
    """Entry point called from cli.py."""
    check_ffmpeg()
    check_ffprobe()

    video_profile = VIDEO_PROFILES[profile]
    if crf is not None:
        video_profile = video_profile.model_copy(update={"crf": crf})

    logger.info(f"Profile: {video_profile.name}, target width {video_profile.target_width}px")
    return optimize_videos(Path(input_dir), Path(output_dir), FFmpegEngine(), video_profile)
