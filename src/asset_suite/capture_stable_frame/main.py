#!/usr/bin/env python3
"""
Extract a motion-stable frame from the first video of a folder as a WebP thumbnail
"""

import logging
from pathlib import Path

from asset_suite.capture_stable_frame.stability import select_with_fallback
from asset_suite.config import VIDEO_EXTENSIONS, FrameOutputSettings, StableFrameSettings
from asset_suite.models.thumbnail import ExtractionResult
from asset_suite.utils.dependencies import check_ffmpeg, check_ffprobe
from asset_suite.utils.engine import FFmpegEngine, TranscodingEngine
from asset_suite.utils.files import ensure_directory, find_first_media_file, is_stale_variants
from asset_suite.utils.frames import extract_at

logger = logging.getLogger(__name__)


def capture_stable_frame(
    input_dir: Path,
    output_dir: Path,
    engine: TranscodingEngine,
    stable_settings: StableFrameSettings,
    output_settings: FrameOutputSettings,
) -> ExtractionResult | None:
    """
    Write ``{base_name}--{timestamp}s.webp`` for the first video in ``input_dir``.

    Returns None when there is nothing to do (no video, or an up-to-date
    variant already exists), otherwise the extraction result.
    """
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory does not exist: {input_dir.resolve()}")

    logger.info("Searching for video files...")
    video_file = find_first_media_file(input_dir, VIDEO_EXTENSIONS)
    if video_file is None:
        logger.info(f"No supported video files found. Supported formats: {', '.join(VIDEO_EXTENSIONS)}")
        return None
    logger.info(f"Found video: {video_file.relative_to(input_dir)}")

    ensure_directory(output_dir)

    prefix = f"{output_settings.base_name}--"
    if not is_stale_variants(video_file, output_dir, prefix, f".{output_settings.extension}"):
        logger.info("Frame already extracted and up-to-date!")
        return None

    video_info = engine.probe(video_file)
    logger.info(f"Finding stable frame from: {video_file.name}")

    selection = select_with_fallback(engine, video_file, video_info, stable_settings)
    logger.info(f"Selected timestamp: {selection.timestamp:.1f}s ({selection.source})")

    return extract_at(engine, video_file, selection.timestamp, video_info, output_dir, output_settings)


def main(
    input_dir: str,
    output_dir: str,
    target_width: int = 1920,
    quality: int = 85,
    base_name: str = "firstframe",
) -> ExtractionResult | None:
    """Entry point called from cli.py."""
    ffmpeg_version = check_ffmpeg()
    check_ffprobe()
    logger.debug(f"ffmpeg version: {ffmpeg_version}")

    output_settings = FrameOutputSettings(target_width=target_width, quality=quality, base_name=base_name)
    return capture_stable_frame(
        Path(input_dir),
        Path(output_dir),
        FFmpegEngine(),
        StableFrameSettings(),
        output_settings,
    )
