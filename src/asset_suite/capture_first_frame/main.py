"""Core logic for capture-first-frame: a WebP thumbnail taken just after the start of a video."""

import logging
from pathlib import Path

from asset_suite.config import VIDEO_EXTENSIONS, FrameOutputSettings
from asset_suite.models.thumbnail import ExtractionResult
from asset_suite.utils.dependencies import check_ffmpeg, check_ffprobe
from asset_suite.utils.engine import FFmpegEngine, TranscodingEngine
from asset_suite.utils.files import ensure_directory, find_first_media_file, is_stale
from asset_suite.utils.frames import extract_to

# Skips potential black frames at the very start
FIRST_FRAME_TIMESTAMP = 0.1

logger = logging.getLogger(__name__)


def capture_first_frame(
    input_dir: Path,
    output_dir: Path,
    engine: TranscodingEngine,
    settings: FrameOutputSettings,
    timestamp: float = FIRST_FRAME_TIMESTAMP,
) -> ExtractionResult | None:
    """Write ``{base_name}.webp`` from the first video found, unless it is up-to-date."""
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory does not exist: {input_dir.resolve()}")

    video_file = find_first_media_file(input_dir, VIDEO_EXTENSIONS)
    if video_file is None:
        logger.info(f"No supported video files found. Supported formats: {', '.join(VIDEO_EXTENSIONS)}")
        return None
    logger.info(f"Found video: {video_file.relative_to(input_dir)}")

    ensure_directory(output_dir)
    output = output_dir / f"{settings.base_name}.{settings.extension}"

    if not is_stale(video_file, output):
        logger.info(f"First frame already extracted and up-to-date: {output}")
        return None

    video_info = engine.probe(video_file)
    logger.info(f"Extracting first frame from: {video_file.name}")
    return extract_to(engine, video_file, timestamp, video_info, output, settings)


def main(
    input_dir: str,
    output_dir: str,
    target_width: int = 1920,
    quality: int = 85,
    base_name: str = "firstframe",
) -> ExtractionResult | None:
    """Entry point called from cli.py."""
    check_ffmpeg()
    check_ffprobe()
    settings = FrameOutputSettings(target_width=target_width, quality=quality, base_name=base_name)
    return capture_first_frame(Path(input_dir), Path(output_dir), FFmpegEngine(), settings)
