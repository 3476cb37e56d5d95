"""Write a single scaled WebP frame of a video to disk."""

import logging
import math
import time
from pathlib import Path

from asset_suite.config import FrameOutputSettings
from asset_suite.models.thumbnail import ExtractionResult
from asset_suite.utils.engine import EngineError, TranscodingEngine
from asset_suite.utils.video import VideoInfo

logger = logging.getLogger(__name__)


def format_output_name(base_name: str, timestamp: float, extension: str) -> str:
    """Name a timestamped variant, e.g. ``firstframe--4-2s.webp`` for 4.2s."""
    formatted = f"{timestamp:.1f}".replace(".", "-")
    return f"{base_name}--{formatted}s.{extension}"


def partial_path(output: Path) -> Path:
    return output.with_name(output.name + ".part")


def scaled_height(video_info: VideoInfo, target_width: int) -> int:
    """Height preserving the source aspect ratio at ``target_width`` (rounded half up)."""
    return math.floor(target_width / video_info.aspect_ratio + 0.5)


def extract_to(
    engine: TranscodingEngine,
    source: Path,
    timestamp: float,
    video_info: VideoInfo,
    output: Path,
    settings: FrameOutputSettings,
) -> ExtractionResult:
    """Extract one frame at ``timestamp`` into ``output``; failures become a failed result."""
    height = scaled_height(video_info, settings.target_width)
    logger.info(f"Target: {settings.target_width}x{height} WebP, quality {settings.quality}%")
    logger.info(f"Output: {output.name}")

    # ``output`` only ever holds a completed frame; partial writes stay on the sibling.
    partial = partial_path(output)
    start_time = time.monotonic()
    try:
        engine.extract_frame(source, timestamp, partial, settings.target_width, height, settings)
        if not partial.exists():
            logger.error("Output file was not created")
            return ExtractionResult(success=False, timestamp=timestamp)
        partial.replace(output)
    except EngineError as e:
        logger.error(f"FFmpeg failed: {e}")
        if e.stderr:
            logger.error(f"Error details: {e.stderr[-300:]}")
        return ExtractionResult(success=False, timestamp=timestamp)
    except OSError as e:
        logger.error(f"FFmpeg process error: {e}")
        return ExtractionResult(success=False, timestamp=timestamp)
    finally:
        partial.unlink(missing_ok=True)

    size_bytes = output.stat().st_size
    logger.info(f"Extracted frame in {time.monotonic() - start_time:.1f}s ({size_bytes / 1024:.1f}KB)")
    return ExtractionResult(success=True, timestamp=timestamp, path=output, size_bytes=size_bytes)


def extract_at(
    engine: TranscodingEngine,
    source: Path,
    timestamp: float,
    video_info: VideoInfo,
    output_dir: Path,
    settings: FrameOutputSettings,
) -> ExtractionResult:
    """Extract a frame into ``output_dir`` under a name embedding ``timestamp``."""
    output = output_dir / format_output_name(settings.base_name, timestamp, settings.extension)
    return extract_to(engine, source, timestamp, video_info, output, settings)
