import logging
from typing import Any

import ffmpeg
from pydantic import BaseModel, ConfigDict, Field

logger: logging.Logger = logging.getLogger(__name__)


class VideoInfo(BaseModel):
    """Video information extracted from ffprobe."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Video width in pixels")
    height: int = Field(..., gt=0, description="Video height in pixels")
    duration: float = Field(..., ge=0, description="Duration in seconds")
    size: int = Field(0, ge=0, description="Container size in bytes")
    fps: float | None = Field(None, gt=0, description="Frames per second, if known")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def parse_frame_rate(value: Any) -> float | None:
    """Parse an ffprobe rate such as '30000/1001' or '25' into a float.

    Returns None for missing, malformed or zero-denominator rates.
    """
    if value is None:
        return None
    try:
        if isinstance(value, str) and '/' in value:
            num, denom = map(int, value.split('/'))
            if denom == 0:
                return None
            fps_value = num / denom
        else:
            fps_value = float(value)
    except ValueError:
        return None
    return fps_value if fps_value > 0 else None


def video_info_from_probe(probe: dict) -> VideoInfo:
    """Build a VideoInfo from the JSON structure returned by ffprobe."""
    stream: Any = next(
        (s for s in probe.get('streams', []) if s.get('codec_type') == 'video'),
        None,
    )
    if stream is None:
        raise ValueError("No video stream found")

    fmt = probe.get('format', {})
    duration = fmt.get('duration', stream.get('duration', 0))

    return VideoInfo(
        width=stream['width'],
        height=stream['height'],
        duration=float(duration),
        size=int(fmt.get('size', 0)),
        fps=parse_frame_rate(stream.get('r_frame_rate')),
    )


def get_video_info(filename: str) -> VideoInfo:
    try:
        probe = ffmpeg.probe(filename)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode(errors='ignore').strip() if e.stderr else ''
        raise RuntimeError(f"ffprobe failed for {filename}: {stderr or 'unknown error'}") from e

    try:
        video_info = video_info_from_probe(probe)
    except (KeyError, ValueError) as e:
        raise RuntimeError(f"Failed to parse video info for {filename}: {e}") from e

    fps_str = f", {video_info.fps:.2f} fps" if video_info.fps else ""
    logger.info(
        f"Video detected: {video_info.width}x{video_info.height}, "
        f"{video_info.duration:.1f}s, {video_info.size / 1024 / 1024:.1f}MB{fps_str}"
    )
    return video_info
