"""
Pick the most stable early frame of a video for use as a thumbnail.

A burst of low-resolution frames is sampled from the start of the video, each
adjacent pair is scored with SSIM, and the frame that moved least relative to
its predecessor wins.
"""

import logging
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from asset_suite.config import StableFrameSettings
from asset_suite.models.thumbnail import MotionScore, SampleFrame, SelectionResult
from asset_suite.utils.engine import EngineError, TranscodingEngine
from asset_suite.utils.video import VideoInfo

logger = logging.getLogger(__name__)

SSIM_PATTERN = re.compile(r'All:([0-9.]+)')


@contextmanager
def sample_frames(
    engine: TranscodingEngine,
    source: Path,
    window_start: float,
    window_end: float,
    settings: StableFrameSettings,
) -> Iterator[List[SampleFrame]]:
    """Yield a burst of analysis frames; their directory is removed on exit.

    An engine failure yields an empty burst. An engine that cannot be started
    raises OSError.
    """
    with tempfile.TemporaryDirectory(prefix="asset_suite_burst_") as temp_dir:
        frames: List[SampleFrame] = []
        if window_end > window_start:
            try:
                paths = engine.sample_burst(source, window_start, window_end, Path(temp_dir), settings)
            except EngineError as e:
                logger.warning(f"Burst sampling failed: {e}")
                logger.debug(e.stderr[-300:])
                paths = []
            frames = [
                SampleFrame(index=i, timestamp=window_start + i * settings.sample_interval, path=path)
                for i, path in enumerate(paths)
            ]
        else:
            logger.debug(f"Empty analysis window [{window_start}, {window_end})")
        yield frames


def parse_similarity(text: str) -> float | None:
    """Extract the overall SSIM value from FFmpeg's ssim filter output."""
    match = SSIM_PATTERN.search(text)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def score_pair(engine: TranscodingEngine, frame_a: Path, frame_b: Path, settings: StableFrameSettings) -> float:
    """Motion score of two frames: 1 - SSIM, or the neutral score if unmeasurable."""
    try:
        output = engine.compute_similarity(frame_a, frame_b)
    except (EngineError, OSError) as e:
        logger.debug(f"Similarity failed for {frame_a.name}/{frame_b.name}: {e}")
        return settings.neutral_score

    similarity = parse_similarity(output)
    if similarity is None:
        logger.debug(f"No SSIM value in output for {frame_a.name}/{frame_b.name}")
        return settings.neutral_score

    return min(1.0, max(0.0, 1.0 - similarity))


def most_stable(scores: List[MotionScore]) -> MotionScore:
    """Lowest score wins; on ties the earliest entry is kept."""
    best = scores[0]
    for current in scores[1:]:
        if current.score < best.score:
            best = current
    return best


def analyze_motion(
    engine: TranscodingEngine,
    source: Path,
    video_info: VideoInfo,
    settings: StableFrameSettings,
) -> SelectionResult:
    window_start = settings.window_start
    window_end = settings.window_end(video_info.duration)
    logger.info(f"Analyzing motion from {window_start}s to {window_end:.1f}s...")

    with sample_frames(engine, source, window_start, window_end, settings) as frames:
        if len(frames) < 2:
            timestamp = window_start + settings.sample_interval
            logger.warning(f"Only {len(frames)} frame(s) sampled, using {timestamp}s")
            return SelectionResult(timestamp=timestamp, source="degenerate")

        scores = [
            MotionScore(
                timestamp=window_start + i * settings.sample_interval,
                score=score_pair(engine, frames[i - 1].path, frames[i].path, settings),
            )
            for i in range(1, len(frames))
        ]

    stable = most_stable(scores)
    logger.info(f"Analyzed {len(scores)} frame transitions")
    logger.info(f"Most stable frame found at {stable.timestamp}s (motion score: {stable.score:.2f})")
    return SelectionResult(timestamp=stable.timestamp, source="motion")


def select_stable_timestamp(
    engine: TranscodingEngine,
    source: Path,
    video_info: VideoInfo,
    settings: StableFrameSettings,
) -> float:
    return analyze_motion(engine, source, video_info, settings).timestamp


def select_with_fallback(
    engine: TranscodingEngine,
    source: Path,
    video_info: VideoInfo,
    settings: StableFrameSettings,
) -> SelectionResult:
    """Run motion analysis, substituting the fixed fallback timestamp on any error."""
    try:
        return analyze_motion(engine, source, video_info, settings)
    except Exception as e:
        logger.warning(f"Motion analysis failed: {e}")
        logger.info(f"Falling back to frame at {settings.fallback_timestamp} seconds")
        return SelectionResult(timestamp=settings.fallback_timestamp, source="fallback")
