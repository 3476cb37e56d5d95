"""Settings shared by the asset preparation tools.

Each tool receives its settings explicitly; CLI options override individual
fields with ``model_copy(update=...)``.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

VIDEO_EXTENSIONS = [".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v", ".flv", ".wmv"]

# SVG is left out: Pillow cannot rasterise it.
IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif"]


class StableFrameSettings(BaseModel):
    """Parameters of the motion analysis used to pick a thumbnail timestamp."""

    model_config = ConfigDict(frozen=True)

    window_start: float = Field(0.5, ge=0, description="Start of the analysis window (skips leading black frames)")
    max_window_end: float = Field(10.0, gt=0, description="Upper bound of the analysis window in seconds")
    window_fraction: float = Field(0.3, gt=0, le=1, description="Fraction of the duration the window may cover")
    sample_interval: float = Field(0.5, gt=0, description="Spacing between sampled frames in seconds")
    sample_width: int = Field(320, gt=0)
    sample_height: int = Field(240, gt=0)
    sample_quality: int = Field(10, ge=1, le=31, description="JPEG q:v for disposable analysis frames")
    neutral_score: float = Field(0.5, ge=0, le=1, description="Motion score used when a pair cannot be measured")
    fallback_timestamp: float = Field(2.0, ge=0, description="Timestamp used when motion analysis fails")

    def window_end(self, duration: float) -> float:
        return min(self.max_window_end, duration * self.window_fraction)

    @property
    def sample_fps(self) -> float:
        return 1.0 / self.sample_interval


class FrameOutputSettings(BaseModel):
    """Encoding parameters of the extracted thumbnail."""

    model_config = ConfigDict(frozen=True)

    base_name: str = "firstframe"
    extension: str = "webp"
    target_width: int = Field(1920, gt=0)
    quality: int = Field(85, ge=0, le=100)
    preset: str = "photo"


class ImageSettings(BaseModel):
    """WebP conversion parameters for still images."""

    model_config = ConfigDict(frozen=True)

    extensions: List[str] = Field(default_factory=lambda: list(IMAGE_EXTENSIONS))
    quality: int = Field(85, ge=1, le=100)
    method: int = Field(6, ge=0, le=6, description="Pillow WebP effort (0-6, higher = smaller files)")
    alpha_quality: int = Field(90, ge=0, le=100)


class VideoProfile(BaseModel):
    """H.264/AAC compression profile for web playback."""

    model_config = ConfigDict(frozen=True)

    name: str
    output_suffix: str = ""
    target_width: int = Field(1920, gt=0)
    codec: str = "libx264"
    crf: int = Field(23, ge=0, le=51)
    preset: str = "medium"
    profile: str = "high"
    level: str = "4.1"
    max_bitrate: str = "5000k"
    buffer_size: str = "10000k"
    audio_codec: str = "aac"
    audio_bitrate: str = "128k"
    audio_sample_rate: str = "44100"
    tune: str | None = None
    encoder_options: Dict[str, str] = Field(default_factory=dict, description="Additional libx264 output options")

    def output_name(self, stem: str) -> str:
        return f"{stem}{self.output_suffix}.mp4"


STANDARD_PROFILE = VideoProfile(name="standard")

AGGRESSIVE_PROFILE = VideoProfile(
    name="aggressive",
    output_suffix="--extra-compressed",
    crf=28,
    preset="slow",
    max_bitrate="2000k",
    buffer_size="4000k",
    audio_bitrate="96k",
    tune="film",
    encoder_options={
        "me_method": "hex",
        "subq": "8",
        "bf": "8",
        "weightp": "2",
        "refs": "5",
        "mixed-refs": "1",
        "trellis": "2",
        "8x8dct": "1",
        "fast-pskip": "0",
        "partitions": "+parti8x8+parti4x4+partp8x8+partb8x8",
    },
)

VIDEO_PROFILES = {profile.name: profile for profile in (STANDARD_PROFILE, AGGRESSIVE_PROFILE)}
