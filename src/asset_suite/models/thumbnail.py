"""In-memory models used while selecting and extracting a video thumbnail."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

SelectionSource = Literal["motion", "degenerate", "fallback"]


@dataclass(frozen=True)
class SampleFrame:
    """A low-resolution analysis frame from a burst."""
    index: int
    timestamp: float
    path: Path


@dataclass(frozen=True)
class MotionScore:
    """Dissimilarity between a frame and its predecessor (0 = identical)."""
    timestamp: float
    score: float


@dataclass(frozen=True)
class SelectionResult:
    timestamp: float
    source: SelectionSource


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of writing the final thumbnail."""
    success: bool
    timestamp: float
    path: Path | None = None
    size_bytes: int = 0

    @property
    def filename(self) -> str | None:
        return self.path.name if self.path is not None else None
