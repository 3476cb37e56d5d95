"""Core logic for optimize-images: incremental WebP conversion of an image tree via Pillow."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from PIL import Image

from asset_suite.config import ImageSettings
from asset_suite.utils.files import ensure_directory, find_media_files, is_stale

logger = logging.getLogger(__name__)


@dataclass
class ConversionSummary:
    converted: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)


def has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def convert_to_webp(input_path: Path, output_path: Path, settings: ImageSettings) -> bool:
    """Convert one image, returning False (and logging) on failure."""
    try:
        with Image.open(input_path) as img:
            alpha = has_alpha(img)
            save_kwargs = {"quality": settings.quality, "method": settings.method}
            if alpha:
                save_kwargs["alpha_quality"] = settings.alpha_quality
            converted = img.convert("RGBA" if alpha else "RGB")
            converted.save(output_path, format="WEBP", **save_kwargs)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"Failed to convert {input_path}: {e}")
        return False

    input_size = input_path.stat().st_size
    output_size = output_path.stat().st_size
    ratio = (input_size - output_size) / input_size * 100 if input_size > 0 else 0
    logger.info(f"{input_path.name} → {output_path.name}")
    logger.info(f"  Size: {input_size / 1024:.1f}KB → {output_size / 1024:.1f}KB ({ratio:.1f}% smaller)")
    return True


def plan_conversions(
    input_dir: Path, output_dir: Path, settings: ImageSettings
) -> Tuple[List[Tuple[Path, Path]], List[Path]]:
    """Split the images of ``input_dir`` into (pending (source, output) pairs, up-to-date sources)."""
    pending: List[Tuple[Path, Path]] = []
    skipped: List[Path] = []
    for input_path in find_media_files(input_dir, settings.extensions):
        output_path = output_dir / input_path.relative_to(input_dir).with_suffix(".webp")
        if is_stale(input_path, output_path):
            pending.append((input_path, output_path))
        else:
            skipped.append(input_path)
    return pending, skipped


def optimize_images(input_dir: Path, output_dir: Path, settings: ImageSettings) -> ConversionSummary:
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory does not exist: {input_dir.resolve()}")

    ensure_directory(output_dir)
    pending, skipped = plan_conversions(input_dir, output_dir, settings)
    summary = ConversionSummary(skipped=skipped)

    logger.info(f"Found {len(pending) + len(skipped)} image(s) total")
    logger.info(f"{len(pending)} file(s) need conversion, {len(skipped)} already up-to-date")
    for path in skipped:
        logger.debug(f"Skipped: {path.relative_to(input_dir)}")

    for input_path, output_path in pending:
        ensure_directory(output_path.parent)
        if convert_to_webp(input_path, output_path, settings):
            summary.converted.append(input_path)
        else:
            summary.failed.append(input_path)

    return summary


def main(input_dir: str, output_dir: str, quality: int = 85) -> ConversionSummary:
    """Entry point called from cli.py."""
    return optimize_images(Path(input_dir), Path(output_dir), ImageSettings(quality=quality))
