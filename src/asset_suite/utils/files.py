"""Media discovery and incremental (mtime-based) rebuild checks."""

import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if missing."""
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created directory: {path}")
    return path


def _has_extension(path: Path, extensions: Iterable[str]) -> bool:
    return path.suffix.lower() in {ext.lower() for ext in extensions}


def find_media_files(directory: Path, extensions: Iterable[str]) -> List[Path]:
    """Recursively collect files whose extension is supported, in sorted order."""
    extensions = list(extensions)
    found: List[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            logger.debug(f"Entering subdirectory: {entry}")
            found.extend(find_media_files(entry, extensions))
        elif _has_extension(entry, extensions):
            found.append(entry)
        else:
            logger.debug(f"Unsupported format, skipping: {entry}")
    return found


def find_first_media_file(directory: Path, extensions: Iterable[str]) -> Path | None:
    """Return the first supported file, preferring the directory's own files over subdirectories."""
    extensions = list(extensions)
    entries = sorted(directory.iterdir())

    for entry in entries:
        if entry.is_file() and _has_extension(entry, extensions):
            return entry

    for entry in entries:
        if entry.is_dir():
            found = find_first_media_file(entry, extensions)
            if found is not None:
                return found

    return None


def is_stale(source: Path, output: Path) -> bool:
    """True when ``output`` is missing or older than ``source``."""
    if not output.exists():
        return True
    return source.stat().st_mtime > output.stat().st_mtime


def is_stale_variants(source: Path, directory: Path, prefix: str, extension: str) -> bool:
    """Check a directory holding timestamped variants of one output.

    Only entries named ``{prefix}...{extension}`` are considered. The output is
    fresh as soon as one variant is at least as new as ``source``.
    """
    if not directory.exists():
        return True

    variants = sorted(
        entry for entry in directory.iterdir()
        if entry.name.startswith(prefix) and entry.name.endswith(extension)
    )
    if not variants:
        return True

    source_mtime = source.stat().st_mtime
    for variant in variants:
        if source_mtime <= variant.stat().st_mtime:
            logger.info(f"Found existing output: {variant.name} (up-to-date)")
            return False

    return True
