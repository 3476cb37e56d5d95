"""Shared utilities for checking external tool dependencies and their versions."""

import re
import subprocess


def _check_tool(name: str) -> str:
    """Verify an FFmpeg-suite binary is available and return its version string.

    Parses version from output like 'ffmpeg version 6.1.1-3ubuntu5 Copyright ...'.

    Raises:
        RuntimeError: If the tool is not found, exits non-zero or prints no version.
    """
    try:
        result = subprocess.run(
            [name, "-version"], capture_output=True, text=True, timeout=5, check=False,
        )
    except FileNotFoundError:
        raise RuntimeError(
            f"Required tool not found: {name}. Install FFmpeg from https://ffmpeg.org/download.html"
        )

    if result.returncode != 0:
        raise RuntimeError(f"{name} -version exited with code {result.returncode}")

    match = re.search(rf"{re.escape(name)} version (\S+)", result.stdout)
    if not match:
        raise RuntimeError(f"Could not parse {name} version from output: {result.stdout.strip()[:200]}")

    return match.group(1)


def check_ffmpeg() -> str:
    return _check_tool("ffmpeg")


def check_ffprobe() -> str:
    return _check_tool("ffprobe")
