"""CLI command for capture-stable-frame."""

import logging

import typer

from asset_suite.capture_stable_frame.main import main
from asset_suite.utils.cli import EXIT_FAILURE, cli_error_handler, console, setup_logging


@cli_error_handler
def capture_stable_frame(
    input_dir: str = typer.Argument(..., help="Folder to search for a video (first match wins, subfolders searched last)"),
    output_dir: str = typer.Argument(..., help="Folder receiving the {base}--{timestamp}s.webp thumbnail"),
    width: int = typer.Option(1920, "--width", "-w", min=1, help="Target width in pixels (height keeps the aspect ratio)"),
    quality: int = typer.Option(85, "--quality", "-q", min=0, max=100, help="WebP quality (0-100)"),
    base_name: str = typer.Option("firstframe", "--base-name", help="Output filename prefix"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Extract the most stable early frame of a video as a WebP thumbnail.

    Frames from the first seconds of the video are compared pairwise with SSIM
    and the one with the least motion is kept. Nothing is done when an output
    newer than the video already exists.
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    logger.info(f"Looking for videos in: {input_dir}")
    result = main(input_dir, output_dir, target_width=width, quality=quality, base_name=base_name)

    if result is None:
        console.print("\n[bold green]Nothing to do.[/bold green] No video found or thumbnail already up-to-date.")
        return

    if not result.success:
        console.print("\n[bold red]Failed:[/bold red] Stable frame extraction failed!")
        raise typer.Exit(code=EXIT_FAILURE)

    console.print(
        f"\n[bold green]Success![/bold green] Frame from {result.timestamp:.1f}s saved to: {result.path}"
    )
