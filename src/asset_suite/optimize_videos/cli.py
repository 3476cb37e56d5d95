"""CLI command for optimize-videos."""

from enum import Enum
from typing import Optional

import typer

from asset_suite.optimize_videos.main import main
from asset_suite.utils.cli import EXIT_FAILURE, cli_error_handler, console, setup_logging


class Profile(str, Enum):
    """Compression profile options."""
    STANDARD = "standard"
    AGGRESSIVE = "aggressive"


@cli_error_handler
def optimize_videos(
    input_dir: str = typer.Argument(..., help="Folder of source videos (searched recursively)"),
    output_dir: str = typer.Argument(..., help="Folder receiving .mp4 files, mirroring the input layout"),
    profile: Profile = typer.Option(Profile.STANDARD, "--profile", "-p", help="'standard' (CRF 23, 5 Mbit/s cap) or 'aggressive' (CRF 28, 2 Mbit/s cap, writes *--extra-compressed.mp4)"),
    crf: Optional[int] = typer.Option(None, "--crf", min=0, max=51, help="Override the profile's Constant Rate Factor (0-51, lower is better)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Compress videos to 1920px wide H.264/AAC MP4 for the web.

    Videos whose output is newer than the source are skipped.
    """
    setup_logging(verbose)

    summary = main(input_dir, output_dir, profile=profile.value, crf=crf)

    console.print(
        f"\n[bold green]Compressed:[/bold green] {len(summary.compressed)} "
        f"[dim]Skipped: {len(summary.skipped)}[/dim]"
    )
    if summary.failed:
        console.print(f"[bold red]Failed:[/bold red] {len(summary.failed)} file(s)")
        raise typer.Exit(code=EXIT_FAILURE)
