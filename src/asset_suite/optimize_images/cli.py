"""CLI command for optimize-images."""

import typer

from asset_suite.optimize_images.main import main
from asset_suite.utils.cli import EXIT_FAILURE, cli_error_handler, console, setup_logging


@cli_error_handler
def optimize_images(
    input_dir: str = typer.Argument(..., help="Folder of source images (searched recursively)"),
    output_dir: str = typer.Argument(..., help="Folder receiving .webp files, mirroring the input layout"),
    quality: int = typer.Option(85, "--quality", "-q", min=1, max=100, help="WebP quality (1-100)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Convert JPEG, PNG, GIF, BMP and TIFF images to WebP.

    Images whose .webp output is newer than the source are skipped.
    Transparency is preserved.
    """
    setup_logging(verbose)

    summary = main(input_dir, output_dir, quality=quality)

    console.print(
        f"\n[bold green]Converted:[/bold green] {len(summary.converted)} "
        f"[dim]Skipped: {len(summary.skipped)}[/dim]"
    )
    if summary.failed:
        console.print(f"[bold red]Failed:[/bold red] {len(summary.failed)} file(s)")
        raise typer.Exit(code=EXIT_FAILURE)
