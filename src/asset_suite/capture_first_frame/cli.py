"""CLI command for capture-first-frame."""

import typer

from asset_suite.capture_first_frame.main import main
from asset_suite.utils.cli import EXIT_FAILURE, cli_error_handler, console, setup_logging


@cli_error_handler
def capture_first_frame(
    input_dir: str = typer.Argument(..., help="Folder to search for a video"),
    output_dir: str = typer.Argument(..., help="Folder receiving {base}.webp"),
    width: int = typer.Option(1920, "--width", "-w", min=1, help="Target width in pixels"),
    quality: int = typer.Option(85, "--quality", "-q", min=0, max=100, help="WebP quality (0-100)"),
    base_name: str = typer.Option("firstframe", "--base-name", help="Output filename without extension"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Extract the frame at 0.1s of the first video found as a WebP thumbnail.
    """
    setup_logging(verbose)

    result = main(input_dir, output_dir, target_width=width, quality=quality, base_name=base_name)

    if result is None:
        console.print("\n[bold green]Nothing to do.[/bold green] No video found or thumbnail already up-to-date.")
        return

    if not result.success:
        console.print("\n[bold red]Failed:[/bold red] First frame extraction failed!")
        raise typer.Exit(code=EXIT_FAILURE)

    console.print(f"\n[bold green]Success![/bold green] First frame saved to: {result.path}")
