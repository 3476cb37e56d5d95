"""Console script for asset_suite."""

import typer

from asset_suite.capture_first_frame.cli import capture_first_frame
from asset_suite.capture_stable_frame.cli import capture_stable_frame
from asset_suite.optimize_images.cli import optimize_images
from asset_suite.optimize_videos.cli import optimize_videos

app = typer.Typer(no_args_is_help=True)

app.command(name="capture-stable-frame")(capture_stable_frame)
app.command(name="capture-first-frame")(capture_first_frame)
app.command(name="optimize-images")(optimize_images)
app.command(name="optimize-videos")(optimize_videos)


@app.command()
def version():
    """Display version information."""
    typer.echo("Asset Suite v0.1.0")
    raise typer.Exit()


if __name__ == "__main__":
    app()
