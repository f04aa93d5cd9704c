"""salientcrop CLI.

Command-line interface for computing content-aware crops of image files.
"""

from __future__ import annotations

import json
import uuid
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from PIL import Image

from salientcrop import __version__
from salientcrop.config import RESAMPLING_METHODS, ConfigError, settings
from salientcrop.core import Analyzer, CropError
from salientcrop.geometry import Region
from salientcrop.utils.logging import (
    configure_logging,
    get_logger,
    set_correlation_context,
)
from salientcrop.vision import DirectoryDebugSink

app = typer.Typer(
    name="salientcrop",
    help="salientcrop: content-aware image cropping",
    add_completion=False,
)


class ResampleMethod(str, Enum):
    """Interpolation filter used for pre-scaling."""

    nearest = "nearest"
    box = "box"
    bilinear = "bilinear"
    hamming = "hamming"
    bicubic = "bicubic"
    lanczos = "lanczos"


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"salientcrop {__version__}")


@app.command()
def crop(  # noqa: PLR0913
    image_path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to the image to analyse",
        ),
    ],
    width: Annotated[
        int, typer.Option("--width", "-W", min=0, help="Target width (0 = any)")
    ] = 0,
    height: Annotated[
        int, typer.Option("--height", "-H", min=0, help="Target height (0 = any)")
    ] = 0,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Save the cropped image")
    ] = None,
    resize: Annotated[
        bool,
        typer.Option(
            "--resize/--no-resize",
            help="Resize the saved crop to exactly WIDTH x HEIGHT",
        ),
    ] = False,
    resample: Annotated[
        ResampleMethod | None,
        typer.Option("--resample", help="Pre-scaling filter (default: settings)"),
    ] = None,
    prescale: Annotated[
        bool,
        typer.Option("--prescale/--no-prescale", help="Analyse a downscaled copy"),
    ] = True,
    debug_dir: Annotated[
        Path | None,
        typer.Option("--debug-dir", help="Write intermediate images to this directory"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Threads used to score candidates"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Find the best crop of an image for the given target size."""
    _configure_logging(verbose)
    logger = get_logger(__name__)
    set_correlation_context(run_id=uuid.uuid4().hex[:12], image_id=str(image_path))

    try:
        analyzer = _build_analyzer(
            resample=resample,
            prescale=prescale,
            debug_dir=debug_dir,
            workers=workers,
        )
        with Image.open(image_path) as image:
            image.load()
            logger.info("Analysing image", width=image.width, height=image.height)
            region = analyzer.find_best_crop(image, width, height)

            if output is not None:
                _save_crop(image, region, output, width, height, resize=resize)
                logger.info("Cropped image saved", path=str(output))

    except (CropError, ConfigError, OSError, ValueError) as e:
        logger.exception("Crop failed")
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(json.dumps(_region_to_dict(region), indent=2))
    else:
        typer.echo(f"{region.x} {region.y} {region.width} {region.height}")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """salientcrop: content-aware image cropping."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _build_analyzer(
    *,
    resample: ResampleMethod | None,
    prescale: bool,
    debug_dir: Path | None,
    workers: int | None,
) -> Analyzer:
    config = settings.analysis_config().model_copy(update={"prescale": prescale})

    overrides: dict[str, object] = {"config": config}
    if resample is not None:
        overrides["resample_method"] = RESAMPLING_METHODS[resample.value]
    if debug_dir is not None:
        overrides["debug_sink"] = DirectoryDebugSink(debug_dir)
    if workers is not None:
        overrides["max_workers"] = workers
    return Analyzer.from_settings(settings, **overrides)


def _save_crop(  # noqa: PLR0913
    image: Image.Image,
    region: Region,
    output: Path,
    width: int,
    height: int,
    *,
    resize: bool,
) -> None:
    cropped = image.crop(region.to_box())
    if resize and width > 0 and height > 0:
        cropped = cropped.resize((width, height), resample=Image.Resampling.LANCZOS)
    if cropped.mode not in ("RGB", "L") and output.suffix.lower() in (".jpg", ".jpeg"):
        cropped = cropped.convert("RGB")
    output.parent.mkdir(parents=True, exist_ok=True)
    cropped.save(output)


def _region_to_dict(region: Region) -> dict[str, int]:
    return {
        "x": region.x,
        "y": region.y,
        "width": region.width,
        "height": region.height,
        "right": region.right,
        "bottom": region.bottom,
    }


if __name__ == "__main__":  # pragma: no cover
    app()
