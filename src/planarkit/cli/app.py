"""CLI application entry point for planarkit.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from planarkit import __version__
from planarkit.cli.output import (
    console,
    create_progress,
    print_cancellation_summary,
    print_error,
    print_header,
    print_processing_info,
    print_shape_table,
    print_shapes_info,
    print_step,
    print_success,
)
from planarkit.config import (
    FlatteningConfig,
    KernelSettings,
    LoggingConfig,
    ProcessingConfig,
)
from planarkit.core import TessellationProcessor
from planarkit.core.monotone import monotone_polygons
from planarkit.core.path import shape_to_topolygon
from planarkit.core.polygon import is_convex, orientation
from planarkit.exceptions import (
    MalformedPolygonError,
    PlanarKitError,
    ProcessingCancelledError,
    ShapeLoadError,
    ShapeSaveError,
)
from planarkit.io import MeshWriter, ShapeReader

app = typer.Typer(
    name="planarkit",
    help="Triangulate and inspect planar shapes made of lines and quadratic curves.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]planarkit[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Planar geometry kernel: curve algebra, monotone decomposition, triangulation."""


def _check_input(input_path: Path) -> None:
    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details=f"The file '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)
    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Please provide a path to a JSON shape file.",
        )
        raise typer.Exit(code=1)


@app.command()
def triangulate(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON shape file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-mesh.json)",
        ),
    ] = None,
    quality: Annotated[
        float,
        typer.Option(
            "--quality",
            help="Curve samples per unit of length",
            min=0.01,
            max=100.0,
        ),
    ] = 1.0,
    resolve: Annotated[
        bool,
        typer.Option(
            "--resolve/--no-resolve",
            help="Split self-crossing outer contours before triangulating",
        ),
    ] = True,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Triangulate every shape of a shape file into a JSON mesh file.

    Each shape is flattened, split into y-monotone pieces and triangulated.
    Shapes that fail are reported and left out of the mesh file.

    Example:
        planarkit triangulate shapes.json -o shapes-mesh.json
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    _check_input(input_path)

    if not quiet:
        print_header(__version__)

    settings = KernelSettings(
        flattening=FlatteningConfig(quality=quality),
        processing=ProcessingConfig(
            max_workers=workers,
            resolve_self_intersections=resolve,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="INFO" if verbose else log_level,
        ),
    )
    output_path = output if output is not None else MeshWriter.get_mesh_path(input_path)

    try:
        with ShapeReader(input_path) as reader:
            shape_count = reader.shape_count

        if not quiet:
            print_step("Loading shapes")
            print_shapes_info(str(input_path), shape_count)
            print_step("Triangulating")
            actual_workers = workers if workers else os.cpu_count() or 1
            print_processing_info(actual_workers, is_auto=(workers is None))

        processor = TessellationProcessor(settings, quiet=quiet)

        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task(
                    f"Triangulating {shape_count} shapes", total=shape_count
                )

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                stats = processor.process(
                    input_path=input_path,
                    output_path=output_path,
                    max_workers=workers,
                    progress_callback=update_progress,
                )
        else:
            stats = processor.process(
                input_path=input_path,
                output_path=output_path,
                max_workers=workers,
            )

        if not quiet:
            print_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                triangles=stats.triangle_count,
                area=stats.total_area,
                errors=stats.error_count,
                rejected=stats.rejected_count,
            )
            if verbose:
                for name, error in stats.errors:
                    console.print(f"  [red]{name}[/red]: {error}")

    except ProcessingCancelledError as e:
        if not quiet:
            print_cancellation_summary(e.processed_count, e.pending_count)
        raise typer.Exit(code=130) from None
    except ShapeLoadError as e:
        print_error(f"Could not load shapes: {e.reason}")
        raise typer.Exit(code=1)
    except ShapeSaveError as e:
        print_error(f"Could not save mesh: {e.reason}")
        raise typer.Exit(code=1)
    except PlanarKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("inspect")
def inspect_shapes(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON shape file",
            show_default=False,
        ),
    ],
    quality: Annotated[
        float,
        typer.Option(
            "--quality",
            help="Curve samples per unit of length",
            min=0.01,
            max=100.0,
        ),
    ] = 1.0,
) -> None:
    """Show orientation, convexity and monotone piece count of every shape."""
    _check_input(input_path)
    flattening = FlatteningConfig(quality=quality)

    rows: list[tuple[str, str, bool, str, int]] = []
    try:
        with ShapeReader(input_path) as reader:
            for shape in reader.iter_shapes():
                topolygon = shape_to_topolygon(shape, flattening)
                winding = orientation(topolygon.outer)
                try:
                    pieces = str(len(monotone_polygons(topolygon)))
                except MalformedPolygonError:
                    pieces = "error"
                rows.append(
                    (
                        shape.name,
                        winding.value if winding is not None else "degenerate",
                        is_convex(topolygon.outer),
                        pieces,
                        len(topolygon.holes),
                    )
                )
    except PlanarKitError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_shape_table(rows)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
