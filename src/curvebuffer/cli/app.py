"""CLI application entry point for curvebuffer.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer

from curvebuffer import __version__
from curvebuffer.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_buffer_settings,
    print_curve_errors,
    print_curve_table,
    print_error,
    print_file_info,
    print_header,
    print_step,
    print_success,
)
from curvebuffer.config import (
    BufferConfig,
    CapStyle,
    CurveBufferSettings,
    JoinStyle,
    LoggingConfig,
)
from curvebuffer.core import BufferProcessor
from curvebuffer.exceptions import CurveBufferError, CurveLoadError, CurveSaveError
from curvebuffer.io import CurveReader, SvgWriter

# Create the Typer app
app = typer.Typer(
    name="curvebuffer",
    help="Compute buffer regions of circulinear curves and draw them as SVG.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Curvebuffer[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def buffer(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to input JSON curve file",
            show_default=False,
        ),
    ],
    distance: Annotated[
        float | None,
        typer.Option(
            "--distance",
            "-d",
            help="Buffer distance (required unless --info)",
            min=0.0,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-buffer.svg)",
        ),
    ] = None,
    join: Annotated[
        str,
        typer.Option(
            "--join",
            "-j",
            help="Join style at convex vertices (round|bevel|mitre)",
        ),
    ] = "round",
    cap: Annotated[
        str,
        typer.Option(
            "--cap",
            "-c",
            help="Cap style at open extremities (round|square|butt)",
        ),
    ] = "round",
    mitre_limit: Annotated[
        float,
        typer.Option(
            "--mitre-limit",
            help="Maximum mitre length as a multiple of the distance (1-100)",
            min=1.0,
            max=100.0,
        ),
    ] = 4.0,
    info: Annotated[
        bool,
        typer.Option(
            "--info",
            help="Describe the curves of the file and exit",
        ),
    ] = False,
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
    """Compute the buffer of every curve in a JSON file and draw it as SVG.

    Each curve is a polyline, a ring, or a composite of segments and arcs.
    The buffer is the region within the given distance of the curve, with
    the chosen joins at vertices and caps at open extremities.

    Example:
        curvebuffer shapes.json --distance 10

    This will create shapes-buffer.svg showing every curve and its buffer.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to a JSON curve file.",
        )
        raise typer.Exit(code=1)

    try:
        join_style = JoinStyle(join.lower())
    except ValueError:
        print_error(f"Invalid join style: {join}", details="Valid values: round, bevel, mitre")
        raise typer.Exit(code=1)

    try:
        cap_style = CapStyle(cap.lower())
    except ValueError:
        print_error(f"Invalid cap style: {cap}", details="Valid values: round, square, butt")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        if info:
            _handle_info(input_file, quiet)
            raise typer.Exit(code=0)

        if distance is None:
            print_error("Missing buffer distance", details="Use --distance to set it.")
            raise typer.Exit(code=1)

        settings = CurveBufferSettings(
            buffer=BufferConfig(
                join_style=join_style,
                cap_style=cap_style,
                mitre_limit=mitre_limit,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )

        if not quiet:
            print_step("Loading curves")

        reader = CurveReader(input_file)
        reader.load()
        curve_count = reader.curve_count

        if not quiet:
            print_file_info(str(input_file), curve_count)

        if curve_count == 0:
            if not quiet:
                console.print("\nNo curves found. Nothing to process.")
            raise typer.Exit(code=0)

        if not quiet:
            print_step("Buffering")
            print_buffer_settings(distance, join_style.value, cap_style.value, mitre_limit)

        actual_output_path = output if output is not None else SvgWriter.get_buffer_path(input_file)

        processor = BufferProcessor(settings)

        if not quiet:
            with create_progress() as progress:
                task_id = progress.add_task(f"Buffering {curve_count} curves", total=curve_count)

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                stats = processor.process(
                    input_path=input_file,
                    distance=distance,
                    output_path=actual_output_path,
                    progress_callback=update_progress,
                )
        else:
            stats = processor.process(
                input_path=input_file,
                distance=distance,
                output_path=actual_output_path,
            )

        if not quiet:
            print_success(
                output_path=str(actual_output_path),
                file_size=_format_file_size(actual_output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                boundary_curves=stats.boundary_count,
                errors=stats.error_count,
                empty=stats.empty_count,
                avg_time_ms=stats.avg_curve_time_ms,
            )
            if verbose and stats.errors:
                print_curve_errors(stats.errors)

        if stats.error_count > 0:
            raise typer.Exit(code=1)

    except CurveLoadError as e:
        print_error(f"Could not load curves: {e.reason}")
        raise typer.Exit(code=1)
    except CurveSaveError as e:
        print_error(f"Could not save drawing: {e.reason}")
        raise typer.Exit(code=1)
    except CurveBufferError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_info(input_file: Path, quiet: bool) -> None:
    """Handle --info mode.

    Args:
        input_file: Path to curve file
        quiet: Suppress decorations, print the table only
    """
    if not quiet:
        print_step("Loading curves")

    reader = CurveReader(input_file)
    reader.load()

    if not quiet:
        print_file_info(str(input_file), reader.curve_count)
        print_step("Curves")

    rows: list[tuple[str, str, int, float, float | None]] = []
    for name, entry in reader.iter_entries():
        curve = reader.read_curve(entry)
        kind = "closed" if curve.closed else "open"
        area = curve.signed_area() if curve.closed else None
        rows.append((name, kind, len(curve.smooth_pieces()), curve.length(), area))

    print_curve_table(rows)

    if not quiet:
        console.print(f"\n[bold green]{SYM_OK} Info complete[/bold green]")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "12 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
