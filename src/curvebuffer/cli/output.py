"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for curve processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Curvebuffer[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_file_info(path: str, curve_count: int) -> None:
    """Print curve file information.

    Args:
        path: Path to the curve file
        curve_count: Number of curve entries in the file
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(f"  {curve_count:,} curves")


def print_buffer_settings(distance: float, join: str, cap: str, mitre_limit: float) -> None:
    """Print buffer configuration."""
    details = f"  distance {distance:g} {SYM_DOT} {join} joins {SYM_DOT} {cap} caps"
    if join == "mitre":
        details += f" {SYM_DOT} mitre limit {mitre_limit:g}"
    console.print(details)


def print_curve_table(rows: list[tuple[str, str, int, float, float | None]]) -> None:
    """Print a table describing curves.

    Args:
        rows: Tuples of (name, kind, pieces, length, signed area or None)
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Curve")
    table.add_column("Kind")
    table.add_column("Pieces", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Area", justify="right")
    for name, kind, pieces, length, area in rows:
        table.add_row(
            name,
            kind,
            str(pieces),
            f"{length:.3f}",
            f"{area:.3f}" if area is not None else "-",
        )
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    processed: int,
    boundary_curves: int,
    errors: int,
    empty: int = 0,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        processed: Number of curves buffered
        boundary_curves: Total number of boundary curves produced
        errors: Number of errors encountered
        empty: Number of curves whose buffer is empty
        avg_time_ms: Average buffering time per curve in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    stats_line = f"  {processed} curves {SYM_DOT} {boundary_curves} boundary curves"
    if empty:
        stats_line += f" {SYM_DOT} {empty} empty"
    console.print(f"{stats_line} {SYM_DOT} [{error_style}]{errors} errors[/{error_style}]")

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_curve_errors(errors: list[tuple[str, str]]) -> None:
    """Print the curves that could not be buffered."""
    for name, message in errors:
        console.print(f"  [red]{SYM_ERR}[/red] {name}: {message}")
