"""Rich console output helpers for the CLI.

This module provides console output using the Rich library: progress bars,
summary tables and formatted messages.
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

SYM_STEP = "▸"
SYM_OK = "✓"
SYM_ERR = "✗"
SYM_DOT = "·"


def create_progress() -> Progress:
    """Create a rich progress bar for shape processing."""
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]planarkit[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_shapes_info(path: str, shape_count: int) -> None:
    """Print the shape file summary.

    Args:
        path: Path to the shape file
        shape_count: Number of shape records in it
    """
    line = Text("  ")
    line.append(path)
    console.print(line)
    plural = "shape" if shape_count == 1 else "shapes"
    console.print(f"  {shape_count:,} {plural}")


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


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_path: str,
    total_time_s: float,
    processed: int,
    triangles: int,
    area: float,
    errors: int,
    rejected: int = 0,
) -> None:
    """Print the completion summary.

    Args:
        output_path: Path to the mesh file
        total_time_s: Total processing time in seconds
        processed: Number of shapes tessellated
        triangles: Total number of triangles emitted
        area: Summed triangle area over all shapes
        errors: Number of shapes that failed
        rejected: Number of faces dropped by the monotone check
    """
    console.print(
        f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}"
    )

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} shapes {SYM_DOT} {triangles} triangles {SYM_DOT} "
        f"area {area:.6g} {SYM_DOT} [{error_style}]{errors} errors[/{error_style}]"
    )
    if rejected:
        console.print(f"  [yellow]{rejected} faces rejected[/yellow] (see log)")


def print_shape_table(rows: list[tuple[str, str, bool, str, int]]) -> None:
    """Print per-shape analysis.

    Args:
        rows: (name, orientation, convex, monotone piece count or
            "error", holes) per shape
    """
    table = Table(show_edge=False, header_style="bold")
    table.add_column("Shape")
    table.add_column("Orientation")
    table.add_column("Convex", justify="center")
    table.add_column("Pieces", justify="right")
    table.add_column("Holes", justify="right")
    for name, orientation, convex, pieces, holes in rows:
        table.add_row(name, orientation, SYM_OK if convex else SYM_DOT, pieces, str(holes))
    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of shapes completed before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} shapes completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")
