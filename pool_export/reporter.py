from __future__ import annotations

from typing import Any, Dict, Optional

import pyarrow as pa
from rich import box
from rich.console import Console
from rich.table import Table

from pool_export.pipeline import PipelineResult


def _format_bytes(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f} MB"


def print_summary(result: PipelineResult, console: Optional[Console] = None) -> None:
    """
    Render one export run summary as a rich table.
    """
    console = console or Console()

    table = Table(title="Pool Export", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="magenta")

    table.add_row("Output", str(result.get("output_path", "")))
    table.add_row("Pools", f"{result.get('rows', 0):,}")
    table.add_row("Pages", str(result.get("pages", 0)))
    table.add_row("Tokens in list", f"{result.get('tokens', 0):,}")
    table.add_row("Unlabeled mints", f"{result.get('unknown_labels', 0):,}")
    table.add_row("File size", _format_bytes(result.get("bytes_written")))
    table.add_row("Duration (s)", f"{result.get('duration_seconds', 0.0):.2f}")
    table.add_row("Throughput (rows/s)", f"{result.get('throughput_rows_per_sec', 0.0):,.2f}")
    table.add_row("Peak Memory", _format_bytes(result.get("peak_rss_bytes")))
    cpu = result.get("cpu_percent")
    table.add_row("CPU %", f"{cpu:.1f}" if cpu is not None else "N/A")

    console.print(table)


def print_preview(
    description: Dict[str, Any],
    sample: pa.Table,
    console: Optional[Console] = None,
) -> None:
    """
    Render a written file's footer summary followed by its first rows.
    """
    console = console or Console()

    console.print(
        f"[bold]{description['rows']:,}[/bold] rows in "
        f"[bold]{description['row_groups']}[/bold] row group(s), "
        f"format {description['format_version']} ([dim]{description['created_by']}[/dim])"
    )

    columns = Table(title="Columns", box=box.SIMPLE)
    columns.add_column("Name", style="cyan", no_wrap=True)
    columns.add_column("Physical type", style="green")
    columns.add_column("Compression", style="yellow")
    columns.add_column("Encodings")
    columns.add_column("Stats", justify="center")
    for col in description["columns"]:
        columns.add_row(
            col["name"],
            col["type"],
            col["compression"],
            ", ".join(col["encodings"]),
            "yes" if col["has_statistics"] else "no",
        )
    console.print(columns)

    if sample.num_rows == 0:
        console.print("[yellow]No rows to display.[/yellow]")
        return

    rows = Table(title=f"First {sample.num_rows} row(s)", box=box.ROUNDED)
    for name in sample.column_names:
        rows.add_column(name, overflow="fold")
    for record in sample.to_pylist():
        rows.add_row(*(str(record[name]) for name in sample.column_names))
    console.print(rows)
