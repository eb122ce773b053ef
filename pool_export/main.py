from __future__ import annotations

import sys
from typing import Optional

import typer

from pool_export.config import get_settings
from pool_export.errors import PipelineError
from pool_export.pipeline import run_pipeline
from pool_export.reporter import print_preview, print_summary
from pool_export.utils.logging import configure_logging, get_logger
from pool_export.writers.parquet_writer import describe_parquet, read_pools_parquet

app = typer.Typer(help="Export the Raydium pool listing to a Parquet file.")

log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"listing={settings.listing_url} | tokens={settings.token_list_url}\n"
        f"poolType={settings.pool_type} sort={settings.pool_sort_field}/{settings.sort_type} "
        f"pageSize={settings.page_size} timeout={settings.request_timeout_seconds}s\n"
        f"output={settings.output_path} compression={settings.parquet_compression} "
        f"pageBytes={settings.parquet_data_page_size}"
    )


@app.command()
def run(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Destination Parquet file (default from settings).",
    ),
    summary_dir: Optional[str] = typer.Option(
        None,
        "--summary-dir",
        help="Directory to persist the run summary as JSON.",
    ),
    no_summary: bool = typer.Option(
        False,
        "--no-summary",
        help="Skip persisting and printing the run summary.",
    ),
) -> None:
    """
    Fetch every pool page and the token list, then write one Parquet file.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    try:
        result = run_pipeline(
            output_path=output,
            settings=settings,
            summary_dir=None if no_summary else summary_dir,
        )
    except PipelineError as exc:
        log.error("[EXPORT FAILED] %s", exc, extra={"error_type": type(exc).__name__})
        typer.echo(f"Export failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not no_summary:
        print_summary(result)


@app.command()
def inspect(
    path: str = typer.Argument(..., help="Parquet file written by `run`."),
    limit: int = typer.Option(5, "--limit", "-n", min=0, help="Number of rows to show."),
) -> None:
    """
    Show the footer summary and the first rows of an exported file.
    """
    try:
        description = describe_parquet(path)
        table = read_pools_parquet(path)
    except PipelineError as exc:
        typer.echo(f"Inspect failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    print_preview(description, table.slice(0, limit))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
