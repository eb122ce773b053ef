"""
Pipeline for exporting the pool listing to Parquet, profiling the run, and persisting a summary.

Usage (example from CLI):
    from pool_export.pipeline import run_pipeline

    result = run_pipeline(output_path="pools.parquet")
    print(result["rows"])

Stages run strictly in sequence: load the token list, drain the page cursor
into one in-memory list, then write the file once. Any failure aborts the run
and propagates; nothing fetched so far is written.

Summaries are saved to `summary_dir` when requested:
- `<summary_dir>/latest.json` (last run)
- `<summary_dir>/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, TypedDict

import httpx

from pool_export.config import Settings, get_settings
from pool_export.domain.models import PoolRecord
from pool_export.infrastructure.http_client import open_http_client
from pool_export.sources.pagination import ListingQuery, PageCursor
from pool_export.sources.token_list import TokenMap, load_token_map
from pool_export.utils.logging import get_logger
from pool_export.utils.profiler import ProfileStats, profile_block
from pool_export.writers.parquet_writer import (
    ParquetWriteOptions,
    ParquetWriteStats,
    write_pools_parquet,
)

log = get_logger(__name__)


class PipelineResult(TypedDict, total=False):
    """
    Summary of one export run.
    """

    output_path: str
    rows: int
    pages: int
    tokens: int
    unknown_labels: int
    bytes_written: int
    duration_seconds: float
    throughput_rows_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


@dataclass(frozen=True)
class PipelineInputs:
    """Everything the writer needs, fully retrieved."""

    pools: Tuple[PoolRecord, ...]
    token_map: TokenMap
    pages: int


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


async def collect_pools(cursor: PageCursor) -> Tuple[List[PoolRecord], int]:
    """
    Drain the cursor into one list, in page then within-page order.

    Returns the pools and the number of non-empty pages consumed.
    """
    pools: List[PoolRecord] = []
    pages = 0
    async for batch in cursor:
        pages += 1
        pools.extend(batch)
    log.info("Pool listing exhausted", extra={"pages": pages, "rows": len(pools)})
    return pools, pages


async def fetch_inputs(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PipelineInputs:
    """
    Load the token list and every pool page over one HTTP client.
    """
    settings = settings or get_settings()
    async with open_http_client(settings, transport=transport) as client:
        token_map = await load_token_map(client, settings.token_list_url)
        cursor = PageCursor(
            client, url=settings.listing_url, query=ListingQuery.from_settings(settings)
        )
        pools, pages = await collect_pools(cursor)
    return PipelineInputs(pools=tuple(pools), token_map=token_map, pages=pages)


def _write_options(settings: Settings) -> ParquetWriteOptions:
    return ParquetWriteOptions(
        compression=settings.parquet_compression,
        data_page_size=settings.parquet_data_page_size,
    )


def _merge_result(
    inputs: PipelineInputs, write_stats: ParquetWriteStats, stats: ProfileStats
) -> PipelineResult:
    """Merge retrieval counts, writer stats, and profiler stats into one summary."""
    duration = _round_float(stats.duration_seconds, 3)
    return PipelineResult(
        output_path=write_stats.path,
        rows=write_stats.rows,
        pages=inputs.pages,
        tokens=len(inputs.token_map),
        unknown_labels=write_stats.unknown_labels,
        bytes_written=write_stats.bytes_written,
        duration_seconds=duration,
        throughput_rows_per_sec=_round_float(write_stats.rows / stats.duration_seconds)
        if stats.duration_seconds
        else 0.0,
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent is not None else None,
    )


def _persist_summary(result: PipelineResult, summary_dir: Path) -> None:
    summary_dir.mkdir(parents=True, exist_ok=True)
    latest_path = summary_dir / "latest.json"
    now = datetime.now(timezone.utc)
    archive_path = summary_dir / f"run-{now.strftime('%Y%m%dT%H%M%SZ')}.json"

    payload = {"timestamp": now.isoformat(), "result": dict(result)}
    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Run summary persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


async def run_pipeline_async(
    output_path: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    summary_dir: Path | str | None = None,
) -> PipelineResult:
    """
    Async variant of `run_pipeline` for callers already inside an event loop.
    """
    settings = settings or get_settings()
    target = output_path or settings.output_path
    log.info("[EXPORT START]", extra={"listing_url": settings.listing_url, "output": target})

    with profile_block("pool-export") as stats:
        inputs = await fetch_inputs(settings, transport=transport)
        write_stats = write_pools_parquet(
            inputs.pools, inputs.token_map, target, options=_write_options(settings)
        )

    result = _merge_result(inputs, write_stats, stats)
    if summary_dir is not None:
        _persist_summary(result, Path(summary_dir))

    log.info(
        "[EXPORT COMPLETE]",
        extra={"rows": result["rows"], "pages": result["pages"], "duration": result["duration_seconds"]},
    )
    return result


def run_pipeline(
    output_path: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    summary_dir: Path | str | None = None,
) -> PipelineResult:
    """
    Run one full export: token list, every pool page, one Parquet write.

    Parameters
    ----------
    output_path : str | None
        Destination file. Defaults to settings.output_path.
    settings : Settings | None
        Effective configuration. Defaults to `get_settings()`.
    transport : httpx.AsyncBaseTransport | None
        HTTP transport override (tests).
    summary_dir : Path | str | None
        If given, the run summary is written there as JSON.

    Raises
    ------
    RuntimeError
        If called from inside a running event loop; use `run_pipeline_async`.
    PipelineError
        Any transport, decode, upstream, or I/O failure, unchanged.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(
            run_pipeline_async(
                output_path=output_path,
                settings=settings,
                transport=transport,
                summary_dir=summary_dir,
            )
        )
    raise RuntimeError(
        "run_pipeline() cannot be called from an async context; await run_pipeline_async() instead"
    )


__all__ = [
    "PipelineInputs",
    "PipelineResult",
    "collect_pools",
    "fetch_inputs",
    "run_pipeline",
    "run_pipeline_async",
]
