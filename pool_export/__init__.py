"""
pool-export - Snapshot the Raydium pool listing into a single Parquet file.

This package retrieves every page of the pool listing API, labels each pool's
mints with symbols from the Solana token list, and writes the result as one
Parquet file with a fixed eight-column schema:

- Lazy, strictly sequential page cursor with explicit termination rules
- One-shot token list loader with a total address -> symbol lookup
- Single-row-group, PLAIN-encoded, snappy-compressed Parquet writer

Failures are never retried or salvaged; the first error aborts the run.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from pool_export.config import Settings, get_settings
from pool_export.errors import (
    DecodeError,
    IoError,
    PipelineError,
    TransportError,
    UpstreamError,
)
from pool_export.pipeline import PipelineResult, run_pipeline, run_pipeline_async
from pool_export.sources.pagination import PageCursor, iter_pool_pages
from pool_export.sources.token_list import UNKNOWN_LABEL, TokenMap, load_token_map
from pool_export.utils.logging import configure_logging, get_logger
from pool_export.writers.parquet_writer import (
    POOLS_SCHEMA,
    read_pools_parquet,
    write_pools_parquet,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "PipelineError",
    "TransportError",
    "DecodeError",
    "UpstreamError",
    "IoError",
    # Pipeline
    "PipelineResult",
    "run_pipeline",
    "run_pipeline_async",
    # Sources
    "PageCursor",
    "iter_pool_pages",
    "UNKNOWN_LABEL",
    "TokenMap",
    "load_token_map",
    # Writer
    "POOLS_SCHEMA",
    "read_pools_parquet",
    "write_pools_parquet",
    # Logging
    "configure_logging",
    "get_logger",
]
