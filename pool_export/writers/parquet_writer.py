"""Typed Parquet writer for the pool export.

This is the storage boundary: pools plus the token map are projected into eight
typed columns and written as one Parquet file holding a single row group.

Row i of every column derives from pool i of the input; nothing is sorted,
dropped, or deduplicated. Mint symbols are looked up with a total function, so
an address missing from the token list becomes `UNKNOWN` instead of an error.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from pool_export.domain.models import PoolRecord
from pool_export.errors import IoError
from pool_export.sources.token_list import UNKNOWN_LABEL, TokenMap
from pool_export.utils.logging import get_logger

log = get_logger(__name__)

POOLS_SCHEMA = pa.schema(
    [
        pa.field("id", pa.string(), nullable=False),
        pa.field("program_id", pa.string(), nullable=False),
        pa.field("price", pa.float64(), nullable=False),
        pa.field("tvl", pa.float64(), nullable=False),
        pa.field("coin_mint", pa.string(), nullable=False),
        pa.field("pc_mint", pa.string(), nullable=False),
        pa.field("symbol_a", pa.string(), nullable=False),
        pa.field("symbol_b", pa.string(), nullable=False),
    ]
)

POOLS_COLUMNS: tuple[str, ...] = tuple(POOLS_SCHEMA.names)


@dataclass(frozen=True)
class ParquetWriteOptions:
    """
    Physical layout of the output file.
    """

    compression: str = "snappy"
    data_page_size: int = 1024 * 1024
    version: str = "2.6"
    data_page_version: str = "2.0"
    write_statistics: bool = True


@dataclass(frozen=True)
class ParquetWriteStats:
    path: str
    rows: int
    unknown_labels: int
    bytes_written: int


def project_columns(pools: Sequence[PoolRecord], token_map: TokenMap) -> Dict[str, List[Any]]:
    """
    Project pools into column lists keyed by schema field name, in schema order.
    """
    return {
        "id": [p.id for p in pools],
        "program_id": [p.program_id for p in pools],
        "price": [p.price for p in pools],
        "tvl": [p.tvl for p in pools],
        "coin_mint": [p.mint_a.address for p in pools],
        "pc_mint": [p.mint_b.address for p in pools],
        "symbol_a": [token_map.label_for(p.mint_a.address) for p in pools],
        "symbol_b": [token_map.label_for(p.mint_b.address) for p in pools],
    }


def build_table(pools: Sequence[PoolRecord], token_map: TokenMap) -> pa.Table:
    """Build the Arrow table for `pools` under POOLS_SCHEMA."""
    return pa.Table.from_pydict(project_columns(pools, token_map), schema=POOLS_SCHEMA)


def write_pools_parquet(
    pools: Sequence[PoolRecord],
    token_map: TokenMap,
    path: str | os.PathLike[str],
    options: ParquetWriteOptions | None = None,
) -> ParquetWriteStats:
    """
    Write all pools to `path` as one Parquet file with a single row group.

    The destination is truncated first. Every column is PLAIN encoded (no
    dictionary), compressed with one codec, and carries statistics. No
    key-value metadata is attached to the footer.

    Raises
    ------
    IoError
        If the file cannot be opened, written, or closed. A partially written
        file is left in place.
    """
    options = options or ParquetWriteOptions()
    table = build_table(pools, token_map)
    target = os.fspath(path)

    try:
        with open(target, "wb") as sink:
            writer = pq.ParquetWriter(
                sink,
                POOLS_SCHEMA,
                version=options.version,
                data_page_version=options.data_page_version,
                compression=options.compression,
                use_dictionary=False,
                column_encoding="PLAIN",
                write_statistics=options.write_statistics,
                data_page_size=options.data_page_size,
                store_schema=False,
            )
            try:
                writer.write_table(table, row_group_size=max(table.num_rows, 1))
            finally:
                writer.close()
            sink.flush()
        bytes_written = os.path.getsize(target)
    except OSError as exc:
        raise IoError(f"failed to write {target}: {exc}") from exc

    unknown = sum(
        1
        for column in ("symbol_a", "symbol_b")
        for label in table.column(column).to_pylist()
        if label == UNKNOWN_LABEL
    )
    stats = ParquetWriteStats(
        path=target,
        rows=table.num_rows,
        unknown_labels=unknown,
        bytes_written=bytes_written,
    )
    log.info(
        "Parquet file written",
        extra={"path": target, "rows": stats.rows, "bytes": bytes_written, "unknown_labels": unknown},
    )
    return stats


def read_pools_parquet(path: str | os.PathLike[str]) -> pa.Table:
    """Read a pools file back into an Arrow table."""
    try:
        return pq.read_table(os.fspath(path))
    except OSError as exc:
        raise IoError(f"failed to read {os.fspath(path)}: {exc}") from exc


def describe_parquet(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Summarize a written file's footer: rows, row groups, schema, and codecs.
    """
    try:
        metadata = pq.ParquetFile(os.fspath(path)).metadata
    except OSError as exc:
        raise IoError(f"failed to read {os.fspath(path)}: {exc}") from exc

    columns: List[Dict[str, Any]] = []
    if metadata.num_row_groups:
        row_group = metadata.row_group(0)
        for index in range(row_group.num_columns):
            chunk = row_group.column(index)
            columns.append(
                {
                    "name": chunk.path_in_schema,
                    "type": chunk.physical_type,
                    "compression": chunk.compression,
                    "encodings": list(chunk.encodings),
                    "has_statistics": chunk.is_stats_set,
                }
            )
    return {
        "rows": metadata.num_rows,
        "row_groups": metadata.num_row_groups,
        "format_version": metadata.format_version,
        "created_by": metadata.created_by,
        "columns": columns,
    }


__all__ = [
    "POOLS_COLUMNS",
    "POOLS_SCHEMA",
    "ParquetWriteOptions",
    "ParquetWriteStats",
    "build_table",
    "describe_parquet",
    "project_columns",
    "read_pools_parquet",
    "write_pools_parquet",
]
