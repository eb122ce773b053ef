"""
Writers package for the pool export pipeline.

Holds the columnar output boundary (schema, projection, Parquet layout).
"""

from pool_export.writers.parquet_writer import (
    POOLS_SCHEMA,
    ParquetWriteOptions,
    ParquetWriteStats,
    describe_parquet,
    project_columns,
    read_pools_parquet,
    write_pools_parquet,
)

__all__ = [
    "POOLS_SCHEMA",
    "ParquetWriteOptions",
    "ParquetWriteStats",
    "describe_parquet",
    "project_columns",
    "read_pools_parquet",
    "write_pools_parquet",
]
