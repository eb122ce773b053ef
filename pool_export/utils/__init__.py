"""
Utilities package for the pool export pipeline.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of domain-specific logic.
"""

from pool_export.utils.logging import configure_logging, get_logger
from pool_export.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
