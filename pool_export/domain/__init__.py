"""
Domain package for the pool export pipeline.

Exports the listing and token list response models used by the sources and the writer.
Keep this package focused on data definitions and validation concerns.
"""

from pool_export.domain.models import (
    MintInfo,
    PageData,
    PageEnvelope,
    PoolRecord,
    TokenEntry,
    TokenListBody,
)

__all__ = [
    "MintInfo",
    "PageData",
    "PageEnvelope",
    "PoolRecord",
    "TokenEntry",
    "TokenListBody",
]
