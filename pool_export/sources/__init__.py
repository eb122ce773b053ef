"""
Sources package for the pool export pipeline.

Re-exports the remote readers so downstream code can import from
`pool_export.sources` directly.
"""

from pool_export.sources.pagination import (
    ListingQuery,
    PageCursor,
    PageStep,
    iter_pool_pages,
    next_page_step,
)
from pool_export.sources.token_list import UNKNOWN_LABEL, TokenMap, load_token_map

__all__ = [
    # Pool listing
    "ListingQuery",
    "PageCursor",
    "PageStep",
    "iter_pool_pages",
    "next_page_step",
    # Token list
    "UNKNOWN_LABEL",
    "TokenMap",
    "load_token_map",
]
