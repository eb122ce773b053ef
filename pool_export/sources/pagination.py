"""
Page-numbered cursor over the pool listing endpoint.

Intent:
- Turn a multi-page HTTP listing into one lazy sequence of record batches.
- Keep the termination policy in a single pure step function so it can be
  tested without a network.
- Fetch strictly sequentially: page N+1 is requested only after page N's batch
  has been handed to the consumer.

Termination, checked in order for each decoded page:
1. `success` is false -> `UpstreamError`.
2. The batch is empty -> stop; nothing is yielded for this page.
3. The batch is yielded; if `hasNextPage` is false, stop after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from pydantic import ValidationError

from pool_export.config import Settings, get_settings
from pool_export.domain.models import PageEnvelope, PoolRecord
from pool_export.errors import DecodeError, UpstreamError
from pool_export.infrastructure.http_client import get_json
from pool_export.utils.logging import get_logger

log = get_logger(__name__)

FIRST_PAGE = 1


@dataclass(frozen=True)
class ListingQuery:
    """Fixed query parameters sent with every page request."""

    pool_type: str = "all"
    pool_sort_field: str = "default"
    sort_type: str = "desc"
    page_size: int = 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListingQuery":
        return cls(
            pool_type=settings.pool_type,
            pool_sort_field=settings.pool_sort_field,
            sort_type=settings.sort_type,
            page_size=settings.page_size,
        )

    def params(self, page: int) -> Dict[str, str]:
        return {
            "poolType": self.pool_type,
            "poolSortField": self.pool_sort_field,
            "sortType": self.sort_type,
            "pageSize": str(self.page_size),
            "page": str(page),
        }


@dataclass(frozen=True)
class PageStep:
    """
    Outcome of one page.

    `batch` is None when nothing should be yielded; `next_page` is None when the
    sequence ends after this step.
    """

    batch: Optional[List[PoolRecord]]
    next_page: Optional[int]

    @property
    def done(self) -> bool:
        return self.next_page is None


def decode_page(payload: Any, page: int) -> PageEnvelope:
    """Validate a decoded JSON body against the page envelope shape."""
    try:
        return PageEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"page {page}: unexpected listing response shape: {exc}") from exc


def next_page_step(page: int, envelope: PageEnvelope) -> PageStep:
    """
    Decide what page `page` contributes and whether to continue.

    Raises
    ------
    UpstreamError
        If the envelope reports `success=false`.
    DecodeError
        If a successful envelope carries no `data` object.
    """
    if not envelope.success:
        detail = f": {envelope.msg}" if envelope.msg else ""
        raise UpstreamError(f"pool listing reported failure on page {page}{detail}")
    if envelope.data is None:
        raise DecodeError(f"page {page}: successful response without a data object")

    batch = envelope.data.data
    if not batch:
        return PageStep(batch=None, next_page=None)
    if not envelope.data.has_next_page:
        return PageStep(batch=batch, next_page=None)
    return PageStep(batch=batch, next_page=page + 1)


async def iter_pool_pages(
    client: httpx.AsyncClient,
    url: str,
    query: Optional[ListingQuery] = None,
) -> AsyncIterator[List[PoolRecord]]:
    """
    Yield each non-empty page of pools, in page order.

    Every iteration re-issues the requests from page 1; nothing is cached.
    Any failure propagates immediately and ends the sequence.
    """
    query = query or ListingQuery()
    page: Optional[int] = FIRST_PAGE
    while page is not None:
        payload = await get_json(client, url, params=query.params(page))
        envelope = decode_page(payload, page)
        step = next_page_step(page, envelope)
        log.info(
            f"Fetched page {page}",
            extra={
                "page": page,
                "records": len(step.batch) if step.batch else 0,
                "has_next_page": envelope.data.has_next_page if envelope.data else False,
            },
        )
        if step.batch is not None:
            yield step.batch
        page = step.next_page


class PageCursor:
    """
    Async-iterable view of the pool listing.

    Example
    -------
        async with open_http_client() as client:
            async for batch in PageCursor(client):
                pools.extend(batch)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: Optional[str] = None,
        query: Optional[ListingQuery] = None,
    ) -> None:
        self._client = client
        self.url = url or get_settings().listing_url
        self.query = query or ListingQuery.from_settings(get_settings())

    def __aiter__(self) -> AsyncIterator[List[PoolRecord]]:
        return iter_pool_pages(self._client, self.url, self.query)


__all__ = [
    "FIRST_PAGE",
    "ListingQuery",
    "PageCursor",
    "PageStep",
    "decode_page",
    "iter_pool_pages",
    "next_page_step",
]
