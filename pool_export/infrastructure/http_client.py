"""
HTTP client factory utilities for the pool export pipeline.

Provides one place to build the `httpx.AsyncClient` used for a run and a single
request helper that turns transport and status failures into `TransportError`
and unparseable bodies into `DecodeError`.

Requests are never retried: the first failure aborts the run.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from pool_export.config import Settings, get_settings
from pool_export.errors import DecodeError, TransportError
from pool_export.utils.logging import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def open_http_client(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Open an async HTTP client configured from settings.

    Parameters
    ----------
    settings : Settings | None
        Source of timeout and user agent. Defaults to `get_settings()`.
    transport : httpx.AsyncBaseTransport | None
        Override the transport (tests pass an `httpx.MockTransport`).

    Example
    -------
        async with open_http_client() as client:
            payload = await get_json(client, url)
    """
    settings = settings or get_settings()
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        transport=transport,
    )
    try:
        yield client
    finally:
        await client.aclose()


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Mapping[str, Any]] = None,
) -> Any:
    """
    Issue one GET and return the decoded JSON body.

    Raises
    ------
    TransportError
        If the request fails at the network level or the status is not 2xx.
    DecodeError
        If the body is not valid JSON.
    """
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise TransportError(
            f"GET {exc.request.url} returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"GET {url} failed: {exc}") from exc

    log.debug(
        "HTTP response received",
        extra={"url": str(response.url), "status": response.status_code, "bytes": len(response.content)},
    )

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"GET {response.url} returned a body that is not JSON: {exc}") from exc


__all__ = ["open_http_client", "get_json"]
