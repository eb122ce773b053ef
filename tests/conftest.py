"""
Pytest configuration for the pool export pipeline.

Provides fixtures for:
- Settings pointing at fake endpoints
- A fake listing/token-list API served through `httpx.MockTransport`
- Payload builders for pools, mints, pages, and token lists
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import httpx
import pytest

from pool_export.config import Settings, get_settings

LISTING_URL = "https://pools.test/pools/info/list"
TOKEN_LIST_URL = "https://tokens.test/solana.tokenlist.json"
PROGRAM_ID = "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SOL = "So11111111111111111111111111111111111111112"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def make_mint(address: str, symbol: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    mint: Dict[str, Any] = {
        "chainId": 101,
        "address": address,
        "programId": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
        "logoURI": "",
        "symbol": symbol or "",
        "name": symbol or "",
        "decimals": 6,
        "tags": [],
        "extensions": {},
    }
    mint.update(extra)
    return mint


def make_pool(
    pool_id: str,
    mint_a: str,
    mint_b: str,
    price: float = 1.0,
    tvl: float = 1_000.0,
    program_id: str = PROGRAM_ID,
) -> Dict[str, Any]:
    return {
        "type": "Concentrated",
        "programId": program_id,
        "id": pool_id,
        "mintA": make_mint(mint_a),
        "mintB": make_mint(mint_b),
        "price": price,
        "mintAmountA": 10.5,
        "mintAmountB": 20.25,
        "feeRate": 0.0025,
        "tvl": tvl,
    }


def make_page(
    pools: Sequence[Dict[str, Any]], has_next_page: bool, success: bool = True
) -> Dict[str, Any]:
    return {
        "id": "req-id",
        "success": success,
        "data": {"count": len(pools), "data": list(pools), "hasNextPage": has_next_page},
    }


def make_token_list(symbols: Dict[str, str]) -> Dict[str, Any]:
    return {
        "name": "Solana Token List",
        "tokens": [
            {"chainId": 101, "address": address, "symbol": symbol, "name": symbol, "decimals": 9}
            for address, symbol in symbols.items()
        ],
    }


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    """JSON response encoded with the standard library so NaN survives."""
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"content-type": "application/json"},
    )


Served = Union[Dict[str, Any], httpx.Response]


class FakePoolApi:
    """
    In-memory stand-in for the listing and token list endpoints.

    `pages[i]` answers `page=i+1`; asking for a page beyond the list fails the
    test, which catches cursors that fetch past their stop condition.
    """

    def __init__(self, pages: Sequence[Served], tokens: Optional[Served] = None) -> None:
        self.pages = list(pages)
        self.tokens = tokens if tokens is not None else make_token_list({})
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "tokens.test":
            return self._serve(self.tokens)
        page = int(request.url.params["page"])
        if page < 1 or page > len(self.pages):
            raise AssertionError(f"unexpected request for page {page}")
        return self._serve(self.pages[page - 1])

    @staticmethod
    def _serve(item: Served) -> httpx.Response:
        if isinstance(item, httpx.Response):
            return item
        return json_response(item)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def requested_pages(self) -> List[int]:
        return [
            int(r.url.params["page"]) for r in self.requests if r.url.host == "pools.test"
        ]


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def test_settings() -> Settings:
    """
    Settings fixture pointing both endpoints at the fake API hosts.
    """
    return Settings(
        listing_url=LISTING_URL,
        token_list_url=TOKEN_LIST_URL,
        request_timeout_seconds=5.0,
        log_level="DEBUG",
    )
