"""
Token list loader: address -> symbol lookup used to label pool mints.

The whole list is fetched with one request and materialized before encoding.
A single malformed entry fails the load; entries are never skipped.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional

import httpx
from pydantic import ValidationError

from pool_export.config import get_settings
from pool_export.domain.models import TokenListBody
from pool_export.errors import DecodeError
from pool_export.infrastructure.http_client import get_json
from pool_export.utils.logging import get_logger

log = get_logger(__name__)

UNKNOWN_LABEL = "UNKNOWN"


class TokenMap(Mapping[str, str]):
    """
    Read-only address -> symbol mapping.

    `label_for` is total: addresses missing from the list resolve to
    `UNKNOWN_LABEL` instead of raising.
    """

    def __init__(self, symbols: Optional[Mapping[str, str]] = None) -> None:
        self._symbols: Dict[str, str] = dict(symbols or {})

    def __getitem__(self, address: str) -> str:
        return self._symbols[address]

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"TokenMap({len(self._symbols)} tokens)"

    def label_for(self, address: str) -> str:
        return self._symbols.get(address, UNKNOWN_LABEL)


def parse_token_list(payload: Any) -> TokenMap:
    """
    Build a TokenMap from a decoded token list body.

    Duplicate addresses keep the last symbol seen.

    Raises
    ------
    DecodeError
        If `tokens` is not an array or any entry lacks a string `address` or `symbol`.
    """
    try:
        body = TokenListBody.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"unexpected token list response shape: {exc}") from exc

    symbols: Dict[str, str] = {}
    for token in body.tokens:
        symbols[token.address] = token.symbol
    return TokenMap(symbols)


async def load_token_map(client: httpx.AsyncClient, url: Optional[str] = None) -> TokenMap:
    """Fetch the token list once and return it as a TokenMap."""
    url = url or get_settings().token_list_url
    payload = await get_json(client, url)
    token_map = parse_token_list(payload)
    log.info("Token list loaded", extra={"tokens": len(token_map)})
    return token_map


__all__ = ["UNKNOWN_LABEL", "TokenMap", "load_token_map", "parse_token_list"]
