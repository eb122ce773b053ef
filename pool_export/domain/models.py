"""
Domain models for the pool export pipeline.

Mirrors the JSON shapes returned by the pool listing API. Only the fields the
export projects into columns are typed strictly; the descriptive mint fields
are carried through as-is so the source payload survives decoding untouched.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MintInfo(BaseModel):
    """
    One side (A or B) of a pool's token pair.
    """

    address: str = Field(..., description="Mint address; join key into the token map.")
    symbol: Optional[str] = None
    name: Optional[str] = None
    decimals: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    logo_uri: Optional[str] = Field(None, alias="logoURI")
    chain_id: Optional[int] = Field(None, alias="chainId")
    program_id: Optional[str] = Field(None, alias="programId")
    extensions: Any = Field(default_factory=dict, description="Opaque pass-through payload.")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class PoolRecord(BaseModel):
    """
    A single listed pool. Price and TVL are passed through without range checks.
    """

    id: str = Field(..., min_length=1, description="Pool identifier.")
    program_id: str = Field(..., min_length=1, alias="programId")
    mint_a: MintInfo = Field(..., alias="mintA")
    mint_b: MintInfo = Field(..., alias="mintB")
    price: float
    tvl: float

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class TokenEntry(BaseModel):
    """
    One entry of the token list. Only the join key and the label are required.
    """

    address: str
    symbol: str

    model_config = ConfigDict(frozen=True, extra="allow")


class TokenListBody(BaseModel):
    tokens: List[TokenEntry]

    model_config = ConfigDict(extra="ignore")


class PageData(BaseModel):
    data: List[PoolRecord]
    has_next_page: bool = Field(..., alias="hasNextPage")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PageEnvelope(BaseModel):
    """
    Decoded body of one listing page: `{success, data: {data, hasNextPage}}`.
    """

    success: bool
    data: Optional[PageData] = None
    msg: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


__all__ = ["MintInfo", "PoolRecord", "TokenEntry", "TokenListBody", "PageData", "PageEnvelope"]
