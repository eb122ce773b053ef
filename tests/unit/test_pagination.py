from __future__ import annotations

from typing import List

import httpx
import pytest

from conftest import BONK, LISTING_URL, SOL, USDC, FakePoolApi, make_page, make_pool
from pool_export.domain.models import PageEnvelope, PoolRecord
from pool_export.errors import DecodeError, TransportError, UpstreamError
from pool_export.infrastructure.http_client import open_http_client
from pool_export.sources.pagination import (
    ListingQuery,
    PageCursor,
    decode_page,
    iter_pool_pages,
    next_page_step,
)

PAGE_SIZE = 1000


def _envelope(pools: list, has_next_page: bool, success: bool = True) -> PageEnvelope:
    return PageEnvelope.model_validate(make_page(pools, has_next_page, success=success))


def _ids(batches: List[List[PoolRecord]]) -> List[List[str]]:
    return [[pool.id for pool in batch] for batch in batches]


async def _drain(api: FakePoolApi, test_settings) -> List[List[PoolRecord]]:
    batches: List[List[PoolRecord]] = []
    async with open_http_client(test_settings, transport=api.transport()) as client:
        async for batch in iter_pool_pages(client, LISTING_URL):
            batches.append(batch)
    return batches


def test_listing_query_params_use_fixed_filters_and_page_number():
    params = ListingQuery().params(3)
    assert params == {
        "poolType": "all",
        "poolSortField": "default",
        "sortType": "desc",
        "pageSize": str(PAGE_SIZE),
        "page": "3",
    }


def test_next_page_step_stops_without_yielding_on_empty_batch():
    step = next_page_step(4, _envelope([], has_next_page=True))
    assert step.batch is None
    assert step.done


def test_next_page_step_advances_by_one_when_more_pages_exist():
    step = next_page_step(2, _envelope([make_pool("p1", SOL, USDC)], has_next_page=True))
    assert [pool.id for pool in step.batch] == ["p1"]
    assert step.next_page == 3


def test_next_page_step_yields_last_batch_then_stops_on_flag():
    step = next_page_step(7, _envelope([make_pool("p1", SOL, USDC)], has_next_page=False))
    assert [pool.id for pool in step.batch] == ["p1"]
    assert step.done


def test_next_page_step_raises_upstream_error_on_reported_failure():
    with pytest.raises(UpstreamError, match="reported failure"):
        next_page_step(1, _envelope([make_pool("p1", SOL, USDC)], has_next_page=True, success=False))


def test_next_page_step_rejects_success_without_data():
    envelope = PageEnvelope.model_validate({"success": True})
    with pytest.raises(DecodeError):
        next_page_step(1, envelope)


def test_failure_envelope_without_data_still_decodes():
    envelope = decode_page({"id": "x", "success": False, "msg": "rate limited"}, page=1)
    with pytest.raises(UpstreamError, match="rate limited"):
        next_page_step(1, envelope)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"success": True, "data": {"data": "not-a-list", "hasNextPage": False}},
        {"success": True, "data": {"data": [], "hasNextPage": "maybe"}},
        make_page([{**make_pool("p1", SOL, USDC), "id": ""}], has_next_page=False),
        make_page([{**make_pool("p1", SOL, USDC), "programId": ""}], has_next_page=False),
        make_page([{k: v for k, v in make_pool("p1", SOL, USDC).items() if k != "mintB"}], False),
    ],
)
def test_decode_page_rejects_malformed_bodies(payload):
    with pytest.raises(DecodeError):
        decode_page(payload, page=1)


def test_decode_page_keeps_nan_and_negative_numbers():
    envelope = decode_page(
        make_page([make_pool("p1", SOL, USDC, price=float("nan"), tvl=-5.0)], False), page=1
    )
    pool = envelope.data.data[0]
    assert pool.price != pool.price
    assert pool.tvl == -5.0


def test_decode_page_carries_mint_extension_data_through():
    raw = make_pool("p1", SOL, USDC)
    raw["mintA"]["extensions"] = {"coingeckoId": "solana"}
    raw["mintA"]["freezeAuthority"] = None
    pool = decode_page(make_page([raw], False), page=1).data.data[0]
    assert pool.mint_a.extensions == {"coingeckoId": "solana"}
    assert pool.mint_a.model_extra == {"freezeAuthority": None}


@pytest.mark.parametrize("extensions", [None, ["x"], "raw", 7])
def test_decode_page_accepts_any_json_extension_payload(extensions):
    raw = make_pool("p1", SOL, USDC)
    raw["mintA"]["extensions"] = extensions
    raw["mintB"]["extensions"] = ["coingecko", {"id": "usd-coin"}]
    pool = decode_page(make_page([raw], False), page=1).data.data[0]
    assert pool.mint_a.extensions == extensions
    assert pool.mint_b.extensions == ["coingecko", {"id": "usd-coin"}]


@pytest.mark.asyncio
async def test_first_empty_page_ends_sequence_without_yielding_it(test_settings):
    api = FakePoolApi(
        [
            make_page([make_pool("p1", SOL, USDC)], has_next_page=True),
            make_page([make_pool("p2", BONK, SOL)], has_next_page=True),
            make_page([], has_next_page=True),
        ]
    )

    batches = await _drain(api, test_settings)

    assert _ids(batches) == [["p1"], ["p2"]]
    assert api.requested_pages == [1, 2, 3]


@pytest.mark.asyncio
async def test_false_continuation_flag_ends_after_yielding_that_page(test_settings):
    api = FakePoolApi(
        [
            make_page([make_pool("p1", SOL, USDC), make_pool("p2", BONK, SOL)], True),
            make_page([make_pool("p3", BONK, USDC)], has_next_page=False),
            make_page([make_pool("never", SOL, SOL)], has_next_page=False),
        ]
    )

    batches = await _drain(api, test_settings)

    assert _ids(batches) == [["p1", "p2"], ["p3"]]
    assert api.requested_pages == [1, 2]


@pytest.mark.asyncio
async def test_reported_failure_stops_sequence_after_earlier_pages(test_settings):
    api = FakePoolApi(
        [
            make_page([make_pool("p1", SOL, USDC)], has_next_page=True),
            make_page([make_pool("p2", SOL, USDC)], has_next_page=True, success=False),
            make_page([make_pool("p3", SOL, USDC)], has_next_page=False),
        ]
    )
    received: List[List[PoolRecord]] = []

    with pytest.raises(UpstreamError):
        async with open_http_client(test_settings, transport=api.transport()) as client:
            async for batch in iter_pool_pages(client, LISTING_URL):
                received.append(batch)

    assert _ids(received) == [["p1"]]
    assert api.requested_pages == [1, 2]


@pytest.mark.asyncio
async def test_non_2xx_status_raises_transport_error(test_settings):
    api = FakePoolApi(
        [
            make_page([make_pool("p1", SOL, USDC)], has_next_page=True),
            httpx.Response(502, text="bad gateway"),
        ]
    )

    with pytest.raises(TransportError, match="502"):
        await _drain(api, test_settings)
    assert api.requested_pages == [1, 2]


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with open_http_client(test_settings, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError, match="connection refused"):
            async for _ in iter_pool_pages(client, LISTING_URL):
                pass


@pytest.mark.asyncio
async def test_non_json_body_raises_decode_error(test_settings):
    api = FakePoolApi([httpx.Response(200, text="<html>maintenance</html>")])

    with pytest.raises(DecodeError):
        await _drain(api, test_settings)


@pytest.mark.asyncio
async def test_pages_are_requested_only_as_the_consumer_advances(test_settings):
    api = FakePoolApi(
        [
            make_page([make_pool("p1", SOL, USDC)], has_next_page=True),
            make_page([make_pool("p2", SOL, USDC)], has_next_page=False),
        ]
    )

    async with open_http_client(test_settings, transport=api.transport()) as client:
        pages = iter_pool_pages(client, LISTING_URL)
        first = await pages.__anext__()
        assert [pool.id for pool in first] == ["p1"]
        assert api.requested_pages == [1]

        second = await pages.__anext__()
        assert [pool.id for pool in second] == ["p2"]
        assert api.requested_pages == [1, 2]

        with pytest.raises(StopAsyncIteration):
            await pages.__anext__()


@pytest.mark.asyncio
async def test_cursor_reissues_requests_on_each_iteration(test_settings):
    api = FakePoolApi([make_page([make_pool("p1", SOL, USDC)], has_next_page=False)])

    async with open_http_client(test_settings, transport=api.transport()) as client:
        cursor = PageCursor(client, url=LISTING_URL, query=ListingQuery(page_size=50))
        first = [batch async for batch in cursor]
        second = [batch async for batch in cursor]

    assert _ids(first) == _ids(second) == [["p1"]]
    assert api.requested_pages == [1, 1]
    assert {r.url.params["pageSize"] for r in api.requests} == {"50"}


@pytest.mark.asyncio
async def test_cursor_sends_listing_query_parameters(test_settings):
    api = FakePoolApi([make_page([], has_next_page=False)])

    batches = await _drain(api, test_settings)

    assert batches == []
    request = api.requests[0]
    assert request.url.path == "/pools/info/list"
    assert dict(request.url.params) == {
        "poolType": "all",
        "poolSortField": "default",
        "sortType": "desc",
        "pageSize": "1000",
        "page": "1",
    }
