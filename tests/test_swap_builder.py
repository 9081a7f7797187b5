"""
Tests for swap preparation via the route finder and its placeholder fallback.
"""

import httpx
import pytest

from mcp_aura.core.errors import SwapBuildError
from mcp_aura.core.execution.swap_builder import (
    PLACEHOLDER_SWAP_CALLDATA,
    SwapParams,
    slippage_to_bps,
)
from mcp_aura.core.networks import NATIVE_PLACEHOLDER
from mcp_aura.providers.relay import RelayProvider, extract_transactions

from fakes import (
    ALICE,
    UNISWAP_ROUTER,
    USDC_ETHEREUM,
    FakeRouteFinder,
    FakeRpc,
    erc20_metadata,
    make_service,
    relay_quote,
)

RELAY_ROUTER = "0xa5F565650890fBA1824Ee0F21EbBbF660a179934"


def _rpc_with_usdc() -> FakeRpc:
    return FakeRpc(contract_calls=erc20_metadata(USDC_ETHEREUM, 6, "USDC", "USD Coin"))


@pytest.mark.parametrize("slippage,expected", [
    (None, 50),
    ("0.5", 50),
    ("1", 100),
    ("1.239", 123),
    (0.3, 30),
])
def test_slippage_to_bps(slippage, expected):
    assert slippage_to_bps(slippage) == expected


def test_slippage_rejects_garbage():
    with pytest.raises(SwapBuildError):
        slippage_to_bps("lots")


@pytest.mark.asyncio
async def test_route_found_uses_last_step_call():
    route_finder = FakeRouteFinder(quote=relay_quote(RELAY_ROUTER, "0xdeadbeef", value="500000000000000000"))
    service = make_service(rpc=_rpc_with_usdc(), route_finder=route_finder)

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="ETH", token_out="USDC", amount_in="0.5", recipient=ALICE, slippage="1",
    ))

    assert not outcome.degraded
    assert outcome.value.to == RELAY_ROUTER
    assert outcome.value.data == "0xdeadbeef"
    assert outcome.value.value == "500000000000000000"

    payload = route_finder.payloads[0]
    assert payload["originChainId"] == 1
    assert payload["destinationChainId"] == 1
    assert payload["originCurrency"] == NATIVE_PLACEHOLDER
    assert payload["destinationCurrency"] == USDC_ETHEREUM
    assert payload["amount"] == "500000000000000000"
    assert payload["tradeType"] == "EXACT_INPUT"
    assert payload["slippageTolerance"] == "100"
    assert payload["user"] == ALICE


@pytest.mark.asyncio
async def test_erc20_input_route_carries_no_value():
    quote = relay_quote(RELAY_ROUTER, "0xfeed", value="123", with_approval=True)
    service = make_service(rpc=_rpc_with_usdc(), route_finder=FakeRouteFinder(quote=quote))

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="USDC", token_out="ETH", amount_in="25", recipient=ALICE,
    ))

    assert outcome.value.to == RELAY_ROUTER
    assert outcome.value.data == "0xfeed"
    assert outcome.value.value == "0"
    assert outcome.degraded
    assert "1 earlier transaction(s)" in outcome.reason


@pytest.mark.asyncio
async def test_route_finder_failure_returns_placeholder():
    route_finder = FakeRouteFinder(error=httpx.ConnectError("connection refused"))
    service = make_service(rpc=_rpc_with_usdc(), route_finder=route_finder)

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="ETH", token_out="USDC", amount_in="1", recipient=ALICE,
    ))

    assert outcome.degraded
    assert "route finder failed" in outcome.reason
    assert outcome.value.to == UNISWAP_ROUTER
    assert outcome.value.data == PLACEHOLDER_SWAP_CALLDATA
    assert len(PLACEHOLDER_SWAP_CALLDATA) == 10 + 640
    assert outcome.value.value == str(10**18)


@pytest.mark.asyncio
async def test_empty_quote_with_erc20_input_returns_zero_value_placeholder():
    service = make_service(rpc=_rpc_with_usdc(), route_finder=FakeRouteFinder(quote={"steps": []}))

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="USDC", token_out="WETH", amount_in="10", recipient=ALICE,
    ))

    assert outcome.degraded
    assert outcome.reason.startswith("route finder returned no call parameters")
    assert outcome.value.value == "0"


@pytest.mark.asyncio
async def test_metadata_fallback_is_reported():
    quote = relay_quote(RELAY_ROUTER, "0xfeed")
    service = make_service(rpc=FakeRpc(), route_finder=FakeRouteFinder(quote=quote))

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="USDC", token_out="ETH", amount_in="10", recipient=ALICE,
    ))

    assert outcome.degraded
    assert "token metadata unavailable" in outcome.reason
    assert outcome.value.to == RELAY_ROUTER


@pytest.mark.asyncio
async def test_unknown_token_fails():
    service = make_service(rpc=_rpc_with_usdc())

    with pytest.raises(SwapBuildError) as exc_info:
        await service.swaps.build_swap(SwapParams(
            token_in="DOGE", token_out="USDC", amount_in="1", recipient=ALICE,
        ))
    assert "DOGE" in exc_info.value.message


@pytest.mark.asyncio
async def test_amount_beyond_token_precision_fails():
    service = make_service(rpc=_rpc_with_usdc())

    with pytest.raises(SwapBuildError):
        await service.swaps.build_swap(SwapParams(
            token_in="USDC", token_out="ETH", amount_in="1.1234567", recipient=ALICE,
        ))


@pytest.mark.parametrize("quote", [
    {"steps": ["oops"]},
    {"steps": [{"id": "swap", "items": "oops"}]},
    {"steps": [{"id": "swap", "items": [None, "oops", {"data": "0x"}]}]},
    {"steps": {"id": "swap"}},
    [{"steps": []}],
    "not a quote",
    None,
])
def test_extract_transactions_skips_malformed_shapes(quote):
    assert extract_transactions(quote) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"steps": ["oops"]},
    {"steps": [{"items": [{"data": {"to": 7, "data": ["0x"]}}]}]},
    ["unexpected", "list"],
])
async def test_malformed_route_body_returns_placeholder(body):
    relay = RelayProvider(
        base_url="https://relay.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body)),
    )
    service = make_service(rpc=_rpc_with_usdc(), route_finder=relay)

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="ETH", token_out="WETH", amount_in="1", recipient=ALICE,
    ))

    assert outcome.degraded
    assert outcome.reason.startswith("route finder returned no call parameters")
    assert outcome.value.to == UNISWAP_ROUTER
    assert outcome.value.data == PLACEHOLDER_SWAP_CALLDATA


@pytest.mark.asyncio
async def test_non_json_route_body_returns_placeholder():
    relay = RelayProvider(
        base_url="https://relay.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
    )
    service = make_service(rpc=_rpc_with_usdc(), route_finder=relay)

    outcome = await service.swaps.build_swap(SwapParams(
        token_in="ETH", token_out="USDC", amount_in="1", recipient=ALICE,
    ))

    assert outcome.degraded
    assert "route finder failed" in outcome.reason
