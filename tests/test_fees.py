"""
Tests for gas and fee estimation.
"""

from decimal import Decimal

import httpx
import pytest

from mcp_aura.core.errors import RpcError
from mcp_aura.core.execution.fees import FeeEstimator
from mcp_aura.core.execution.models import TransactionRequest
from mcp_aura.providers.rpc import JsonRpcClient

from fakes import ALICE, BOB, GWEI, FakeRpc, node_responses


def _transfer_tx() -> TransactionRequest:
    return TransactionRequest(to=BOB, data="0x", value=str(10**17))


@pytest.mark.asyncio
async def test_eip1559_fees_use_doubled_base_fee_plus_tip():
    estimator = FeeEstimator(FakeRpc(), usd_rate=Decimal("2500"))

    outcome = await estimator.estimate_fees(_transfer_tx())

    fees = outcome.value
    assert not outcome.degraded
    assert fees.gas_limit == 21_000
    assert fees.gas_price == 30 * GWEI
    assert fees.max_priority_fee_per_gas == 1_500_000_000
    assert fees.max_fee_per_gas == 21_500_000_000
    assert fees.total_fee_native == "0.0004515"
    assert fees.total_fee_usd == "1.13"


@pytest.mark.asyncio
async def test_legacy_chain_prices_with_gas_price():
    rpc = FakeRpc(node_responses(eth_getBlockByNumber={"number": hex(5)}))
    estimator = FeeEstimator(rpc, usd_rate=Decimal("2500"))

    outcome = await estimator.estimate_fees(_transfer_tx())

    assert outcome.value.max_fee_per_gas is None
    assert outcome.value.total_fee_native == "0.00063"
    assert outcome.value.total_fee_usd == "1.58"
    assert "maxFeePerGas" not in outcome.value.to_dict()


@pytest.mark.asyncio
async def test_estimate_sends_hex_value_and_sender():
    rpc = FakeRpc()
    await FeeEstimator(rpc).estimate_fees(_transfer_tx(), from_address=ALICE)

    method, params = rpc.requests[0]
    assert method == "eth_estimateGas"
    assert params[0] == {"to": BOB, "data": "0x", "value": hex(10**17), "from": ALICE}


@pytest.mark.asyncio
async def test_estimation_failure_uses_fallback():
    rpc = FakeRpc(node_responses(eth_estimateGas=RpcError("RPC error on eth_estimateGas: execution reverted")))
    estimator = FeeEstimator(rpc, usd_rate=Decimal("2500"))

    outcome = await estimator.estimate_fees(_transfer_tx())

    assert outcome.degraded
    assert outcome.reason.startswith("gas estimation failed")
    assert outcome.value.to_dict() == {
        "gasLimit": "200000",
        "gasPrice": "20000000000",
        "totalFeeInNative": "0.004",
        "totalFeeInUSD": "10.00",
    }


@pytest.mark.asyncio
async def test_fee_data_failure_after_estimate_uses_fallback():
    rpc = FakeRpc({"eth_estimateGas": hex(50_000)})
    outcome = await FeeEstimator(rpc, usd_rate=Decimal("2500")).estimate_fees(_transfer_tx())

    assert outcome.degraded
    assert outcome.value.gas_limit == 200_000


@pytest.mark.asyncio
async def test_estimate_for_known_gas_limit():
    rpc = FakeRpc({})
    outcome = await FeeEstimator(rpc, usd_rate=Decimal("2500")).estimate_for_gas_limit(65_000)

    assert outcome.degraded
    assert outcome.value.gas_limit == 65_000
    assert outcome.value.gas_price == 20 * GWEI
    assert outcome.value.total_fee_native == "0.0013"
    assert outcome.value.total_fee_usd == "3.25"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[], "ok", 42])
async def test_non_object_node_response_uses_fallback(body):
    rpc = JsonRpcClient(
        "https://node.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body)),
    )

    outcome = await FeeEstimator(rpc, usd_rate=Decimal("2500")).estimate_fees(_transfer_tx())

    assert outcome.degraded
    assert "non-object response" in outcome.reason
    assert outcome.value.gas_limit == 200_000
    assert outcome.value.gas_price == 20 * GWEI


@pytest.mark.asyncio
@pytest.mark.parametrize("block", [
    ["not", "a", "block"],
    {"number": hex(100), "baseFeePerGas": "0xzz"},
    {"number": hex(100), "baseFeePerGas": 7},
])
async def test_malformed_block_uses_fallback(block):
    rpc = FakeRpc(node_responses(eth_getBlockByNumber=block))

    outcome = await FeeEstimator(rpc, usd_rate=Decimal("2500")).estimate_fees(_transfer_tx())

    assert outcome.degraded
    assert outcome.value.total_fee_native == "0.004"
    assert outcome.value.total_fee_usd == "10.00"
