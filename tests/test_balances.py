"""
Tests for balance reads and transfer sufficiency checks.
"""

import pytest

from mcp_aura.core.errors import RpcError
from mcp_aura.core.execution.balances import BalanceChecker
from mcp_aura.core.networks import NATIVE_PLACEHOLDER

from fakes import ALICE, ETHER, GWEI, USDC_ETHEREUM, FakeRpc, erc20_balance, node_responses


@pytest.mark.asyncio
async def test_native_transfer_with_room_for_gas():
    checker = BalanceChecker(FakeRpc(node_responses(eth_getBalance=hex(2 * ETHER))))

    check = await checker.check_transfer_feasibility(
        NATIVE_PLACEHOLDER, 18, "1", ALICE, estimated_fee_wei=21_000 * 30 * GWEI,
    )

    assert check.sufficient
    assert check.remaining == ETHER


@pytest.mark.asyncio
async def test_native_transfer_of_whole_balance_lacks_gas():
    checker = BalanceChecker(FakeRpc(node_responses(eth_getBalance=hex(ETHER))))
    fee = 21_000 * 30 * GWEI

    check = await checker.check_transfer_feasibility(NATIVE_PLACEHOLDER, 18, "1", ALICE, estimated_fee_wei=fee)

    assert check.has_token_balance
    assert not check.has_gas
    assert check.gas_shortfall == fee


@pytest.mark.asyncio
async def test_erc20_shortfall():
    rpc = FakeRpc(contract_calls=erc20_balance(USDC_ETHEREUM, 5_000_000))
    check = await BalanceChecker(rpc).check_transfer_feasibility(USDC_ETHEREUM, 6, "10", ALICE)

    assert not check.sufficient
    assert check.shortfall == 5_000_000
    assert check.token_balance == 5_000_000


@pytest.mark.asyncio
async def test_erc20_transfer_checks_native_gas_separately():
    rpc = FakeRpc(
        node_responses(eth_getBalance=hex(10**12)),
        contract_calls=erc20_balance(USDC_ETHEREUM, 50_000_000),
    )
    check = await BalanceChecker(rpc).check_transfer_feasibility(
        USDC_ETHEREUM, 6, "10", ALICE, estimated_fee_wei=65_000 * 30 * GWEI,
    )

    assert check.has_token_balance
    assert not check.has_gas
    assert check.native_balance == 10**12


@pytest.mark.asyncio
async def test_balance_of_without_return_data_is_rpc_error():
    rpc = FakeRpc(contract_calls={(USDC_ETHEREUM.lower(), "0x70a08231"): "0x"})

    with pytest.raises(RpcError):
        await BalanceChecker(rpc).get_token_balance(USDC_ETHEREUM, ALICE)
