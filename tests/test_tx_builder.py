"""
Tests for transfer, bridge and stake builders plus risk classification.
"""

import pytest

from mcp_aura.core.errors import InvalidAmountError, UnsupportedPlatformError
from mcp_aura.core.execution.abi import encode_transfer
from mcp_aura.core.execution.tx_builder import (
    STAKING_CONTRACTS,
    STARGATE_ROUTER_ADDRESS,
    TransactionBuilder,
    generate_id,
)
from mcp_aura.core.networks import NATIVE_PLACEHOLDER
from mcp_aura.core.risk import assess_risk
from mcp_aura.core.tokens import TokenMetadata

from fakes import BOB, USDC_ETHEREUM

WETH = TokenMetadata(address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", symbol="WETH", decimals=18, name="Wrapped Ether")
USDC = TokenMetadata(address=USDC_ETHEREUM, symbol="USDC", decimals=6, name="USD Coin")


class TestTransfers:
    def test_native_transfer_sends_value(self):
        tx = TransactionBuilder.build_transfer(WETH, NATIVE_PLACEHOLDER, BOB, "0.25")

        assert tx.to == BOB
        assert tx.data == "0x"
        assert tx.value == str(25 * 10**16)

    def test_erc20_transfer_encodes_calldata(self):
        tx = TransactionBuilder.build_transfer(USDC, USDC_ETHEREUM, BOB, "25.5")

        assert tx.to == USDC_ETHEREUM
        assert tx.value == "0"
        assert tx.data == encode_transfer(BOB, 25_500_000)

    def test_transfer_rejects_bad_amount(self):
        with pytest.raises(InvalidAmountError):
            TransactionBuilder.build_transfer(USDC, USDC_ETHEREUM, BOB, "0.0000001")


class TestStubs:
    def test_bridge_is_degraded_stub(self):
        outcome = TransactionBuilder.build_bridge("Stargate")

        assert outcome.degraded
        assert outcome.reason.startswith("stub")
        assert outcome.value.to == STARGATE_ROUTER_ADDRESS

    def test_stake_known_platform_case_insensitive(self):
        outcome = TransactionBuilder.build_stake("AAVE")

        assert outcome.degraded
        assert outcome.value.to == STAKING_CONTRACTS["aave"]

    def test_stake_unknown_platform(self):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            TransactionBuilder.build_stake("Lido")
        assert exc_info.value.message == "Unsupported stake platform: Lido"


def test_generate_id_is_prefixed_and_unique():
    first, second = generate_id("action"), generate_id("action")
    assert first.startswith("action_")
    assert len(first) == len("action_") + 24
    assert first != second


@pytest.mark.parametrize("operation,platform,expected", [
    ("swap", "Uniswap", "low"),
    ("bridge", "Synapse", "high"),
    ("stake", "yearn", "moderate"),
    ("transfer", "Native", "low"),
    ("swap", "SomethingNew", "moderate"),
])
def test_assess_risk(operation, platform, expected):
    assert assess_risk(operation, platform) == expected
