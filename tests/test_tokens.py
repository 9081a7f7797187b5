"""
Tests for network registry, token resolution and metadata lookup.
"""

import pytest

from mcp_aura.core.errors import UnknownTokenError, UnsupportedNetworkError
from mcp_aura.core.networks import (
    NATIVE_PLACEHOLDER,
    TOKEN_MAP,
    get_network,
    is_native,
    normalize_network,
)
from mcp_aura.core.tokens import TokenMetadataFetcher, is_address, resolve_token_address

from fakes import ALICE, USDC_ETHEREUM, FakeRpc, erc20_metadata


class TestNetworks:
    @pytest.mark.parametrize("raw,expected", [
        ("Ethereum", "ethereum"),
        ("mainnet", "ethereum"),
        ("Arbitrum One", "arbitrum"),
        (" MATIC ", "polygon"),
        ("Solana", "solana"),
    ])
    def test_normalize_network(self, raw, expected):
        assert normalize_network(raw) == expected

    def test_get_network_rejects_unknown(self):
        with pytest.raises(UnsupportedNetworkError) as exc_info:
            get_network("solana")
        assert exc_info.value.message == "Unsupported network: solana"

    def test_chain_ids(self):
        assert get_network("ethereum").chain_id == 1
        assert get_network("arbitrum").chain_id == 42161
        assert get_network("polygon").chain_id == 137

    def test_is_native_covers_wrapped_token(self):
        network = get_network("ethereum")
        assert is_native(NATIVE_PLACEHOLDER, network)
        assert is_native(network.wrapped_native_address.lower(), network)
        assert not is_native(USDC_ETHEREUM, network)

    def test_explorer_url(self):
        assert get_network("arbitrum").explorer_tx_url("0xabc") == "https://arbiscan.io/tx/0xabc"


@pytest.mark.parametrize("network,symbol,address", [
    (network, symbol, address)
    for network, table in TOKEN_MAP.items()
    for symbol, address in table.items()
])
def test_every_configured_symbol_resolves(network, symbol, address):
    assert resolve_token_address(symbol, network) == address
    assert resolve_token_address(symbol.lower(), network) == address


class TestResolveTokenAddress:
    def test_symbol_lookup_is_case_insensitive(self):
        assert resolve_token_address("usdc", "ethereum") == USDC_ETHEREUM
        assert resolve_token_address("USDC", "ethereum") == USDC_ETHEREUM

    def test_eth_maps_to_native_sentinel(self):
        assert resolve_token_address("ETH", "arbitrum") == NATIVE_PLACEHOLDER

    def test_addresses_pass_through_unchanged(self):
        mixed = "0xAbCdEf0123456789abcdef0123456789ABCDEF01"
        assert resolve_token_address(mixed, "polygon") == mixed

    def test_unknown_symbol(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            resolve_token_address("DOGE", "ethereum")
        assert exc_info.value.message == 'Token symbol "DOGE" not found on ethereum network'

    def test_symbol_missing_on_other_network(self):
        with pytest.raises(UnknownTokenError):
            resolve_token_address("MKR", "arbitrum")

    def test_is_address(self):
        assert is_address(ALICE)
        assert not is_address("0x123")
        assert not is_address("")


class TestTokenMetadataFetcher:
    @pytest.mark.asyncio
    async def test_native_returns_wrapped_metadata_without_rpc(self):
        rpc = FakeRpc()
        fetcher = TokenMetadataFetcher(get_network("polygon"), rpc)

        outcome = await fetcher.describe_token(NATIVE_PLACEHOLDER)

        assert not outcome.degraded
        assert outcome.value.symbol == "WMATIC"
        assert outcome.value.decimals == 18
        assert rpc.requests == []

    @pytest.mark.asyncio
    async def test_reads_metadata_from_chain(self):
        rpc = FakeRpc(contract_calls=erc20_metadata(USDC_ETHEREUM, 6, "USDC", "USD Coin"))
        fetcher = TokenMetadataFetcher(get_network("ethereum"), rpc)

        outcome = await fetcher.describe_token(USDC_ETHEREUM.lower())

        assert not outcome.degraded
        assert outcome.value.address == USDC_ETHEREUM
        assert outcome.value.decimals == 6
        assert outcome.value.symbol == "USDC"
        assert outcome.value.name == "USD Coin"

    @pytest.mark.asyncio
    async def test_known_token_falls_back_to_table(self):
        fetcher = TokenMetadataFetcher(get_network("ethereum"), FakeRpc())

        outcome = await fetcher.describe_token(USDC_ETHEREUM)

        assert outcome.degraded
        assert outcome.value.decimals == 6
        assert outcome.value.symbol == "USDC"
        assert "token metadata unavailable" in outcome.reason

    @pytest.mark.asyncio
    async def test_unknown_token_gets_generic_defaults(self):
        fetcher = TokenMetadataFetcher(get_network("ethereum"), FakeRpc())

        outcome = await fetcher.describe_token(ALICE)

        assert outcome.degraded
        assert outcome.value.symbol == "UNKNOWN"
        assert outcome.value.decimals == 18
        assert "generic token defaults" in outcome.reason

    @pytest.mark.asyncio
    async def test_partial_failure_defaults_missing_fields(self):
        calls = erc20_metadata(ALICE, 8, "TKN", "Token")
        calls = {key: value for key, value in calls.items() if key[1] != "0x06fdde03"}
        fetcher = TokenMetadataFetcher(get_network("ethereum"), FakeRpc(contract_calls=calls))

        outcome = await fetcher.describe_token(ALICE)

        assert outcome.degraded
        assert outcome.value.decimals == 8
        assert outcome.value.symbol == "TKN"
        assert outcome.value.name == "Unknown Token"

    @pytest.mark.asyncio
    async def test_timeout_falls_back_to_table(self):
        rpc = FakeRpc(contract_calls=erc20_metadata(USDC_ETHEREUM, 6, "USDC", "USD Coin"), delay=0.2)
        fetcher = TokenMetadataFetcher(get_network("ethereum"), rpc, timeout_s=0.01)

        outcome = await fetcher.describe_token(USDC_ETHEREUM)

        assert outcome.degraded
        assert outcome.value.decimals == 6
        assert "timed out" in outcome.reason

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", [USDC_ETHEREUM, ALICE, NATIVE_PLACEHOLDER])
    async def test_repeated_lookups_agree(self, address):
        rpc = FakeRpc(contract_calls=erc20_metadata(USDC_ETHEREUM, 6, "USDC", "USD Coin"))
        fetcher = TokenMetadataFetcher(get_network("ethereum"), rpc)

        first = await fetcher.describe_token(address)
        second = await fetcher.describe_token(address)

        assert first.value == second.value
        assert first.degraded == second.degraded
