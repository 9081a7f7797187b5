"""Static network registry and per-network token tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..config import settings
from .errors import UnsupportedNetworkError

NATIVE_PLACEHOLDER = '0x0000000000000000000000000000000000000000'

SUPPORTED_NETWORKS: Tuple[str, ...] = ('ethereum', 'arbitrum', 'polygon')


@dataclass(frozen=True)
class NetworkConfig:
    """Immutable description of one supported chain."""

    key: str
    chain_id: int
    display_name: str
    rpc_url: str
    explorer_url: str
    wrapped_native_address: str
    wrapped_native_symbol: str
    wrapped_native_name: str
    swap_router_address: str
    native_symbol: str = 'ETH'

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"


NETWORKS: Dict[str, NetworkConfig] = {
    'ethereum': NetworkConfig(
        key='ethereum',
        chain_id=1,
        display_name='Ethereum',
        rpc_url='https://rpc.ankr.com/eth',
        explorer_url='https://etherscan.io',
        wrapped_native_address='0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2',
        wrapped_native_symbol='WETH',
        wrapped_native_name='Wrapped Ether',
        swap_router_address='0xE592427A0AEce92De3Edee1F18E0157C05861564',
    ),
    'arbitrum': NetworkConfig(
        key='arbitrum',
        chain_id=42161,
        display_name='Arbitrum One',
        rpc_url='https://rpc.ankr.com/arbitrum',
        explorer_url='https://arbiscan.io',
        wrapped_native_address='0x82aF49447D8a07e3bd95BD0d56f35241523fBab1',
        wrapped_native_symbol='WETH',
        wrapped_native_name='Wrapped Ether',
        swap_router_address='0xE592427A0AEce92De3Edee1F18E0157C05861564',
    ),
    'polygon': NetworkConfig(
        key='polygon',
        chain_id=137,
        display_name='Polygon',
        rpc_url='https://rpc.ankr.com/polygon',
        explorer_url='https://polygonscan.com',
        wrapped_native_address='0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270',
        wrapped_native_symbol='WMATIC',
        wrapped_native_name='Wrapped Matic',
        swap_router_address='0xE592427A0AEce92De3Edee1F18E0157C05861564',
        native_symbol='MATIC',
    ),
}

# Symbol -> address per network. ETH maps to the native sentinel on every chain.
TOKEN_MAP: Dict[str, Dict[str, str]] = {
    'ethereum': {
        'ETH': NATIVE_PLACEHOLDER,
        'WETH': '0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2',
        'USDC': '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48',
        'USDT': '0xdAC17F958D2ee523a2206206994597C13D831ec7',
        'DAI': '0x6B175474E89094C44Da98b954EedeAC495271d0F',
        'WBTC': '0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599',
        'UNI': '0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984',
        'AAVE': '0x7Fc66500c84A76Ad7e9c93437bFc5Ac33E2DDaE9',
        'LINK': '0x514910771AF9Ca656af840dff83E8264EcF986CA',
        'MKR': '0x9f8F72AA9304c8B593d555F12eF6589cC3A579A2',
    },
    'arbitrum': {
        'ETH': NATIVE_PLACEHOLDER,
        'WETH': '0x82aF49447D8a07e3bd95BD0d56f35241523fBab1',
        'USDC': '0xaf88d065e77c8cC2239327C5EDb3A432268e5831',
        'USDC.E': '0xFF970A61A04b1cA14834A43f5de4533eBDDB5CC8',
        'USDT': '0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9',
        'DAI': '0xDA10009cBd5D07dd0CeCc66161FC93D7c9000da1',
        'WBTC': '0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f',
        'UNI': '0xFa7F8980b0f1E64A2062791cc3b0871572f1F7f0',
        'LINK': '0xf97f4df75117a78c1A5a0DBb814Af92458539FB4',
    },
    'polygon': {
        'ETH': NATIVE_PLACEHOLDER,
        'MATIC': NATIVE_PLACEHOLDER,
        'WMATIC': '0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270',
        'WETH': '0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619',
        'USDC': '0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174',
        'USDT': '0xc2132D05D31c914a87C6611C10748AEb04B58e8F',
        'DAI': '0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063',
        'WBTC': '0x1BFD67037B42Cf73acF2047067bd4F2C47D9BfD6',
        'AAVE': '0xD6DF932A45C0f255f85145f286eA0b292B21C90B',
        'LINK': '0x53E0bca35eC356BD5ddDFebbD1Fc0fD03FaBad39',
    },
}

_NETWORK_ALIASES: Dict[str, str] = {
    'ethereum': 'ethereum',
    'eth': 'ethereum',
    'mainnet': 'ethereum',
    'ethereum mainnet': 'ethereum',
    'arbitrum': 'arbitrum',
    'arbitrum one': 'arbitrum',
    'arb': 'arbitrum',
    'polygon': 'polygon',
    'matic': 'polygon',
    'polygon mainnet': 'polygon',
}


def normalize_network(value: str) -> str:
    """Collapse user-provided network names into registry keys.

    Unknown names come back lowercased so validation can reject them.
    """

    cleaned = value.strip().lower()
    return _NETWORK_ALIASES.get(cleaned, cleaned)


def get_network(key: str) -> NetworkConfig:
    config = NETWORKS.get(key)
    if config is None:
        raise UnsupportedNetworkError(key)
    return config


def rpc_url_for(network: NetworkConfig) -> str:
    """RPC endpoint for a network, honoring configured overrides."""

    return settings.rpc_url_override(network.key) or network.rpc_url


def is_native(address: str, network: NetworkConfig) -> bool:
    """True for the native sentinel and the network's wrapped-native token."""

    lowered = address.lower()
    return lowered in (NATIVE_PLACEHOLDER, network.wrapped_native_address.lower())


__all__ = [
    'NATIVE_PLACEHOLDER',
    'SUPPORTED_NETWORKS',
    'NetworkConfig',
    'NETWORKS',
    'TOKEN_MAP',
    'normalize_network',
    'get_network',
    'rpc_url_for',
    'is_native',
]
