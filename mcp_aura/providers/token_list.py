"""
Token metadata fallback table for well-known tokens
"""

from typing import Any, Dict

# Lowercased address -> metadata, across all supported networks
KNOWN_TOKENS: Dict[str, Dict[str, Any]] = {
    # Ethereum
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": {"symbol": "USDC", "name": "USD Coin", "decimals": 6},
    "0xdac17f958d2ee523a2206206994597c13d831ec7": {"symbol": "USDT", "name": "Tether USD", "decimals": 6},
    "0x6b175474e89094c44da98b954eedeac495271d0f": {"symbol": "DAI", "name": "Dai Stablecoin", "decimals": 18},
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599": {"symbol": "WBTC", "name": "Wrapped BTC", "decimals": 8},
    "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984": {"symbol": "UNI", "name": "Uniswap", "decimals": 18},
    "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9": {"symbol": "AAVE", "name": "Aave Token", "decimals": 18},
    "0x514910771af9ca656af840dff83e8264ecf986ca": {"symbol": "LINK", "name": "ChainLink Token", "decimals": 18},
    "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2": {"symbol": "MKR", "name": "Maker", "decimals": 18},

    # Arbitrum
    "0xaf88d065e77c8cc2239327c5edb3a432268e5831": {"symbol": "USDC", "name": "USD Coin", "decimals": 6},
    "0xff970a61a04b1ca14834a43f5de4533ebddb5cc8": {"symbol": "USDC.e", "name": "Bridged USDC", "decimals": 6},
    "0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9": {"symbol": "USDT", "name": "Tether USD", "decimals": 6},
    "0xda10009cbd5d07dd0cecc66161fc93d7c9000da1": {"symbol": "DAI", "name": "Dai Stablecoin", "decimals": 18},
    "0x2f2a2543b76a4166549f7aab2e75bef0aefc5b0f": {"symbol": "WBTC", "name": "Wrapped BTC", "decimals": 8},
    "0xfa7f8980b0f1e64a2062791cc3b0871572f1f7f0": {"symbol": "UNI", "name": "Uniswap", "decimals": 18},
    "0xf97f4df75117a78c1a5a0dbb814af92458539fb4": {"symbol": "LINK", "name": "ChainLink Token", "decimals": 18},

    # Polygon
    "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619": {"symbol": "WETH", "name": "Wrapped Ether", "decimals": 18},
    "0x2791bca1f2de4661ed88a30c99a7a9449aa84174": {"symbol": "USDC", "name": "USD Coin (PoS)", "decimals": 6},
    "0xc2132d05d31c914a87c6611c10748aeb04b58e8f": {"symbol": "USDT", "name": "Tether USD (PoS)", "decimals": 6},
    "0x8f3cf7ad23cd3cadbd9735aff958023239c6a063": {"symbol": "DAI", "name": "Dai Stablecoin (PoS)", "decimals": 18},
    "0x1bfd67037b42cf73acf2047067bd4f2c47d9bfd6": {"symbol": "WBTC", "name": "Wrapped BTC (PoS)", "decimals": 8},
    "0xd6df932a45c0f255f85145f286ea0b292b21c90b": {"symbol": "AAVE", "name": "Aave (PoS)", "decimals": 18},
    "0x53e0bca35ec356bd5dddfebbd1fc0fd03fabad39": {"symbol": "LINK", "name": "ChainLink Token (PoS)", "decimals": 18},
}

UNKNOWN_TOKEN: Dict[str, Any] = {"symbol": "UNKNOWN", "name": "Unknown Token", "decimals": 18}


def is_known_token(address: str) -> bool:
    return address.lower() in KNOWN_TOKENS


def get_fallback_token_metadata(address: str) -> Dict[str, Any]:
    """
    Get fallback token metadata for well-known tokens
    """
    token_data = KNOWN_TOKENS.get(address.lower(), UNKNOWN_TOKEN)
    return dict(token_data)
