"""Token symbol resolution and on-chain ERC-20 metadata lookup."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_utils import to_checksum_address

from ..config import settings
from ..providers.rpc import JsonRpcClient
from ..providers.token_list import UNKNOWN_TOKEN, get_fallback_token_metadata, is_known_token
from .errors import UnknownTokenError
from .execution.abi import (
    ERC20_DECIMALS_SELECTOR,
    ERC20_NAME_SELECTOR,
    ERC20_SYMBOL_SELECTOR,
    decode_string,
    decode_uint256,
)
from .execution.models import Outcome
from .networks import TOKEN_MAP, NetworkConfig, is_native

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_address(value: str) -> bool:
    return bool(ADDRESS_PATTERN.match(value or ""))


def resolve_token_address(token_input: str, network: str) -> str:
    """Map a ticker or address onto a contract address for ``network``.

    Addresses pass through untouched, case included. Tickers are matched
    case-insensitively against the network's token table.
    """

    if is_address(token_input):
        return token_input

    symbol = token_input.strip().upper()
    address = TOKEN_MAP.get(network, {}).get(symbol)
    if address is None:
        raise UnknownTokenError(token_input, network)
    return address


@dataclass(frozen=True)
class TokenMetadata:
    address: str
    symbol: str
    decimals: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "name": self.name,
        }


class TokenMetadataFetcher:
    """Reads ``decimals``/``symbol``/``name`` for a token on one network.

    Nothing is cached: every call goes back to the chain.
    """

    def __init__(
        self,
        network: NetworkConfig,
        rpc: JsonRpcClient,
        *,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.network = network
        self.rpc = rpc
        self.timeout_s = timeout_s or settings.token_metadata_timeout_seconds

    def wrapped_native(self) -> TokenMetadata:
        return TokenMetadata(
            address=to_checksum_address(self.network.wrapped_native_address),
            symbol=self.network.wrapped_native_symbol,
            decimals=18,
            name=self.network.wrapped_native_name,
        )

    async def describe_token(self, address: str) -> Outcome[TokenMetadata]:
        if is_native(address, self.network):
            return Outcome.live(self.wrapped_native())

        try:
            decimals, symbol, name = await asyncio.wait_for(
                asyncio.gather(
                    self._read_decimals(address),
                    self._read_string(address, ERC20_SYMBOL_SELECTOR),
                    self._read_string(address, ERC20_NAME_SELECTOR),
                    return_exceptions=True,
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Token metadata lookup timed out after %ss for %s on %s",
                self.timeout_s, address, self.network.key,
            )
            return self._table_fallback(address, "token metadata lookup timed out")

        failures = [r for r in (decimals, symbol, name) if isinstance(r, Exception)]
        if len(failures) == 3:
            logger.warning("All token metadata reads failed for %s: %s", address, failures[0])
            return self._table_fallback(address, f"token metadata unavailable: {failures[0]}")

        metadata = TokenMetadata(
            address=to_checksum_address(address),
            decimals=UNKNOWN_TOKEN["decimals"] if isinstance(decimals, Exception) else decimals,
            symbol=UNKNOWN_TOKEN["symbol"] if isinstance(symbol, Exception) else symbol,
            name=UNKNOWN_TOKEN["name"] if isinstance(name, Exception) else name,
        )
        if failures:
            logger.warning("Partial token metadata for %s: %d read(s) defaulted", address, len(failures))
            return Outcome.fallback(metadata, f"token metadata partially defaulted for {address}")
        return Outcome.live(metadata)

    async def _read_decimals(self, address: str) -> int:
        result = await self.rpc.eth_call(address, ERC20_DECIMALS_SELECTOR)
        return decode_uint256(result)

    async def _read_string(self, address: str, selector: str) -> str:
        result = await self.rpc.eth_call(address, selector)
        value = decode_string(result)
        if value is None:
            raise ValueError(f"Empty string result for selector {selector}")
        return value

    def _table_fallback(self, address: str, reason: str) -> Outcome[TokenMetadata]:
        entry = get_fallback_token_metadata(address)
        if not is_known_token(address):
            reason = f"{reason}; using generic token defaults"
        metadata = TokenMetadata(
            address=to_checksum_address(address),
            symbol=entry["symbol"],
            decimals=entry["decimals"],
            name=entry["name"],
        )
        return Outcome.fallback(metadata, reason)


__all__ = [
    "ADDRESS_PATTERN",
    "TokenMetadata",
    "TokenMetadataFetcher",
    "is_address",
    "resolve_token_address",
]
