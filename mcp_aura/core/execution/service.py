"""
Per-network facade over the transaction-preparation components.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...providers.relay import RelayProvider
from ...providers.rpc import JsonRpcClient
from ..errors import RpcError
from ..networks import NetworkConfig, get_network, rpc_url_for
from ..tokens import TokenMetadataFetcher
from .balances import BalanceChecker
from .fees import FeeEstimator
from .swap_builder import SwapBuilder
from .tx_builder import TransactionBuilder

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Everything needed to prepare transactions on one network.

    Wires a single RPC client into:
    - Token metadata reads
    - Fee estimation
    - Swap building (via the route finder)
    - Balance checks
    - Receipt lookups
    """

    def __init__(
        self,
        network: NetworkConfig,
        *,
        rpc: Optional[JsonRpcClient] = None,
        route_finder: Optional[RelayProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.network = network
        self.rpc = rpc or JsonRpcClient(rpc_url_for(network), transport=transport)
        self.route_finder = route_finder or RelayProvider(transport=transport)
        self.tokens = TokenMetadataFetcher(network, self.rpc)
        self.fees = FeeEstimator(self.rpc)
        self.swaps = SwapBuilder(network, self.tokens, self.route_finder)
        self.balances = BalanceChecker(self.rpc)
        self.builder = TransactionBuilder()

    async def get_transaction_status(self, tx_hash: str) -> Dict[str, Any]:
        """Receipt-based status; lookup failures report ``failed``."""
        try:
            receipt = await self.rpc.get_transaction_receipt(tx_hash)
            if not receipt:
                return {"status": "pending"}
            current_block = await self.rpc.block_number()
        except RpcError as exc:
            logger.warning("Transaction status lookup failed for %s: %s", tx_hash, exc)
            return {"status": "failed", "error": exc.message}

        block_number = int(receipt["blockNumber"], 16) if receipt.get("blockNumber") else None
        status = "success" if receipt.get("status") == "0x1" else "failed"
        result: Dict[str, Any] = {
            "status": status,
            "blockNumber": block_number,
            "gasUsed": str(int(receipt["gasUsed"], 16)) if receipt.get("gasUsed") else None,
            "effectiveGasPrice": (
                str(int(receipt["effectiveGasPrice"], 16)) if receipt.get("effectiveGasPrice") else None
            ),
        }
        if block_number is not None:
            result["confirmations"] = max(current_block - block_number + 1, 0)
        return result

    async def health(self) -> Dict[str, Any]:
        try:
            chain_id = await self.rpc.chain_id()
        except RpcError as exc:
            return {"status": "error", "reason": exc.message}
        if chain_id != self.network.chain_id:
            return {"status": "error", "reason": f"unexpected chain id {chain_id}"}
        return {"status": "healthy", "chainId": chain_id}


def get_transaction_service(network: str) -> TransactionService:
    """Build a fresh service for ``network``; raises ``UnsupportedNetworkError``."""
    return TransactionService(get_network(network))
