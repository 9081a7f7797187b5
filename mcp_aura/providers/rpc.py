"""Minimal async JSON-RPC client for EVM nodes."""

from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..core.errors import RpcError


class JsonRpcClient:
    """One endpoint, one attempt per call. Errors surface as ``RpcError``."""

    name = "jsonrpc"

    def __init__(
        self,
        url: str,
        *,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s or settings.rpc_timeout_seconds
        self._transport = transport
        self._ids = itertools.count(1)

    async def call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(f"{method} request failed: {exc}", method=method) from exc
        except ValueError as exc:
            raise RpcError(f"{method} returned a non-JSON body", method=method) from exc

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a non-object response", method=method)

        if "error" in data and data["error"]:
            error = data["error"]
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise RpcError(f"RPC error on {method}: {message}", method=method, code=code)

        return data.get("result")

    # ---- convenience wrappers -------------------------------------------

    async def eth_call(self, to: str, data: str) -> str:
        result = await self.call("eth_call", [{"to": to, "data": data}, "latest"])
        return result or "0x"

    async def get_balance(self, address: str) -> int:
        result = await self.call("eth_getBalance", [address, "latest"])
        return _hex_to_int(result, "eth_getBalance")

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        result = await self.call("eth_estimateGas", [tx])
        return _hex_to_int(result, "eth_estimateGas")

    async def gas_price(self) -> int:
        result = await self.call("eth_gasPrice", [])
        return _hex_to_int(result, "eth_gasPrice")

    async def latest_block(self) -> Dict[str, Any]:
        result = await self.call("eth_getBlockByNumber", ["latest", False])
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise RpcError("eth_getBlockByNumber returned a non-object block", method="eth_getBlockByNumber")
        return result

    async def base_fee_per_gas(self) -> Optional[int]:
        """Latest block base fee, or None on chains without EIP-1559."""
        raw = (await self.latest_block()).get("baseFeePerGas")
        if raw is None:
            return None
        return _hex_to_int(raw, "eth_getBlockByNumber")

    async def block_number(self) -> int:
        result = await self.call("eth_blockNumber", [])
        return _hex_to_int(result, "eth_blockNumber")

    async def chain_id(self) -> int:
        result = await self.call("eth_chainId", [])
        return _hex_to_int(result, "eth_chainId")

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return await self.call("eth_getTransactionReceipt", [tx_hash])


def _hex_to_int(value: Any, method: str) -> int:
    if not isinstance(value, str):
        raise RpcError(f"{method} returned no result", method=method)
    try:
        return int(value, 16)
    except ValueError as exc:
        raise RpcError(f"{method} returned malformed quantity {value!r}", method=method) from exc
