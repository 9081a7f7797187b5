"""Async client for Relay's quote API, used as the swap route finder."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

DEFAULT_RELAY_BASE_URL = "https://api.relay.link"


class RelayProvider:
    """Thin wrapper around https://api.relay.link endpoints."""

    name = "relay"

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        configured = base_url or settings.relay_base_url
        self.base_url = (configured or DEFAULT_RELAY_BASE_URL).rstrip("/")
        self.timeout_s = timeout_s or settings.relay_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "user-agent": "McpAuraRelayClient/1.0",
        }

    async def quote(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Request a quote from Relay.

        `payload` follows the schema documented at https://docs.relay.link/
        (originChainId, destinationChainId, amount, tradeType, ...).
        """

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_s,
            transport=self._transport,
        ) as client:
            response = await client.post("/quote", json=payload, headers=self._headers())
            response.raise_for_status()
            return response.json()


def extract_transactions(quote: Any) -> List[Dict[str, Any]]:
    """Pull the executable ``{to, data, value}`` items out of a Relay quote.

    Anything that does not have the documented shape is skipped, so a
    malformed quote yields an empty list rather than an exception.
    """

    if not isinstance(quote, dict):
        return []
    steps = quote.get("steps")
    if not isinstance(steps, list):
        return []

    transactions: List[Dict[str, Any]] = []
    for step in steps:
        if not isinstance(step, dict) or not isinstance(step.get("items"), list):
            continue
        for item in step["items"]:
            data_obj = item.get("data") if isinstance(item, dict) else None
            if isinstance(data_obj, dict) and "to" in data_obj and ("data" in data_obj or "value" in data_obj):
                transactions.append({
                    "step_id": step.get("id"),
                    "action": step.get("action"),
                    "data": data_obj,
                })
    return transactions
