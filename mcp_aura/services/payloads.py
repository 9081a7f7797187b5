"""Input adapter that folds loose client payloads into the canonical shape.

Runs before schema validation so aliases never leak into handlers.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from ..config import settings
from ..core.networks import normalize_network

DEFAULT_PLATFORM = "Uniswap"

_NUMERIC_RE = re.compile(r"\d+(?:\.\d+)?")


def _first_str(payload: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str):
            return value.strip()
    return None


def _numeric_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        cleaned = value.strip()
        match = _NUMERIC_RE.search(cleaned)
        return match.group(0) if match else cleaned
    return value


def normalize_action_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve aliases and loose formatting on a ``POST /action`` body.

    - ``chain`` -> ``network`` (with network name aliases collapsed)
    - ``action`` -> ``operation``, lowercased
    - ``amount`` -> ``amountIn``, reduced to its first numeric token
    - ``fromToken``/``toToken`` -> ``tokenIn``/``tokenOut``
    - ``protocol`` -> ``platform``, defaulting to Uniswap
    - ``slippage`` loses any ``%`` sign
    - ``fromAddress`` falls back to the configured default wallet
    """

    normalized: Dict[str, Any] = dict(payload)

    network = _first_str(payload, "network", "chain")
    if network is not None:
        normalized["network"] = normalize_network(network)
    normalized.pop("chain", None)

    operation = _first_str(payload, "operation", "action")
    if operation is not None:
        normalized["operation"] = operation.lower()
    normalized.pop("action", None)

    if "amountIn" in payload and payload["amountIn"] is not None:
        normalized["amountIn"] = _numeric_text(payload["amountIn"])
    elif "amount" in payload and payload["amount"] is not None:
        normalized["amountIn"] = _numeric_text(payload["amount"])
    normalized.pop("amount", None)

    token_in = _first_str(payload, "tokenIn", "fromToken")
    if token_in is not None:
        normalized["tokenIn"] = token_in
    token_out = _first_str(payload, "tokenOut", "toToken")
    if token_out is not None:
        normalized["tokenOut"] = token_out
    normalized.pop("fromToken", None)
    normalized.pop("toToken", None)

    platform = _first_str(payload, "platform", "protocol")
    normalized["platform"] = platform or DEFAULT_PLATFORM
    normalized.pop("protocol", None)

    slippage = payload.get("slippage")
    if isinstance(slippage, (int, float)) and not isinstance(slippage, bool):
        normalized["slippage"] = str(slippage)
    elif isinstance(slippage, str):
        normalized["slippage"] = slippage.replace("%", "").strip()
    elif slippage is None:
        normalized.pop("slippage", None)

    from_address = _first_str(payload, "fromAddress")
    if from_address:
        normalized["fromAddress"] = from_address
    elif settings.default_wallet_address:
        normalized["fromAddress"] = settings.default_wallet_address

    return normalized
