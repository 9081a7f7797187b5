"""
Swap transaction preparation.

Routes come from the Relay quote API. When no usable route is returned the
builder substitutes a placeholder call to the network's swap router; that
placeholder calldata does NOT encode a real swap and must never be
broadcast. It is always returned as a degraded ``Outcome``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from ...providers.relay import RelayProvider, extract_transactions
from ..errors import McpAuraError, RouteNotFoundError, SwapBuildError
from ..networks import NetworkConfig, is_native
from ..tokens import TokenMetadataFetcher, resolve_token_address
from .models import Outcome, TransactionRequest
from .units import parse_units

logger = logging.getLogger(__name__)

DEFAULT_SLIPPAGE_PERCENT = Decimal("0.5")
DEFAULT_DEADLINE_SECONDS = 1800

# exactInputSingle selector followed by twenty zeroed 32-byte words.
PLACEHOLDER_SWAP_CALLDATA = "0x414bf389" + "0" * 640

REFERRER = "mcp-aura"


@dataclass
class SwapParams:
    token_in: str
    token_out: str
    amount_in: str
    recipient: str
    deadline: Optional[int] = None
    slippage: Optional[Union[float, str, Decimal]] = None


def slippage_to_bps(slippage: Optional[Union[float, str, Decimal]]) -> int:
    """Percent to basis points, truncated to two-decimal-percent granularity."""

    if slippage is None:
        value = DEFAULT_SLIPPAGE_PERCENT
    else:
        try:
            value = Decimal(str(slippage))
        except InvalidOperation as exc:
            raise SwapBuildError(f"invalid slippage {slippage!r}") from exc
    return int((value * 100).to_integral_value(rounding=ROUND_FLOOR))


def _parse_quantity(raw: Any) -> int:
    if raw is None:
        return 0
    if isinstance(raw, int):
        return raw
    text = str(raw)
    if text.startswith("0x"):
        return int(text, 16)
    return int(text or "0")


class SwapBuilder:
    """Builds swap transactions for a single network."""

    def __init__(
        self,
        network: NetworkConfig,
        fetcher: TokenMetadataFetcher,
        route_finder: RelayProvider,
    ) -> None:
        self.network = network
        self.fetcher = fetcher
        self.route_finder = route_finder

    async def build_swap(self, params: SwapParams) -> Outcome[TransactionRequest]:
        try:
            token_in_address = resolve_token_address(params.token_in, self.network.key)
            token_out_address = resolve_token_address(params.token_out, self.network.key)
            token_in = await self.fetcher.describe_token(token_in_address)
            token_out = await self.fetcher.describe_token(token_out_address)
            amount_in_wei = parse_units(params.amount_in, token_in.value.decimals)
        except McpAuraError as exc:
            raise SwapBuildError(exc.message) from exc

        is_native_in = is_native(token_in_address, self.network)
        slippage_bps = slippage_to_bps(params.slippage)
        deadline = params.deadline or int(time.time()) + DEFAULT_DEADLINE_SECONDS

        reasons: List[str] = [o.reason for o in (token_in, token_out) if o.degraded and o.reason]

        payload: Dict[str, Any] = {
            "user": params.recipient,
            "originChainId": self.network.chain_id,
            "destinationChainId": self.network.chain_id,
            "originCurrency": token_in_address,
            "destinationCurrency": token_out_address,
            "recipient": params.recipient,
            "tradeType": "EXACT_INPUT",
            "amount": str(amount_in_wei),
            "referrer": REFERRER,
            "slippageTolerance": str(slippage_bps),
        }

        route_reason: Optional[str] = None
        tx: Optional[TransactionRequest] = None
        try:
            quote = await self.route_finder.quote(payload)
            tx, skipped = self._route_to_tx(quote, is_native_in)
        except (httpx.HTTPError, ValueError) as exc:
            route_reason = f"route finder failed: {exc}"
        except RouteNotFoundError as exc:
            route_reason = exc.message
        else:
            if skipped:
                reasons.append(
                    f"route needs {skipped} earlier transaction(s), such as a token approval, "
                    "that are not included"
                )

        if tx is None:
            logger.warning(
                "Swap route unavailable on %s, using placeholder router call: %s",
                self.network.key, route_reason,
            )
            tx = TransactionRequest(
                to=self.network.swap_router_address,
                data=PLACEHOLDER_SWAP_CALLDATA,
                value=str(amount_in_wei) if is_native_in else "0",
            )
            reasons.insert(0, route_reason or "route unavailable")

        logger.info(
            "Prepared swap %s -> %s on %s (amount=%s, slippage_bps=%d, deadline=%d, degraded=%s)",
            params.token_in, params.token_out, self.network.key,
            amount_in_wei, slippage_bps, deadline, bool(reasons),
        )

        if reasons:
            return Outcome.fallback(tx, "; ".join(reasons))
        return Outcome.live(tx)

    def _route_to_tx(self, quote: Any, is_native_in: bool) -> Tuple[TransactionRequest, int]:
        """Return the swap call (the last item) and how many earlier items were left out.

        Earlier items are approvals the wallet must send before the swap.
        """
        transactions = extract_transactions(quote)
        if not transactions:
            raise RouteNotFoundError("route finder returned no call parameters")
        call = transactions[-1]["data"]
        to, data = call.get("to"), call.get("data")
        if not isinstance(to, str) or not to or not isinstance(data, str) or not data:
            raise RouteNotFoundError("route finder returned no call parameters")
        value = _parse_quantity(call.get("value")) if is_native_in else 0
        return TransactionRequest(to=to, data=data, value=str(value)), len(transactions) - 1
