"""
Gas and fee estimation for prepared transactions.

One attempt against the node. When any call fails, a fixed heuristic
(``fallback_gas_limit`` at ``fallback_gas_price_gwei``) is substituted and
the estimate is flagged degraded.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from ...config import settings
from ...providers.rpc import JsonRpcClient
from ..errors import RpcError
from .models import FeeEstimate, Outcome, TransactionRequest
from .units import GWEI, format_units, to_usd

logger = logging.getLogger(__name__)

PRIORITY_FEE_WEI = 1_500_000_000  # 1.5 gwei tip on EIP-1559 chains


class FeeEstimator:
    """Estimates gas limit and fee for a transaction on one network."""

    def __init__(self, rpc: JsonRpcClient, *, usd_rate: Optional[Decimal] = None) -> None:
        self.rpc = rpc
        self.usd_rate = usd_rate if usd_rate is not None else settings.native_usd_rate

    async def estimate_fees(
        self,
        tx: TransactionRequest,
        from_address: Optional[str] = None,
    ) -> Outcome[FeeEstimate]:
        call_obj: Dict[str, Any] = {
            "to": tx.to,
            "data": tx.data,
            "value": hex(tx.value_wei),
        }
        if from_address:
            call_obj["from"] = from_address

        try:
            gas_limit = await self.rpc.estimate_gas(call_obj)
            return Outcome.live(await self._priced(gas_limit))
        except RpcError as exc:
            logger.warning("Gas estimation failed, using fallback: %s", exc)
            return Outcome.fallback(self.fallback_estimate(), f"gas estimation failed: {exc.message}")

    async def estimate_for_gas_limit(self, gas_limit: int) -> Outcome[FeeEstimate]:
        """Price a known gas limit at current network fees."""
        try:
            return Outcome.live(await self._priced(gas_limit))
        except RpcError as exc:
            logger.warning("Fee data unavailable, using fallback gas price: %s", exc)
            fallback = self._build(gas_limit, settings.fallback_gas_price_gwei * GWEI)
            return Outcome.fallback(fallback, f"fee data unavailable: {exc.message}")

    async def _priced(self, gas_limit: int) -> FeeEstimate:
        gas_price = await self.rpc.gas_price()
        base_fee = await self.rpc.base_fee_per_gas()

        max_fee: Optional[int] = None
        priority_fee: Optional[int] = None
        if base_fee is not None:
            priority_fee = PRIORITY_FEE_WEI
            max_fee = base_fee * 2 + priority_fee
        return self._build(gas_limit, gas_price, max_fee, priority_fee)

    def fallback_estimate(self) -> FeeEstimate:
        return self._build(
            settings.fallback_gas_limit,
            settings.fallback_gas_price_gwei * GWEI,
        )

    def _build(
        self,
        gas_limit: int,
        gas_price: int,
        max_fee: Optional[int] = None,
        priority_fee: Optional[int] = None,
    ) -> FeeEstimate:
        total_wei = gas_limit * (max_fee or gas_price)
        total_native = format_units(total_wei, 18)
        return FeeEstimate(
            gas_limit=gas_limit,
            gas_price=gas_price,
            max_fee_per_gas=max_fee,
            max_priority_fee_per_gas=priority_fee,
            total_fee_native=total_native,
            total_fee_usd=to_usd(total_native, self.usd_rate),
        )
