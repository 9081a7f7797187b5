"""Shared preparation of swap / bridge / stake / transfer transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..core.errors import McpAuraError, MissingParametersError
from ..core.execution.models import FeeEstimate, Outcome, TransactionRequest, TransactionType, collect_fallbacks
from ..core.execution.service import TransactionService, get_transaction_service
from ..core.execution.swap_builder import SwapParams
from ..core.tokens import resolve_token_address

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[str], TransactionService]


def get_service_factory() -> ServiceFactory:
    """FastAPI dependency; tests swap in factories with fake RPC/route finders."""
    return get_transaction_service


@dataclass
class PreparedOperation:
    operation: str
    network: str
    chain_id: int
    transaction: Outcome[TransactionRequest]
    fees: Outcome[FeeEstimate]
    fallbacks: List[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.fallbacks)


async def prepare_operation(
    service: TransactionService,
    operation: str,
    *,
    from_address: str,
    platform: str,
    token_in: Optional[str] = None,
    token_out: Optional[str] = None,
    amount_in: Optional[str] = None,
    slippage: Optional[str] = None,
    deadline: Optional[int] = None,
    target_address: Optional[str] = None,
) -> PreparedOperation:
    """Build the transaction for ``operation`` and estimate its fees.

    Raises ``McpAuraError`` subclasses for bad input or unsupported
    platforms; dependency failures come back as degraded outcomes.
    """

    if operation == TransactionType.SWAP.value:
        _require(operation, token_in=token_in, token_out=token_out, amount_in=amount_in)
        tx = await service.swaps.build_swap(SwapParams(
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            recipient=from_address,
            deadline=deadline,
            slippage=slippage,
        ))
    elif operation == TransactionType.BRIDGE.value:
        _require(operation, token_in=token_in, amount_in=amount_in)
        tx = service.builder.build_bridge(platform)
    elif operation == TransactionType.STAKE.value:
        _require(operation, token_in=token_in, amount_in=amount_in)
        tx = service.builder.build_stake(platform)
    elif operation == TransactionType.TRANSFER.value:
        _require(operation, target_address=target_address, token_in=token_in, amount_in=amount_in)
        token_address = resolve_token_address(token_in, service.network.key)
        metadata = await service.tokens.describe_token(token_address)
        tx = Outcome(
            value=service.builder.build_transfer(metadata.value, token_address, target_address, amount_in),
            degraded=metadata.degraded,
            reason=metadata.reason,
        )
    else:
        raise McpAuraError(f"Unsupported operation: {operation}")

    fees = await service.fees.estimate_fees(tx.value, from_address)
    fallbacks = collect_fallbacks(tx, fees)
    if fallbacks:
        logger.info("Prepared %s on %s with fallbacks: %s", operation, service.network.key, fallbacks)

    return PreparedOperation(
        operation=operation,
        network=service.network.key,
        chain_id=service.network.chain_id,
        transaction=tx,
        fees=fees,
        fallbacks=fallbacks,
    )


def _require(operation: str, **params: Optional[str]) -> None:
    missing = [name for name, value in params.items() if not value]
    if missing:
        raise MissingParametersError(
            f"Missing required parameters for {operation} operation: {', '.join(missing)}",
            {"missing": missing},
        )
