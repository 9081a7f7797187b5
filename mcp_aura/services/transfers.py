"""Transfer preparation with balance and gas sufficiency checks."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.errors import InsufficientFundsError
from ..core.execution.models import collect_fallbacks
from ..core.execution.tx_builder import generate_id
from ..core.execution.units import format_units
from ..core.networks import NATIVE_PLACEHOLDER, get_network
from ..core.tokens import resolve_token_address
from ..types.requests import TransferRequest
from .operations import ServiceFactory

logger = logging.getLogger(__name__)


async def prepare_transfer(request: TransferRequest, service_factory: ServiceFactory) -> Dict[str, Any]:
    """Build a transfer and verify the sender can afford it.

    Raises ``InsufficientFundsError`` with the figures the client needs when
    either the token balance or the native balance for gas falls short.
    """

    service = service_factory(request.network)
    token_address = resolve_token_address(request.token, request.network)
    token = await service.tokens.describe_token(token_address)
    decimals = 18 if token_address.lower() == NATIVE_PLACEHOLDER else token.value.decimals

    tx = service.builder.build_transfer(token.value, token_address, request.to_address, request.amount)
    fees = await service.fees.estimate_fees(tx, request.from_address)

    check = await service.balances.check_transfer_feasibility(
        token_address,
        decimals,
        request.amount,
        request.from_address,
        estimated_fee_wei=fees.value.total_fee_wei,
    )

    if not check.has_token_balance:
        raise InsufficientFundsError("Insufficient balance", {
            "requested": request.amount,
            "available": format_units(check.token_balance, decimals),
            "token": request.token,
        })

    if not check.has_gas:
        raise InsufficientFundsError("Insufficient ETH for gas fees", {
            "requiredGas": fees.value.total_fee_native,
            "availableETH": format_units(check.native_balance or 0, 18),
            "shortfall": format_units(check.gas_shortfall or 0, 18),
        })

    fallbacks = collect_fallbacks(token, fees)
    is_native_transfer = token_address.lower() == NATIVE_PLACEHOLDER

    return {
        "transferId": generate_id("transfer"),
        "fromAddress": request.from_address,
        "toAddress": request.to_address,
        "token": request.token,
        "amount": request.amount,
        "network": request.network,
        "memo": request.memo,
        "transactionRequest": tx.to_dict(),
        "estimatedFees": fees.value.to_dict(),
        "status": "prepared",
        "requiresSignature": True,
        "degraded": bool(fallbacks),
        "fallbacks": fallbacks,
        "balanceCheck": {
            "sufficient": True,
            "currentBalance": format_units(check.token_balance, decimals),
            "afterTransfer": format_units(check.remaining, decimals),
        },
        "metadata": {
            "estimatedTime": "1-3 minutes",
            "riskLevel": "low",
            "type": "ETH_TRANSFER" if is_native_transfer else "ERC20_TRANSFER",
        },
    }


async def transfer_status(
    tx_hash: str,
    network: str,
    service_factory: ServiceFactory,
    transfer_id: Optional[str] = None,
) -> Dict[str, Any]:
    service = service_factory(network)
    status = await service.get_transaction_status(tx_hash)
    return {
        "transferId": transfer_id,
        "txHash": tx_hash,
        "network": network,
        **status,
        "explorerUrl": get_network(network).explorer_tx_url(tx_hash),
    }
