"""Prepared-action lifecycle: build, persist, read back."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..config import settings
from ..core.errors import NotFoundError
from ..core.execution.models import ActionRecord, ActionStatus
from ..core.execution.tx_builder import generate_id
from ..core.risk import assess_risk
from ..core.store import KeyValueStore
from ..types.requests import ActionRequest
from .operations import ServiceFactory, prepare_operation

logger = logging.getLogger(__name__)

ESTIMATED_TIME = "2-5 minutes"


def _action_key(action_id: str) -> str:
    return f"action:{action_id}"


async def save_action(store: KeyValueStore, record: ActionRecord, ttl: Optional[int] = None) -> None:
    ttl = ttl or settings.action_ttl_seconds
    if record.expires_at is None:
        record.expires_at = record.created_at + timedelta(seconds=ttl)
    await store.put(_action_key(record.action_id), record.to_dict(), ttl=ttl)


async def load_action(store: KeyValueStore, action_id: str) -> ActionRecord:
    raw = await store.get(_action_key(action_id))
    if raw is None:
        raise NotFoundError("Action not found", {"actionId": action_id})
    return ActionRecord.from_dict(raw)


async def prepare_action(
    request: ActionRequest,
    service_factory: ServiceFactory,
    store: KeyValueStore,
) -> Dict[str, Any]:
    service = service_factory(request.network)
    prepared = await prepare_operation(
        service,
        request.operation,
        from_address=request.from_address,
        platform=request.platform,
        token_in=request.token_in,
        token_out=request.token_out,
        amount_in=request.amount_in,
        slippage=request.slippage,
        deadline=request.deadline,
    )

    action_id = generate_id("action")
    metadata = {
        "tokenIn": request.token_in,
        "tokenOut": request.token_out,
        "amountIn": request.amount_in,
        "slippage": request.slippage,
        "deadline": request.deadline,
        "estimatedTime": ESTIMATED_TIME,
        "riskLevel": assess_risk(request.operation, request.platform),
    }
    transaction_request = prepared.transaction.value.to_dict()

    record = ActionRecord(
        action_id=action_id,
        transaction_request=transaction_request,
        metadata={
            **metadata,
            "operation": request.operation,
            "platform": request.platform,
            "network": request.network,
            "fromAddress": request.from_address,
            "estimatedFees": prepared.fees.value.to_dict(),
        },
    )
    await save_action(store, record)
    logger.info("Prepared %s action %s on %s", request.operation, action_id, request.network)

    return {
        "actionId": action_id,
        "operation": request.operation,
        "platform": request.platform,
        "network": request.network,
        "transactionRequest": transaction_request,
        "estimatedFees": prepared.fees.value.to_dict(),
        "status": ActionStatus.PREPARED.value,
        "requiresSignature": True,
        "degraded": prepared.degraded,
        "fallbacks": prepared.fallbacks,
        "metadata": metadata,
        "expiresAt": record.expires_at.isoformat() if record.expires_at else None,
    }


async def store_client_action(
    store: KeyValueStore,
    action_id: str,
    transaction_request: Dict[str, Any],
    metadata: Optional[Dict[str, Any]],
) -> ActionRecord:
    record = ActionRecord(
        action_id=action_id,
        transaction_request=transaction_request,
        metadata=metadata or {},
        status="pending",
        created_at=datetime.now(timezone.utc),
    )
    await save_action(store, record)
    return record
