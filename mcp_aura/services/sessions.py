"""Signing sessions: wallet hand-off on the way out, callback on the way back."""

from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.errors import NotFoundError
from ..core.execution.models import ActionRecord, ActionStatus
from ..core.execution.tx_builder import generate_id
from ..core.execution.walletconnect import deep_links, generate_walletconnect_uri, qr_code_url
from ..core.risk import assess_risk
from ..core.store import KeyValueStore
from ..types.requests import SignRequest
from .actions import load_action, save_action
from .operations import ServiceFactory, prepare_operation

logger = logging.getLogger(__name__)

DEFAULT_PLATFORMS = {
    "swap": "Uniswap",
    "bridge": "Stargate",
    "stake": "Aave",
    "transfer": "Native",
}

SIGNING_INSTRUCTIONS = {
    "mobile": "Tap the button below to open your wallet app",
    "desktop": "Scan the QR code with your mobile wallet or use WalletConnect",
    "web": "Connect your browser wallet extension",
}


def _describe(request: SignRequest) -> str:
    if request.operation == "swap":
        return f"Swap {request.amount_in} {request.token_in} for {request.token_out}"
    if request.operation == "bridge":
        return f"Bridge {request.amount_in} {request.token_in} to {request.token_out}"
    if request.operation == "stake":
        return f"Stake {request.amount_in} {request.token_in}"
    return f"Transfer {request.amount_in} {request.token_in} to {request.target_address}"


def _with_session(url: str, session_id: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}sessionId={session_id}"


async def create_sign_session(
    request: SignRequest,
    service_factory: ServiceFactory,
    store: KeyValueStore,
) -> Dict[str, Any]:
    platform = request.platform or DEFAULT_PLATFORMS[request.operation]
    if request.operation == "transfer":
        platform = DEFAULT_PLATFORMS["transfer"]

    service = service_factory(request.network)
    prepared = await prepare_operation(
        service,
        request.operation,
        from_address=request.from_address,
        platform=platform,
        token_in=request.token_in,
        token_out=request.token_out,
        amount_in=request.amount_in,
        target_address=request.target_address,
    )

    session_id = generate_id("session")
    callback_url = str(request.user_callback_url)
    tx = prepared.transaction.value
    redirect_url = generate_walletconnect_uri(
        request.operation,
        tx,
        _with_session(callback_url, session_id),
        prepared.chain_id,
    )

    operation_details = {
        "type": request.operation,
        "description": _describe(request),
        "platform": platform,
        "risk": assess_risk(request.operation, platform),
    }
    estimated_fees = prepared.fees.value.to_dict()

    record = ActionRecord(
        action_id=session_id,
        kind="session",
        transaction_request=tx.to_dict(),
        status=ActionStatus.PENDING_SIGNATURE.value,
        metadata={
            "fromAddress": request.from_address,
            "operation": request.operation,
            "network": request.network,
            "estimatedFees": estimated_fees,
            "operationDetails": operation_details,
            "callbackUrl": callback_url,
            "clientMetadata": request.metadata,
        },
    )
    await save_action(store, record)
    logger.info("Created signing session %s for %s", session_id, request.operation)

    return {
        "sessionId": session_id,
        "redirectUrl": redirect_url,
        "operationDetails": operation_details,
        "transactionRequest": tx.to_dict(),
        "estimatedFees": estimated_fees,
        "degraded": prepared.degraded,
        "fallbacks": prepared.fallbacks,
        "expiresAt": record.expires_at.isoformat() if record.expires_at else None,
        "qrCode": qr_code_url(redirect_url),
        "deepLink": deep_links(redirect_url),
        "instructions": SIGNING_INSTRUCTIONS,
    }


def next_steps(status: str, operation: str, portfolio_refresh: bool) -> List[str]:
    if status == "success":
        steps = ["Transaction completed successfully"]
        if portfolio_refresh:
            steps.append("Your portfolio will be updated shortly")
        steps.append({
            "swap": "Swap completed - check your wallet for new tokens",
            "bridge": "Bridge transfer initiated - tokens will arrive on the destination chain",
            "stake": "Staking position created - rewards start accruing",
            "transfer": "Transfer completed - recipient should receive tokens shortly",
        }.get(operation, "Operation completed"))
        steps.append("View the updated portfolio in the dashboard")
        return steps
    if status == "fail":
        return [
            "Transaction failed",
            "Check the transaction details for more information",
            "You can try the operation again",
        ]
    return [
        "Transaction was cancelled",
        "You can start a new transaction anytime",
    ]


async def complete_sign_session(
    store: KeyValueStore,
    service_factory: ServiceFactory,
    session_id: str,
    status: str,
    tx_hash: Optional[str] = None,
    network: Optional[str] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        record = await load_action(store, session_id)
    except NotFoundError as exc:
        raise NotFoundError("Session not found or expired", {"sessionId": session_id}) from exc
    if record.kind != "session":
        raise NotFoundError("Session not found or expired", {"sessionId": session_id})

    operation = record.metadata.get("operation", "")
    network = network or record.metadata.get("network")
    transaction_details: Optional[Dict[str, Any]] = None
    portfolio_refresh = False

    if status == "success" and tx_hash and network:
        service = service_factory(network)
        tx_status = await service.get_transaction_status(tx_hash)
        transaction_details = {
            "txHash": tx_hash,
            "network": network,
            **tx_status,
            "explorerUrl": service.network.explorer_tx_url(tx_hash),
        }
        portfolio_refresh = tx_status.get("status") == "success"

    record.status = status
    record.metadata.update({
        "txHash": tx_hash,
        "error": error,
        "completedAt": datetime.now(timezone.utc).isoformat(),
        "transactionDetails": transaction_details,
    })
    remaining = int((record.expires_at - datetime.now(timezone.utc)).total_seconds()) if record.expires_at else 0
    await save_action(store, record, ttl=max(remaining, 1))

    return {
        "sessionId": session_id,
        "operation": operation,
        "status": status,
        "transactionDetails": transaction_details,
        "portfolioRefreshNeeded": portfolio_refresh,
        "nextSteps": next_steps(status, operation, portfolio_refresh),
    }


_TITLES = {"success": "Transaction Successful", "fail": "Transaction Failed", "cancelled": "Transaction Cancelled"}


def render_callback_html(data: Dict[str, Any]) -> str:
    status = data["status"]
    title = _TITLES.get(status, "Transaction Update")
    details = data.get("transactionDetails") or {}
    detail_html = ""
    if details:
        rows = [
            f"<li>Network: {html.escape(str(details.get('network', '')))}</li>",
            f"<li>Status: {html.escape(str(details.get('status', '')))}</li>",
        ]
        if details.get("gasUsed"):
            rows.append(f"<li>Gas used: {html.escape(str(details['gasUsed']))}</li>")
        if details.get("explorerUrl"):
            url = html.escape(details["explorerUrl"], quote=True)
            rows.append(f'<li><a href="{url}" target="_blank" rel="noopener">View on explorer</a></li>')
        detail_html = "<h2>Transaction details</h2><ul>" + "".join(rows) + "</ul>"

    steps = "".join(f"<li>{html.escape(step)}</li>" for step in data.get("nextSteps", []))
    operation = html.escape(str(data.get("operation", "")))
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title} - MCP AURA</title>
</head>
<body>
<main>
<h1>{title}</h1>
<p>{operation} operation {html.escape(status)}</p>
{detail_html}
<h2>Next steps</h2>
<ul>{steps}</ul>
<p><a href="{html.escape(settings.public_base_url, quote=True)}">Return to app</a></p>
</main>
</body>
</html>
"""
