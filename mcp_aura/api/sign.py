import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from ..core.errors import McpAuraError, NotFoundError
from ..core.store import KeyValueStore, get_store
from ..services.operations import ServiceFactory, get_service_factory
from ..services.sessions import complete_sign_session, create_sign_session, render_callback_html
from ..types.requests import SignCallbackQuery, SignRequest
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)


def _wants_html(request: Request) -> bool:
    user_agent = request.headers.get("user-agent", "")
    return "Mozilla" in user_agent and "Mobile" not in user_agent


@router.post("/sign-request")
async def create_sign_request(
    payload: Dict[str, Any] = Body(...),
    service_factory: ServiceFactory = Depends(get_service_factory),
    store: KeyValueStore = Depends(get_store),
):
    """Prepare a transaction and hand it to the user's wallet via WalletConnect."""

    try:
        request = SignRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        data = await create_sign_session(request, service_factory, store)
    except McpAuraError as exc:
        logger.warning("Signature request failed: %s", exc.message)
        return error_response(500, "Failed to prepare signature request", message=exc.message)

    return success(data)


@router.get("/sign-callback")
async def sign_callback(
    request: Request,
    sessionId: Optional[str] = None,
    status: Optional[str] = None,
    txHash: Optional[str] = None,
    network: Optional[str] = None,
    error: Optional[str] = None,
    service_factory: ServiceFactory = Depends(get_service_factory),
    store: KeyValueStore = Depends(get_store),
):
    """Wallet redirect target once the user signs, rejects or abandons."""

    try:
        query = SignCallbackQuery.model_validate({
            "sessionId": sessionId,
            "status": status,
            "txHash": txHash,
            "network": network,
            "error": error,
        })
    except ValidationError as exc:
        return validation_error(exc, "Invalid callback parameters")

    try:
        data = await complete_sign_session(
            store,
            service_factory,
            query.session_id,
            query.status,
            tx_hash=query.tx_hash,
            network=query.network,
            error=query.error,
        )
    except NotFoundError as exc:
        return error_response(404, exc.message)

    if _wants_html(request):
        return HTMLResponse(render_callback_html(data))
    return success(data)
