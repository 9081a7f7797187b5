from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..core.errors import NotFoundError
from ..core.store import KeyValueStore, get_store
from ..services.actions import load_action, store_client_action
from ..types.requests import WalletActionWrite
from .responses import error_response, validation_error

router = APIRouter()


@router.get("/wallet/action")
async def read_action(
    actionId: Optional[str] = None,
    store: KeyValueStore = Depends(get_store),
):
    """Fetch a prepared action for the signing page."""

    if not actionId:
        return error_response(400, "Action ID required")
    try:
        record = await load_action(store, actionId)
    except NotFoundError as exc:
        return error_response(404, exc.message)
    return {"success": True, **record.to_dict()}


@router.post("/wallet/action")
async def write_action(
    payload: Dict[str, Any] = Body(...),
    store: KeyValueStore = Depends(get_store),
):
    """Store a client-built action so a signing page can pick it up."""

    try:
        request = WalletActionWrite.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc, "Action ID and transaction request required")

    record = await store_client_action(store, request.action_id, request.transaction_request, request.metadata)
    return {
        "success": True,
        "message": "Action stored successfully",
        "actionId": record.action_id,
        "expiresAt": record.expires_at.isoformat() if record.expires_at else None,
    }
