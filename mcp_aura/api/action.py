import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..core.errors import McpAuraError, UnsupportedNetworkError
from ..core.store import KeyValueStore, get_store
from ..services.actions import prepare_action
from ..services.operations import ServiceFactory, get_service_factory
from ..services.payloads import normalize_action_payload
from ..types.requests import ActionRequest
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/action")
async def create_action(
    payload: Dict[str, Any] = Body(...),
    service_factory: ServiceFactory = Depends(get_service_factory),
    store: KeyValueStore = Depends(get_store),
):
    """Prepare an unsigned swap, stake or bridge transaction."""

    try:
        request = ActionRequest.model_validate(normalize_action_payload(payload))
    except ValidationError as exc:
        return validation_error(exc)

    try:
        data = await prepare_action(request, service_factory, store)
    except UnsupportedNetworkError as exc:
        return error_response(400, "Invalid request parameters", message=exc.message)
    except McpAuraError as exc:
        logger.warning("Transaction building failed: %s", exc.message)
        return error_response(500, "Failed to build transaction", message=exc.message)

    return success(data)
