import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..core.errors import InsufficientFundsError, McpAuraError
from ..core.networks import SUPPORTED_NETWORKS
from ..services.operations import ServiceFactory, get_service_factory
from ..services.transfers import prepare_transfer, transfer_status
from ..types.requests import TransferRequest
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/transfer")
async def create_transfer(
    payload: Dict[str, Any] = Body(...),
    service_factory: ServiceFactory = Depends(get_service_factory),
):
    """Prepare a native or ERC-20 transfer after balance and gas checks."""

    try:
        request = TransferRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        data = await prepare_transfer(request, service_factory)
    except InsufficientFundsError as exc:
        return error_response(400, exc.message, data=exc.details)
    except McpAuraError as exc:
        logger.warning("Transfer preparation failed: %s", exc.message)
        return error_response(500, "Failed to prepare transfer", message=exc.message)

    return success(data)


@router.get("/transfer")
async def get_transfer_status(
    txHash: Optional[str] = None,
    network: Optional[str] = None,
    transferId: Optional[str] = None,
    service_factory: ServiceFactory = Depends(get_service_factory),
):
    """Receipt-based status of a broadcast transfer."""

    if not txHash or not network:
        return error_response(400, "txHash and network parameters are required")
    if network not in SUPPORTED_NETWORKS:
        return error_response(400, "Invalid request parameters", message=f"Unsupported network: {network}")

    return success(await transfer_status(txHash, network, service_factory, transfer_id=transferId))
