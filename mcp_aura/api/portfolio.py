import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from ..core.errors import AuraUnavailableError
from ..providers.aura import AuraClient, get_aura_client
from ..types.requests import PortfolioQuery
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/portfolio")
async def get_portfolio(
    address: Optional[str] = None,
    aura: AuraClient = Depends(get_aura_client),
):
    """Wallet balances per network from the AURA API."""

    if not address:
        return error_response(400, "Address parameter is required")
    try:
        query = PortfolioQuery(address=address)
    except ValidationError as exc:
        return validation_error(exc, "Invalid address format")

    try:
        outcome = await aura.get_portfolio(query.address)
    except AuraUnavailableError as exc:
        logger.error("Portfolio lookup failed for %s: %s", query.address, exc.message)
        return error_response(500, "Failed to fetch portfolio data", message=exc.message)

    return success(
        outcome.value.to_api(),
        degraded=outcome.degraded,
        meta={
            "source": "AURA AdEx API",
            "version": "1.0.0",
            "cached": False,
            "fallbackReason": outcome.reason,
        },
    )
