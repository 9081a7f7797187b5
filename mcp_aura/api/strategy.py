import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from ..core.errors import AuraUnavailableError
from ..providers.aura import AuraClient, get_aura_client
from ..services.strategies import enrich_strategies, filter_by_risk
from ..types.requests import StrategyQuery
from .responses import error_response, success, validation_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/strategy")
async def get_strategy(
    address: Optional[str] = None,
    riskLevel: Optional[str] = None,
    timeframe: Optional[str] = None,
    aura: AuraClient = Depends(get_aura_client),
):
    """AI strategy recommendations, optionally filtered by risk level."""

    if not address:
        return error_response(400, "Address parameter is required")
    try:
        query = StrategyQuery.model_validate({
            "address": address,
            "riskLevel": riskLevel or None,
            "timeframe": timeframe or None,
        })
    except ValidationError as exc:
        return validation_error(exc, "Invalid parameters")

    try:
        outcome = await aura.get_strategies(query.address)
    except AuraUnavailableError as exc:
        logger.error("Strategy lookup failed for %s: %s", query.address, exc.message)
        return error_response(500, "Failed to fetch strategy data", message=exc.message)

    filtered = filter_by_risk(outcome.value, query.risk_level)
    logger.info("Strategies for %s: %d after filtering", query.address, filtered.total_strategies)

    return success(
        enrich_strategies(filtered),
        filters={"riskLevel": query.risk_level, "timeframe": query.timeframe},
        degraded=outcome.degraded,
        meta={
            "source": "AURA AdEx API",
            "version": "1.0.0",
            "totalStrategies": filtered.total_strategies,
            "fallbackReason": outcome.reason,
        },
    )
