"""Strategy filtering and enrichment for the strategy endpoint and chat tools."""

from typing import Any, Dict, Optional

from ..core.execution.tx_builder import generate_id
from ..types.strategy import StrategyResponse

ESTIMATED_TIME = "2-5 minutes"


def filter_by_risk(response: StrategyResponse, risk_level: Optional[str]) -> StrategyResponse:
    if not risk_level:
        return response
    groups = [
        group.model_copy(update={"response": [s for s in group.response if s.risk == risk_level]})
        for group in response.strategies
    ]
    return response.model_copy(update={"strategies": groups})


def enrich_strategies(response: StrategyResponse) -> Dict[str, Any]:
    """Serialize strategies, tagging every action step as executable."""

    payload = response.to_api()
    for group in payload.get("strategies", []):
        for strategy in group.get("response", []):
            for action in strategy.get("actions", []):
                operations = action.get("operations") or []
                action.update({
                    "id": generate_id("action"),
                    "executable": True,
                    "estimatedTime": ESTIMATED_TIME,
                    "complexity": "complex" if len(operations) > 1 else "simple",
                })
    return payload
