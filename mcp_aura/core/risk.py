"""Static risk classification per operation and platform."""

from typing import Dict

DEFAULT_RISK = "moderate"

RISK_MATRIX: Dict[str, Dict[str, str]] = {
    "swap": {"uniswap": "low", "sushiswap": "low", "1inch": "moderate"},
    "bridge": {"stargate": "moderate", "hop": "moderate", "synapse": "high"},
    "stake": {"aave": "low", "compound": "low", "yearn": "moderate"},
    "transfer": {"native": "low"},
}


def assess_risk(operation: str, platform: str) -> str:
    return RISK_MATRIX.get(operation.lower(), {}).get(platform.strip().lower(), DEFAULT_RISK)
