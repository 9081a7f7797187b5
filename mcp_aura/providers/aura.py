"""Failover client for the AURA portfolio and strategy API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..config import settings
from ..core.errors import AuraUnavailableError
from ..core.execution.models import Outcome
from ..types.portfolio import Portfolio
from ..types.strategy import StrategyResponse

logger = logging.getLogger(__name__)


class AuraClient:
    """Tries each configured base URL in order, one attempt each."""

    name = "aura"

    def __init__(
        self,
        *,
        base_urls: Optional[List[str]] = None,
        api_key: Optional[str] = None,
        timeout_s: Optional[float] = None,
        mock_fallback: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_urls = [url.rstrip("/") for url in (base_urls or settings.aura_base_urls)]
        self.api_key = settings.aura_api_key if api_key is None else api_key
        self.timeout_s = timeout_s or settings.aura_timeout_seconds
        self.mock_fallback = settings.aura_mock_fallback if mock_fallback is None else mock_fallback
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        last_error: Optional[Exception] = None

        for base_url in self.base_urls:
            try:
                async with httpx.AsyncClient(
                    base_url=base_url,
                    timeout=self.timeout_s,
                    transport=self._transport,
                ) as client:
                    response = await client.get(path, params=params, headers=self._headers())
                    response.raise_for_status()
                    payload = response.json()
                logger.debug("AURA %s served by %s", path, base_url)
                return payload
            except (httpx.HTTPError, ValueError) as exc:
                logger.info("AURA candidate %s failed for %s: %s", base_url, path, exc)
                last_error = exc
                continue

        raise AuraUnavailableError(
            f"All AURA hosts failed for {path}: {last_error}",
            {"path": path, "candidates": self.base_urls},
        )

    async def get_portfolio(self, address: str) -> Outcome[Portfolio]:
        try:
            data = await self._get("/portfolio/balances", {"address": address})
            body = data if isinstance(data, dict) else {}
            portfolio = Portfolio.model_validate({**body, "address": body.get("address") or address})
            return Outcome.live(portfolio)
        except (AuraUnavailableError, ValidationError) as exc:
            if not self.mock_fallback:
                raise _unavailable(exc)
            logger.warning("Serving sample portfolio for %s: %s", address, exc)
            return Outcome.fallback(sample_portfolio(address), f"AURA portfolio unavailable: {exc}")

    async def get_strategies(self, address: str) -> Outcome[StrategyResponse]:
        try:
            data = await self._get("/portfolio/strategies", {"address": address})
            return Outcome.live(StrategyResponse.model_validate(data if isinstance(data, dict) else {}))
        except (AuraUnavailableError, ValidationError) as exc:
            if not self.mock_fallback:
                raise _unavailable(exc)
            logger.warning("Serving sample strategies for %s: %s", address, exc)
            return Outcome.fallback(sample_strategies(), f"AURA strategies unavailable: {exc}")


def _unavailable(exc: Exception) -> AuraUnavailableError:
    if isinstance(exc, AuraUnavailableError):
        return exc
    return AuraUnavailableError(f"AURA returned an unexpected payload: {exc}")


def get_aura_client() -> AuraClient:
    """FastAPI dependency."""
    return AuraClient()


def sample_portfolio(address: str) -> Portfolio:
    return Portfolio.model_validate({
        "address": address,
        "totalValueUSD": "2450.75",
        "networks": [
            {
                "network": {
                    "name": "Arbitrum One",
                    "chainId": "42161",
                    "explorerUrl": "https://arbiscan.io",
                },
                "totalValueUSD": "1200.50",
                "tokens": [
                    {
                        "address": "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
                        "symbol": "USDC",
                        "balance": "1200",
                        "balanceUSD": "1200.00",
                        "network": "arbitrum",
                        "decimals": 6,
                    }
                ],
            },
            {
                "network": {
                    "name": "Ethereum",
                    "chainId": "1",
                    "explorerUrl": "https://etherscan.io",
                },
                "totalValueUSD": "1250.25",
                "tokens": [
                    {
                        "address": "0x0000000000000000000000000000000000000000",
                        "symbol": "ETH",
                        "balance": "0.5",
                        "balanceUSD": "1250.25",
                        "network": "ethereum",
                        "decimals": 18,
                    }
                ],
            },
        ],
    })


def sample_strategies() -> StrategyResponse:
    return StrategyResponse.model_validate({
        "strategies": [
            {
                "llm": {"provider": "sample", "model": "static"},
                "response": [
                    {
                        "name": "Yield Optimization Strategy",
                        "risk": "moderate",
                        "expectedYield": "8.5%",
                        "timeframe": "30 days",
                        "description": "Optimize the portfolio for yield while keeping moderate risk exposure.",
                        "actions": [
                            {
                                "tokens": "USDC, USDT",
                                "description": "Swap 50% of USDC to USDT on Uniswap V3 for deeper liquidity pools.",
                                "platforms": [{"name": "Uniswap V3", "url": "https://app.uniswap.org/#/swap"}],
                                "networks": ["arbitrum"],
                                "operations": ["swap"],
                                "apy": "3.5%",
                                "risk": "low",
                                "estimatedGas": "0.002 ETH",
                                "slippage": "0.5%",
                            },
                            {
                                "tokens": "USDC, ETH",
                                "description": "Provide liquidity to the USDC/ETH pool on Uniswap V3 to earn fees.",
                                "platforms": [{"name": "Uniswap V3", "url": "https://app.uniswap.org/#/pool"}],
                                "networks": ["arbitrum"],
                                "operations": ["stake", "liquidity"],
                                "apy": "12.3%",
                                "risk": "moderate",
                                "estimatedGas": "0.005 ETH",
                                "slippage": "1%",
                            },
                        ],
                    },
                    {
                        "name": "Cross-Chain Arbitrage",
                        "risk": "high",
                        "expectedYield": "15.2%",
                        "timeframe": "7 days",
                        "description": "Take advantage of price differences across chains.",
                        "actions": [
                            {
                                "tokens": "ETH",
                                "description": "Bridge ETH from Ethereum to Arbitrum using Stargate for lower fees.",
                                "platforms": [{"name": "Stargate", "url": "https://stargate.finance"}],
                                "networks": ["ethereum", "arbitrum"],
                                "operations": ["bridge"],
                                "apy": "0%",
                                "risk": "low",
                                "estimatedGas": "0.01 ETH",
                                "slippage": "0.1%",
                            }
                        ],
                    },
                ],
            }
        ]
    })
