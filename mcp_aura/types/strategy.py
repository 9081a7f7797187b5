from typing import Any, List, Optional

from pydantic import Field, field_validator

from .portfolio import AuraModel, _numeric_to_str


class PlatformLink(AuraModel):
    name: str = ""
    url: str = ""


class ActionStep(AuraModel):
    tokens: str = Field(default="", description="Comma-separated tokens involved")
    description: str = ""
    platforms: List[PlatformLink] = Field(default_factory=list)
    networks: List[str] = Field(default_factory=list)
    operations: List[str] = Field(default_factory=list)
    apy: Optional[str] = None
    risk: Optional[str] = None
    estimated_gas: Optional[str] = Field(default=None, alias="estimatedGas")
    slippage: Optional[str] = None

    @field_validator("apy", "slippage", "estimated_gas", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)


class Strategy(AuraModel):
    name: str = ""
    risk: str = Field(default="moderate", description="low, moderate or high")
    expected_yield: Optional[str] = Field(default=None, alias="expectedYield")
    timeframe: Optional[str] = None
    description: str = ""
    actions: List[ActionStep] = Field(default_factory=list)

    @field_validator("expected_yield", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)


class LLMInfo(AuraModel):
    provider: str = ""
    model: str = ""


class StrategyGroup(AuraModel):
    llm: LLMInfo = Field(default_factory=LLMInfo)
    response: List[Strategy] = Field(default_factory=list)


class StrategyResponse(AuraModel):
    strategies: List[StrategyGroup] = Field(default_factory=list)

    @property
    def total_strategies(self) -> int:
        return sum(len(group.response) for group in self.strategies)
