from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _numeric_to_str(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class AuraModel(BaseModel):
    """Lenient base for AURA payloads: unknown fields are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenHolding(AuraModel):
    address: str = Field(default="", description="Token contract address")
    symbol: str = Field(default="", description="Token symbol (e.g. ETH, USDC)")
    balance: str = Field(default="0", description="Human readable balance")
    balance_usd: str = Field(default="0", alias="balanceUSD", description="Balance value in USD")
    network: Optional[str] = Field(default=None, description="Network key")
    decimals: Optional[int] = Field(default=None, description="Token decimal places")
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")

    @field_validator("balance", "balance_usd", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)


class NetworkInfo(AuraModel):
    name: str = Field(default="", description="Network display name")
    chain_id: str = Field(default="", alias="chainId")
    rpc_url: Optional[str] = Field(default=None, alias="rpcUrl")
    explorer_url: Optional[str] = Field(default=None, alias="explorerUrl")

    @field_validator("chain_id", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)


class NetworkHoldings(AuraModel):
    network: NetworkInfo = Field(default_factory=NetworkInfo)
    tokens: List[TokenHolding] = Field(default_factory=list)
    total_value_usd: str = Field(default="0", alias="totalValueUSD")

    @field_validator("total_value_usd", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)


class Portfolio(AuraModel):
    address: str = Field(description="Wallet address")
    total_value_usd: str = Field(default="0", alias="totalValueUSD", description="Total portfolio value in USD")
    networks: List[NetworkHoldings] = Field(default_factory=list, description="Holdings grouped by network")

    @field_validator("total_value_usd", mode="before")
    @classmethod
    def coerce_numbers(cls, value: Any) -> Any:
        return _numeric_to_str(value)
