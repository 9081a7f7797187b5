from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

ADDRESS_REGEX = r"^0x[a-fA-F0-9]{40}$"

Network = Literal["ethereum", "arbitrum", "polygon"]
RiskLevel = Literal["low", "moderate", "high"]
Timeframe = Literal["1d", "7d", "30d", "90d"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = Field(description="Message role: user or assistant")
    content: str = Field(description="Message content")


class ChatRequest(CamelModel):
    messages: List[ChatMessage] = Field(min_length=1, description="Chat conversation history")
    wallet_address: Optional[str] = Field(
        default=None,
        alias="walletAddress",
        pattern=ADDRESS_REGEX,
        description="Connected wallet, surfaced to the model",
    )


class PortfolioQuery(BaseModel):
    address: str = Field(pattern=ADDRESS_REGEX)


class StrategyQuery(CamelModel):
    address: str = Field(pattern=ADDRESS_REGEX)
    risk_level: Optional[RiskLevel] = Field(default=None, alias="riskLevel")
    timeframe: Optional[Timeframe] = None


class ActionRequest(CamelModel):
    from_address: str = Field(alias="fromAddress", pattern=ADDRESS_REGEX)
    operation: Literal["swap", "stake", "bridge"]
    platform: str = Field(min_length=1)
    token_in: str = Field(alias="tokenIn", min_length=1)
    token_out: str = Field(alias="tokenOut", min_length=1)
    amount_in: str = Field(alias="amountIn", min_length=1)
    network: Network
    slippage: str = "0.5"
    deadline: Optional[int] = None


class TransferRequest(CamelModel):
    from_address: str = Field(alias="fromAddress", pattern=ADDRESS_REGEX)
    to_address: str = Field(alias="toAddress", pattern=ADDRESS_REGEX)
    token: str = Field(min_length=1)
    amount: str = Field(min_length=1)
    network: Network
    memo: Optional[str] = None


class SignRequest(CamelModel):
    from_address: str = Field(alias="fromAddress", pattern=ADDRESS_REGEX)
    operation: Literal["swap", "stake", "bridge", "transfer"]
    platform: Optional[str] = None
    token_in: Optional[str] = Field(default=None, alias="tokenIn")
    token_out: Optional[str] = Field(default=None, alias="tokenOut")
    amount_in: Optional[str] = Field(default=None, alias="amountIn")
    target_address: Optional[str] = Field(default=None, alias="targetAddress", pattern=ADDRESS_REGEX)
    network: Network
    user_callback_url: HttpUrl = Field(alias="userCallbackUrl")
    metadata: Optional[Dict[str, Any]] = None


class WalletActionWrite(CamelModel):
    action_id: str = Field(alias="actionId", min_length=1)
    transaction_request: Dict[str, Any] = Field(alias="transactionRequest")
    metadata: Optional[Dict[str, Any]] = None


class SignCallbackQuery(CamelModel):
    session_id: str = Field(alias="sessionId", min_length=1)
    status: Literal["success", "fail", "cancelled"]
    tx_hash: Optional[str] = Field(default=None, alias="txHash", pattern=r"^0x[a-fA-F0-9]{64}$")
    network: Optional[Network] = None
    error: Optional[str] = None
