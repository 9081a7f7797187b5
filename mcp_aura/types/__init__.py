from .portfolio import NetworkHoldings, NetworkInfo, Portfolio, TokenHolding
from .requests import (
    ActionRequest,
    ChatMessage,
    ChatRequest,
    SignCallbackQuery,
    SignRequest,
    TransferRequest,
    WalletActionWrite,
)
from .strategy import ActionStep, PlatformLink, Strategy, StrategyGroup, StrategyResponse

__all__ = [
    "TokenHolding",
    "NetworkInfo",
    "NetworkHoldings",
    "Portfolio",
    "ActionRequest",
    "ChatMessage",
    "ChatRequest",
    "SignCallbackQuery",
    "SignRequest",
    "TransferRequest",
    "WalletActionWrite",
    "ActionStep",
    "PlatformLink",
    "Strategy",
    "StrategyGroup",
    "StrategyResponse",
]
