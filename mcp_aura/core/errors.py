"""
Error types shared by the transaction-preparation layer.

Builders either substitute a documented fallback (see ``Outcome``) or raise
one of these; route handlers turn them into JSON envelopes.
"""

from typing import Any, Dict, Optional


class McpAuraError(Exception):
    """Base exception for MCP AURA errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnsupportedNetworkError(McpAuraError):
    """Network key is not in the registry."""

    def __init__(self, network: str):
        super().__init__(f"Unsupported network: {network}", {"network": network})
        self.network = network


class UnknownTokenError(McpAuraError):
    """Symbol is not in the network's token table."""

    def __init__(self, token: str, network: str):
        super().__init__(
            f'Token symbol "{token}" not found on {network} network',
            {"token": token, "network": network},
        )
        self.token = token
        self.network = network


class UnsupportedPlatformError(McpAuraError):
    """No contract is configured for the requested platform."""

    def __init__(self, operation: str, platform: str):
        super().__init__(
            f"Unsupported {operation} platform: {platform}",
            {"operation": operation, "platform": platform},
        )


class InvalidAmountError(McpAuraError):
    """Amount string cannot be represented in the token's smallest unit."""
    pass


class SwapBuildError(McpAuraError):
    """Swap transaction could not be prepared."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to build swap transaction: {reason}", {"reason": reason})


class RpcError(McpAuraError):
    """JSON-RPC endpoint returned an error or was unreachable."""

    def __init__(self, message: str, method: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message, {"method": method, "code": code})
        self.method = method
        self.code = code


class RouteNotFoundError(McpAuraError):
    """Route finder produced no usable call parameters."""
    pass


class AuraUnavailableError(McpAuraError):
    """Every AURA base URL failed."""
    pass


class InsufficientFundsError(McpAuraError):
    """Sender cannot cover the transfer amount or its gas fee."""
    pass


class NotFoundError(McpAuraError):
    """Unknown or expired action / session id."""
    pass


class MissingParametersError(McpAuraError):
    """Operation-specific fields were not supplied."""
    pass
