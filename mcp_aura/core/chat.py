"""
LLM chat orchestration with in-process DeFi tools.

One completion with tool definitions; when the model asks for tools they run
against the same services the HTTP routes use, and a second completion turns
the results into the reply.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..config import settings
from ..providers.aura import AuraClient
from ..providers.llm import (
    LLMMessage,
    LLMProvider,
    ToolCall,
    ToolDefinition,
    ToolParameter,
    ToolParameterType,
    ToolResult,
)
from ..services.actions import prepare_action
from ..services.operations import ServiceFactory
from ..services.payloads import normalize_action_payload
from ..services.strategies import enrich_strategies, filter_by_risk
from ..services.transfers import prepare_transfer
from ..types.requests import ActionRequest, ChatRequest, TransferRequest
from .errors import McpAuraError
from .networks import SUPPORTED_NETWORKS, normalize_network
from .store import KeyValueStore
from .tokens import is_address

logger = logging.getLogger(__name__)

NETWORK_ENUM = list(SUPPORTED_NETWORKS)

# Representative gas limits per operation for ballpark fee quotes
TYPICAL_GAS_LIMITS: Dict[str, int] = {
    "transfer": 21_000,
    "erc20_transfer": 65_000,
    "swap": 180_000,
    "stake": 150_000,
    "bridge": 250_000,
}

CHAT_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="get_portfolio",
        description="Analyze a wallet's DeFi portfolio across supported networks using the AURA API",
        parameters=[
            ToolParameter(name="address", description="Wallet address to analyze (0x...)"),
        ],
    ),
    ToolDefinition(
        name="get_strategy",
        description="Get AI-generated DeFi strategy recommendations for a wallet from the AURA API",
        parameters=[
            ToolParameter(name="address", description="Wallet address for strategy analysis"),
            ToolParameter(
                name="risk_level",
                description="Only return strategies at this risk level",
                required=False,
                enum=["low", "moderate", "high"],
            ),
        ],
    ),
    ToolDefinition(
        name="execute_action",
        description=(
            "Prepare an unsigned swap, stake or bridge transaction for the user to sign. "
            "Nothing is broadcast."
        ),
        parameters=[
            ToolParameter(name="action", description="Operation to prepare", enum=["swap", "stake", "bridge"]),
            ToolParameter(name="fromToken", description="Source token symbol or address (e.g. ETH, USDC)"),
            ToolParameter(name="toToken", description="Destination token symbol or address", required=False),
            ToolParameter(name="amount", description="Amount in token units, e.g. 0.5"),
            ToolParameter(name="chain", description="Network", enum=NETWORK_ENUM),
            ToolParameter(
                name="slippage",
                type=ToolParameterType.NUMBER,
                description="Maximum slippage in percent",
                required=False,
            ),
            ToolParameter(name="protocol", description="Protocol, e.g. Uniswap, Aave", required=False),
            ToolParameter(name="fromAddress", description="Wallet preparing the action", required=False),
        ],
    ),
    ToolDefinition(
        name="transfer_tokens",
        description="Prepare an unsigned token transfer after checking balances and gas",
        parameters=[
            ToolParameter(name="fromAddress", description="Sender wallet address"),
            ToolParameter(name="toAddress", description="Recipient wallet address"),
            ToolParameter(name="token", description="Token symbol or address (e.g. ETH, USDC)"),
            ToolParameter(name="amount", description="Amount in token units"),
            ToolParameter(name="chain", description="Network", required=False, enum=NETWORK_ENUM),
        ],
    ),
    ToolDefinition(
        name="estimate_fees",
        description="Ballpark gas fee for a typical transaction of the given kind",
        parameters=[
            ToolParameter(name="action", description="Transaction kind", enum=sorted(TYPICAL_GAS_LIMITS)),
            ToolParameter(name="chain", description="Network", required=False, enum=NETWORK_ENUM),
        ],
    ),
]


def build_system_prompt(wallet_address: Optional[str]) -> str:
    wallet_line = (
        f"User's connected wallet address: {wallet_address}"
        if wallet_address
        else "No wallet connected yet."
    )
    return (
        "You are MCP AURA, a DeFi assistant backed by the AURA portfolio API.\n\n"
        "Tools:\n"
        "- get_portfolio: balances across networks\n"
        "- get_strategy: strategy recommendations\n"
        "- execute_action: prepare swaps, stakes and bridges for signing\n"
        "- transfer_tokens: prepare transfers for signing\n"
        "- estimate_fees: ballpark gas costs\n\n"
        f"{wallet_line}\n\n"
        "Prepared transactions are never broadcast; the user signs them in their own wallet. "
        "When a result is marked degraded, say that the figures are estimates. "
        "Explain risks alongside any suggested action."
    )


class ChatService:
    def __init__(
        self,
        provider: LLMProvider,
        aura: AuraClient,
        service_factory: ServiceFactory,
        store: KeyValueStore,
    ) -> None:
        self.provider = provider
        self.aura = aura
        self.service_factory = service_factory
        self.store = store
        self._handlers: Dict[str, Callable[[Dict[str, Any], Optional[str]], Awaitable[Any]]] = {
            "get_portfolio": self._get_portfolio,
            "get_strategy": self._get_strategy,
            "execute_action": self._execute_action,
            "transfer_tokens": self._transfer_tokens,
            "estimate_fees": self._estimate_fees,
        }

    async def respond(self, request: ChatRequest) -> Dict[str, Any]:
        conversation = [LLMMessage(role="system", content=build_system_prompt(request.wallet_address))]
        conversation.extend(LLMMessage(role=m.role, content=m.content) for m in request.messages)

        first = await self.provider.generate_response(
            conversation,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            tools=CHAT_TOOLS,
        )
        if not first.wants_tools:
            return {"message": first.content or ""}

        results = await asyncio.gather(*(self.run_tool(call, request.wallet_address) for call in first.tool_calls))

        conversation.append(LLMMessage(role="assistant", content=first.content, tool_calls=first.tool_calls))
        conversation.append(LLMMessage(role="tool_result", tool_results=list(results)))
        final = await self.provider.generate_response(
            conversation,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            tools=CHAT_TOOLS,
        )

        return {
            "message": final.content or "",
            "toolCalls": [call.model_dump() for call in first.tool_calls],
        }

    async def run_tool(self, call: ToolCall, wallet_address: Optional[str] = None) -> ToolResult:
        handler = self._handlers.get(call.name)
        if handler is None:
            return ToolResult(tool_call_id=call.id, error=f"Unknown tool: {call.name}")
        try:
            result = await handler(call.arguments, wallet_address)
        except McpAuraError as exc:
            logger.info("Tool %s failed: %s", call.name, exc.message)
            return ToolResult(tool_call_id=call.id, error=exc.message)
        except ValidationError as exc:
            return ToolResult(
                tool_call_id=call.id,
                error=f"Invalid arguments: {exc.errors(include_url=False, include_context=False)}",
            )
        return ToolResult(tool_call_id=call.id, result=result)

    # ---- tool handlers ----------------------------------------------------

    async def _get_portfolio(self, args: Dict[str, Any], wallet: Optional[str]) -> Any:
        address = _require_address(args.get("address") or wallet)
        outcome = await self.aura.get_portfolio(address)
        return {"portfolio": outcome.value.to_api(), "degraded": outcome.degraded}

    async def _get_strategy(self, args: Dict[str, Any], wallet: Optional[str]) -> Any:
        address = _require_address(args.get("address") or wallet)
        outcome = await self.aura.get_strategies(address)
        strategies = filter_by_risk(outcome.value, args.get("risk_level"))
        return {"strategies": enrich_strategies(strategies), "degraded": outcome.degraded}

    async def _execute_action(self, args: Dict[str, Any], wallet: Optional[str]) -> Any:
        payload = normalize_action_payload({**args, "fromAddress": args.get("fromAddress") or wallet})
        request = ActionRequest.model_validate(payload)
        return await prepare_action(request, self.service_factory, self.store)

    async def _transfer_tokens(self, args: Dict[str, Any], wallet: Optional[str]) -> Any:
        request = TransferRequest.model_validate({
            "fromAddress": args.get("fromAddress") or wallet,
            "toAddress": args.get("toAddress"),
            "token": args.get("token"),
            "amount": str(args.get("amount", "")),
            "network": normalize_network(args.get("chain") or "ethereum"),
        })
        return await prepare_transfer(request, self.service_factory)

    async def _estimate_fees(self, args: Dict[str, Any], wallet: Optional[str]) -> Any:
        action = args.get("action", "transfer")
        gas_limit = TYPICAL_GAS_LIMITS.get(action, TYPICAL_GAS_LIMITS["swap"])
        service = self.service_factory(normalize_network(args.get("chain") or "ethereum"))
        outcome = await service.fees.estimate_for_gas_limit(gas_limit)
        return {"action": action, "estimatedFees": outcome.value.to_dict(), "degraded": outcome.degraded}


def _require_address(value: Optional[str]) -> str:
    if not value or not is_address(value):
        raise McpAuraError("A valid wallet address (0x followed by 40 hex characters) is required")
    return value
