"""
Tests for chat orchestration, tool dispatch and the Anthropic provider adapter.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from mcp_aura.config import settings
from mcp_aura.core.chat import CHAT_TOOLS, ChatService, build_system_prompt
from mcp_aura.core.store import InMemoryStore
from mcp_aura.providers.aura import AuraClient
from mcp_aura.providers.llm import (
    AnthropicProvider,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ToolCall,
    ToolResult,
    get_llm_provider,
)
from mcp_aura.types.requests import ChatRequest

from fakes import ALICE, ScriptedProvider, make_service


def _aura() -> AuraClient:
    return AuraClient(
        base_urls=["https://aura.test"],
        mock_fallback=True,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )


def _chat(provider: LLMProvider, store=None) -> ChatService:
    return ChatService(provider, _aura(), lambda network: make_service(network), store or InMemoryStore())


def _request(text: str, wallet=ALICE) -> ChatRequest:
    return ChatRequest.model_validate({"messages": [{"role": "user", "content": text}], "walletAddress": wallet})


@pytest.mark.asyncio
async def test_plain_reply_without_tools():
    provider = ScriptedProvider([LLMResponse(content="Hello there")])

    result = await _chat(provider).respond(_request("hi"))

    assert result == {"message": "Hello there"}
    conversation = provider.conversations[0]
    assert conversation[0].role == "system"
    assert ALICE in conversation[0].content
    assert conversation[1].content == "hi"


@pytest.mark.asyncio
async def test_tool_round_trip_uses_connected_wallet():
    provider = ScriptedProvider([
        LLMResponse(tool_calls=[ToolCall(id="call_1", name="get_portfolio", arguments={})]),
        LLMResponse(content="You hold 0.5 ETH"),
    ])

    result = await _chat(provider).respond(_request("what do I hold?"))

    assert result["message"] == "You hold 0.5 ETH"
    assert result["toolCalls"][0]["name"] == "get_portfolio"
    tool_message = provider.conversations[1][-1]
    assert tool_message.role == "tool_result"
    tool_result = tool_message.tool_results[0]
    assert tool_result.tool_call_id == "call_1"
    assert tool_result.result["portfolio"]["address"] == ALICE
    assert tool_result.result["degraded"] is True


@pytest.mark.asyncio
async def test_unknown_tool_is_reported_as_error():
    result = await _chat(ScriptedProvider([])).run_tool(ToolCall(id="x", name="launch_rocket"))
    assert result.error == "Unknown tool: launch_rocket"


@pytest.mark.asyncio
async def test_portfolio_tool_requires_an_address():
    result = await _chat(ScriptedProvider([])).run_tool(ToolCall(id="x", name="get_portfolio"), None)
    assert "valid wallet address" in result.error


@pytest.mark.asyncio
async def test_execute_action_prepares_and_stores():
    store = InMemoryStore()
    call = ToolCall(id="x", name="execute_action", arguments={
        "action": "swap", "fromToken": "ETH", "toToken": "USDC", "amount": "0.1", "chain": "ethereum",
    })

    result = await _chat(ScriptedProvider([]), store).run_tool(call, ALICE)

    assert result.error is None
    assert result.result["operation"] == "swap"
    assert result.result["degraded"] is True
    assert await store.get(f"action:{result.result['actionId']}") is not None


@pytest.mark.asyncio
async def test_execute_action_with_bad_arguments():
    call = ToolCall(id="x", name="execute_action", arguments={
        "action": "swap", "fromToken": "ETH", "toToken": "USDC", "amount": "1", "chain": "solana",
    })

    result = await _chat(ScriptedProvider([])).run_tool(call, ALICE)

    assert result.error.startswith("Invalid arguments")


@pytest.mark.asyncio
async def test_estimate_fees_uses_typical_gas_limit():
    call = ToolCall(id="x", name="estimate_fees", arguments={"action": "erc20_transfer", "chain": "arbitrum"})

    result = await _chat(ScriptedProvider([])).run_tool(call)

    assert result.result["estimatedFees"]["gasLimit"] == "65000"
    assert result.result["degraded"] is False


def test_system_prompt_without_wallet():
    assert "No wallet connected yet." in build_system_prompt(None)


def test_tool_definitions_render_for_anthropic():
    execute = next(tool for tool in CHAT_TOOLS if tool.name == "execute_action").to_anthropic_format()

    assert execute["input_schema"]["properties"]["chain"]["enum"] == ["ethereum", "arbitrum", "polygon"]
    assert "toToken" not in execute["input_schema"]["required"]
    assert execute["input_schema"]["properties"]["slippage"]["type"] == "number"


def test_get_llm_provider_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "anthropic_api_key", "")

    with pytest.raises(ValueError):
        get_llm_provider()


class TestAnthropicProvider:
    @pytest.mark.asyncio
    async def test_parses_text_and_tool_use_blocks(self):
        client = SimpleNamespace(messages=SimpleNamespace(create=AsyncMock(return_value=SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="Checking"),
                SimpleNamespace(type="tool_use", id="tu_1", name="get_portfolio", input={"address": ALICE}),
            ],
            usage=SimpleNamespace(output_tokens=12),
            stop_reason="tool_use",
        ))))
        provider = AnthropicProvider(api_key="k", model="claude-test", client=client)

        response = await provider.generate_response(
            [LLMMessage(role="system", content="be brief"), LLMMessage(role="user", content="hi")],
            tools=CHAT_TOOLS,
        )

        assert response.content == "Checking"
        assert response.tool_calls[0].arguments == {"address": ALICE}
        assert response.finish_reason == "tool_use"
        params = client.messages.create.await_args.kwargs
        assert params["system"] == "be brief"
        assert params["messages"] == [{"role": "user", "content": "hi"}]
        assert len(params["tools"]) == len(CHAT_TOOLS)

    def test_tool_results_become_user_blocks(self):
        message = LLMMessage(role="tool_result", tool_results=[ToolResult(tool_call_id="tu_1", result={"ok": True})])

        converted = AnthropicProvider._convert_message(message)

        assert converted["role"] == "user"
        assert converted["content"][0] == {
            "type": "tool_result",
            "tool_use_id": "tu_1",
            "content": '{"ok": true}',
            "is_error": False,
        }
