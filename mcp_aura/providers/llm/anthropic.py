import time
from typing import Any, Dict, List, Optional

import anthropic
from anthropic import AsyncAnthropic

from .base import (
    LLMMessage,
    LLMProvider,
    LLMProviderAPIError,
    LLMProviderAuthError,
    LLMProviderRateLimitError,
    LLMResponse,
    ToolCall,
    ToolDefinition,
)


class AnthropicProvider(LLMProvider):
    """Claude via the Messages API, with native tool use"""

    def __init__(self, api_key: str, model: Optional[str] = None, **kwargs):
        if not model:
            raise ValueError("AnthropicProvider requires a model to be specified")
        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs) -> None:
        self.client = kwargs.get("client") or AsyncAnthropic(api_key=self.api_key)

    @staticmethod
    def _convert_message(msg: LLMMessage) -> Dict[str, Any]:
        if msg.role == "tool_result" and msg.tool_results:
            return {
                "role": "user",
                "content": [r.to_anthropic_format() for r in msg.tool_results],
            }

        if msg.role == "assistant" and msg.tool_calls:
            content: List[Dict[str, Any]] = []
            if msg.content:
                content.append({"type": "text", "text": msg.content})
            for tc in msg.tool_calls:
                content.append({"type": "tool_use", "id": tc.id, "name": tc.name, "input": tc.arguments})
            return {"role": "assistant", "content": content}

        return {"role": msg.role, "content": msg.content or ""}

    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        tools: Optional[List[ToolDefinition]] = None,
    ) -> LLMResponse:
        started = time.perf_counter()

        system_parts = [m.content for m in messages if m.role == "system" and m.content]
        request_params: Dict[str, Any] = {
            "model": self.model,
            "messages": [self._convert_message(m) for m in messages if m.role != "system"],
            "max_tokens": max_tokens or 4000,
        }
        if system_parts:
            request_params["system"] = "\n\n".join(system_parts)
        if temperature is not None:
            request_params["temperature"] = temperature
        if tools:
            request_params["tools"] = [t.to_anthropic_format() for t in tools]

        try:
            response = await self.client.messages.create(**request_params)
        except anthropic.AuthenticationError as e:
            self.logger.error("Anthropic authentication failed: %s", e)
            raise LLMProviderAuthError(f"Authentication failed: {e}") from e
        except anthropic.RateLimitError as e:
            self.logger.warning("Anthropic rate limit hit: %s", e)
            raise LLMProviderRateLimitError(f"Rate limit exceeded: {e}") from e
        except anthropic.APIError as e:
            self.logger.error("Anthropic API error: %s", e)
            raise LLMProviderAPIError(f"API error: {e}") from e

        text = ""
        tool_calls: List[ToolCall] = []
        for block in response.content or []:
            if block.type == "text":
                text += block.text
            elif block.type == "tool_use":
                tool_calls.append(ToolCall(id=block.id, name=block.name, arguments=dict(block.input or {})))

        return LLMResponse(
            content=text or None,
            tool_calls=tool_calls or None,
            tokens_used=response.usage.output_tokens if response.usage else None,
            model=self.model,
            finish_reason=response.stop_reason,
            response_time_ms=self._elapsed_ms(started),
        )
