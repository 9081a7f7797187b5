"""
Provider-neutral chat types.

The chat service speaks only in these models; each provider converts them to
and from its own wire format.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolParameterType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class ToolParameter(BaseModel):
    name: str
    description: str
    type: ToolParameterType = ToolParameterType.STRING
    required: bool = True
    enum: Optional[List[str]] = None

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type.value, "description": self.description}
        if self.enum:
            schema["enum"] = self.enum
        return schema


class ToolDefinition(BaseModel):
    """A wallet operation the model may ask the backend to run."""

    name: str
    description: str
    parameters: List[ToolParameter] = Field(default_factory=list)

    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }

    def to_anthropic_format(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "input_schema": self.input_schema()}


class ToolCall(BaseModel):
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    tool_call_id: str
    result: Any = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_anthropic_format(self) -> Dict[str, Any]:
        payload = self.error if self.failed else self.result
        if not isinstance(payload, str):
            # Decimal amounts and datetimes from the AURA models
            payload = json.dumps(payload, default=str)
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_call_id,
            "content": payload,
            "is_error": self.failed,
        }


class LLMMessage(BaseModel):
    role: str  # system | user | assistant | tool_result
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_results: Optional[List[ToolResult]] = None


class LLMResponse(BaseModel):
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tokens_used: Optional[int] = None
    model: Optional[str] = None
    finish_reason: Optional[str] = None
    response_time_ms: Optional[float] = None

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)


class LLMProvider(ABC):
    """One chat completion backend."""

    def __init__(self, api_key: str, model: str, **kwargs):
        self.api_key = api_key
        self.model = model
        self.logger = logging.getLogger(f"mcp_aura.llm.{self.__class__.__name__}")
        self._setup_client(**kwargs)

    @abstractmethod
    def _setup_client(self, **kwargs) -> None:
        """Create the vendor SDK client."""

    @abstractmethod
    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        tools: Optional[List[ToolDefinition]] = None,
    ) -> LLMResponse:
        """Run one completion; the response may request tool calls instead of text."""

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 1)


class LLMProviderError(Exception):
    """Raised when the model backend cannot produce a reply."""


class LLMProviderRateLimitError(LLMProviderError):
    pass


class LLMProviderAuthError(LLMProviderError):
    pass


class LLMProviderAPIError(LLMProviderError):
    pass
