from typing import Dict, Optional, Type

from .anthropic import AnthropicProvider
from .base import (
    LLMMessage,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    ToolCall,
    ToolDefinition,
    ToolParameter,
    ToolParameterType,
    ToolResult,
)

PROVIDER_ALIAS_MAP: Dict[str, str] = {
    "claude": "anthropic",
}

PROVIDER_REGISTRY: Dict[str, Type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
}


def canonical_provider_name(name: str) -> str:
    """Normalize provider aliases to their canonical identifier."""

    return PROVIDER_ALIAS_MAP.get(name.lower(), name.lower())


def get_llm_provider(provider_name: Optional[str] = None, model: Optional[str] = None) -> LLMProvider:
    """Instantiate the configured provider; raises ValueError when unusable."""

    from ...config import settings

    resolved = canonical_provider_name(provider_name or settings.llm_provider)
    provider_class = PROVIDER_REGISTRY.get(resolved)
    if provider_class is None:
        available = ", ".join(PROVIDER_REGISTRY)
        raise ValueError(f"Unsupported provider '{resolved}'. Available providers: {available}")

    if not settings.has_llm_key:
        raise ValueError(f"No API key configured for provider: {resolved}")

    resolved_model = (model or "").strip() or settings.resolve_default_model(resolved)
    return provider_class(api_key=settings.anthropic_api_key, model=resolved_model)


__all__ = [
    "AnthropicProvider",
    "LLMMessage",
    "LLMProvider",
    "LLMProviderError",
    "LLMResponse",
    "PROVIDER_REGISTRY",
    "ToolCall",
    "ToolDefinition",
    "ToolParameter",
    "ToolParameterType",
    "ToolResult",
    "canonical_provider_name",
    "get_llm_provider",
]
