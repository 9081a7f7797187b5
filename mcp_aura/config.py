import os

from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.anthropic_api_key:
            fallback = os.getenv("CLAUDE_API_KEY")
            if fallback:
                object.__setattr__(self, "anthropic_api_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="auto", description="Log renderer: auto, json or console")
    public_base_url: str = Field(
        default="http://localhost:8000",
        description="Externally reachable base URL, used for signing callbacks",
    )

    # AURA portfolio / strategy API
    aura_api_key: str = Field(default="", description="AURA API bearer token")
    aura_base_urls: List[str] = Field(
        default_factory=lambda: [
            "https://aura.adex.network/api",
            "https://aura.adex.network/v1",
            "https://aura.adex.network",
        ],
        description="Candidate AURA base URLs, tried in order",
    )
    aura_timeout_seconds: float = Field(default=10.0, gt=0, description="Per-candidate AURA timeout")
    aura_mock_fallback: bool = Field(
        default=True,
        description="Serve sample portfolio/strategy data (flagged degraded) when every AURA host fails",
    )

    # Route finder (Relay)
    relay_base_url: str = Field(
        default="",
        description="Override the default Relay API base URL",
    )
    relay_timeout_seconds: int = Field(default=20, description="Relay quote timeout")

    # JSON-RPC
    rpc_timeout_seconds: float = Field(default=30.0, gt=0, description="JSON-RPC request timeout")
    token_metadata_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Overall timeout for reading ERC-20 decimals/symbol/name",
    )
    ethereum_rpc_url: str = Field(default="", description="Override the Ethereum RPC endpoint")
    arbitrum_rpc_url: str = Field(default="", description="Override the Arbitrum RPC endpoint")
    polygon_rpc_url: str = Field(default="", description="Override the Polygon RPC endpoint")

    # Fee estimation
    native_usd_rate: Decimal = Field(
        default=Decimal("2500"),
        description="Fixed native-currency/USD rate used for fee estimates (no price oracle)",
    )
    fallback_gas_limit: int = Field(default=200_000, description="Gas limit used when estimation fails")
    fallback_gas_price_gwei: int = Field(default=20, description="Gas price used when fee data is unavailable")

    # Action / session store
    action_ttl_seconds: int = Field(default=1800, ge=1, description="Lifetime of prepared actions and signing sessions")
    max_store_size: int = Field(default=1000, description="Maximum in-memory store entries")
    redis_url: str = Field(
        default="",
        description="Redis connection string; when set, actions and sessions are stored in Redis",
    )

    default_wallet_address: str = Field(
        default="",
        description="Wallet used for /action requests that omit fromAddress",
        validation_alias=AliasChoices("default_wallet_address", "DEFAULT_WALLET_ADDRESS"),
    )

    # LLM Provider Settings
    llm_provider: str = Field(default="anthropic", description="Default LLM provider")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")

    # LLM Configuration
    llm_model: str = Field(default="claude-sonnet-4-20250514", description="Default LLM model")
    max_tokens: int = Field(default=4000, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.7, description="LLM temperature setting")
    provider_models_catalog: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=lambda: {
            "anthropic": [
                {
                    "id": "claude-sonnet-4-20250514",
                    "label": "Claude Sonnet 4",
                    "description": "Balanced depth and latency for daily use.",
                    "default": True,
                },
            ],
        },
        description="Provider models metadata surfaced to clients",
    )

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["anthropic", "claude"]:
            return self.has_anthropic_key
        return False

    def rpc_url_override(self, network: str) -> Optional[str]:
        value = getattr(self, f"{network}_rpc_url", "")
        return value or None

    def resolve_default_model(self, provider: str) -> str:
        options = self.provider_models_catalog.get(provider.lower(), [])
        for option in options:
            default_flag = option.get("default")
            if isinstance(default_flag, str):
                is_default = default_flag.lower() in {"true", "1", "yes"}
            else:
                is_default = bool(default_flag)
            if is_default:
                return option.get("id", self.llm_model)
        if options:
            return options[0].get("id", self.llm_model)
        return self.llm_model


# Global settings instance
settings = Settings()
