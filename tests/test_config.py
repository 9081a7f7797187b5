"""Settings behaviour that other modules depend on."""

from decimal import Decimal

from mcp_aura.config import Settings, settings
from mcp_aura.core.networks import get_network, rpc_url_for


def test_defaults():
    fresh = Settings(_env_file=None)

    assert fresh.fallback_gas_limit == 200_000
    assert fresh.fallback_gas_price_gwei == 20
    assert fresh.native_usd_rate == Decimal("2500")
    assert fresh.action_ttl_seconds == 1800
    assert fresh.resolve_default_model("anthropic") == "claude-sonnet-4-20250514"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FALLBACK_GAS_LIMIT", "300000")
    monkeypatch.setenv("AURA_BASE_URLS", '["https://aura.internal"]')

    fresh = Settings(_env_file=None)

    assert fresh.fallback_gas_limit == 300_000
    assert fresh.aura_base_urls == ["https://aura.internal"]


def test_claude_key_alias(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setenv("CLAUDE_API_KEY", "sk-test")

    fresh = Settings(_env_file=None)

    assert fresh.anthropic_api_key == "sk-test"
    assert fresh.has_llm_key


def test_rpc_override(monkeypatch):
    network = get_network("polygon")
    assert rpc_url_for(network) == network.rpc_url

    monkeypatch.setattr(settings, "polygon_rpc_url", "https://polygon.internal")
    assert rpc_url_for(network) == "https://polygon.internal"


def test_log_format_selection():
    import logging

    from mcp_aura import logging_config

    assert logging_config._use_console(logging.DEBUG, "auto")
    assert not logging_config._use_console(logging.INFO, "auto")
    assert not logging_config._use_console(logging.DEBUG, "JSON")
    assert logging_config._use_console(logging.INFO, "console")
