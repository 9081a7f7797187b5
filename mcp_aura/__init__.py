"""MCP AURA: portfolio, strategy and transaction-preparation backend."""

__version__ = "1.0.0"
