#!/usr/bin/env python3
"""Simple CLI for exercising MCP AURA locally"""

import argparse
import asyncio
import json

from mcp_aura.core.errors import McpAuraError
from mcp_aura.core.execution import TransactionRequest
from mcp_aura.core.execution.service import get_transaction_service
from mcp_aura.providers.aura import get_aura_client
from mcp_aura.services.operations import prepare_operation


def print_portfolio(portfolio, degraded=False):
    """Pretty print portfolio data"""
    marker = "⚠️ sample data" if degraded else "🔄 live"
    print(f"\n{marker} Portfolio")
    print("=" * 50)
    print(f"Address: {portfolio.address}")
    print(f"Total Value: ${portfolio.total_value_usd} USD")

    for holdings in portfolio.networks:
        print(f"\n{holdings.network.name or 'Unknown network'} (${holdings.total_value_usd})")
        print("-" * 50)
        for token in holdings.tokens:
            print(f"  {token.balance:>14} {token.symbol:<8} ${token.balance_usd:>12}")


async def cli_portfolio(address: str):
    print(f"🔍 Fetching portfolio for {address}...")
    try:
        outcome = await get_aura_client().get_portfolio(address)
    except McpAuraError as e:
        print(f"❌ Error: {e.message}")
        return
    print_portfolio(outcome.value, outcome.degraded)
    if outcome.reason:
        print(f"\n⚠️  {outcome.reason}")


async def cli_strategies(address: str):
    print(f"🧭 Fetching strategies for {address}...")
    try:
        outcome = await get_aura_client().get_strategies(address)
    except McpAuraError as e:
        print(f"❌ Error: {e.message}")
        return
    for group in outcome.value.strategies:
        for strategy in group.response:
            print(f"\n[{strategy.risk}] {strategy.name}  APY {strategy.expected_yield}")
            for step in strategy.actions:
                print(f"   - {step.description}")


async def cli_prepare(args):
    service = get_transaction_service(args.network)
    try:
        prepared = await prepare_operation(
            service,
            args.operation,
            from_address=args.from_address,
            platform=args.platform,
            token_in=args.token_in,
            token_out=args.token_out,
            amount_in=args.amount,
            slippage=args.slippage,
            target_address=args.to,
        )
    except McpAuraError as e:
        print(f"❌ Error: {e.message}")
        return

    print(json.dumps({
        "transactionRequest": prepared.transaction.value.to_dict(),
        "estimatedFees": prepared.fees.value.to_dict(),
        "fallbacks": prepared.fallbacks,
    }, indent=2))


async def cli_fees(network: str, to: str, data: str, value: str):
    service = get_transaction_service(network)
    outcome = await service.fees.estimate_fees(TransactionRequest(to=to, data=data, value=value))
    print(json.dumps(outcome.value.to_dict(), indent=2))
    if outcome.degraded:
        print(f"⚠️  {outcome.reason}")


async def cli_status(network: str, tx_hash: str):
    service = get_transaction_service(network)
    status = await service.get_transaction_status(tx_hash)
    status["explorerUrl"] = service.network.explorer_tx_url(tx_hash)
    print(json.dumps(status, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MCP AURA CLI")
    subparsers = parser.add_subparsers(dest="command")

    portfolio_parser = subparsers.add_parser("portfolio", help="Get portfolio snapshot")
    portfolio_parser.add_argument("address", help="Wallet address")

    strategy_parser = subparsers.add_parser("strategies", help="List AI strategy recommendations")
    strategy_parser.add_argument("address", help="Wallet address")

    prepare_parser = subparsers.add_parser("prepare", help="Prepare an unsigned transaction")
    prepare_parser.add_argument("operation", choices=["swap", "bridge", "stake", "transfer"])
    prepare_parser.add_argument("from_address", help="Sender wallet")
    prepare_parser.add_argument("amount", help="Human-readable amount")
    prepare_parser.add_argument("--network", default="ethereum")
    prepare_parser.add_argument("--token-in", default="ETH")
    prepare_parser.add_argument("--token-out", default="USDC")
    prepare_parser.add_argument("--platform", default="Uniswap")
    prepare_parser.add_argument("--slippage", default="0.5")
    prepare_parser.add_argument("--to", help="Recipient for transfers")

    fees_parser = subparsers.add_parser("fees", help="Estimate fees for a raw transaction")
    fees_parser.add_argument("to", help="Destination address")
    fees_parser.add_argument("--network", default="ethereum")
    fees_parser.add_argument("--data", default="0x")
    fees_parser.add_argument("--value", default="0", help="Value in wei")

    status_parser = subparsers.add_parser("status", help="Look up a transaction receipt")
    status_parser.add_argument("tx_hash")
    status_parser.add_argument("--network", default="ethereum")

    return parser


async def main():
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "portfolio":
        await cli_portfolio(args.address)
    elif args.command == "strategies":
        await cli_strategies(args.address)
    elif args.command == "prepare":
        await cli_prepare(args)
    elif args.command == "fees":
        await cli_fees(args.network, args.to, args.data, args.value)
    elif args.command == "status":
        await cli_status(args.network, args.tx_hash)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
