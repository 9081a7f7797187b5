"""
Transaction builders for transfers, bridges and staking.
"""

import logging
import secrets
from typing import Dict

from ..errors import UnsupportedPlatformError
from ..networks import NATIVE_PLACEHOLDER
from ..tokens import TokenMetadata
from .abi import encode_transfer
from .models import Outcome, TransactionRequest, TransactionType
from .units import parse_units

logger = logging.getLogger(__name__)

STARGATE_ROUTER_ADDRESS = "0x53Bf833A5d6c4ddA888F69c22C88C9f356a41614"

STAKING_CONTRACTS: Dict[str, str] = {
    "uniswap": "0x1f98431c8ad98523631ae4a59f267346ea31f984",
    "aave": "0x7d2768dE32b0b80b7a3454c06BdAc94A69DDc7A9",
    "compound": "0x3d9819210A31b4961b30EF54bE2aeD79B9c9Cd3B",
}


def generate_id(prefix: str) -> str:
    """Unique id for prepared actions, transfers and sessions."""
    return f"{prefix}_{secrets.token_hex(12)}"


class TransactionBuilder:
    """
    Builds unsigned transactions for non-swap operations.

    Handles:
    - Native and ERC-20 transfers
    - Bridge placeholders (Stargate router)
    - Staking placeholders per platform
    """

    @staticmethod
    def build_transfer(token: TokenMetadata, token_address: str, recipient: str, amount: str) -> TransactionRequest:
        """
        Build a transfer of ``amount`` (human units) to ``recipient``.

        Args:
            token: Metadata of the token being sent; its decimals scale the amount
            token_address: The resolved address, the native sentinel for ETH/MATIC
            recipient: Destination address
            amount: Human decimal amount

        Returns:
            TransactionRequest ready to be signed
        """
        if token_address.lower() == NATIVE_PLACEHOLDER:
            return TransactionRequest(
                to=recipient,
                data="0x",
                value=str(parse_units(amount, 18)),
            )

        amount_units = parse_units(amount, token.decimals)
        return TransactionRequest(
            to=token_address,
            data=encode_transfer(recipient, amount_units),
            value="0",
        )

    @staticmethod
    def build_bridge(platform: str = "Stargate") -> Outcome[TransactionRequest]:
        # TODO: replace with a real cross-chain quote once a destination-chain input exists.
        logger.warning("Bridge transaction for %s is a stub and must not be broadcast", platform)
        tx = TransactionRequest(to=STARGATE_ROUTER_ADDRESS, data="0x", value="0")
        return Outcome.fallback(tx, f"stub: bridge via {platform} is not implemented")

    @staticmethod
    def build_stake(platform: str) -> Outcome[TransactionRequest]:
        contract = STAKING_CONTRACTS.get(platform.strip().lower())
        if contract is None:
            raise UnsupportedPlatformError(TransactionType.STAKE.value, platform)
        logger.warning("Stake transaction for %s is a stub and must not be broadcast", platform)
        tx = TransactionRequest(to=contract, data="0x", value="0")
        return Outcome.fallback(tx, f"stub: staking on {platform} is not implemented")
