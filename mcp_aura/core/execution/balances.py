"""Balance reads and transfer sufficiency checks, in smallest units throughout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...providers.rpc import JsonRpcClient
from ..errors import RpcError
from ..networks import NATIVE_PLACEHOLDER
from .abi import decode_uint256, encode_balance_of
from .units import parse_units

logger = logging.getLogger(__name__)


@dataclass
class TransferFeasibility:
    token_balance: int
    requested: int
    decimals: int
    native_balance: Optional[int] = None
    required_fee: Optional[int] = None
    shortfall: Optional[int] = None
    gas_shortfall: Optional[int] = None

    @property
    def has_token_balance(self) -> bool:
        return self.shortfall is None

    @property
    def has_gas(self) -> bool:
        return self.gas_shortfall is None

    @property
    def sufficient(self) -> bool:
        return self.has_token_balance and self.has_gas

    @property
    def remaining(self) -> int:
        return self.token_balance - self.requested


class BalanceChecker:
    def __init__(self, rpc: JsonRpcClient) -> None:
        self.rpc = rpc

    async def get_token_balance(self, token_address: str, owner: str) -> int:
        if token_address.lower() == NATIVE_PLACEHOLDER:
            return await self.rpc.get_balance(owner)
        result = await self.rpc.eth_call(token_address, encode_balance_of(owner))
        try:
            return decode_uint256(result)
        except ValueError as exc:
            raise RpcError(f"balanceOf returned no data for {token_address}", method="eth_call") from exc

    async def check_transfer_feasibility(
        self,
        token_address: str,
        decimals: int,
        amount: str,
        from_address: str,
        estimated_fee_wei: Optional[int] = None,
    ) -> TransferFeasibility:
        """Compare the sender's balances against the transfer and its gas fee.

        For native transfers the fee must be covered by what remains after
        the transfer amount itself.
        """

        requested = parse_units(amount, decimals)
        token_balance = await self.get_token_balance(token_address, from_address)
        result = TransferFeasibility(token_balance=token_balance, requested=requested, decimals=decimals)

        if requested > token_balance:
            result.shortfall = requested - token_balance
            return result

        if estimated_fee_wei is None:
            return result

        is_native_transfer = token_address.lower() == NATIVE_PLACEHOLDER
        native_balance = token_balance if is_native_transfer else await self.rpc.get_balance(from_address)
        available_for_gas = native_balance - requested if is_native_transfer else native_balance

        result.native_balance = native_balance
        result.required_fee = estimated_fee_wei
        if estimated_fee_wei > available_for_gas:
            result.gas_shortfall = estimated_fee_wei - available_for_gas
            logger.info(
                "Insufficient native balance for gas: fee=%d available=%d",
                estimated_fee_wei, available_for_gas,
            )
        return result
