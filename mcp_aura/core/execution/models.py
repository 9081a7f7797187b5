"""
Transaction preparation models and types.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class TransactionType(str, Enum):
    """Operations the builders can prepare."""
    SWAP = "swap"
    BRIDGE = "bridge"
    TRANSFER = "transfer"
    STAKE = "stake"


class ActionStatus(str, Enum):
    """Lifecycle of a prepared action or signing session."""
    PREPARED = "prepared"
    PENDING_SIGNATURE = "pending_signature"
    SUCCESS = "success"
    FAIL = "fail"
    CANCELLED = "cancelled"


@dataclass
class Outcome(Generic[T]):
    """A value plus whether it came from a fallback instead of live data."""
    value: T
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def live(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "Outcome[T]":
        return cls(value=value, degraded=True, reason=reason)


def collect_fallbacks(*outcomes: Optional[Outcome[Any]]) -> List[str]:
    """Reasons of every degraded outcome, in order."""
    return [o.reason or "fallback substituted" for o in outcomes if o is not None and o.degraded]


@dataclass
class TransactionRequest:
    """A signable EVM transaction descriptor."""
    to: str
    data: str = "0x"
    value: str = "0"                             # Smallest unit, decimal string
    gas_limit: Optional[str] = None
    gas_price: Optional[str] = None
    max_fee_per_gas: Optional[str] = None         # EIP-1559
    max_priority_fee_per_gas: Optional[str] = None  # EIP-1559

    @property
    def value_wei(self) -> int:
        return int(self.value or "0")

    def to_dict(self) -> Dict[str, Any]:
        tx: Dict[str, Any] = {
            "to": self.to,
            "data": self.data,
            "value": self.value,
        }
        if self.gas_limit is not None:
            tx["gasLimit"] = self.gas_limit
        if self.gas_price is not None:
            tx["gasPrice"] = self.gas_price
        if self.max_fee_per_gas is not None:
            tx["maxFeePerGas"] = self.max_fee_per_gas
        if self.max_priority_fee_per_gas is not None:
            tx["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas
        return tx

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionRequest":
        return cls(
            to=str(data["to"]),
            data=str(data.get("data") or "0x"),
            value=str(data.get("value") or "0"),
            gas_limit=data.get("gasLimit"),
            gas_price=data.get("gasPrice"),
            max_fee_per_gas=data.get("maxFeePerGas"),
            max_priority_fee_per_gas=data.get("maxPriorityFeePerGas"),
        )


@dataclass
class FeeEstimate:
    """Gas estimation for a prepared transaction."""
    gas_limit: int
    gas_price: int
    total_fee_native: str
    total_fee_usd: str
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    @property
    def total_fee_wei(self) -> int:
        return self.gas_limit * (self.max_fee_per_gas or self.gas_price)

    def to_dict(self) -> Dict[str, Any]:
        fees: Dict[str, Any] = {
            "gasLimit": str(self.gas_limit),
            "gasPrice": str(self.gas_price),
            "totalFeeInNative": self.total_fee_native,
            "totalFeeInUSD": self.total_fee_usd,
        }
        if self.max_fee_per_gas is not None:
            fees["maxFeePerGas"] = str(self.max_fee_per_gas)
        if self.max_priority_fee_per_gas is not None:
            fees["maxPriorityFeePerGas"] = str(self.max_priority_fee_per_gas)
        return fees


@dataclass
class ActionRecord:
    """A prepared-but-unsigned action or signing session."""
    action_id: str
    transaction_request: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)
    kind: str = "action"
    status: str = ActionStatus.PREPARED.value
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actionId": self.action_id,
            "kind": self.kind,
            "transactionRequest": self.transaction_request,
            "metadata": self.metadata,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionRecord":
        expires_raw = data.get("expiresAt")
        return cls(
            action_id=data["actionId"],
            kind=data.get("kind", "action"),
            transaction_request=data.get("transactionRequest") or {},
            metadata=data.get("metadata") or {},
            status=data.get("status", ActionStatus.PREPARED.value),
            created_at=datetime.fromisoformat(data["createdAt"]),
            expires_at=datetime.fromisoformat(expires_raw) if expires_raw else None,
        )
