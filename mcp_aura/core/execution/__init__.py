"""
Transaction preparation: builders, fee estimation and balance checks.

Nothing here signs or broadcasts; every builder returns an unsigned
``TransactionRequest`` for an external wallet.
"""

from .models import (
    ActionRecord,
    ActionStatus,
    FeeEstimate,
    Outcome,
    TransactionRequest,
    TransactionType,
    collect_fallbacks,
)

__all__ = [
    "ActionRecord",
    "ActionStatus",
    "FeeEstimate",
    "Outcome",
    "TransactionRequest",
    "TransactionType",
    "collect_fallbacks",
]
