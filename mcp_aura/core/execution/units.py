"""Decimal-string <-> smallest-unit integer conversion."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import InvalidAmountError

GWEI = 10**9


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human decimal string into smallest units.

    Raises ``InvalidAmountError`` for malformed or negative input and for
    amounts carrying more fractional digits than the token supports.
    """

    text = str(amount).strip()
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(
            f"Amount {amount} has more than {decimals} decimal places"
        )
    return int(scaled)


def format_units(value: int, decimals: int) -> str:
    """Render smallest units as a decimal string with at least one fractional digit."""

    quantity = Decimal(int(value)).scaleb(-decimals)
    text = format(quantity, "f")
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    else:
        text += ".0"
    return text


def to_usd(native_amount: str, rate: Decimal) -> str:
    """Native amount times a fixed rate, rounded half-up to cents."""

    usd = Decimal(native_amount) * rate
    return str(usd.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
