"""Hand-rolled ABI encoding for the handful of ERC-20 calls we make."""

from typing import Optional

ERC20_TRANSFER_SELECTOR = "0xa9059cbb"   # transfer(address,uint256)
ERC20_BALANCE_OF_SELECTOR = "0x70a08231"  # balanceOf(address)
ERC20_DECIMALS_SELECTOR = "0x313ce567"    # decimals()
ERC20_SYMBOL_SELECTOR = "0x95d89b41"      # symbol()
ERC20_NAME_SELECTOR = "0x06fdde03"        # name()

MAX_UINT256 = 2**256 - 1


def _encode_uint256(value: int) -> str:
    """Encode a uint256 as a 32-byte hex string (without 0x prefix)."""
    if value < 0 or value > MAX_UINT256:
        raise ValueError(f"Value out of uint256 range: {value}")
    return format(value, "064x")


def _encode_address(address: str) -> str:
    """Encode an address as a 32-byte hex string (without 0x prefix)."""
    addr = address.lower().replace("0x", "")
    return addr.zfill(64)


def encode_transfer(recipient: str, amount: int) -> str:
    return ERC20_TRANSFER_SELECTOR + _encode_address(recipient) + _encode_uint256(amount)


def encode_balance_of(owner: str) -> str:
    return ERC20_BALANCE_OF_SELECTOR + _encode_address(owner)


def _strip(data: str) -> str:
    return data[2:] if data.startswith("0x") else data


def decode_uint256(data: str) -> int:
    body = _strip(data)
    if not body:
        raise ValueError("Empty return data")
    return int(body[:64], 16)


def decode_string(data: str) -> Optional[str]:
    """Decode an ABI ``string`` return value.

    Some older tokens (MKR among them) return ``bytes32`` instead; those are
    decoded by trimming trailing NUL bytes.
    """

    body = _strip(data)
    if not body:
        return None

    raw = bytes.fromhex(body)
    if len(raw) >= 64:
        offset = int.from_bytes(raw[:32], "big")
        if offset + 32 <= len(raw):
            length = int.from_bytes(raw[offset:offset + 32], "big")
            start = offset + 32
            if start + length <= len(raw):
                return raw[start:start + length].decode("utf-8", errors="replace")

    if len(raw) == 32:
        text = raw.rstrip(b"\x00").decode("utf-8", errors="replace")
        return text or None
    return None
