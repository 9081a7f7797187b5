"""WalletConnect-style pairing URIs, QR code links and wallet deep links."""

import json
import secrets
from typing import Any, Dict
from urllib.parse import quote

from .models import TransactionRequest

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"

_DEEP_LINK_SCHEMES = {
    "metamask": "metamask://wc?uri=",
    "trust": "trust://wc?uri=",
    "rainbow": "rainbow://wc?uri=",
    "coinbase": "cbwallet://wc?uri=",
}


def generate_walletconnect_uri(
    operation: str,
    tx: TransactionRequest,
    callback_url: str,
    chain_id: int,
) -> str:
    """Build a v2 pairing URI that carries the transaction as a JSON payload.

    The topic and symmetric key are random per call. This is not a pairing
    negotiated with a relay server; wallets that only speak the official
    protocol will use the deep link or QR code to reach the signing page.
    """

    topic = secrets.token_hex(32)
    sym_key = secrets.token_hex(32)
    payload: Dict[str, Any] = {
        "topic": topic,
        "version": "2",
        "chainId": chain_id,
        "operation": operation,
        "txData": tx.to_dict(),
        "callback": callback_url,
    }
    data = quote(json.dumps(payload, separators=(",", ":")), safe="")
    return f"wc:{topic}@2?relay-protocol=irn&symKey={sym_key}&data={data}"


def qr_code_url(uri: str, size: int = 300) -> str:
    return f"{QR_SERVICE_URL}?size={size}x{size}&data={quote(uri, safe='')}"


def deep_links(uri: str) -> Dict[str, str]:
    encoded = quote(uri, safe="")
    links = {name: f"{scheme}{encoded}" for name, scheme in _DEEP_LINK_SCHEMES.items()}
    links["generic"] = uri
    return links
