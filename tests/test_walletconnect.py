"""
Tests for WalletConnect URIs, QR links and deep links.
"""

import json
import re
from urllib.parse import parse_qs, unquote

from mcp_aura.core.execution.models import TransactionRequest
from mcp_aura.core.execution.walletconnect import deep_links, generate_walletconnect_uri, qr_code_url

from fakes import BOB

CALLBACK = "https://wallet.example/callback?sessionId=session_abc"


def _parse(uri: str):
    head, query = uri.split("?", 1)
    return head, parse_qs(query)


def test_uri_shape():
    tx = TransactionRequest(to=BOB, data="0x", value="1000")
    uri = generate_walletconnect_uri("transfer", tx, CALLBACK, 42161)

    head, params = _parse(uri)
    assert re.fullmatch(r"wc:[0-9a-f]{64}@2", head)
    assert params["relay-protocol"] == ["irn"]
    assert re.fullmatch(r"[0-9a-f]{64}", params["symKey"][0])


def test_payload_round_trips_transaction_and_callback():
    tx = TransactionRequest(to=BOB, data="0xabcdef", value="5")
    uri = generate_walletconnect_uri("swap", tx, CALLBACK, 1)

    head, params = _parse(uri)
    payload = json.loads(params["data"][0])
    assert payload["topic"] == head[3:67]
    assert payload["version"] == "2"
    assert payload["chainId"] == 1
    assert payload["operation"] == "swap"
    assert payload["txData"] == {"to": BOB, "data": "0xabcdef", "value": "5"}
    assert payload["callback"] == CALLBACK


def test_topics_are_random_per_call():
    tx = TransactionRequest(to=BOB)
    first = generate_walletconnect_uri("swap", tx, CALLBACK, 1)
    second = generate_walletconnect_uri("swap", tx, CALLBACK, 1)
    assert first.split("@")[0] != second.split("@")[0]


def test_qr_and_deep_links_embed_encoded_uri():
    uri = generate_walletconnect_uri("swap", TransactionRequest(to=BOB), CALLBACK, 1)

    qr = qr_code_url(uri)
    assert qr.startswith("https://api.qrserver.com/v1/create-qr-code/?size=300x300&data=")
    assert unquote(qr.split("&data=", 1)[1]) == uri

    links = deep_links(uri)
    assert set(links) == {"metamask", "trust", "rainbow", "coinbase", "generic"}
    assert links["generic"] == uri
    assert links["coinbase"].startswith("cbwallet://wc?uri=")
    assert unquote(links["metamask"][len("metamask://wc?uri="):]) == uri
