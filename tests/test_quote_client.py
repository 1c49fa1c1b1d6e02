"""Tests for the 0x Swap API client (no network)."""

from __future__ import annotations

import pytest

from conftest import (
    PERMIT2,
    TX_HASH,
    WETH,
    FakeResponse,
    FakeSession,
    connection_error,
    price_json,
    quote_json,
)
from swap_settlement.core.config import ZeroExConfig
from swap_settlement.core.errors import MalformedResponse, ServiceUnavailable
from swap_settlement.quotes.client import QuoteServiceClient

CHAIN_ID = 534352


def make_client(*responses) -> tuple[QuoteServiceClient, FakeSession]:
    session = FakeSession(list(responses))
    config = ZeroExConfig(api_url="https://api.0x.org/", api_key="test-key")
    return QuoteServiceClient(config, CHAIN_ID, session=session), session


def test_headers_on_every_request(intent) -> None:
    client, session = make_client(FakeResponse(price_json()), FakeResponse(quote_json()))

    client.get_price(intent)
    client.get_quote(intent)

    for call in session.calls:
        assert call["headers"] == {
            "Content-Type": "application/json",
            "0x-api-key": "test-key",
            "0x-version": "v2",
        }


def test_price_request(intent) -> None:
    client, session = make_client(FakeResponse(price_json(spender=PERMIT2)))

    price = client.get_price(intent)

    call = session.calls[0]
    assert call["url"] == "https://api.0x.org/swap/permit2/price"
    assert call["params"] == {
        "chainId": "534352",
        "sellToken": WETH,
        "buyToken": intent.buy_token,
        "sellAmount": "100000000000000000",
        "taker": intent.taker,
        "affiliateFee": "100",
        "surplusCollection": "true",
    }
    assert price.allowance_issue is not None
    assert price.allowance_issue.spender == PERMIT2


def test_quote_and_execute_reuse_price_params(intent) -> None:
    client, session = make_client(
        FakeResponse(price_json()),
        FakeResponse(quote_json()),
        FakeResponse({"hash": TX_HASH}),
    )

    client.get_price(intent)
    client.get_quote(intent)
    result = client.execute(intent, "0xsig")

    price_params, quote_params, execute_params = (c["params"] for c in session.calls)
    assert quote_params == price_params
    assert execute_params == dict(price_params, signature="0xsig")
    assert session.calls[1]["url"].endswith("/swap/permit2/quote")
    assert session.calls[2]["url"].endswith("/swap/permit2/execute")
    assert result.transaction_hash == TX_HASH


def test_execute_empty_signature(intent) -> None:
    client, session = make_client(FakeResponse({"hash": TX_HASH}))

    client.execute(intent, "")

    assert session.calls[0]["params"]["signature"] == ""


def test_execute_without_hash_is_malformed(intent) -> None:
    client, _ = make_client(FakeResponse({"status": "ok"}))

    with pytest.raises(MalformedResponse):
        client.execute(intent, "")


def test_transport_error_is_service_unavailable(intent) -> None:
    client, _ = make_client(connection_error())

    with pytest.raises(ServiceUnavailable):
        client.get_price(intent)


def test_http_error_is_service_unavailable(intent) -> None:
    client, _ = make_client(FakeResponse({"name": "INPUT_INVALID"}, status_code=400))

    with pytest.raises(ServiceUnavailable) as exc_info:
        client.get_quote(intent)

    assert exc_info.value.status_code == 400
    assert "INPUT_INVALID" in str(exc_info.value)


def test_invalid_json_is_malformed(intent) -> None:
    client, _ = make_client(FakeResponse(None, text="<html>bad gateway</html>"))

    with pytest.raises(MalformedResponse):
        client.get_price(intent)


def test_non_object_quote_is_malformed(intent) -> None:
    client, _ = make_client(FakeResponse(["not", "an", "object"]))

    with pytest.raises(MalformedResponse):
        client.get_quote(intent)


def test_list_liquidity_sources() -> None:
    client, session = make_client(FakeResponse({"sources": {"Ambient": {}, "SyncSwap": {}, "Uniswap_V3": {}}}))

    sources = client.list_liquidity_sources(CHAIN_ID)

    assert sources == ["Ambient", "SyncSwap", "Uniswap_V3"]
    assert session.calls[0]["url"] == "https://api.0x.org/swap/v1/sources"
    assert session.calls[0]["params"] == {"chainId": "534352"}


def test_list_liquidity_sources_list_shape_deduplicates() -> None:
    client, _ = make_client(FakeResponse({"sources": ["Ambient", "Ambient", "Nuri"]}))

    assert client.list_liquidity_sources() == ["Ambient", "Nuri"]


def test_list_liquidity_sources_missing_field() -> None:
    client, _ = make_client(FakeResponse({"zid": "abc"}))

    with pytest.raises(MalformedResponse):
        client.list_liquidity_sources()
