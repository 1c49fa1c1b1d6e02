"""Shared fakes and payload builders for settlement tests."""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests
from eth_account import Account

from swap_settlement.core.errors import SignatureDenied
from swap_settlement.core.models import SettlementResult, TradeIntent
from swap_settlement.quotes.models import ExecutableQuote, PriceQuote

WETH = "0x5300000000000000000000000000000000000004"
WSTETH = "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32"
PERMIT2 = "0x000000000022D473030F116dDEE9F6B43aC78BA3"
TX_HASH = "0x" + "ab" * 32

# Throwaway key, never funded
TEST_KEY = "0x" + "11" * 32


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: str | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses."""

    def __init__(self, responses: list[Any] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[dict[str, Any]] = []

    def _next(self) -> FakeResponse:
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, headers: dict | None = None, params: dict | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append({"method": "GET", "url": url, "headers": headers, "params": dict(params or {}), "timeout": timeout})
        return self._next()

    def post(self, url: str, json: dict | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append({"method": "POST", "url": url, "json": json, "timeout": timeout})
        return self._next()


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")


def permit2_typed_data(chain_id: int = 534352) -> dict[str, Any]:
    """Permit2 PermitTransferFrom typed data shaped like the 0x v2 quote."""
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "PermitTransferFrom": [
                {"name": "permitted", "type": "TokenPermissions"},
                {"name": "spender", "type": "address"},
                {"name": "nonce", "type": "uint256"},
                {"name": "deadline", "type": "uint256"},
            ],
            "TokenPermissions": [
                {"name": "token", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
        },
        "domain": {"name": "Permit2", "chainId": chain_id, "verifyingContract": PERMIT2},
        "primaryType": "PermitTransferFrom",
        "message": {
            "permitted": {"token": WETH, "amount": "100000000000000000"},
            "spender": "0x0000000000001ff3684f28c67538d4d072c22734",
            "nonce": "2241959297937691820908574931991575",
            "deadline": "1717000000",
        },
    }


def price_json(spender: str | None = None, liquidity: bool = True) -> dict[str, Any]:
    return {
        "liquidityAvailable": liquidity,
        "buyAmount": "85000000000000000",
        "issues": {
            "allowance": {"actual": "0", "spender": spender} if spender else None,
            "balance": None,
        },
    }


def quote_json(
    fills: list[tuple[str, str]] | None = None,
    permit2: bool = True,
    surplus: str | None = None,
    affiliate_fee_bps: str | None = "100",
    taxes: dict[str, dict[str, str]] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "buyAmount": "85000000000000000",
        "route": {
            "fills": [
                {"from": WETH, "to": WSTETH, "source": s, "proportionBps": bps}
                for s, bps in (fills or [("Ambient", "6000"), ("SyncSwap", "4000")])
            ],
        },
        "tokenMetadata": taxes
        or {
            "buyToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
            "sellToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
        },
    }
    if affiliate_fee_bps is not None:
        data["affiliateFeeBps"] = affiliate_fee_bps
    if surplus is not None:
        data["tradeSurplus"] = surplus
    if permit2:
        data["permit2"] = {"type": "Permit2", "hash": "0x" + "00" * 32, "eip712": permit2_typed_data()}
    else:
        data["permit2"] = None
    return data


class FakeQuoteClient:
    """Records calls; returns canned price/quote/execute results."""

    def __init__(
        self,
        price: PriceQuote | Exception | None = None,
        quote: ExecutableQuote | Exception | None = None,
        execute: SettlementResult | Exception | None = None,
    ) -> None:
        self.price = price if price is not None else PriceQuote.from_json(price_json())
        self.quote = quote if quote is not None else ExecutableQuote.from_json(quote_json())
        self.execute_result = execute if execute is not None else SettlementResult.executed(TX_HASH)
        self.calls: list[tuple[str, Any]] = []

    def get_price(self, intent: TradeIntent) -> PriceQuote:
        self.calls.append(("price", intent))
        if isinstance(self.price, Exception):
            raise self.price
        return self.price

    def get_quote(self, intent: TradeIntent) -> ExecutableQuote:
        self.calls.append(("quote", intent))
        if isinstance(self.quote, Exception):
            raise self.quote
        return self.quote

    def execute(self, intent: TradeIntent, signature: str) -> SettlementResult:
        self.calls.append(("execute", (intent, signature)))
        if isinstance(self.execute_result, Exception):
            raise self.execute_result
        return self.execute_result

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeAllowanceManager:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str, str, int]] = []

    def ensure_allowance(self, owner: str, token: str, spender: str, min_amount: int) -> dict[str, Any]:
        self.calls.append((owner, token, spender, min_amount))
        if self.error is not None:
            raise self.error
        return {"status": "0x1", "transactionHash": "0x" + "cd" * 32}


class FakeSigner:
    def __init__(self, deny: bool = False) -> None:
        self.deny = deny
        self.payloads: list[Any] = []

    def sign(self, payload: Any) -> str:
        self.payloads.append(payload)
        if self.deny:
            raise SignatureDenied("user rejected signature request")
        return "0x" + "ee" * 65


@pytest.fixture
def account():
    return Account.from_key(TEST_KEY)


@pytest.fixture
def intent(account) -> TradeIntent:
    return TradeIntent(
        sell_token=WETH,
        buy_token=WSTETH,
        sell_amount=100_000_000_000_000_000,
        taker=account.address,
        affiliate_fee_bps=100,
        collect_surplus=True,
    )


@pytest.fixture(autouse=True)
def _clear_secret_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PRIVATE_KEY", "ZERO_EX_API_KEY", "ALCHEMY_HTTP_TRANSPORT_URL", "SETTLEMENT_CHAIN"):
        monkeypatch.delenv(name, raising=False)
