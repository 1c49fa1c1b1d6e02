"""
Quote Service Client

HTTP client for the 0x Swap API (Permit2 endpoints): price, quote,
execute and liquidity-source listing. Transport and JSON decoding only;
no retries.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from swap_settlement.core.config import ZeroExConfig
from swap_settlement.core.errors import MalformedResponse, ServiceUnavailable
from swap_settlement.core.models import SettlementResult, TradeIntent
from swap_settlement.quotes.models import ExecutableQuote, PriceQuote

logger = logging.getLogger(__name__)

PRICE_PATH = "/swap/permit2/price"
QUOTE_PATH = "/swap/permit2/quote"
EXECUTE_PATH = "/swap/permit2/execute"
SOURCES_PATH = "/swap/v1/sources"


class QuoteServiceClient:
    """
    0x Swap API client.

    Args:
        config: API settings (base URL, key, version header, timeout)
        chain_id: Chain every request is parameterized with
        session: Optional requests.Session (injected in tests)
    """

    def __init__(self, config: ZeroExConfig, chain_id: int, session: Optional[requests.Session] = None):
        self.base_url = config.api_url.rstrip("/")
        self.chain_id = chain_id
        self.timeout_sec = config.timeout_sec
        self.session = session or requests.Session()
        # Fixed per deployment
        self.headers = {
            "Content-Type": "application/json",
            "0x-api-key": config.api_key,
            "0x-version": config.version,
        }

    def get_price(self, intent: TradeIntent) -> PriceQuote:
        """Non-binding price; reports allowance issues."""
        data = self._get(PRICE_PATH, intent.to_params(self.chain_id))
        return PriceQuote.from_json(data)

    def get_quote(self, intent: TradeIntent) -> ExecutableQuote:
        """Binding quote; carries the Permit2 payload when a signature is needed."""
        data = self._get(QUOTE_PATH, intent.to_params(self.chain_id))
        return ExecutableQuote.from_json(data)

    def execute(self, intent: TradeIntent, signature: str) -> SettlementResult:
        """Submit the signed settlement; empty signature when none is required."""
        params = intent.to_params(self.chain_id)
        params["signature"] = signature or ""
        data = self._get(EXECUTE_PATH, params)
        tx_hash = data.get("hash") if isinstance(data, dict) else None
        if not tx_hash:
            raise MalformedResponse("execute response has no transaction hash")
        return SettlementResult.executed(str(tx_hash))

    def list_liquidity_sources(self, chain_id: Optional[int] = None) -> List[str]:
        """Names of all liquidity sources the service routes through on a chain."""
        cid = self.chain_id if chain_id is None else chain_id
        data = self._get(SOURCES_PATH, {"chainId": str(cid)})
        sources = data.get("sources") if isinstance(data, dict) else None
        if isinstance(sources, dict):
            names = list(sources.keys())
        elif isinstance(sources, list):
            names = [str(s) for s in sources]
        else:
            raise MalformedResponse("sources response has no 'sources' field")
        return list(dict.fromkeys(names))

    # ------------------------
    # Helpers
    # ------------------------
    def _get(self, path: str, params: Dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("[QuoteService] GET %s %s", path, params)
        try:
            resp = self.session.get(url, headers=self.headers, params=params, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            raise ServiceUnavailable(f"GET {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            raise ServiceUnavailable(
                f"GET {path} failed: status={resp.status_code} body={resp.text[:500]}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponse(f"GET {path} returned invalid JSON: {resp.text[:200]}") from exc
