"""
JSON-RPC transport for EVM chains.

Thin wrapper over an HTTP endpoint (Alchemy or any node). Covers only
the calls the settlement flow needs: reads, nonce/gas lookup, raw
transaction broadcast and receipt polling.
"""

import itertools
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from swap_settlement.core.errors import ReceiptTimeout, RpcError
from swap_settlement.utils.units import to_int

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """
    Minimal Ethereum JSON-RPC client.

    Args:
        url: HTTP transport URL
        session: Optional requests.Session (injected in tests)
        timeout_sec: Per-request timeout
    """

    def __init__(self, url: str, session: Optional[requests.Session] = None, timeout_sec: float = 20.0):
        self.url = url
        self.session = session or requests.Session()
        self.timeout_sec = timeout_sec
        self._ids = itertools.count(1)

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Issue one JSON-RPC request and return its ``result``."""
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params or []}
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            raise RpcError(f"{method} transport failed: {exc}") from exc

        if resp.status_code >= 400:
            raise RpcError(f"{method} failed: status={resp.status_code} body={resp.text[:300]}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RpcError(f"{method} returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise RpcError(f"{method} returned non-object payload")
        if payload.get("error") not in (None, {}):
            err = payload["error"]
            msg = err.get("message") if isinstance(err, dict) else err
            raise RpcError(f"{method} error: {msg}")
        if "result" not in payload:
            raise RpcError(f"{method} missing result")
        return payload["result"]

    # ------------------------
    # Typed helpers
    # ------------------------
    def chain_id(self) -> int:
        return to_int(self.call("eth_chainId"))

    def eth_call(self, tx: Dict[str, Any], block: str = "latest") -> str:
        return self.call("eth_call", [tx, block])

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return to_int(self.call("eth_getTransactionCount", [address, block]))

    def gas_price(self) -> int:
        return to_int(self.call("eth_gasPrice"))

    def estimate_gas(self, tx: Dict[str, Any]) -> int:
        return to_int(self.call("eth_estimateGas", [tx]))

    def send_raw_transaction(self, raw_tx_hex: str) -> str:
        return self.call("eth_sendRawTransaction", [raw_tx_hex])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout_sec: float = 120.0,
        poll_interval_sec: float = 2.0,
    ) -> Dict[str, Any]:
        """
        Poll until the transaction is mined.

        Raises:
            ReceiptTimeout: if no receipt appears within timeout_sec
        """
        deadline = time.monotonic() + timeout_sec
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt:
                return receipt
            if time.monotonic() >= deadline:
                raise ReceiptTimeout(f"No receipt for {tx_hash} after {timeout_sec:.0f}s")
            logger.debug("[Rpc] Waiting for receipt %s", tx_hash)
            time.sleep(poll_interval_sec)
