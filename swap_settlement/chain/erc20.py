"""
ERC-20 contract access over JSON-RPC.

Reads (decimals, allowance) go through eth_call; approve is simulated,
signed locally with the trading account and broadcast as a raw
transaction.
"""

import logging
from typing import Any, Dict

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_account.signers.local import LocalAccount
from eth_utils import function_signature_to_4byte_selector, to_checksum_address, to_hex

from swap_settlement.chain.rpc import JsonRpcClient
from swap_settlement.core.errors import ChainError, RpcError

logger = logging.getLogger(__name__)

DECIMALS_SELECTOR = function_signature_to_4byte_selector("decimals()")
ALLOWANCE_SELECTOR = function_signature_to_4byte_selector("allowance(address,address)")
APPROVE_SELECTOR = function_signature_to_4byte_selector("approve(address,uint256)")


def encode_call(selector: bytes, arg_types: list, args: list) -> str:
    """ABI-encode a function call as 0x-prefixed calldata."""
    return to_hex(selector + encode(arg_types, args))


def _decode_single(abi_type: str, result: str) -> Any:
    try:
        raw = bytes.fromhex(result[2:] if result.startswith("0x") else result)
    except (AttributeError, ValueError) as exc:
        raise RpcError(f"eth_call returned non-hex data: {result!r}") from exc
    if not raw:
        raise RpcError("eth_call returned no data (not a contract?)")
    try:
        return decode([abi_type], raw)[0]
    except DecodingError as exc:
        raise RpcError(f"eth_call result is not a valid {abi_type}: {exc}") from exc


class Erc20Token:
    """
    One ERC-20 token on one chain.

    Args:
        address: Token contract address
        rpc: JSON-RPC client for the chain
        chain_id: Chain id used in signed transactions
    """

    def __init__(self, address: str, rpc: JsonRpcClient, chain_id: int):
        self.address = to_checksum_address(address)
        self.rpc = rpc
        self.chain_id = chain_id
        self._decimals = None

    def decimals(self) -> int:
        """Token decimals (cached after the first read)."""
        if self._decimals is None:
            result = self.rpc.eth_call({"to": self.address, "data": to_hex(DECIMALS_SELECTOR)})
            self._decimals = int(_decode_single("uint8", result))
        return self._decimals

    def allowance(self, owner: str, spender: str) -> int:
        data = encode_call(
            ALLOWANCE_SELECTOR,
            ["address", "address"],
            [to_checksum_address(owner), to_checksum_address(spender)],
        )
        result = self.rpc.eth_call({"to": self.address, "data": data})
        return int(_decode_single("uint256", result))

    def build_approve(self, owner: str, spender: str, amount: int) -> Dict[str, Any]:
        """Call object for approve(spender, amount) sent from owner."""
        return {
            "from": to_checksum_address(owner),
            "to": self.address,
            "data": encode_call(APPROVE_SELECTOR, ["address", "uint256"], [to_checksum_address(spender), amount]),
        }

    def approve(
        self,
        account: LocalAccount,
        spender: str,
        amount: int,
        gas_limit_multiplier: float = 1.2,
    ) -> str:
        """
        Simulate, sign and broadcast approve(spender, amount).

        Returns:
            Transaction hash (0x-hex)
        """
        call = self.build_approve(account.address, spender, amount)

        # Simulate first; a revert surfaces here before any gas is spent
        self.rpc.eth_call(call)

        gas = self.rpc.estimate_gas(call)
        tx = {
            "to": call["to"],
            "data": call["data"],
            "value": 0,
            "nonce": self.rpc.get_transaction_count(account.address),
            "gas": int(gas * gas_limit_multiplier),
            "gasPrice": self.rpc.gas_price(),
            "chainId": self.chain_id,
        }
        try:
            signed = account.sign_transaction(tx)
        except Exception as exc:
            raise ChainError(f"could not sign approve transaction: {exc}") from exc
        tx_hash = self.rpc.send_raw_transaction(to_hex(signed.raw_transaction))
        logger.info("[Erc20] approve(%s) submitted for %s: %s", spender, self.address, tx_hash)
        return tx_hash
