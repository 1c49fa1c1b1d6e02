"""
Signature Provider: EIP-712 signatures over Permit2 payloads.
"""

import logging
from typing import Any, Dict

from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from swap_settlement.core.errors import SignatureDenied
from swap_settlement.quotes.models import AuthorizationPayload
from swap_settlement.utils.units import to_int

logger = logging.getLogger(__name__)


def _coerce(types: Dict[str, Any], type_name: str, value: Any) -> Any:
    """Turn numeric strings into ints wherever the EIP-712 type is (u)intN."""
    if value is None:
        return value
    if type_name.endswith("]"):
        base = type_name[: type_name.rindex("[")]
        return [_coerce(types, base, v) for v in value]
    if type_name in types and isinstance(value, dict):
        out = dict(value)
        for f in types[type_name]:
            if f["name"] in out:
                out[f["name"]] = _coerce(types, f["type"], out[f["name"]])
        return out
    if type_name.startswith(("uint", "int")) and isinstance(value, str):
        return to_int(value)
    return value


def normalize_typed_data(payload: AuthorizationPayload) -> Dict[str, Any]:
    """Full EIP-712 message with integer fields as ints."""
    typed = payload.to_typed_data()
    types = typed["types"]
    if "EIP712Domain" in types:
        typed["domain"] = _coerce(types, "EIP712Domain", typed["domain"])
    elif isinstance(typed["domain"].get("chainId"), str):
        typed["domain"] = dict(typed["domain"], chainId=to_int(typed["domain"]["chainId"]))
    if payload.primary_type:
        typed["message"] = _coerce(types, payload.primary_type, typed["message"])
    return typed


class SignatureProvider:
    """Signs authorization payloads with the trading account."""

    def __init__(self, account: LocalAccount):
        self.account = account

    def sign(self, payload: AuthorizationPayload) -> str:
        """
        Sign one payload.

        Returns:
            0x-prefixed 65-byte signature

        Raises:
            SignatureDenied: payload incomplete/malformed or signing rejected
        """
        if payload is None or not payload.is_complete:
            raise SignatureDenied("authorization payload is missing domain or message")
        try:
            typed = normalize_typed_data(payload)
            signed = self.account.sign_typed_data(full_message=typed)
        except Exception as exc:
            raise SignatureDenied("typed-data signing failed", exc) from exc
        logger.info("[Signer] Signed %s payload", payload.primary_type or "typed-data")
        return to_hex(signed.signature)
