"""Blockchain access: JSON-RPC transport and ERC-20 contracts."""

from swap_settlement.chain.rpc import JsonRpcClient
from swap_settlement.chain.erc20 import Erc20Token

__all__ = ["JsonRpcClient", "Erc20Token"]
