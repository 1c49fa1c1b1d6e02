"""
Trading context: the account, chain and RPC handle for one run.

Built once at startup and passed explicitly to every component that
touches the chain, instead of living in module globals.
"""

from dataclasses import dataclass

from eth_account import Account
from eth_account.signers.local import LocalAccount

from swap_settlement.chain.erc20 import Erc20Token
from swap_settlement.chain.rpc import JsonRpcClient
from swap_settlement.core.chains import ChainSpec, get_chain
from swap_settlement.core.config import Config
from swap_settlement.core.errors import ConfigError


@dataclass(frozen=True)
class TradingContext:
    """Trading account + chain + RPC transport."""

    account: LocalAccount
    chain: ChainSpec
    rpc: JsonRpcClient

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def chain_id(self) -> int:
        return self.chain.chain_id

    def token(self, symbol_or_address: str) -> Erc20Token:
        """ERC-20 handle for a registry symbol or raw address."""
        return Erc20Token(self.chain.token(symbol_or_address), self.rpc, self.chain_id)

    def verify_chain(self):
        """
        Check that the RPC endpoint serves the configured chain.

        Raises:
            ConfigError: if the node reports a different chain id
        """
        remote = self.rpc.chain_id()
        if remote != self.chain_id:
            raise ConfigError(
                f"RPC endpoint is on chain {remote}, but chain.name={self.chain.name} expects {self.chain_id}"
            )

    @classmethod
    def from_config(cls, config: Config) -> "TradingContext":
        """Create the account from the configured key and connect the RPC."""
        try:
            account = Account.from_key(config.private_key_hex)
        except Exception as exc:
            raise ConfigError("PRIVATE_KEY is not a valid private key") from exc
        rpc = JsonRpcClient(config.chain.rpc_url, timeout_sec=config.chain.rpc_timeout_sec)
        return cls(account=account, chain=get_chain(config.chain.name), rpc=rpc)
