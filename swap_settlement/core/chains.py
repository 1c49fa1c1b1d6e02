"""
Chain registry: chain ids, block explorers and token addresses.
"""

from dataclasses import dataclass, field
from typing import Dict

MAX_UINT256 = (1 << 256) - 1


@dataclass(frozen=True)
class ChainSpec:
    """Static facts about one EVM chain."""

    name: str
    chain_id: int
    explorer_url: str
    tokens: Dict[str, str] = field(default_factory=dict)  # symbol -> address

    def token(self, symbol: str) -> str:
        """Resolve a token symbol (or pass through a raw address)."""
        if symbol.startswith("0x") and len(symbol) == 42:
            return symbol
        try:
            return self.tokens[symbol]
        except KeyError:
            raise KeyError(f"Unknown token {symbol!r} on {self.name}") from None

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"


SCROLL = ChainSpec(
    name="scroll",
    chain_id=534352,
    explorer_url="https://scrollscan.com",
    tokens={
        "WETH": "0x5300000000000000000000000000000000000004",
        "wstETH": "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32",
    },
)

ETHEREUM = ChainSpec(
    name="ethereum",
    chain_id=1,
    explorer_url="https://etherscan.io",
    tokens={
        "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "wstETH": "0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0",
    },
)

CHAINS: Dict[str, ChainSpec] = {c.name: c for c in (SCROLL, ETHEREUM)}


def get_chain(name: str) -> ChainSpec:
    """Look up a chain by name."""
    key = name.strip().lower()
    if key not in CHAINS:
        raise ValueError(f"Unsupported chain: {name}")
    return CHAINS[key]
