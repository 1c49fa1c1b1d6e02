"""
Configuration management for the swap settlement runner.

Supports loading from YAML/dict and environment variable overrides.
The three secrets (signing key, 0x API key, RPC URL) normally come from
the environment or a .env file.
"""

import os
from dataclasses import dataclass, field
from typing import Literal


@dataclass
class ZeroExConfig:
    """0x Swap API settings."""

    api_url: str = "https://api.0x.org"
    api_key: str = ""  # From ZERO_EX_API_KEY
    version: str = "v2"  # Sent as the 0x-version header
    timeout_sec: float = 20.0


@dataclass
class ChainConfig:
    """Chain + RPC transport."""

    name: str = "scroll"
    rpc_url: str = ""  # From ALCHEMY_HTTP_TRANSPORT_URL
    receipt_timeout_sec: float = 120.0
    receipt_poll_interval_sec: float = 2.0
    gas_limit_multiplier: float = 1.2  # Headroom over eth_estimateGas
    rpc_timeout_sec: float = 20.0


@dataclass
class WalletConfig:
    """Trading account."""

    private_key: str = ""  # From PRIVATE_KEY, with or without 0x prefix


@dataclass
class TradeConfig:
    """What to swap."""

    sell_token: str = "WETH"  # Symbol from the chain registry or raw address
    buy_token: str = "wstETH"
    sell_amount: str = "0.1"  # Human units, scaled by the token's decimals
    affiliate_fee_bps: int = 100  # 1%
    collect_surplus: bool = True


@dataclass
class MonitoringConfig:
    """Logging and journal."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str = "logs"
    journal_dir: str = "data/state"


@dataclass
class Config:
    """
    Complete runner configuration.

    Environment variables (override config file):
    - PRIVATE_KEY: Signing key of the trading account
    - ZERO_EX_API_KEY: 0x API key
    - ALCHEMY_HTTP_TRANSPORT_URL: JSON-RPC endpoint
    - SETTLEMENT_CHAIN: Chain name (optional)
    """

    zero_ex: ZeroExConfig = field(default_factory=ZeroExConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    trade: TradeConfig = field(default_factory=TradeConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self):
        """Load environment variable overrides."""
        if os.getenv("PRIVATE_KEY"):
            self.wallet.private_key = os.getenv("PRIVATE_KEY", "")

        if os.getenv("ZERO_EX_API_KEY"):
            self.zero_ex.api_key = os.getenv("ZERO_EX_API_KEY", "")

        if os.getenv("ALCHEMY_HTTP_TRANSPORT_URL"):
            self.chain.rpc_url = os.getenv("ALCHEMY_HTTP_TRANSPORT_URL", "")

        if os.getenv("SETTLEMENT_CHAIN"):
            self.chain.name = os.getenv("SETTLEMENT_CHAIN", "scroll")

    @property
    def private_key_hex(self) -> str:
        """Signing key with a 0x prefix."""
        key = self.wallet.private_key.strip()
        return key if key.startswith("0x") else f"0x{key}"

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        from dataclasses import is_dataclass, fields

        def build(dc_type, data):
            if not is_dataclass(dc_type):
                return data
            kwargs = {}
            for f in fields(dc_type):
                if f.name in data:
                    val = data[f.name]
                    if hasattr(f.type, "__dataclass_fields__"):
                        kwargs[f.name] = build(f.type, val or {})
                    else:
                        kwargs[f.name] = val
            return dc_type(**kwargs)

        return build(cls, data)

    def validate(self) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        from swap_settlement.core.chains import CHAINS

        errors = []

        # Required secrets
        if not self.wallet.private_key:
            errors.append("PRIVATE_KEY environment variable required")

        if not self.zero_ex.api_key:
            errors.append("ZERO_EX_API_KEY environment variable required")

        if not self.chain.rpc_url:
            errors.append("ALCHEMY_HTTP_TRANSPORT_URL environment variable required")

        if self.chain.name.lower() not in CHAINS:
            errors.append(f"chain.name must be one of {sorted(CHAINS)}")

        if not (0 <= self.trade.affiliate_fee_bps <= 10_000):
            errors.append("trade.affiliate_fee_bps must be in [0, 10000]")

        if self.chain.gas_limit_multiplier < 1.0:
            errors.append("chain.gas_limit_multiplier must be >= 1.0")

        if self.chain.receipt_poll_interval_sec <= 0:
            errors.append("chain.receipt_poll_interval_sec must be > 0")

        return errors
