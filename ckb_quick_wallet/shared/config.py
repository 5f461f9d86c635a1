"""Wallet configuration loaded from arguments or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ckb_quick_wallet.shared.network import TimeoutConfig

DEFAULT_NODE_URL = "http://localhost:8114"
DEFAULT_SCAN_WINDOW = 100

ADDRESS_PREFIXES = {
    "mainnet": "ckb",
    "testnet": "ckt",
}


@dataclass
class WalletConfig:
    node_url: str = DEFAULT_NODE_URL
    network: str = "testnet"
    window_size: int = DEFAULT_SCAN_WINDOW
    skip_data_and_type: bool = True
    timeout_config: TimeoutConfig | None = None

    def __post_init__(self):
        if self.network not in ADDRESS_PREFIXES:
            raise ValueError(f"Unknown network: {self.network}")
        if self.window_size < 1:
            raise ValueError("window_size must be positive")
        if self.timeout_config is None:
            self.timeout_config = TimeoutConfig()

    @property
    def address_prefix(self) -> str:
        return ADDRESS_PREFIXES[self.network]

    @classmethod
    def from_environment(cls) -> "WalletConfig":
        try:
            window_size = int(os.getenv("CKB_WALLET_SCAN_WINDOW", DEFAULT_SCAN_WINDOW))
        except ValueError:
            window_size = DEFAULT_SCAN_WINDOW

        return cls(
            node_url=os.getenv("CKB_WALLET_NODE_URL", DEFAULT_NODE_URL),
            network=os.getenv("CKB_WALLET_NETWORK", "testnet").lower(),
            window_size=window_size,
        )


def config_for(api) -> WalletConfig:
    """The ``WalletConfig`` carried by ``api``, or the defaults when it has none."""
    config = getattr(api, "config", None)
    return config if isinstance(config, WalletConfig) else WalletConfig()
