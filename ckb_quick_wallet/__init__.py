"""CKB Quick Wallet - a client-side wallet for the CKB cell model.

This package is organized into feature-based modules:
- features.multisig: M-of-N multisig policy, signing message and transfers
- features.udt: Simple UDT amounts, token cell scans and transfers
- features.account: Default single-signature account
- core: Hashing, molecule encoding, addresses, keys and node RPC
- shared: Errors, logging, configuration and transport
"""

from ckb_quick_wallet.core import CKBClient, Key
from ckb_quick_wallet.features.account import SingleSignWallet
from ckb_quick_wallet.features.multisig import (
    MultiSignConfiguration,
    MultiSignWallet,
    SigningMessageBuilder,
)
from ckb_quick_wallet.features.udt import AmountCodec, SimpleUdtWallet, TokenCellScanner
from ckb_quick_wallet.shared import WalletConfig, WalletError

__version__ = "0.1.0"
__all__ = [
    "AmountCodec",
    "CKBClient",
    "Key",
    "MultiSignConfiguration",
    "MultiSignWallet",
    "SigningMessageBuilder",
    "SimpleUdtWallet",
    "SingleSignWallet",
    "TokenCellScanner",
    "WalletConfig",
    "WalletError",
]
