"""Multisig lock support for CKB Quick Wallet."""

from ckb_quick_wallet.features.multisig.configuration import MultiSignConfiguration
from ckb_quick_wallet.features.multisig.service import MultiSignWallet
from ckb_quick_wallet.features.multisig.signing import SigningMessageBuilder

__all__ = [
    "MultiSignConfiguration",
    "MultiSignWallet",
    "SigningMessageBuilder",
]
