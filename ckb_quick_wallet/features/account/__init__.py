"""Single-signature account support for CKB Quick Wallet."""

from ckb_quick_wallet.features.account.service import SingleSignWallet

__all__ = ["SingleSignWallet"]
