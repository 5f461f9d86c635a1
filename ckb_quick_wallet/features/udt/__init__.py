"""Simple UDT (user defined token) support for CKB Quick Wallet."""

from ckb_quick_wallet.features.udt.codec import AmountCodec, pack_amount, unpack_amount
from ckb_quick_wallet.features.udt.scanner import (
    UDT_SCRIPT_HASH,
    TokenCellScanner,
    UdtCell,
    UdtCellCollection,
)
from ckb_quick_wallet.features.udt.service import SimpleUdtWallet

__all__ = [
    "AmountCodec",
    "pack_amount",
    "unpack_amount",
    "UDT_SCRIPT_HASH",
    "TokenCellScanner",
    "UdtCell",
    "UdtCellCollection",
    "SimpleUdtWallet",
]
