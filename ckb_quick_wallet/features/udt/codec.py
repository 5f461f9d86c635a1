"""Token amounts stored in cell data as two little-endian u64 words."""

from __future__ import annotations

import struct

from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.shared.errors import MalformedInput, OutOfRange

AMOUNT_SIZE = 16
MAX_AMOUNT = 2**128 - 1
U64_MASK = 0xFFFFFFFFFFFFFFFF


class AmountCodec:
    @staticmethod
    def encode(amount: int) -> bytes:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise OutOfRange(f"Amount must be an integer, got {type(amount).__name__}")
        if not 0 <= amount <= MAX_AMOUNT:
            raise OutOfRange(f"Amount {amount} is outside [0, 2^128)")
        return struct.pack("<QQ", amount & U64_MASK, (amount >> 64) & U64_MASK)

    @staticmethod
    def decode(data: bytes | str) -> int:
        try:
            raw = hex_to_bin(data)
        except ValueError as e:
            raise MalformedInput(f"Amount data is not valid hex: {e}") from e
        if len(raw) != AMOUNT_SIZE:
            raise MalformedInput(
                f"Amount data must be {AMOUNT_SIZE} bytes, got {len(raw)}"
            )
        low, high = struct.unpack("<QQ", raw)
        return (high << 64) | low


pack_amount = AmountCodec.encode
unpack_amount = AmountCodec.decode
