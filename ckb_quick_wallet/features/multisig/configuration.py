"""M-of-N multisig policy and the lock args derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ckb_quick_wallet.core.hashing import BLAKE160_SIZE, blake160
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.serializer import pack_uint64
from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.shared.errors import InvalidPolicy

MAX_BYTE_VALUE = 255
MAX_SINCE = 2**64 - 1
HEADER_SIZE = 4
RESERVED_BYTE = 0x00


def _normalize_hashes(pubkey_hashes: Iterable[str | bytes]) -> tuple[bytes, ...]:
    try:
        hashes = tuple(hex_to_bin(h) for h in pubkey_hashes)
    except ValueError as e:
        raise InvalidPolicy(f"Pubkey hash is not valid hex: {e}") from e
    for pubkey_hash in hashes:
        if len(pubkey_hash) != BLAKE160_SIZE:
            raise InvalidPolicy(
                f"Pubkey hash must be {BLAKE160_SIZE} bytes, got {len(pubkey_hash)}"
            )
    return hashes


@dataclass(frozen=True)
class MultiSignConfiguration:
    """Multisig policy: ``threshold`` signatures out of ``pubkey_hashes``.

    The first ``require_first_n`` signatures must come from the first
    ``require_first_n`` keys in ``pubkey_hashes`` order. ``since`` is the
    lock-time attached to every input spent under this policy.
    """

    require_first_n: int
    threshold: int
    pubkey_hashes: tuple[bytes, ...]
    since: int = 0

    def __post_init__(self):
        if not 0 <= self.require_first_n <= MAX_BYTE_VALUE:
            raise InvalidPolicy("require_first_n should be less than 256")
        if not 0 <= self.threshold <= MAX_BYTE_VALUE:
            raise InvalidPolicy("threshold should be less than 256")
        hashes = _normalize_hashes(self.pubkey_hashes)
        if len(hashes) > MAX_BYTE_VALUE:
            raise InvalidPolicy("Pubkey number must be less than 256")
        if not 0 <= self.since <= MAX_SINCE:
            raise InvalidPolicy("since must fit in an unsigned 64-bit integer")
        object.__setattr__(self, "pubkey_hashes", hashes)

    @classmethod
    def from_private_keys(
        cls,
        require_first_n: int,
        threshold: int,
        private_keys: Sequence["Key | str | bytes"],
        since: int = 0,
    ) -> "MultiSignConfiguration":
        pubkey_hashes = tuple(Key.coerce(key).pubkey_hash for key in private_keys)
        return cls(
            require_first_n=require_first_n,
            threshold=threshold,
            pubkey_hashes=pubkey_hashes,
            since=since,
        )

    @classmethod
    def deserialize(cls, blob: bytes, since: int = 0) -> "MultiSignConfiguration":
        if len(blob) < HEADER_SIZE:
            raise InvalidPolicy("Multisig script is shorter than its header")
        reserved, require_first_n, threshold, count = blob[:HEADER_SIZE]
        if reserved != RESERVED_BYTE:
            raise InvalidPolicy(f"Unsupported multisig script version: {reserved}")
        expected = HEADER_SIZE + BLAKE160_SIZE * count
        if len(blob) != expected:
            raise InvalidPolicy(
                f"Multisig script should be {expected} bytes, got {len(blob)}"
            )
        body = blob[HEADER_SIZE:]
        return cls(
            require_first_n=require_first_n,
            threshold=threshold,
            pubkey_hashes=tuple(
                body[i : i + BLAKE160_SIZE] for i in range(0, len(body), BLAKE160_SIZE)
            ),
            since=since,
        )

    def serialize(self) -> bytes:
        header = bytes(
            [RESERVED_BYTE, self.require_first_n, self.threshold, len(self.pubkey_hashes)]
        )
        return header + b"".join(self.pubkey_hashes)

    def blake160(self) -> bytes:
        return blake160(self.serialize())

    def lock_args(self) -> bytes:
        return self.blake160() + pack_uint64(self.since)
