"""Signing message shared by the secp256k1 lock scripts.

The lock script recomputes this digest on chain: the transaction hash, then
every witness of the script group (and the ones after it) prefixed by its
length as a little-endian u64. Witness 0 is hashed with its ``lock`` field
replaced by a placeholder of exactly the size the real lock will have.
"""

from __future__ import annotations

from dataclasses import replace

from ckb_quick_wallet.core.hashing import new_hasher
from ckb_quick_wallet.core.keys import SIGNATURE_SIZE, Key
from ckb_quick_wallet.core.serializer import pack_uint64
from ckb_quick_wallet.core.types import Transaction, WitnessArgs
from ckb_quick_wallet.shared.errors import MalformedInput


def compute_signing_message(tx: Transaction, placeholder_lock: bytes) -> bytes:
    if not tx.witnesses:
        raise MalformedInput("Transaction has no witness to sign")
    first = tx.witnesses[0]
    if not isinstance(first, WitnessArgs):
        raise MalformedInput("Witness 0 must be a structured witness")

    hasher = new_hasher()
    hasher.update(tx.compute_hash())

    emptied = replace(first, lock=placeholder_lock).serialize()
    hasher.update(pack_uint64(len(emptied)))
    hasher.update(emptied)

    for witness in tx.witnesses[1:]:
        data = witness.serialize()
        hasher.update(pack_uint64(len(data)))
        hasher.update(data)

    return hasher.digest()


def sign_transaction(tx: Transaction, key: Key) -> Transaction:
    """Sign every input with one key under the default single-signature lock."""
    message = compute_signing_message(tx, bytes(SIGNATURE_SIZE))
    return tx.with_witness_lock(0, key.sign_recoverable(message))
