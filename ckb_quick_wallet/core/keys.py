"""secp256k1 keys and recoverable signatures (libsecp256k1 through coincurve)."""

from __future__ import annotations

import coincurve

from ckb_quick_wallet.core.hashing import blake160
from ckb_quick_wallet.core.utils import bin_to_hex, hex_to_bin
from ckb_quick_wallet.shared.errors import MalformedInput

SIGNATURE_SIZE = 65
MESSAGE_SIZE = 32


class Key:
    def __init__(self, private_key: "str | bytes | coincurve.PrivateKey"):
        if isinstance(private_key, coincurve.PrivateKey):
            self._key = private_key
        else:
            secret = hex_to_bin(private_key)
            if len(secret) != 32:
                raise MalformedInput("Private key must be 32 bytes")
            self._key = coincurve.PrivateKey(secret)

    @classmethod
    def random(cls) -> "Key":
        return cls(coincurve.PrivateKey())

    @classmethod
    def coerce(cls, key: "Key | str | bytes") -> "Key":
        return key if isinstance(key, cls) else cls(key)

    @property
    def pubkey(self) -> bytes:
        return self._key.public_key.format(compressed=True)

    @property
    def pubkey_hash(self) -> bytes:
        return blake160(self.pubkey)

    @property
    def privkey_hex(self) -> str:
        return bin_to_hex(self._key.secret)

    def sign_recoverable(self, message: bytes) -> bytes:
        """Sign a 32-byte digest; returns ``r || s || recovery_id``."""
        if len(message) != MESSAGE_SIZE:
            raise MalformedInput("Signing message must be a 32-byte digest")
        signature = self._key.sign_recoverable(message, hasher=None)
        if len(signature) != SIGNATURE_SIZE:
            raise MalformedInput(f"Unexpected signature length: {len(signature)}")
        return signature

    def __repr__(self) -> str:
        return f"Key(pubkey={bin_to_hex(self.pubkey)})"


def recover_pubkey(message: bytes, signature: bytes) -> bytes:
    public_key = coincurve.PublicKey.from_signature_and_message(
        signature, message, hasher=None
    )
    return public_key.format(compressed=True)
