"""Signing message for the multisig lock."""

from __future__ import annotations

from ckb_quick_wallet.core.keys import SIGNATURE_SIZE
from ckb_quick_wallet.core.signing import compute_signing_message
from ckb_quick_wallet.core.types import Transaction
from ckb_quick_wallet.features.multisig.configuration import MultiSignConfiguration


class SigningMessageBuilder:
    def __init__(self, configuration: MultiSignConfiguration):
        self.configuration = configuration

    def placeholder_lock(self) -> bytes:
        # Sized by policy: the lock script replays threshold signatures.
        return self.configuration.serialize() + bytes(
            SIGNATURE_SIZE * self.configuration.threshold
        )

    def build(self, tx: Transaction) -> bytes:
        return compute_signing_message(tx, self.placeholder_lock())
