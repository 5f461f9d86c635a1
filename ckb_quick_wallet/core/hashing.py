"""ckbhash: BLAKE2b-256 personalized with ``ckb-default-hash``."""

from __future__ import annotations

import hashlib

CKB_HASH_PERSONALIZATION = b"ckb-default-hash"
HASH_SIZE = 32
BLAKE160_SIZE = 20


def new_hasher():
    return hashlib.blake2b(digest_size=HASH_SIZE, person=CKB_HASH_PERSONALIZATION)


def ckbhash(data: bytes) -> bytes:
    hasher = new_hasher()
    hasher.update(data)
    return hasher.digest()


def blake160(data: bytes) -> bytes:
    return ckbhash(data)[:BLAKE160_SIZE]
