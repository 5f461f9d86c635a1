"""Bech32 address codec for lock scripts.

Payload formats:
- short: ``0x01 || code_hash_index || args`` where index ``0x00`` is the
  default secp256k1 single-signature lock and ``0x01`` the multisig lock.
- full: ``0x02`` (hash_type ``data``) or ``0x04`` (hash_type ``type``)
  followed by ``code_hash || args``.
"""

from __future__ import annotations

from dataclasses import dataclass

import bech32

from ckb_quick_wallet.core.types import Script
from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.shared.errors import InvalidAddress

PREFIX_MAINNET = "ckb"
PREFIX_TESTNET = "ckt"

SHORT_FORMAT = 0x01
FULL_DATA_FORMAT = 0x02
FULL_TYPE_FORMAT = 0x04

CODE_HASH_INDEX_SINGLESIG = 0x00
CODE_HASH_INDEX_MULTISIG = 0x01

SECP256K1_BLAKE160_SIGHASH_ALL_TYPE_HASH = hex_to_bin(
    "0x9bd7e06f3ecf4be0f2fcd2188b23f1b9fcc88e5d4b65a8637b17723bbda3cce8"
)
SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH = hex_to_bin(
    "0x5c5069eb0857efc65e1bca0c07df34c31663b3622fd3876c876320fc9634e2a8"
)

SHORT_CODE_HASHES = {
    CODE_HASH_INDEX_SINGLESIG: SECP256K1_BLAKE160_SIGHASH_ALL_TYPE_HASH,
    CODE_HASH_INDEX_MULTISIG: SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH,
}

ADDRESS_TYPE_SHORT_SINGLESIG = "SHORTSINGLESIG"
ADDRESS_TYPE_SHORT_MULTISIG = "SHORTMULTISIG"
ADDRESS_TYPE_FULL = "FULL"


@dataclass(frozen=True)
class ParsedAddress:
    prefix: str
    address_type: str
    script: Script


def encode_address(prefix: str, payload: bytes) -> str:
    data = bech32.convertbits(list(payload), 8, 5)
    return bech32.bech32_encode(prefix, data)


def generate_short_address(
    args: bytes, prefix: str = PREFIX_TESTNET, code_hash_index: int = CODE_HASH_INDEX_SINGLESIG
) -> str:
    return encode_address(prefix, bytes([SHORT_FORMAT, code_hash_index]) + args)


def generate_full_address(
    code_hash: bytes, args: bytes, prefix: str = PREFIX_TESTNET, hash_type: str = "type"
) -> str:
    format_byte = FULL_TYPE_FORMAT if hash_type == "type" else FULL_DATA_FORMAT
    return encode_address(prefix, bytes([format_byte]) + code_hash + args)


def _decode(address: str) -> tuple[str, bytes]:
    if address != address.lower() and address != address.upper():
        raise InvalidAddress(f"Mixed-case address: {address}")
    hrp, data = bech32.bech32_decode(address)
    if hrp is None:
        # Full-format addresses exceed the 90 character BIP173 limit enforced
        # by bech32_decode; the checksum itself is still plain bech32.
        lowered = address.lower()
        pos = lowered.rfind("1")
        if pos < 1 or pos + 7 > len(lowered):
            raise InvalidAddress(f"Invalid address: {address}")
        hrp = lowered[:pos]
        if any(c not in bech32.CHARSET for c in lowered[pos + 1 :]):
            raise InvalidAddress(f"Invalid address: {address}")
        values = [bech32.CHARSET.find(c) for c in lowered[pos + 1 :]]
        if not bech32.bech32_verify_checksum(hrp, values):
            raise InvalidAddress(f"Invalid address checksum: {address}")
        data = values[:-6]

    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None or not payload:
        raise InvalidAddress(f"Invalid address payload: {address}")
    return hrp, bytes(payload)


def parse_address(address: str) -> ParsedAddress:
    prefix, payload = _decode(address)
    if prefix not in (PREFIX_MAINNET, PREFIX_TESTNET):
        raise InvalidAddress(f"Unknown address prefix: {prefix}")

    format_type = payload[0]
    if format_type == SHORT_FORMAT:
        if len(payload) != 22:
            raise InvalidAddress("Short address payload must be 22 bytes")
        code_hash_index = payload[1]
        if code_hash_index not in SHORT_CODE_HASHES:
            raise InvalidAddress(f"Unknown code hash index: {code_hash_index}")
        address_type = (
            ADDRESS_TYPE_SHORT_SINGLESIG
            if code_hash_index == CODE_HASH_INDEX_SINGLESIG
            else ADDRESS_TYPE_SHORT_MULTISIG
        )
        script = Script(
            code_hash=SHORT_CODE_HASHES[code_hash_index],
            hash_type="type",
            args=payload[2:],
        )
        return ParsedAddress(prefix=prefix, address_type=address_type, script=script)

    if format_type in (FULL_DATA_FORMAT, FULL_TYPE_FORMAT):
        if len(payload) < 33:
            raise InvalidAddress("Full address payload is too short")
        script = Script(
            code_hash=payload[1:33],
            hash_type="type" if format_type == FULL_TYPE_FORMAT else "data",
            args=payload[33:],
        )
        return ParsedAddress(prefix=prefix, address_type=ADDRESS_TYPE_FULL, script=script)

    raise InvalidAddress(f"Unknown address format: {format_type:#04x}")
