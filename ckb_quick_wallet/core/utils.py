"""Hex and unit conversions shared by the core data classes."""

from __future__ import annotations

from typing import Any

SHANNONS_PER_CKBYTE = 100_000_000


def hex_to_bin(value: str | bytes | bytearray) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def bin_to_hex(value: bytes) -> str:
    return "0x" + value.hex()


def to_int(value: Any) -> int:
    """Accept ints and the node's ``0x``-prefixed hex quantities."""
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to int")


def to_hex(value: int) -> str:
    return hex(value)


def byte_to_shannon(size: int) -> int:
    return size * SHANNONS_PER_CKBYTE
