"""Molecule encodings of the transaction structures.

The node and the on-chain lock scripts hash these exact byte layouts, so the
signing message is only valid if every field is packed the same way here.

Layouts used:
- struct: fields concatenated, fixed size.
- fixvec: ``u32 item_count`` followed by fixed-size items.
- dynvec / table: ``u32 total_size``, one ``u32`` offset per item, items.
- option: empty when absent, the inner value otherwise.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ckb_quick_wallet.core.types import (
        CellDep,
        CellInput,
        CellOutput,
        OutPoint,
        Script,
        Transaction,
        WitnessArgs,
    )

HASH_TYPES = {"data": 0, "type": 1, "data1": 2}
DEP_TYPES = {"code": 0, "dep_group": 1}

FULL_SIZE_BYTES = 4


def pack_uint32(value: int) -> bytes:
    return struct.pack("<I", value)


def pack_uint64(value: int) -> bytes:
    return struct.pack("<Q", value)


def serialize_bytes(data: bytes) -> bytes:
    return pack_uint32(len(data)) + data


def serialize_option(data: bytes | None) -> bytes:
    return b"" if data is None else data


def serialize_fixvec(items: Iterable[bytes]) -> bytes:
    items = list(items)
    return pack_uint32(len(items)) + b"".join(items)


def serialize_dynvec(items: Iterable[bytes]) -> bytes:
    items = list(items)
    header_size = FULL_SIZE_BYTES + 4 * len(items)
    offsets = []
    offset = header_size
    for item in items:
        offsets.append(pack_uint32(offset))
        offset += len(item)
    return pack_uint32(offset) + b"".join(offsets) + b"".join(items)


# A table shares the dynvec layout; the items are its fields in order.
serialize_table = serialize_dynvec


def serialize_script(script: "Script") -> bytes:
    return serialize_table(
        [
            script.code_hash,
            bytes([HASH_TYPES[script.hash_type]]),
            serialize_bytes(script.args),
        ]
    )


def serialize_out_point(out_point: "OutPoint") -> bytes:
    return out_point.tx_hash + pack_uint32(out_point.index)


def serialize_cell_input(cell_input: "CellInput") -> bytes:
    return pack_uint64(cell_input.since) + serialize_out_point(
        cell_input.previous_output
    )


def serialize_cell_output(output: "CellOutput") -> bytes:
    type_script = serialize_script(output.type) if output.type is not None else None
    return serialize_table(
        [
            pack_uint64(output.capacity),
            serialize_script(output.lock),
            serialize_option(type_script),
        ]
    )


def serialize_cell_dep(cell_dep: "CellDep") -> bytes:
    return serialize_out_point(cell_dep.out_point) + bytes(
        [DEP_TYPES[cell_dep.dep_type]]
    )


def serialize_raw_transaction(tx: "Transaction") -> bytes:
    return serialize_table(
        [
            pack_uint32(tx.version),
            serialize_fixvec(serialize_cell_dep(dep) for dep in tx.cell_deps),
            serialize_fixvec(tx.header_deps),
            serialize_fixvec(serialize_cell_input(i) for i in tx.inputs),
            serialize_dynvec(serialize_cell_output(o) for o in tx.outputs),
            serialize_dynvec(serialize_bytes(data) for data in tx.outputs_data),
        ]
    )


def serialize_witness_args(witness: "WitnessArgs") -> bytes:
    return serialize_table(
        [
            serialize_option(
                serialize_bytes(field) if field is not None else None
            )
            for field in (witness.lock, witness.input_type, witness.output_type)
        ]
    )
