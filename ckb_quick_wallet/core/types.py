"""Immutable transaction data classes and their JSON-RPC representations.

Values are frozen; builders derive new drafts with the ``with_*`` helpers
instead of mutating a shared transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from ckb_quick_wallet.core import serializer
from ckb_quick_wallet.core.hashing import ckbhash
from ckb_quick_wallet.core.utils import bin_to_hex, byte_to_shannon, hex_to_bin, to_hex, to_int


def _bytes_field(instance: Any, name: str) -> None:
    value = getattr(instance, name)
    if value is not None and not isinstance(value, bytes):
        object.__setattr__(instance, name, hex_to_bin(value))


@dataclass(frozen=True)
class Script:
    code_hash: bytes
    hash_type: str = "type"
    args: bytes = b""

    def __post_init__(self):
        _bytes_field(self, "code_hash")
        _bytes_field(self, "args")
        if self.hash_type not in serializer.HASH_TYPES:
            raise ValueError(f"Unknown hash_type: {self.hash_type}")
        if len(self.code_hash) != 32:
            raise ValueError("code_hash must be 32 bytes")

    def serialize(self) -> bytes:
        return serializer.serialize_script(self)

    def compute_hash(self) -> bytes:
        return ckbhash(self.serialize())

    def calculate_bytesize(self) -> int:
        return len(self.code_hash) + 1 + len(self.args)

    def to_dict(self) -> dict[str, str]:
        return {
            "code_hash": bin_to_hex(self.code_hash),
            "hash_type": self.hash_type,
            "args": bin_to_hex(self.args),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Script | None":
        if not data:
            return None
        return cls(
            code_hash=data["code_hash"],
            hash_type=data.get("hash_type", "data"),
            args=data.get("args", "0x"),
        )


@dataclass(frozen=True)
class OutPoint:
    tx_hash: bytes
    index: int

    def __post_init__(self):
        _bytes_field(self, "tx_hash")
        object.__setattr__(self, "index", to_int(self.index))

    def to_dict(self) -> dict[str, str]:
        return {"tx_hash": bin_to_hex(self.tx_hash), "index": to_hex(self.index)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutPoint":
        return cls(tx_hash=data["tx_hash"], index=data["index"])


@dataclass(frozen=True)
class CellDep:
    out_point: OutPoint
    dep_type: str = "code"

    def __post_init__(self):
        if self.dep_type not in serializer.DEP_TYPES:
            raise ValueError(f"Unknown dep_type: {self.dep_type}")

    def to_dict(self) -> dict[str, Any]:
        return {"out_point": self.out_point.to_dict(), "dep_type": self.dep_type}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CellDep":
        return cls(
            out_point=OutPoint.from_dict(data["out_point"]),
            dep_type=data.get("dep_type", "code"),
        )


@dataclass(frozen=True)
class CellInput:
    previous_output: OutPoint
    since: int = 0

    def __post_init__(self):
        object.__setattr__(self, "since", to_int(self.since))

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous_output": self.previous_output.to_dict(),
            "since": to_hex(self.since),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CellInput":
        return cls(
            previous_output=OutPoint.from_dict(data["previous_output"]),
            since=data.get("since", 0),
        )


@dataclass(frozen=True)
class CellOutput:
    capacity: int
    lock: Script
    type: Script | None = None

    def __post_init__(self):
        object.__setattr__(self, "capacity", to_int(self.capacity))

    def calculate_bytesize(self, data: bytes = b"") -> int:
        size = 8 + len(data) + self.lock.calculate_bytesize()
        if self.type is not None:
            size += self.type.calculate_bytesize()
        return size

    def calculate_min_capacity(self, data: bytes = b"") -> int:
        return byte_to_shannon(self.calculate_bytesize(data))

    def to_dict(self) -> dict[str, Any]:
        return {
            "capacity": to_hex(self.capacity),
            "lock": self.lock.to_dict(),
            "type": self.type.to_dict() if self.type is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CellOutput":
        return cls(
            capacity=data["capacity"],
            lock=Script.from_dict(data["lock"]),
            type=Script.from_dict(data.get("type")),
        )


@dataclass(frozen=True)
class WitnessArgs:
    """Structured witness: each field is optional raw bytes."""

    lock: bytes | None = None
    input_type: bytes | None = None
    output_type: bytes | None = None

    def __post_init__(self):
        for name in ("lock", "input_type", "output_type"):
            _bytes_field(self, name)

    def serialize(self) -> bytes:
        return serializer.serialize_witness_args(self)


@dataclass(frozen=True)
class OpaqueWitness:
    """Witness carried as raw bytes and hashed as-is."""

    data: bytes = b""

    def __post_init__(self):
        _bytes_field(self, "data")

    def serialize(self) -> bytes:
        return self.data


Witness = Union[WitnessArgs, OpaqueWitness]


@dataclass(frozen=True)
class Transaction:
    version: int = 0
    cell_deps: tuple[CellDep, ...] = ()
    header_deps: tuple[bytes, ...] = ()
    inputs: tuple[CellInput, ...] = ()
    outputs: tuple[CellOutput, ...] = ()
    outputs_data: tuple[bytes, ...] = ()
    witnesses: tuple[Witness, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "cell_deps", tuple(self.cell_deps))
        object.__setattr__(
            self, "header_deps", tuple(hex_to_bin(h) for h in self.header_deps)
        )
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(
            self, "outputs_data", tuple(hex_to_bin(d) for d in self.outputs_data)
        )
        object.__setattr__(self, "witnesses", tuple(self.witnesses))

    def serialize_raw(self) -> bytes:
        return serializer.serialize_raw_transaction(self)

    def compute_hash(self) -> bytes:
        return ckbhash(self.serialize_raw())

    def with_cell_dep(self, cell_dep: CellDep) -> "Transaction":
        return replace(self, cell_deps=self.cell_deps + (cell_dep,))

    def with_inputs_since(self, since: int) -> "Transaction":
        return replace(
            self, inputs=tuple(replace(i, since=since) for i in self.inputs)
        )

    def with_witness(self, index: int, witness: Witness) -> "Transaction":
        witnesses = list(self.witnesses)
        witnesses[index] = witness
        return replace(self, witnesses=tuple(witnesses))

    def with_witness_lock(self, index: int, lock: bytes) -> "Transaction":
        witness = self.witnesses[index]
        if not isinstance(witness, WitnessArgs):
            raise TypeError("Only structured witnesses carry a lock field")
        return self.with_witness(index, replace(witness, lock=lock))

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": to_hex(self.version),
            "cell_deps": [dep.to_dict() for dep in self.cell_deps],
            "header_deps": [bin_to_hex(h) for h in self.header_deps],
            "inputs": [i.to_dict() for i in self.inputs],
            "outputs": [o.to_dict() for o in self.outputs],
            "outputs_data": [bin_to_hex(d) for d in self.outputs_data],
            "witnesses": [bin_to_hex(w.serialize()) for w in self.witnesses],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            version=to_int(data.get("version", 0)),
            cell_deps=[CellDep.from_dict(d) for d in data.get("cell_deps", [])],
            header_deps=data.get("header_deps", []),
            inputs=[CellInput.from_dict(i) for i in data.get("inputs", [])],
            outputs=[CellOutput.from_dict(o) for o in data.get("outputs", [])],
            outputs_data=data.get("outputs_data", []),
            witnesses=[OpaqueWitness(w) for w in data.get("witnesses", [])],
        )


@dataclass(frozen=True)
class Block:
    number: int
    transactions: tuple[Transaction, ...] = ()
    transaction_hashes: tuple[bytes, ...] = ()

    def iter_transactions(self):
        """Yield ``(tx_hash, transaction)``, hashing locally when the node omitted it."""
        for index, tx in enumerate(self.transactions):
            if index < len(self.transaction_hashes):
                yield self.transaction_hashes[index], tx
            else:
                yield tx.compute_hash(), tx

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        raw_transactions = data.get("transactions", [])
        hashes = tuple(hex_to_bin(tx["hash"]) for tx in raw_transactions if "hash" in tx)
        if len(hashes) != len(raw_transactions):
            hashes = ()
        return cls(
            number=to_int(data["header"]["number"]),
            transactions=tuple(Transaction.from_dict(tx) for tx in raw_transactions),
            transaction_hashes=hashes,
        )


@dataclass(frozen=True)
class CellOutputWithOutPoint:
    capacity: int
    lock: Script
    out_point: OutPoint
    type: Script | None = None
    block_hash: bytes | None = None
    output_data_len: int = 0

    def __post_init__(self):
        object.__setattr__(self, "capacity", to_int(self.capacity))
        object.__setattr__(self, "output_data_len", to_int(self.output_data_len))
        _bytes_field(self, "block_hash")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CellOutputWithOutPoint":
        return cls(
            capacity=data["capacity"],
            lock=Script.from_dict(data["lock"]),
            out_point=OutPoint.from_dict(data["out_point"]),
            type=Script.from_dict(data.get("type")),
            block_hash=data.get("block_hash"),
            output_data_len=data.get("output_data_len", 0),
        )


@dataclass(frozen=True)
class LiveCell:
    status: str
    output: CellOutput | None = None
    data: bytes | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LiveCell":
        cell = data.get("cell") or {}
        output = cell.get("output")
        content = (cell.get("data") or {}).get("content")
        return cls(
            status=data.get("status", "unknown"),
            output=CellOutput.from_dict(output) if output else None,
            data=hex_to_bin(content) if content is not None else None,
        )


@dataclass(frozen=True)
class SystemScripts:
    """Well-known cells of the default lock scripts, read from the genesis block."""

    secp_cell_type_hash: bytes
    secp_group_out_point: OutPoint
    secp_code_out_point: OutPoint
    secp_data_out_point: OutPoint
    multi_sign_secp_cell_type_hash: bytes
    multi_sign_secp_group_out_point: OutPoint

    @classmethod
    def from_genesis(cls, genesis: Block) -> "SystemScripts":
        (cell_tx_hash, cell_tx), (group_tx_hash, _) = list(genesis.iter_transactions())[:2]
        return cls(
            secp_cell_type_hash=cell_tx.outputs[1].type.compute_hash(),
            secp_group_out_point=OutPoint(tx_hash=group_tx_hash, index=0),
            secp_code_out_point=OutPoint(tx_hash=cell_tx_hash, index=1),
            secp_data_out_point=OutPoint(tx_hash=cell_tx_hash, index=3),
            multi_sign_secp_cell_type_hash=cell_tx.outputs[4].type.compute_hash(),
            multi_sign_secp_group_out_point=OutPoint(tx_hash=group_tx_hash, index=1),
        )
