import pytest

from ckb_quick_wallet.core.address import (
    SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH,
    SECP256K1_BLAKE160_SIGHASH_ALL_TYPE_HASH,
)
from ckb_quick_wallet.core.hashing import ckbhash
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.types import (
    Block,
    CellOutput,
    CellOutputWithOutPoint,
    LiveCell,
    OutPoint,
    Script,
)
from ckb_quick_wallet.shared.errors import BroadcastRejected

GROUP_TX_HASH = b"\x11" * 32
CELL_TX_HASH = b"\x22" * 32


class FakeChain:
    """In-memory node implementing the chain RPC calls used by the wallets."""

    def __init__(self):
        self.blocks: list[Block] = [Block(number=0)]
        self.cells: list[tuple[int, CellOutputWithOutPoint, bytes]] = []
        self.fetched_blocks: list[int] = []
        self.cell_queries: list[tuple[int, int]] = []
        self.live_cell_queries: list[OutPoint] = []
        self.sent = []
        self.reject_with: str | None = None
        self.spent: set[OutPoint] = set()

        self.secp_cell_type_hash = SECP256K1_BLAKE160_SIGHASH_ALL_TYPE_HASH
        self.multi_sign_secp_cell_type_hash = SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH
        self.secp_group_out_point = OutPoint(tx_hash=GROUP_TX_HASH, index=0)
        self.multi_sign_secp_group_out_point = OutPoint(tx_hash=GROUP_TX_HASH, index=1)
        self.secp_code_out_point = OutPoint(tx_hash=CELL_TX_HASH, index=1)
        self.secp_data_out_point = OutPoint(tx_hash=CELL_TX_HASH, index=3)

    def extend_to(self, height: int) -> None:
        while len(self.blocks) <= height:
            self.blocks.append(Block(number=len(self.blocks)))

    def set_block(self, number: int, transactions, hashes=()) -> None:
        self.extend_to(number)
        self.blocks[number] = Block(
            number=number,
            transactions=tuple(transactions),
            transaction_hashes=tuple(hashes),
        )

    def add_cell(
        self,
        lock: Script,
        capacity: int,
        block_number: int = 0,
        type_script: Script | None = None,
        data: bytes = b"",
    ) -> CellOutputWithOutPoint:
        self.extend_to(block_number)
        out_point = OutPoint(
            tx_hash=ckbhash(len(self.cells).to_bytes(4, "little")), index=0
        )
        cell = CellOutputWithOutPoint(
            capacity=capacity,
            lock=lock,
            out_point=out_point,
            type=type_script,
            output_data_len=len(data),
        )
        self.cells.append((block_number, cell, data))
        return cell

    def get_tip_block_number(self) -> int:
        return len(self.blocks) - 1

    def get_block_by_number(self, number: int) -> Block:
        self.fetched_blocks.append(number)
        return self.blocks[number]

    def get_cells_by_lock_hash(self, lock_hash: bytes, from_number: int, to_number: int):
        self.cell_queries.append((from_number, to_number))
        return [
            cell
            for number, cell, _ in self.cells
            if from_number <= number <= to_number and cell.lock.compute_hash() == lock_hash
        ]

    def get_live_cell(self, out_point: OutPoint, with_data: bool = False) -> LiveCell:
        self.live_cell_queries.append(out_point)
        if out_point in self.spent:
            return LiveCell(status="dead")
        for _, cell, data in self.cells:
            if cell.out_point == out_point:
                return LiveCell(
                    status="live",
                    output=CellOutput(capacity=cell.capacity, lock=cell.lock, type=cell.type),
                    data=data if with_data else None,
                )
        return LiveCell(status="unknown")

    def send_transaction(self, tx) -> bytes:
        if self.reject_with:
            raise BroadcastRejected(self.reject_with, code=-3)
        self.sent.append(tx)
        return tx.compute_hash()


@pytest.fixture
def chain():
    """Fixture providing an empty in-memory chain (tip = genesis)"""
    return FakeChain()


@pytest.fixture
def keys():
    """Fixture providing three deterministic private keys"""
    return [Key("0x" + f"{i:02x}" * 32) for i in (1, 2, 3)]


@pytest.fixture
def recipient_key():
    """Fixture providing the key behind the transfer target address"""
    return Key("0x" + "42" * 32)
