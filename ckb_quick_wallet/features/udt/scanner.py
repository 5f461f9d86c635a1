"""Chain scans backing the Simple UDT wallet.

Both scans are synchronous and bounded only by chain height.
"""

from __future__ import annotations

from dataclasses import dataclass

from ckb_quick_wallet.core.cell_collector import iter_block_windows
from ckb_quick_wallet.core.hashing import ckbhash
from ckb_quick_wallet.core.types import CellDep, CellOutputWithOutPoint, OutPoint
from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.features.udt.codec import AmountCodec
from ckb_quick_wallet.shared.config import config_for
from ckb_quick_wallet.shared.errors import DependencyNotFound, MalformedInput
from ckb_quick_wallet.shared.logging import get_logger

logger = get_logger(__name__)

UDT_SCRIPT_HASH = hex_to_bin(
    "0x57dd0067814dab356e05c6def0d094bb79776711e68ffdfad2df6a7f877f7db6"
)


@dataclass(frozen=True)
class UdtCell:
    cell: CellOutputWithOutPoint
    amount: int


@dataclass(frozen=True)
class UdtCellCollection:
    cells: tuple[UdtCell, ...]
    total_capacities: int
    total_amounts: int


class TokenCellScanner:
    def __init__(
        self,
        api,
        code_hash: bytes = UDT_SCRIPT_HASH,
        window_size: int | None = None,
    ):
        self.api = api
        self.code_hash = code_hash
        self.window_size = config_for(api).window_size if window_size is None else window_size
        self._cell_dep: CellDep | None = None

    @property
    def cached_dependency(self) -> CellDep | None:
        return self._cell_dep

    def invalidate(self) -> None:
        self._cell_dep = None

    def locate_dependency(self) -> CellDep:
        """Find the cell whose data hashes to the token contract code hash."""
        if self._cell_dep is not None:
            return self._cell_dep

        tip = self.api.get_tip_block_number()
        for number in range(tip + 1):
            block = self.api.get_block_by_number(number)
            for tx_hash, tx in block.iter_transactions():
                for index, data in enumerate(tx.outputs_data):
                    if ckbhash(data) == self.code_hash:
                        self._cell_dep = CellDep(
                            out_point=OutPoint(tx_hash=tx_hash, index=index),
                            dep_type="code",
                        )
                        logger.info(
                            "Token contract found in block %d, output %d", number, index
                        )
                        return self._cell_dep

        raise DependencyNotFound("UDT Script is not deployed!")

    def collect_balance(self, lock_hash: bytes, type_hash: bytes) -> UdtCellCollection:
        results: list[UdtCell] = []
        total_capacities = 0
        total_amounts = 0

        tip = self.api.get_tip_block_number()
        for current_from, current_to in iter_block_windows(tip, self.window_size):
            cells = self.api.get_cells_by_lock_hash(lock_hash, current_from, current_to)
            for cell in cells:
                if cell.type is None or cell.type.compute_hash() != type_hash:
                    continue
                live_cell = self.api.get_live_cell(cell.out_point, True)
                if live_cell.status != "live":
                    # Spent between the window read and this lookup.
                    logger.info(
                        "Skipping token cell %s: status %s",
                        cell.out_point.to_dict(),
                        live_cell.status,
                    )
                    continue
                if live_cell.data is None:
                    raise MalformedInput(
                        f"Live cell {cell.out_point.to_dict()} returned no data"
                    )
                amount = AmountCodec.decode(live_cell.data)
                results.append(UdtCell(cell=cell, amount=amount))
                total_capacities += cell.capacity
                total_amounts += amount

        return UdtCellCollection(
            cells=tuple(results),
            total_capacities=total_capacities,
            total_amounts=total_amounts,
        )
