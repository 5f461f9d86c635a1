"""Live cell enumeration and input selection for plain capacity transfers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from ckb_quick_wallet.core.types import (
    CellInput,
    CellOutputWithOutPoint,
    OpaqueWitness,
    Witness,
    WitnessArgs,
)
from ckb_quick_wallet.shared.config import config_for
from ckb_quick_wallet.shared.errors import InsufficientFunds
from ckb_quick_wallet.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class InputsInfo:
    inputs: tuple[CellInput, ...]
    capacities: int
    witnesses: tuple[Witness, ...]


@dataclass(frozen=True)
class UnspentCells:
    cells: tuple[CellOutputWithOutPoint, ...]
    total_capacities: int


def iter_block_windows(tip: int, window_size: int) -> Iterator[tuple[int, int]]:
    """Yield inclusive ``(from, to)`` block ranges covering ``0..tip``."""
    current_from = 0
    while current_from <= tip:
        current_to = min(current_from + window_size, tip)
        yield current_from, current_to
        current_from = current_to + 1


class CellCollector:
    def __init__(
        self,
        api,
        skip_data_and_type: bool | None = None,
        window_size: int | None = None,
    ):
        config = config_for(api)
        self.api = api
        self.skip_data_and_type = (
            config.skip_data_and_type if skip_data_and_type is None else skip_data_and_type
        )
        self.window_size = config.window_size if window_size is None else window_size

    def _accepts(self, cell: CellOutputWithOutPoint) -> bool:
        if not self.skip_data_and_type:
            return True
        return cell.output_data_len == 0 and cell.type is None

    def iter_unspent_cells(self, lock_hash: bytes) -> Iterator[CellOutputWithOutPoint]:
        tip = self.api.get_tip_block_number()
        for current_from, current_to in iter_block_windows(tip, self.window_size):
            for cell in self.api.get_cells_by_lock_hash(lock_hash, current_from, current_to):
                if self._accepts(cell):
                    yield cell

    def get_unspent_cells(self, lock_hash: bytes) -> UnspentCells:
        cells = tuple(self.iter_unspent_cells(lock_hash))
        return UnspentCells(
            cells=cells,
            total_capacities=sum(cell.capacity for cell in cells),
        )

    def gather_inputs(
        self,
        lock_hashes: list[bytes],
        capacity: int,
        min_capacity: int,
        min_change_capacity: int,
        fee: int = 0,
    ) -> InputsInfo:
        """Pick live cells until ``capacity + fee`` is covered.

        Selection stops once the leftover is either exactly zero (no change
        output) or large enough to fund a change cell of ``min_change_capacity``.
        """
        if capacity < min_capacity:
            raise InsufficientFunds(
                f"capacity cannot be less than {min_capacity} shannons"
            )

        total_capacities = capacity + fee
        input_capacities = 0
        inputs: list[CellInput] = []
        satisfied = False

        for lock_hash in lock_hashes:
            for cell in self.iter_unspent_cells(lock_hash):
                inputs.append(CellInput(previous_output=cell.out_point, since=0))
                input_capacities += cell.capacity
                diff = input_capacities - total_capacities
                if diff == 0 or diff >= min_change_capacity:
                    satisfied = True
                    break
            if satisfied:
                break

        if not satisfied:
            logger.warning(
                "Capacity not enough: need %d (+%d for change), have %d",
                total_capacities,
                min_change_capacity,
                input_capacities,
            )
            raise InsufficientFunds(
                f"Capacity not enough: need {total_capacities} shannons, "
                f"gathered {input_capacities}"
            )

        witnesses: list[Witness] = [WitnessArgs()]
        witnesses.extend(OpaqueWitness() for _ in inputs[1:])
        return InputsInfo(
            inputs=tuple(inputs),
            capacities=input_capacities,
            witnesses=tuple(witnesses),
        )
