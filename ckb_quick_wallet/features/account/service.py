"""Single-signature account service for CKB Quick Wallet."""

from __future__ import annotations

from dataclasses import replace

from ckb_quick_wallet.core.address import (
    generate_short_address,
    parse_address,
)
from ckb_quick_wallet.core.cell_collector import CellCollector
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.signing import sign_transaction
from ckb_quick_wallet.core.types import CellDep, CellOutput, Script, Transaction
from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.shared.config import config_for
from ckb_quick_wallet.shared.logging import get_logger

logger = get_logger(__name__)


class SingleSignWallet:
    """Cells locked by the default secp256k1/blake160 lock of one key."""

    def __init__(
        self,
        api,
        key: "Key | str | bytes",
        skip_data_and_type: bool | None = None,
        prefix: str | None = None,
        collector: CellCollector | None = None,
    ):
        self.api = api
        self.key = Key.coerce(key)
        self.prefix = config_for(api).address_prefix if prefix is None else prefix
        self.collector = collector or CellCollector(
            api, skip_data_and_type=skip_data_and_type
        )

    @property
    def lock(self) -> Script:
        return Script(
            code_hash=self.api.secp_cell_type_hash,
            hash_type="type",
            args=self.key.pubkey_hash,
        )

    @property
    def lock_hash(self) -> bytes:
        return self.lock.compute_hash()

    @property
    def address(self) -> str:
        return generate_short_address(self.key.pubkey_hash, prefix=self.prefix)

    def get_balance(self) -> int:
        return self.collector.get_unspent_cells(self.lock_hash).total_capacities

    def generate_tx(
        self,
        target_address: str,
        capacity: int,
        data: str | bytes = b"",
        fee: int = 0,
        type_script: Script | None = None,
    ) -> Transaction:
        target_lock = parse_address(target_address).script
        return self.generate_tx_to_lock(
            target_lock, capacity, data=data, fee=fee, type_script=type_script
        )

    def generate_tx_to_lock(
        self,
        target_lock: Script,
        capacity: int,
        data: str | bytes = b"",
        fee: int = 0,
        type_script: Script | None = None,
    ) -> Transaction:
        """Unsigned transfer from this account's cells to ``target_lock``."""
        output_data = hex_to_bin(data)
        output = CellOutput(capacity=capacity, lock=target_lock, type=type_script)
        change_output = CellOutput(capacity=0, lock=self.lock)

        inputs_info = self.collector.gather_inputs(
            [self.lock_hash],
            capacity,
            output.calculate_min_capacity(output_data),
            change_output.calculate_min_capacity(),
            fee,
        )

        outputs = [output]
        outputs_data = [output_data]
        change_capacity = inputs_info.capacities - (capacity + fee)
        if change_capacity > 0:
            outputs.append(replace(change_output, capacity=change_capacity))
            outputs_data.append(b"")

        return Transaction(
            version=0,
            cell_deps=[CellDep(out_point=self.api.secp_group_out_point, dep_type="dep_group")],
            inputs=inputs_info.inputs,
            outputs=outputs,
            outputs_data=outputs_data,
            witnesses=inputs_info.witnesses,
        )

    def sign(self, tx: Transaction) -> Transaction:
        return sign_transaction(tx, self.key)

    def send_capacity(
        self, target_address: str, capacity: int, data: str | bytes = b"", fee: int = 0
    ) -> bytes:
        tx = self.sign(self.generate_tx(target_address, capacity, data=data, fee=fee))
        logger.info("Sending %d shannons from %s", capacity, self.address)
        return self.api.send_transaction(tx)
