"""Multisig wallet service for CKB Quick Wallet.

Builds capacity transfers out of cells locked by a multisig policy and
collects the threshold signatures into the first witness.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from ckb_quick_wallet.core.address import (
    ADDRESS_TYPE_SHORT_SINGLESIG,
    FULL_TYPE_FORMAT,
    encode_address,
    parse_address,
)
from ckb_quick_wallet.core.cell_collector import CellCollector
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.types import CellDep, CellOutput, Script, Transaction
from ckb_quick_wallet.core.utils import hex_to_bin
from ckb_quick_wallet.features.multisig.configuration import MultiSignConfiguration
from ckb_quick_wallet.features.multisig.signing import SigningMessageBuilder
from ckb_quick_wallet.shared.config import config_for
from ckb_quick_wallet.shared.errors import UnsupportedTarget, WrongKeyCount
from ckb_quick_wallet.shared.logging import get_logger

logger = get_logger(__name__)


class MultiSignWallet:
    """Spend cells guarded by a ``MultiSignConfiguration``."""

    def __init__(
        self,
        api,
        configuration: MultiSignConfiguration,
        skip_data_and_type: bool | None = None,
        prefix: str | None = None,
        collector: CellCollector | None = None,
    ):
        config = config_for(api)
        if skip_data_and_type is None:
            skip_data_and_type = config.skip_data_and_type
        self.api = api
        self.configuration = configuration
        self.skip_data_and_type = skip_data_and_type
        self.prefix = config.address_prefix if prefix is None else prefix
        self.collector = collector or CellCollector(
            api, skip_data_and_type=skip_data_and_type
        )

    @property
    def lock(self) -> Script:
        return Script(
            code_hash=self.api.multi_sign_secp_cell_type_hash,
            hash_type="type",
            args=self.configuration.lock_args(),
        )

    @property
    def lock_hash(self) -> bytes:
        return self.lock.compute_hash()

    @property
    def address(self) -> str:
        payload = (
            bytes([FULL_TYPE_FORMAT])
            + self.api.multi_sign_secp_cell_type_hash
            + self.configuration.lock_args()
        )
        return encode_address(self.prefix, payload)

    def get_balance(self) -> int:
        return self.collector.get_unspent_cells(self.lock_hash).total_capacities

    def build(
        self,
        target_address: str,
        capacity: int,
        private_keys: Sequence["Key | str | bytes"],
        data: str | bytes = b"",
        fee: int = 0,
    ) -> Transaction:
        """Assemble and sign a transfer of ``capacity`` shannons to ``target_address``.

        ``private_keys`` must hold exactly ``threshold`` keys, ordered so the
        first ``require_first_n`` belong to the first pubkey hashes of the
        policy. Signatures are concatenated in the order given.

        Raises:
            WrongKeyCount: key count differs from the threshold.
            UnsupportedTarget: target is not a default single-signature address.
            InsufficientFunds: live cells cannot cover capacity, change and fee.
        """
        if len(private_keys) != self.configuration.threshold:
            raise WrongKeyCount(
                f"Invalid number of keys: expected {self.configuration.threshold}, "
                f"got {len(private_keys)}"
            )
        keys = [Key.coerce(key) for key in private_keys]

        parsed_address = parse_address(target_address)
        if parsed_address.address_type != ADDRESS_TYPE_SHORT_SINGLESIG:
            raise UnsupportedTarget(
                "Right now only supports sending to default single signed lock!"
            )

        output_data = hex_to_bin(data)
        output = CellOutput(capacity=capacity, lock=parsed_address.script)
        change_output = CellOutput(capacity=0, lock=self.lock)
        change_output_data = b""

        inputs_info = self.collector.gather_inputs(
            [self.lock_hash],
            capacity,
            output.calculate_min_capacity(output_data),
            change_output.calculate_min_capacity(change_output_data),
            fee,
        )

        outputs = [output]
        outputs_data = [output_data]
        change_capacity = inputs_info.capacities - (capacity + fee)
        if change_capacity > 0:
            outputs.append(replace(change_output, capacity=change_capacity))
            outputs_data.append(change_output_data)

        tx = Transaction(
            version=0,
            inputs=inputs_info.inputs,
            outputs=outputs,
            outputs_data=outputs_data,
            witnesses=inputs_info.witnesses,
        )
        # TODO: skip the override for inputs whose lock-time has already elapsed.
        tx = tx.with_inputs_since(self.configuration.since)
        tx = tx.with_cell_dep(
            CellDep(out_point=self.api.multi_sign_secp_group_out_point, dep_type="dep_group")
        )

        message = SigningMessageBuilder(self.configuration).build(tx)
        signatures = b"".join(key.sign_recoverable(message) for key in keys)

        logger.with_context(
            inputs=len(tx.inputs), outputs=len(tx.outputs), signatures=len(keys)
        ).info("Built multisig transaction")

        return tx.with_witness_lock(0, self.configuration.serialize() + signatures)

    generate_tx = build

    def send(
        self,
        target_address: str,
        capacity: int,
        private_keys: Sequence["Key | str | bytes"],
        data: str | bytes = b"",
        fee: int = 0,
    ) -> bytes:
        tx = self.build(target_address, capacity, private_keys, data=data, fee=fee)
        return self.api.send_transaction(tx)

    send_capacity = send
