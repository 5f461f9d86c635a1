"""Simple UDT wallet service for CKB Quick Wallet.

Token cells carry a type script pointing at the UDT contract (by data hash)
with the issuer's lock hash as args; their data is the 16-byte amount.
"""

from __future__ import annotations

from ckb_quick_wallet.core.address import (
    ADDRESS_TYPE_SHORT_MULTISIG,
    parse_address,
)
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.types import (
    CellDep,
    CellInput,
    CellOutput,
    Script,
    Transaction,
    WitnessArgs,
)
from ckb_quick_wallet.core.utils import byte_to_shannon, hex_to_bin
from ckb_quick_wallet.features.account.service import SingleSignWallet
from ckb_quick_wallet.features.udt.codec import AmountCodec
from ckb_quick_wallet.features.udt.scanner import (
    TokenCellScanner,
    UdtCellCollection,
)
from ckb_quick_wallet.shared.errors import InsufficientFunds, UnsupportedTarget
from ckb_quick_wallet.shared.logging import get_logger

logger = get_logger(__name__)

UDT_CELL_CAPACITY = byte_to_shannon(142)


class SimpleUdtWallet:
    def __init__(
        self,
        api,
        key: "Key | str | bytes",
        owner_script_hash: str | bytes,
        prefix: str | None = None,
        window_size: int | None = None,
        scanner: TokenCellScanner | None = None,
        wallet: SingleSignWallet | None = None,
    ):
        self.api = api
        self.owner_script_hash = hex_to_bin(owner_script_hash)
        self.scanner = scanner or TokenCellScanner(api, window_size=window_size)
        self.wallet = wallet or SingleSignWallet(api, key, prefix=prefix)

    @property
    def cell_dep(self) -> CellDep:
        return self.scanner.locate_dependency()

    @property
    def type(self) -> Script:
        return Script(
            code_hash=self.scanner.code_hash,
            hash_type="data",
            args=self.owner_script_hash,
        )

    @property
    def type_hash(self) -> bytes:
        return self.type.compute_hash()

    @property
    def lock(self) -> Script:
        return self.wallet.lock

    @property
    def lock_hash(self) -> bytes:
        return self.wallet.lock_hash

    @property
    def address(self) -> str:
        return self.wallet.address

    def get_unspent_cells(self) -> UdtCellCollection:
        return self.scanner.collect_balance(self.lock_hash, self.type_hash)

    def balance(self) -> int:
        return self.get_unspent_cells().total_amounts

    def capacities(self) -> int:
        return self.get_unspent_cells().total_capacities

    def send_amount(
        self, target_address: str, amount: int, fee: int = 0, use_dep_group: bool = True
    ) -> bytes:
        parsed_address = parse_address(target_address)
        if parsed_address.address_type == ADDRESS_TYPE_SHORT_MULTISIG:
            raise UnsupportedTarget(
                "Right now only supports sending to default single signed lock!"
            )
        return self.send_amount_raw(
            parsed_address.script, amount, fee=fee, use_dep_group=use_dep_group
        )

    def build_transfer(
        self, target_lock: Script, amount: int, fee: int = 0, use_dep_group: bool = True
    ) -> Transaction:
        """Signed transfer spending every token cell of this wallet."""
        unspent = self.get_unspent_cells()
        if amount > unspent.total_amounts:
            raise InsufficientFunds(
                f"Amount not enough: have {unspent.total_amounts}, need {amount}"
            )
        if unspent.total_capacities < 2 * UDT_CELL_CAPACITY + fee:
            raise InsufficientFunds(
                f"Capacity not enough: have {unspent.total_capacities} shannons"
            )

        # Encode both amounts up front so an out-of-range amount fails early.
        outputs_data = [
            AmountCodec.encode(amount),
            AmountCodec.encode(unspent.total_amounts - amount),
        ]
        cell_deps = [self.cell_dep]
        if use_dep_group:
            cell_deps.append(CellDep(out_point=self.api.secp_group_out_point, dep_type="dep_group"))
        else:
            cell_deps.append(CellDep(out_point=self.api.secp_code_out_point, dep_type="code"))
            cell_deps.append(CellDep(out_point=self.api.secp_data_out_point, dep_type="code"))

        tx = Transaction(
            version=0,
            cell_deps=cell_deps,
            inputs=[
                CellInput(previous_output=item.cell.out_point, since=0)
                for item in unspent.cells
            ],
            outputs=[
                CellOutput(capacity=UDT_CELL_CAPACITY, lock=target_lock, type=self.type),
                CellOutput(
                    capacity=unspent.total_capacities - UDT_CELL_CAPACITY - fee,
                    lock=self.lock,
                    type=self.type,
                ),
            ],
            outputs_data=outputs_data,
            witnesses=[WitnessArgs() for _ in unspent.cells],
        )
        return self.wallet.sign(tx)

    def send_amount_raw(
        self, target_lock: Script, amount: int, fee: int = 0, use_dep_group: bool = True
    ) -> bytes:
        tx = self.build_transfer(target_lock, amount, fee=fee, use_dep_group=use_dep_group)
        logger.info("Sending %d tokens", amount)
        return self.api.send_transaction(tx)

    def deposit_capacity_to_udt_wallet(self, capacity: int, fee: int = 0) -> bytes:
        """Create an empty token cell funded with plain capacity of this account."""
        tx = self.wallet.generate_tx_to_lock(
            self.lock,
            capacity,
            data=AmountCodec.encode(0),
            fee=fee,
            type_script=self.type,
        )
        tx = self.wallet.sign(tx.with_cell_dep(self.cell_dep))
        return self.api.send_transaction(tx)

    create_empty_wallet = deposit_capacity_to_udt_wallet
