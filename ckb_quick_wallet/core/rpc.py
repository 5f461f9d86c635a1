"""Chain RPC client for a CKB node."""

from __future__ import annotations

from typing import Any

from ckb_quick_wallet.core.types import (
    Block,
    CellOutputWithOutPoint,
    LiveCell,
    OutPoint,
    SystemScripts,
    Transaction,
)
from ckb_quick_wallet.core.utils import hex_to_bin, to_hex, to_int
from ckb_quick_wallet.shared.config import WalletConfig
from ckb_quick_wallet.shared.errors import BroadcastRejected
from ckb_quick_wallet.shared.logging import get_logger
from ckb_quick_wallet.shared.network import JsonRpcClient, RpcError

logger = get_logger(__name__)


class CKBClient:
    def __init__(self, node_url: str | None = None, config: WalletConfig | None = None):
        self.config = config or WalletConfig()
        self.node_url = node_url or self.config.node_url
        self._rpc = JsonRpcClient(self.node_url, timeout_config=self.config.timeout_config)
        self._system_scripts: SystemScripts | None = None

    def call(self, method: str, *params: Any) -> Any:
        return self._rpc.call(method, *params)

    def get_tip_block_number(self) -> int:
        return to_int(self.call("get_tip_block_number"))

    def get_block_by_number(self, number: int) -> Block:
        return Block.from_dict(self.call("get_block_by_number", to_hex(number)))

    def genesis_block(self) -> Block:
        return self.get_block_by_number(0)

    def get_cells_by_lock_hash(
        self, lock_hash: bytes, from_number: int, to_number: int
    ) -> list[CellOutputWithOutPoint]:
        result = self.call(
            "get_cells_by_lock_hash",
            "0x" + lock_hash.hex(),
            to_hex(from_number),
            to_hex(to_number),
        )
        return [CellOutputWithOutPoint.from_dict(cell) for cell in result or []]

    def get_live_cell(self, out_point: OutPoint, with_data: bool = False) -> LiveCell:
        return LiveCell.from_dict(
            self.call("get_live_cell", out_point.to_dict(), with_data)
        )

    def send_transaction(self, transaction: Transaction) -> bytes:
        try:
            tx_hash = self.call("send_transaction", transaction.to_dict())
        except RpcError as e:
            logger.warning("Node rejected transaction: %s", e)
            raise BroadcastRejected(
                f"Transaction rejected by node: {e.message}",
                code=e.code,
                data=e.data,
            ) from e
        logger.info("Transaction sent: %s", tx_hash)
        return hex_to_bin(tx_hash)

    def system_scripts(self) -> SystemScripts:
        if self._system_scripts is None:
            self._system_scripts = SystemScripts.from_genesis(self.genesis_block())
        return self._system_scripts

    @property
    def secp_cell_type_hash(self) -> bytes:
        return self.system_scripts().secp_cell_type_hash

    @property
    def secp_group_out_point(self) -> OutPoint:
        return self.system_scripts().secp_group_out_point

    @property
    def secp_code_out_point(self) -> OutPoint:
        return self.system_scripts().secp_code_out_point

    @property
    def secp_data_out_point(self) -> OutPoint:
        return self.system_scripts().secp_data_out_point

    @property
    def multi_sign_secp_cell_type_hash(self) -> bytes:
        return self.system_scripts().multi_sign_secp_cell_type_hash

    @property
    def multi_sign_secp_group_out_point(self) -> OutPoint:
        return self.system_scripts().multi_sign_secp_group_out_point
