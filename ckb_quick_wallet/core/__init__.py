"""Chain primitives: hashing, molecule encoding, addresses, keys and RPC."""

from ckb_quick_wallet.core.address import ParsedAddress, parse_address
from ckb_quick_wallet.core.cell_collector import CellCollector, InputsInfo
from ckb_quick_wallet.core.hashing import blake160, ckbhash
from ckb_quick_wallet.core.keys import Key
from ckb_quick_wallet.core.rpc import CKBClient
from ckb_quick_wallet.core.types import (
    Block,
    CellDep,
    CellInput,
    CellOutput,
    CellOutputWithOutPoint,
    LiveCell,
    OpaqueWitness,
    OutPoint,
    Script,
    SystemScripts,
    Transaction,
    Witness,
    WitnessArgs,
)

__all__ = [
    "Block",
    "CellCollector",
    "CellDep",
    "CellInput",
    "CellOutput",
    "CellOutputWithOutPoint",
    "CKBClient",
    "InputsInfo",
    "Key",
    "LiveCell",
    "OpaqueWitness",
    "OutPoint",
    "ParsedAddress",
    "Script",
    "SystemScripts",
    "Transaction",
    "Witness",
    "WitnessArgs",
    "blake160",
    "ckbhash",
    "parse_address",
]
