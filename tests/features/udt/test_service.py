"""Tests for the Simple UDT wallet service."""

import pytest

from ckb_quick_wallet.core.address import CODE_HASH_INDEX_MULTISIG, generate_short_address
from ckb_quick_wallet.core.hashing import ckbhash
from ckb_quick_wallet.core.keys import recover_pubkey
from ckb_quick_wallet.core.signing import compute_signing_message
from ckb_quick_wallet.core.types import CellOutput, OutPoint, Script, Transaction
from ckb_quick_wallet.features.udt.codec import AmountCodec
from ckb_quick_wallet.features.udt.scanner import TokenCellScanner
from ckb_quick_wallet.features.udt.service import UDT_CELL_CAPACITY, SimpleUdtWallet
from ckb_quick_wallet.shared.errors import (
    BroadcastRejected,
    InsufficientFunds,
    OutOfRange,
    UnsupportedTarget,
)

CKB = 100_000_000
CONTRACT = b"\x7fELF token contract"
CONTRACT_TX_HASH = b"\x77" * 32
OWNER_HASH = b"\x05" * 32


@pytest.fixture
def udt(chain, keys):
    tx = Transaction(
        outputs=[CellOutput(capacity=0, lock=Script(code_hash=b"\x01" * 32))],
        outputs_data=[CONTRACT],
    )
    chain.set_block(1, [tx], [CONTRACT_TX_HASH])
    scanner = TokenCellScanner(chain, code_hash=ckbhash(CONTRACT))
    return SimpleUdtWallet(chain, keys[0], OWNER_HASH, scanner=scanner)


@pytest.fixture
def funded(chain, udt):
    chain.add_cell(udt.lock, 150 * CKB, type_script=udt.type, data=AmountCodec.encode(300))
    chain.add_cell(udt.lock, 142 * CKB, type_script=udt.type, data=AmountCodec.encode(200))
    return udt


def target_lock(chain, key):
    return Script(code_hash=chain.secp_cell_type_hash, hash_type="type", args=key.pubkey_hash)


class TestIdentity:
    def test_type_script(self, udt):
        assert udt.type.code_hash == ckbhash(CONTRACT)
        assert udt.type.hash_type == "data"
        assert udt.type.args == OWNER_HASH

    def test_cell_dep_points_at_contract(self, udt):
        assert udt.cell_dep.out_point == OutPoint(tx_hash=CONTRACT_TX_HASH, index=0)

    def test_lock_is_single_sig(self, chain, udt, keys):
        assert udt.lock == target_lock(chain, keys[0])
        assert udt.address == udt.wallet.address

    def test_balance_and_capacities(self, funded):
        assert funded.balance() == 500
        assert funded.capacities() == 292 * CKB


class TestBuildTransfer:
    def test_outputs_and_data(self, chain, funded, recipient_key):
        lock = target_lock(chain, recipient_key)

        tx = funded.build_transfer(lock, 350, fee=1000)

        assert len(tx.inputs) == 2
        assert [o.capacity for o in tx.outputs] == [UDT_CELL_CAPACITY, 150 * CKB - 1000]
        assert tx.outputs[0].lock == lock
        assert tx.outputs[1].lock == funded.lock
        assert all(o.type == funded.type for o in tx.outputs)
        assert [AmountCodec.decode(d) for d in tx.outputs_data] == [350, 150]

    def test_dep_group_cell_deps(self, chain, funded, recipient_key):
        tx = funded.build_transfer(target_lock(chain, recipient_key), 10)

        assert tx.cell_deps[0] == funded.cell_dep
        assert tx.cell_deps[1].out_point == chain.secp_group_out_point
        assert tx.cell_deps[1].dep_type == "dep_group"

    def test_code_cell_deps(self, chain, funded, recipient_key):
        tx = funded.build_transfer(target_lock(chain, recipient_key), 10, use_dep_group=False)

        assert [d.out_point for d in tx.cell_deps] == [
            funded.cell_dep.out_point,
            chain.secp_code_out_point,
            chain.secp_data_out_point,
        ]
        assert all(d.dep_type == "code" for d in tx.cell_deps)

    def test_signed_by_wallet_key(self, chain, funded, keys, recipient_key):
        tx = funded.build_transfer(target_lock(chain, recipient_key), 10)

        signature = tx.witnesses[0].lock
        message = compute_signing_message(tx, bytes(65))
        assert recover_pubkey(message, signature) == keys[0].pubkey
        assert len(tx.witnesses) == len(tx.inputs)

    def test_amount_not_enough(self, chain, funded, recipient_key):
        with pytest.raises(InsufficientFunds, match="Amount not enough"):
            funded.build_transfer(target_lock(chain, recipient_key), 501)

    def test_capacity_not_enough(self, chain, udt, recipient_key):
        chain.add_cell(udt.lock, 142 * CKB, type_script=udt.type, data=AmountCodec.encode(10))

        with pytest.raises(InsufficientFunds, match="Capacity not enough"):
            udt.build_transfer(target_lock(chain, recipient_key), 5)

    def test_negative_amount(self, chain, funded, recipient_key):
        with pytest.raises(OutOfRange):
            funded.build_transfer(target_lock(chain, recipient_key), -1)

    def test_dependency_looked_up_once(self, chain, funded, recipient_key):
        lock = target_lock(chain, recipient_key)
        funded.build_transfer(lock, 10)
        fetched = list(chain.fetched_blocks)

        funded.build_transfer(lock, 10)

        assert chain.fetched_blocks == fetched


class TestSendAmount:
    def test_sends_to_short_address(self, chain, funded, recipient_key):
        address = generate_short_address(recipient_key.pubkey_hash)

        tx_hash = funded.send_amount(address, 120)

        [sent] = chain.sent
        assert tx_hash == sent.compute_hash()
        assert AmountCodec.decode(sent.outputs_data[0]) == 120

    def test_rejects_multisig_target(self, chain, funded):
        address = generate_short_address(b"\x01" * 20, code_hash_index=CODE_HASH_INDEX_MULTISIG)

        with pytest.raises(UnsupportedTarget):
            funded.send_amount(address, 10)
        assert chain.sent == []

    def test_rejection_propagates(self, chain, funded, recipient_key):
        chain.reject_with = "TransactionFailedToResolve"

        with pytest.raises(BroadcastRejected):
            funded.send_amount_raw(target_lock(chain, recipient_key), 10)


class TestDeposit:
    def test_creates_empty_token_cell(self, chain, udt, keys):
        chain.add_cell(udt.lock, 500 * CKB)

        udt.deposit_capacity_to_udt_wallet(200 * CKB)

        [tx] = chain.sent
        assert tx.outputs[0].capacity == 200 * CKB
        assert tx.outputs[0].lock == udt.lock
        assert tx.outputs[0].type == udt.type
        assert tx.outputs_data[0] == AmountCodec.encode(0)
        assert tx.outputs[1].capacity == 300 * CKB
        assert tx.outputs[1].type is None
        assert udt.cell_dep in tx.cell_deps

        message = compute_signing_message(tx, bytes(65))
        assert recover_pubkey(message, tx.witnesses[0].lock) == keys[0].pubkey

    def test_below_token_cell_minimum(self, chain, udt):
        chain.add_cell(udt.lock, 500 * CKB)

        with pytest.raises(InsufficientFunds):
            udt.create_empty_wallet(100 * CKB)
        assert chain.sent == []
