"""Tests for the multisig wallet service."""

from unittest.mock import MagicMock

import pytest

from ckb_quick_wallet.core.address import (
    ADDRESS_TYPE_FULL,
    CODE_HASH_INDEX_MULTISIG,
    SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH,
    generate_short_address,
    parse_address,
)
from ckb_quick_wallet.core.keys import recover_pubkey
from ckb_quick_wallet.core.types import WitnessArgs
from ckb_quick_wallet.features.multisig.configuration import MultiSignConfiguration
from ckb_quick_wallet.features.multisig.service import MultiSignWallet
from ckb_quick_wallet.features.multisig.signing import SigningMessageBuilder
from ckb_quick_wallet.shared.errors import (
    BroadcastRejected,
    InsufficientFunds,
    UnsupportedTarget,
    WrongKeyCount,
)

CKB = 100_000_000


@pytest.fixture
def configuration(keys):
    return MultiSignConfiguration.from_private_keys(0, 2, keys)


@pytest.fixture
def wallet(chain, configuration):
    return MultiSignWallet(chain, configuration)


@pytest.fixture
def target(recipient_key):
    return generate_short_address(recipient_key.pubkey_hash)


class TestIdentity:
    def test_lock_uses_multisig_type_hash(self, wallet, configuration):
        assert wallet.lock.code_hash == SECP256K1_BLAKE160_MULTISIG_ALL_TYPE_HASH
        assert wallet.lock.hash_type == "type"
        assert wallet.lock.args == configuration.lock_args()

    def test_full_address_parses_back_to_lock(self, wallet):
        parsed = parse_address(wallet.address)
        assert parsed.address_type == ADDRESS_TYPE_FULL
        assert parsed.script == wallet.lock

    def test_balance(self, chain, wallet):
        chain.add_cell(wallet.lock, 200 * CKB)
        chain.add_cell(wallet.lock, 300 * CKB)
        assert wallet.get_balance() == 500 * CKB


class TestBuild:
    def test_signed_witness_layout(self, chain, wallet, configuration, keys, target):
        chain.add_cell(wallet.lock, 200 * CKB)

        tx = wallet.build(target, 100 * CKB, keys[:2])

        lock = tx.witnesses[0].lock
        assert len(lock) == 4 + 20 * 3 + 65 * 2
        assert lock[:64] == configuration.serialize()

    def test_signatures_recover_in_key_order(self, chain, wallet, configuration, keys, target):
        chain.add_cell(wallet.lock, 200 * CKB)

        tx = wallet.build(target, 100 * CKB, [keys[2], keys[0]])

        message = SigningMessageBuilder(configuration).build(tx)
        signatures = tx.witnesses[0].lock[64:]
        assert recover_pubkey(message, signatures[:65]) == keys[2].pubkey
        assert recover_pubkey(message, signatures[65:]) == keys[0].pubkey

    def test_outputs_with_change(self, chain, wallet, keys, target, recipient_key):
        chain.add_cell(wallet.lock, 200 * CKB)

        tx = wallet.build(target, 100 * CKB, keys[:2], fee=1000)

        assert [o.capacity for o in tx.outputs] == [100 * CKB, 100 * CKB - 1000]
        assert tx.outputs[0].lock.args == recipient_key.pubkey_hash
        assert tx.outputs[1].lock == wallet.lock
        assert tx.outputs_data == (b"", b"")

    def test_no_change_output_on_exact_amount(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 100 * CKB)

        tx = wallet.build(target, 100 * CKB - 1000, keys[:2], fee=1000)

        assert len(tx.outputs) == 1

    def test_cell_dep_is_multisig_group(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 200 * CKB)

        tx = wallet.build(target, 100 * CKB, keys[:2])

        assert len(tx.cell_deps) == 1
        assert tx.cell_deps[0].out_point == chain.multi_sign_secp_group_out_point
        assert tx.cell_deps[0].dep_type == "dep_group"

    def test_every_input_gets_policy_since(self, chain, keys, target):
        # Inputs whose lock-time already passed are overridden too.
        configuration = MultiSignConfiguration.from_private_keys(0, 2, keys, since=9)
        wallet = MultiSignWallet(chain, configuration)
        chain.add_cell(wallet.lock, 70 * CKB)
        chain.add_cell(wallet.lock, 70 * CKB)

        tx = wallet.build(target, 140 * CKB, keys[:2])

        assert [i.since for i in tx.inputs] == [9, 9]

    def test_extra_witnesses_left_empty(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 70 * CKB)
        chain.add_cell(wallet.lock, 70 * CKB)

        tx = wallet.build(target, 140 * CKB, keys[:2])

        assert isinstance(tx.witnesses[0], WitnessArgs)
        assert tx.witnesses[1].serialize() == b""

    def test_output_data_is_hex_decoded(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 300 * CKB)

        tx = wallet.build(target, 100 * CKB, keys[:2], data="0x0102")

        assert tx.outputs_data[0] == b"\x01\x02"

    def test_insufficient_funds(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 80 * CKB)

        with pytest.raises(InsufficientFunds):
            wallet.build(target, 100 * CKB, keys[:2])


class TestValidation:
    @pytest.mark.parametrize("count", [1, 3])
    def test_wrong_key_count_before_any_call(self, configuration, keys, target, count):
        api = MagicMock()
        collector = MagicMock()
        wallet = MultiSignWallet(api, configuration, collector=collector)

        with pytest.raises(WrongKeyCount):
            wallet.build(target, 100 * CKB, keys[:count])

        assert api.method_calls == []
        collector.gather_inputs.assert_not_called()

    def test_multisig_short_target_rejected(self, chain, wallet, keys):
        address = generate_short_address(b"\x01" * 20, code_hash_index=CODE_HASH_INDEX_MULTISIG)

        with pytest.raises(UnsupportedTarget):
            wallet.build(address, 100 * CKB, keys[:2])
        assert chain.cell_queries == []

    def test_full_address_target_rejected(self, chain, wallet, keys):
        with pytest.raises(UnsupportedTarget):
            wallet.build(wallet.address, 100 * CKB, keys[:2])


class TestSend:
    def test_returns_transaction_hash(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 200 * CKB)

        tx_hash = wallet.send(target, 100 * CKB, keys[:2])

        assert tx_hash == chain.sent[0].compute_hash()
        assert wallet.send_capacity == wallet.send

    def test_rejection_propagates(self, chain, wallet, keys, target):
        chain.add_cell(wallet.lock, 200 * CKB)
        chain.reject_with = "Script: ValidationFailure(-31)"

        with pytest.raises(BroadcastRejected):
            wallet.send(target, 100 * CKB, keys[:2])
        assert chain.sent == []
