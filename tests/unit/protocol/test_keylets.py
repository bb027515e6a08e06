"""Key derivation for each ledger object type."""

import hashlib
import struct

import pytest

from ledger_entry.protocol import keylets
from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.bridge import ChainType
from ledger_entry.protocol.currency import NATIVE_ISSUE, Issue
from ledger_entry.protocol.hashes import Hash256

pytestmark = pytest.mark.unit


def _expected(tag: str, *parts: bytes) -> Hash256:
    digest = hashlib.sha512(struct.pack(">H", ord(tag)) + b"".join(parts)).digest()
    return Hash256(digest[:32])


def test_account_root_of_genesis_account():
    genesis = AccountID.from_base58("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh")
    assert genesis is not None
    assert str(keylets.account(genesis)) == (
        "2B6AC232AA4C4BE41BF49D2459FA4A0347E1B543A4C92FCEE0821C0201E2E9A8"
    )


def test_sequence_keyed_objects_use_big_endian_u32(alice):
    assert keylets.escrow(alice, 5) == _expected("u", alice.value, b"\x00\x00\x00\x05")
    assert keylets.offer(alice, 7) == _expected("o", alice.value, b"\x00\x00\x00\x07")
    assert keylets.ticket(alice, 9) == _expected("T", alice.value, b"\x00\x00\x00\x09")
    assert keylets.oracle(alice, 1) == _expected("R", alice.value, b"\x00\x00\x00\x01")


def test_namespaces_separate_objects_with_the_same_parameters(alice):
    keys = {
        keylets.account(alice),
        keylets.owner_dir(alice),
        keylets.did(alice),
        keylets.escrow(alice, 1),
        keylets.offer(alice, 1),
        keylets.ticket(alice, 1),
        keylets.oracle(alice, 1),
    }
    assert len(keys) == 7


def test_directory_page_zero_is_the_root(alice):
    root = keylets.owner_dir(alice)
    assert keylets.page(root, 0) == root
    assert keylets.page(root, 1) == _expected(
        "d", root.value, b"\x00\x00\x00\x00\x00\x00\x00\x01"
    )


def test_trust_line_ignores_account_order(alice, bob, usd):
    assert keylets.line(alice, bob, usd) == keylets.line(bob, alice, usd)


def test_deposit_preauth_depends_on_direction(alice, bob):
    assert keylets.deposit_preauth(alice, bob) != keylets.deposit_preauth(bob, alice)


def test_amm_ignores_asset_order(alice, usd):
    issue = Issue(usd, alice)
    assert keylets.amm(NATIVE_ISSUE, issue) == keylets.amm(issue, NATIVE_ISSUE)


def test_bridge_key_depends_on_chain_side(bridge_spec):
    locking = keylets.bridge(bridge_spec, ChainType.LOCKING)
    issuing = keylets.bridge(bridge_spec, ChainType.ISSUING)
    assert locking != issuing
    assert locking == _expected(
        "H",
        bridge_spec.locking_chain_door.value,
        bridge_spec.locking_chain_issue.currency.value,
    )


def test_xchain_claim_ids_differ_by_kind_and_sequence(bridge_spec):
    assert keylets.xchain_claim_id(bridge_spec, 1) != keylets.xchain_claim_id(
        bridge_spec, 2
    )
    assert keylets.xchain_claim_id(
        bridge_spec, 1
    ) != keylets.xchain_create_account_claim_id(bridge_spec, 1)
