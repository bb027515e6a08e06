"""Deterministic key derivation for each ledger object type.

Every key is SHA-512Half over a two-byte namespace tag followed by the
fixed-width parameters that identify the object. Parameters whose order
should not matter (trust line accounts, AMM issues) are sorted first.
"""

from __future__ import annotations

import enum
import struct

from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.bridge import ChainType, XChainBridge
from ledger_entry.protocol.currency import Currency, Issue
from ledger_entry.protocol.hashes import Hash256, sha512_half


class LedgerNameSpace(enum.StrEnum):
    ACCOUNT = "a"
    DIR_NODE = "d"
    TRUST_LINE = "r"
    OFFER = "o"
    OWNER_DIR = "O"
    ESCROW = "u"
    TICKET = "T"
    DEPOSIT_PREAUTH = "p"
    AMM = "A"
    BRIDGE = "H"
    XCHAIN_CLAIM_ID = "Q"
    XCHAIN_CREATE_ACCOUNT_CLAIM_ID = "K"
    DID = "I"
    ORACLE = "R"


def _index(space: LedgerNameSpace, *parts: bytes) -> Hash256:
    return Hash256(sha512_half(struct.pack(">H", ord(space)), *parts))


def _u32(value: int) -> bytes:
    return struct.pack(">I", value)


def _u64(value: int) -> bytes:
    return struct.pack(">Q", value)


def _issue_bytes(issue: Issue) -> bytes:
    return issue.currency.value + issue.account.value


def account(account_id: AccountID) -> Hash256:
    return _index(LedgerNameSpace.ACCOUNT, account_id.value)


def owner_dir(account_id: AccountID) -> Hash256:
    return _index(LedgerNameSpace.OWNER_DIR, account_id.value)


def page(root: Hash256, index: int) -> Hash256:
    """Key of page ``index`` of the directory rooted at ``root``; page 0 is the root."""
    if index == 0:
        return root
    return _index(LedgerNameSpace.DIR_NODE, root.value, _u64(index))


def escrow(owner: AccountID, seq: int) -> Hash256:
    return _index(LedgerNameSpace.ESCROW, owner.value, _u32(seq))


def offer(owner: AccountID, seq: int) -> Hash256:
    return _index(LedgerNameSpace.OFFER, owner.value, _u32(seq))


def ticket(owner: AccountID, ticket_seq: int) -> Hash256:
    return _index(LedgerNameSpace.TICKET, owner.value, _u32(ticket_seq))


def line(a: AccountID, b: AccountID, currency: Currency) -> Hash256:
    low, high = (a, b) if a < b else (b, a)
    return _index(LedgerNameSpace.TRUST_LINE, low.value, high.value, currency.value)


def deposit_preauth(owner: AccountID, authorized: AccountID) -> Hash256:
    return _index(LedgerNameSpace.DEPOSIT_PREAUTH, owner.value, authorized.value)


def amm(issue1: Issue, issue2: Issue) -> Hash256:
    low, high = (issue1, issue2) if issue1 < issue2 else (issue2, issue1)
    return _index(
        LedgerNameSpace.AMM,
        low.account.value,
        low.currency.value,
        high.account.value,
        high.currency.value,
    )


def bridge(spec: XChainBridge, chain: ChainType) -> Hash256:
    return _index(
        LedgerNameSpace.BRIDGE,
        spec.door(chain).value,
        spec.issue(chain).currency.value,
    )


def _bridge_bytes(spec: XChainBridge) -> tuple[bytes, ...]:
    return (
        spec.locking_chain_door.value,
        _issue_bytes(spec.locking_chain_issue),
        spec.issuing_chain_door.value,
        _issue_bytes(spec.issuing_chain_issue),
    )


def xchain_claim_id(spec: XChainBridge, seq: int) -> Hash256:
    return _index(LedgerNameSpace.XCHAIN_CLAIM_ID, *_bridge_bytes(spec), _u64(seq))


def xchain_create_account_claim_id(spec: XChainBridge, seq: int) -> Hash256:
    return _index(
        LedgerNameSpace.XCHAIN_CREATE_ACCOUNT_CLAIM_ID, *_bridge_bytes(spec), _u64(seq)
    )


def did(account_id: AccountID) -> Hash256:
    return _index(LedgerNameSpace.DID, account_id.value)


def oracle(account_id: AccountID, document_id: int) -> Hash256:
    return _index(LedgerNameSpace.ORACLE, account_id.value, _u32(document_id))
