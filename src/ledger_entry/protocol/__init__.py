"""Ledger protocol primitives: identifiers, currencies, and the keying scheme."""

from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.bridge import ChainType, XChainBridge, parse_bridge
from ledger_entry.protocol.currency import Currency, Issue, parse_issue
from ledger_entry.protocol.hashes import Hash256, sha512_half
from ledger_entry.protocol.ledger_types import LedgerEntryType

__all__ = [  # noqa: RUF022
    "AccountID",
    "Currency",
    "Issue",
    "parse_issue",
    "ChainType",
    "XChainBridge",
    "parse_bridge",
    "Hash256",
    "sha512_half",
    "LedgerEntryType",
]
