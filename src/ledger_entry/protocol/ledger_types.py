"""Ledger entry type tags."""

from __future__ import annotations

import enum


class LedgerEntryType(enum.IntEnum):
    """On-ledger type codes of the objects a snapshot can hold."""

    ACCOUNT_ROOT = 0x0061
    DIR_NODE = 0x0064
    RIPPLE_STATE = 0x0072
    TICKET = 0x0054
    SIGNER_LIST = 0x0053
    OFFER = 0x006F
    LEDGER_HASHES = 0x0068
    AMENDMENTS = 0x0066
    FEE_SETTINGS = 0x0073
    ESCROW = 0x0075
    PAYCHAN = 0x0078
    CHECK = 0x0043
    DEPOSIT_PREAUTH = 0x0070
    NEGATIVE_UNL = 0x004E
    NFTOKEN_PAGE = 0x0050
    NFTOKEN_OFFER = 0x0037
    AMM = 0x0079
    BRIDGE = 0x0069
    XCHAIN_OWNED_CLAIM_ID = 0x0071
    XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID = 0x0074
    DID = 0x0049
    ORACLE = 0x0080

    @property
    def json_name(self) -> str:
        return _JSON_NAMES[self]

    @classmethod
    def from_json_name(cls, name: str) -> LedgerEntryType:
        """Look up a type by its JSON name (``"AccountRoot"``) or member name."""
        for member, json_name in _JSON_NAMES.items():
            if name == json_name:
                return member
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown ledger entry type: {name!r}") from None


_JSON_NAMES: dict[LedgerEntryType, str] = {
    LedgerEntryType.ACCOUNT_ROOT: "AccountRoot",
    LedgerEntryType.DIR_NODE: "DirectoryNode",
    LedgerEntryType.RIPPLE_STATE: "RippleState",
    LedgerEntryType.TICKET: "Ticket",
    LedgerEntryType.SIGNER_LIST: "SignerList",
    LedgerEntryType.OFFER: "Offer",
    LedgerEntryType.LEDGER_HASHES: "LedgerHashes",
    LedgerEntryType.AMENDMENTS: "Amendments",
    LedgerEntryType.FEE_SETTINGS: "FeeSettings",
    LedgerEntryType.ESCROW: "Escrow",
    LedgerEntryType.PAYCHAN: "PayChannel",
    LedgerEntryType.CHECK: "Check",
    LedgerEntryType.DEPOSIT_PREAUTH: "DepositPreauth",
    LedgerEntryType.NEGATIVE_UNL: "NegativeUNL",
    LedgerEntryType.NFTOKEN_PAGE: "NFTokenPage",
    LedgerEntryType.NFTOKEN_OFFER: "NFTokenOffer",
    LedgerEntryType.AMM: "AMM",
    LedgerEntryType.BRIDGE: "Bridge",
    LedgerEntryType.XCHAIN_OWNED_CLAIM_ID: "XChainOwnedClaimID",
    LedgerEntryType.XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID: "XChainOwnedCreateAccountClaimID",
    LedgerEntryType.DID: "DID",
    LedgerEntryType.ORACLE: "Oracle",
}
