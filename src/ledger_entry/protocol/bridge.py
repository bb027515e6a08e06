"""Cross-chain bridge descriptors."""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import enum
import typing

from ledger_entry.core.exceptions import DescriptorParseError
from ledger_entry.core.types import Failure, Result, Success
from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.currency import Issue, parse_issue

LOCKING_CHAIN_DOOR = "LockingChainDoor"
LOCKING_CHAIN_ISSUE = "LockingChainIssue"
ISSUING_CHAIN_DOOR = "IssuingChainDoor"
ISSUING_CHAIN_ISSUE = "IssuingChainIssue"

BRIDGE_FIELDS = frozenset(
    {LOCKING_CHAIN_DOOR, LOCKING_CHAIN_ISSUE, ISSUING_CHAIN_DOOR, ISSUING_CHAIN_ISSUE}
)


class ChainType(enum.Enum):
    LOCKING = "locking"
    ISSUING = "issuing"

    @classmethod
    def src_chain(cls, was_locking_chain_send: bool) -> ChainType:  # noqa: FBT001
        return cls.LOCKING if was_locking_chain_send else cls.ISSUING


@dataclasses.dataclass(frozen=True, slots=True)
class XChainBridge:
    """The two door accounts and the issue bridged on each side."""

    locking_chain_door: AccountID
    locking_chain_issue: Issue
    issuing_chain_door: AccountID
    issuing_chain_issue: Issue

    def door(self, chain: ChainType) -> AccountID:
        if chain is ChainType.LOCKING:
            return self.locking_chain_door
        return self.issuing_chain_door

    def issue(self, chain: ChainType) -> Issue:
        if chain is ChainType.LOCKING:
            return self.locking_chain_issue
        return self.issuing_chain_issue

    def to_json(self) -> dict[str, typing.Any]:
        return {
            LOCKING_CHAIN_DOOR: str(self.locking_chain_door),
            LOCKING_CHAIN_ISSUE: self.locking_chain_issue.to_json(),
            ISSUING_CHAIN_DOOR: str(self.issuing_chain_door),
            ISSUING_CHAIN_ISSUE: self.issuing_chain_issue.to_json(),
        }


def parse_bridge(value: typing.Any) -> Result[XChainBridge, DescriptorParseError]:
    """Parse a bridge descriptor object.

    Exactly the four bridge fields are allowed; doors must be valid account
    strings and issues valid issue descriptors.
    """
    if not isinstance(value, Mapping):
        return Failure(DescriptorParseError("bridge must be an object"))
    extra = set(value) - BRIDGE_FIELDS
    if extra:
        return Failure(
            DescriptorParseError(f"bridge has unexpected fields: {sorted(extra)}")
        )

    locking_door_text = value.get(LOCKING_CHAIN_DOOR)
    issuing_door_text = value.get(ISSUING_CHAIN_DOOR)
    if not isinstance(locking_door_text, str) or not isinstance(
        issuing_door_text, str
    ):
        return Failure(DescriptorParseError("bridge doors must be strings"))
    locking_door = AccountID.from_base58(locking_door_text)
    issuing_door = AccountID.from_base58(issuing_door_text)
    if locking_door is None or issuing_door is None:
        return Failure(DescriptorParseError("bridge doors must be valid accounts"))

    locking_issue = parse_issue(value.get(LOCKING_CHAIN_ISSUE))
    if isinstance(locking_issue, Failure):
        return locking_issue
    issuing_issue = parse_issue(value.get(ISSUING_CHAIN_ISSUE))
    if isinstance(issuing_issue, Failure):
        return issuing_issue

    return Success(
        XChainBridge(
            locking_chain_door=locking_door,
            locking_chain_issue=locking_issue.value,
            issuing_chain_door=issuing_door,
            issuing_chain_issue=issuing_issue.value,
        )
    )
