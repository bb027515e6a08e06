"""Binary lookup by raw key, for typed transports.

Unlike the structured path there is no request classification and no type
guard: the caller names the object by its 32-byte key and receives its
canonical bytes. Outcomes are reported as a ``(response, Status)`` pair in the
manner of an RPC framework status code.
"""

from __future__ import annotations

import dataclasses
import enum
import logging

from ledger_entry.core.types import ErrorKind, Failure
from ledger_entry.protocol.hashes import Hash256
from ledger_entry.snapshot import LedgerSource, LedgerSpecifier

logger = logging.getLogger(__name__)


class StatusCode(enum.IntEnum):
    """The subset of RPC status codes this lookup reports."""

    OK = 0
    INVALID_ARGUMENT = 3
    NOT_FOUND = 5


@dataclasses.dataclass(frozen=True, slots=True)
class Status:
    code: StatusCode = StatusCode.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code is StatusCode.OK


@dataclasses.dataclass(frozen=True, slots=True)
class GetLedgerEntryRequest:
    key: bytes
    ledger: LedgerSpecifier = dataclasses.field(default_factory=LedgerSpecifier)


@dataclasses.dataclass(frozen=True, slots=True)
class RawLedgerObject:
    data: bytes
    key: bytes


@dataclasses.dataclass(frozen=True, slots=True)
class GetLedgerEntryResponse:
    """Empty unless the lookup succeeded."""

    ledger_object: RawLedgerObject | None = None
    ledger: LedgerSpecifier | None = None


def get_ledger_entry(
    request: GetLedgerEntryRequest, ledgers: LedgerSource
) -> tuple[GetLedgerEntryResponse, Status]:
    """Fetch the raw bytes of the object stored under ``request.key``.

    Returns:
        The response and its status. The status is ``INVALID_ARGUMENT`` for a
        malformed ledger reference or key, ``NOT_FOUND`` for an unavailable
        ledger or a missing object, and ``OK`` otherwise.
    """
    empty = GetLedgerEntryResponse()

    snapshot = ledgers.resolve(request.ledger)
    if isinstance(snapshot, Failure):
        code = (
            StatusCode.INVALID_ARGUMENT
            if snapshot.error.kind is ErrorKind.INVALID_PARAMS
            else StatusCode.NOT_FOUND
        )
        return empty, Status(code, str(snapshot.error))

    key = Hash256.from_bytes(request.key)
    if key is None:
        return empty, Status(StatusCode.INVALID_ARGUMENT, "index malformed")

    entry = snapshot.value.read(key)
    if entry is None:
        logger.debug("No object under %s", key)
        return empty, Status(StatusCode.NOT_FOUND, "object not found")

    response = GetLedgerEntryResponse(
        ledger_object=RawLedgerObject(data=entry.serialize(), key=request.key),
        ledger=request.ledger,
    )
    return response, Status()
