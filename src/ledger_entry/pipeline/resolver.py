"""Lookup stage: fetches the keyed object and checks its type."""

import logging

from ledger_entry.core.exceptions import EntryLookupError
from ledger_entry.core.types import (
    ErrorKind,
    Failure,
    KeyedCommand,
    ResolvedEntry,
    Result,
    Success,
)
from ledger_entry.pipeline.base import BaseHandler

logger = logging.getLogger(__name__)


class KeyResolver(BaseHandler[KeyedCommand, ResolvedEntry, EntryLookupError]):
    """Reads the object from the request's snapshot.

    When the variant implies a ledger type, an object of any other type is
    withheld and reported as ``unexpectedLedgerType``.
    """

    stage_name = "resolve"

    def handle(self, command: KeyedCommand) -> Result[ResolvedEntry, EntryLookupError]:
        snapshot = command.classified.initial.snapshot
        entry = snapshot.read(command.key)
        if entry is None:
            return Failure(EntryLookupError(ErrorKind.ENTRY_NOT_FOUND))

        expected = command.classified.expected_type
        if expected is not None and entry.entry_type != expected:
            logger.debug(
                "Object %s is %s, expected %s",
                command.key,
                entry.entry_type.json_name,
                expected.json_name,
            )
            return Failure(EntryLookupError(ErrorKind.UNEXPECTED_LEDGER_TYPE))
        return Success(ResolvedEntry(keyed=command, entry=entry))
