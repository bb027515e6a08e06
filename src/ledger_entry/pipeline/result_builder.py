"""Result builder: turns a resolved entry into the client response.

Focus: the two success encodings and the failure envelope.

- Structured: ``{"node": {...}, "index": "<HEX>"}``
- Binary: ``{"node_binary": "<HEX>", "index": "<HEX>"}``
- Failure: ``{"error": "<kind>"}`` and nothing else

Success envelopes also carry ``ledger_index``, ``validated`` and, when the
snapshot knows it, ``ledger_hash``.
"""

from typing import Never

from ledger_entry.core import fields
from ledger_entry.core.exceptions import EntryLookupError
from ledger_entry.core.types import (
    ResolvedEntry,
    ResponseEnvelope,
    Result,
    Success,
)
from ledger_entry.pipeline.base import BaseHandler


class ResultBuilder(BaseHandler[ResolvedEntry, ResponseEnvelope, Never]):
    """Format a `ResolvedEntry` as a response envelope.

    Attributes:
        binary_default: Encoding used when the request has no ``binary`` field.
    """

    stage_name = "build_result"

    def __init__(self, *, binary_default: bool = False) -> None:
        """Initialize with the encoding used when the request is silent."""
        self.binary_default = binary_default

    def handle(self, command: ResolvedEntry) -> Result[ResponseEnvelope, Never]:
        params = command.keyed.classified.initial.params
        binary = (
            fields.as_bool(params["binary"])
            if fields.is_member(params, "binary")
            else self.binary_default
        )

        entry = command.entry
        index = str(command.keyed.key)
        envelope: ResponseEnvelope
        if binary:
            envelope = {"node_binary": entry.serialize().hex().upper(), "index": index}
        else:
            envelope = {"node": entry.to_json(), "index": index}

        snapshot = command.keyed.classified.initial.snapshot
        envelope["ledger_index"] = snapshot.ledger_index
        if snapshot.ledger_hash is not None:
            envelope["ledger_hash"] = str(snapshot.ledger_hash)
        envelope["validated"] = snapshot.validated
        return Success(envelope)


def error_envelope(error: EntryLookupError) -> ResponseEnvelope:
    """The failure response: only the error kind, never a partial result."""
    return {"error": str(error.kind)}
