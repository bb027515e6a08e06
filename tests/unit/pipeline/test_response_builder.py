"""Structured and binary response envelopes."""

import pytest

from ledger_entry.core.exceptions import EntryLookupError
from ledger_entry.core.types import (
    ClassifiedCommand,
    ErrorKind,
    KeyedCommand,
    LookupCommand,
    RequestVariant,
    ResolvedEntry,
    Success,
    is_response_envelope,
)
from ledger_entry.pipeline.result_builder import ResultBuilder, error_envelope
from ledger_entry.snapshot import LedgerSnapshot

pytestmark = pytest.mark.unit


@pytest.fixture
def resolved(ledger, ledger_keys):
    def _resolved(params, snapshot=None) -> ResolvedEntry:
        snapshot = snapshot or ledger
        key = ledger_keys["did"]
        classified = ClassifiedCommand(
            initial=LookupCommand(params, 1, snapshot),
            variant=RequestVariant.DID,
            expected_type=None,
        )
        return ResolvedEntry(KeyedCommand(classified, key), snapshot.read(key))

    return _resolved


def test_structured_by_default(resolved, ledger_keys):
    result = ResultBuilder().handle(resolved({}))
    assert isinstance(result, Success)
    envelope = result.value
    assert envelope["node"]["LedgerEntryType"] == "DID"
    assert envelope["node"]["Name"] == "did"
    assert envelope["index"] == str(ledger_keys["did"])
    assert "node_binary" not in envelope
    assert is_response_envelope(envelope)


def test_binary_flag(resolved, ledger, ledger_keys):
    envelope = ResultBuilder().handle(resolved({"binary": True})).value
    expected = ledger.read(ledger_keys["did"]).serialize().hex().upper()
    assert envelope["node_binary"] == expected
    assert "node" not in envelope
    assert envelope["index"] == str(ledger_keys["did"])


@pytest.mark.parametrize(
    ("flag", "binary"), [(1, True), ("yes", True), (0, False), (None, False), ("", False)]
)
def test_binary_flag_truthiness(resolved, flag, binary):
    envelope = ResultBuilder().handle(resolved({"binary": flag})).value
    assert ("node_binary" in envelope) is binary


def test_binary_default_applies_only_when_flag_absent(resolved):
    builder = ResultBuilder(binary_default=True)
    assert "node_binary" in builder.handle(resolved({})).value
    assert "node" in builder.handle(resolved({"binary": False})).value


def test_ledger_metadata(resolved, ledger):
    envelope = ResultBuilder().handle(resolved({})).value
    assert envelope["ledger_index"] == ledger.ledger_index
    assert envelope["ledger_hash"] == str(ledger.ledger_hash)
    assert envelope["validated"] is True


def test_ledger_hash_omitted_when_unknown(resolved, ledger, ledger_keys):
    unhashed = LedgerSnapshot([ledger.read(ledger_keys["did"])], ledger_index=4)
    envelope = ResultBuilder().handle(resolved({}, unhashed)).value
    assert "ledger_hash" not in envelope
    assert envelope["validated"] is False


def test_error_envelope_holds_only_the_kind():
    assert error_envelope(EntryLookupError(ErrorKind.ENTRY_NOT_FOUND, "detail")) == {
        "error": "entryNotFound"
    }
