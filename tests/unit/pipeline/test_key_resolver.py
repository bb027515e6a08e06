"""Snapshot lookup and the type guard."""

import pytest

from ledger_entry.core.types import (
    ClassifiedCommand,
    ErrorKind,
    Failure,
    KeyedCommand,
    LookupCommand,
    RequestVariant,
    Success,
)
from ledger_entry.pipeline.resolver import KeyResolver
from ledger_entry.protocol.hashes import Hash256
from ledger_entry.protocol.ledger_types import LedgerEntryType

pytestmark = pytest.mark.unit


@pytest.fixture
def keyed(ledger):
    def _keyed(key: Hash256, expected: LedgerEntryType | None) -> KeyedCommand:
        classified = ClassifiedCommand(
            initial=LookupCommand({}, 1, ledger),
            variant=RequestVariant.BY_INDEX,
            expected_type=expected,
            value=str(key),
        )
        return KeyedCommand(classified, key)

    return _keyed


def test_returns_the_object_when_the_type_matches(keyed, ledger_keys):
    result = KeyResolver().handle(
        keyed(ledger_keys["escrow"], LedgerEntryType.ESCROW)
    )
    assert isinstance(result, Success)
    assert result.value.entry.key == ledger_keys["escrow"]
    assert result.value.entry.entry_type is LedgerEntryType.ESCROW


def test_no_expected_type_accepts_any_object(keyed, ledger_keys):
    result = KeyResolver().handle(keyed(ledger_keys["oracle"], None))
    assert isinstance(result, Success)


def test_type_mismatch_withholds_the_object(keyed, ledger_keys):
    result = KeyResolver().handle(keyed(ledger_keys["escrow"], LedgerEntryType.OFFER))
    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.UNEXPECTED_LEDGER_TYPE


def test_missing_object(keyed):
    result = KeyResolver().handle(
        keyed(Hash256(b"\x42" * 32), LedgerEntryType.ACCOUNT_ROOT)
    )
    assert isinstance(result, Failure)
    assert result.error.kind is ErrorKind.ENTRY_NOT_FOUND
