"""Core data types that flow through the pipeline.

This module defines the immutable data structures that represent the state
of a lookup request as it moves through the classification, key derivation,
resolution, and formatting stages. Each stage transforms the data into a new
state, so a later stage can only run on the output of the one before it.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import enum
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:  # pragma: no cover - import for annotations only
    from ledger_entry.protocol.hashes import Hash256
    from ledger_entry.protocol.ledger_types import LedgerEntryType
    from ledger_entry.snapshot import LedgerObject, SnapshotStore

# --- Minimal guard helpers ---

T = typing.TypeVar("T")


def _freeze_mapping(m: Mapping[str, T] | None) -> Mapping[str, T] | None:
    """Return an immutable mapping view or None."""
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result Monad for Explicit Error Handling ---
# Validation and lookup outcomes are data: a stage returns Success or Failure
# and never raises for a bad request.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful result in the pipeline."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failure in the pipeline, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Client-visible enumerations ---


class ErrorKind(enum.StrEnum):
    """Stable error identifiers reported to clients."""

    MALFORMED_REQUEST = "malformedRequest"
    MALFORMED_ADDRESS = "malformedAddress"
    MALFORMED_OWNER = "malformedOwner"
    MALFORMED_AUTHORIZED = "malformedAuthorized"
    MALFORMED_CURRENCY = "malformedCurrency"
    MALFORMED_DOCUMENT_ID = "malformedDocumentID"
    ENTRY_NOT_FOUND = "entryNotFound"
    UNEXPECTED_LEDGER_TYPE = "unexpectedLedgerType"
    UNKNOWN_OPTION = "unknownOption"
    INVALID_PARAMS = "invalidParams"
    LGR_NOT_FOUND = "lgrNotFound"
    INVALID_API_VERSION = "invalid_API_version"


class RequestVariant(enum.StrEnum):
    """The mutually exclusive ways a client can identify a ledger object."""

    BY_INDEX = "index"
    ACCOUNT_ROOT = "account_root"
    CHECK = "check"
    DEPOSIT_PREAUTH = "deposit_preauth"
    DIRECTORY = "directory"
    ESCROW = "escrow"
    OFFER = "offer"
    PAYMENT_CHANNEL = "payment_channel"
    RIPPLE_STATE = "ripple_state"
    TICKET = "ticket"
    NFT_PAGE = "nft_page"
    AMM = "amm"
    BRIDGE = "bridge"
    XCHAIN_OWNED_CLAIM_ID = "xchain_owned_claim_id"
    XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID = "xchain_owned_create_account_claim_id"
    DID = "did"
    ORACLE = "oracle"
    LEGACY_POSITIONAL = "params"
    UNRECOGNIZED = "unrecognized"


# --- Typed Command States ---


@dataclasses.dataclass(frozen=True, slots=True)
class LookupCommand:
    """The initial state: the raw request bound to a snapshot and API version."""

    params: Mapping[str, typing.Any]
    api_version: int
    snapshot: SnapshotStore

    def __post_init__(self) -> None:
        """Validate and freeze the request document."""
        _require(
            condition=isinstance(self.params, Mapping),
            message="must be a mapping",
            field_name="params",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.api_version, int)
            and not isinstance(self.api_version, bool),
            message="must be an int",
            field_name="api_version",
            exc=TypeError,
        )
        object.__setattr__(self, "params", _freeze_mapping(self.params))


@dataclasses.dataclass(frozen=True, slots=True)
class ClassifiedCommand:
    """The request after its variant has been selected."""

    initial: LookupCommand
    variant: RequestVariant
    expected_type: LedgerEntryType | None
    # The value of the selecting top-level field (None when unrecognized).
    value: typing.Any = None


@dataclasses.dataclass(frozen=True, slots=True)
class KeyedCommand:
    """A classified request with a successfully derived, non-zero key."""

    classified: ClassifiedCommand
    key: Hash256

    def __post_init__(self) -> None:
        """A zero key must never be looked up."""
        _require(
            condition=not self.key.is_zero,
            message="must not be the zero sentinel",
            field_name="key",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """A keyed request together with the type-checked object it names."""

    keyed: KeyedCommand
    entry: LedgerObject


class ResponseEnvelope(typing.TypedDict, total=False):
    """Response shape returned to clients.

    Exactly one of ``node``, ``node_binary`` or ``error`` is present.
    """

    node: dict[str, typing.Any]
    node_binary: str
    index: str
    error: str
    ledger_index: int
    ledger_hash: str
    validated: bool


def is_response_envelope(value: object) -> bool:
    """Return True when ``value`` has the shape of a `ResponseEnvelope`."""
    if not isinstance(value, dict):
        return False
    bodies = [k for k in ("node", "node_binary", "error") if k in value]
    if len(bodies) != 1:
        return False
    if "error" in value:
        return isinstance(value["error"], str)
    return isinstance(value.get("index"), str)
