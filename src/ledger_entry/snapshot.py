"""Immutable ledger snapshots and the history that selects among them.

A snapshot is a read-only view of every object in the ledger at one version.
Snapshots never change after construction, so one instance can be shared by
any number of concurrent lookups without locking.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import copy
import dataclasses
import json
import logging
from pathlib import Path
from types import MappingProxyType
import typing

from ledger_entry.core import fields
from ledger_entry.core.exceptions import EntryLookupError
from ledger_entry.core.types import ErrorKind, Failure, Result, Success
from ledger_entry.protocol.hashes import Hash256
from ledger_entry.protocol.ledger_types import LedgerEntryType

logger = logging.getLogger(__name__)

LedgerShortcut = typing.Literal["current", "closed", "validated"]
SHORTCUTS: tuple[str, ...] = typing.get_args(LedgerShortcut)


@dataclasses.dataclass(frozen=True, slots=True)
class LedgerObject:
    """A ledger object as stored in a snapshot.

    ``data`` is the object's canonical binary serialization, produced by
    whoever built the snapshot; this package only passes it through.
    ``fields`` is copied in full on the way in and on the way out, so no
    caller can reach the nested values a snapshot holds.
    """

    key: Hash256
    entry_type: LedgerEntryType
    fields: Mapping[str, typing.Any]
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "fields", MappingProxyType(copy.deepcopy(dict(self.fields)))
        )

    def to_json(self) -> dict[str, typing.Any]:
        """Structured form: the stored fields plus type and index."""
        return {
            **copy.deepcopy(dict(self.fields)),
            "LedgerEntryType": self.entry_type.json_name,
            "index": str(self.key),
        }

    def serialize(self) -> bytes:
        return self.data


@typing.runtime_checkable
class SnapshotStore(typing.Protocol):
    """Read-only access to the objects of one ledger version."""

    @property
    def ledger_index(self) -> int: ...  # noqa: D102

    @property
    def ledger_hash(self) -> Hash256 | None: ...  # noqa: D102

    @property
    def validated(self) -> bool: ...  # noqa: D102

    def read(self, key: Hash256) -> LedgerObject | None: ...  # noqa: D102


class LedgerSnapshot:
    """In-memory `SnapshotStore` backed by a frozen mapping."""

    __slots__ = ("_ledger_hash", "_ledger_index", "_objects", "_validated")

    def __init__(
        self,
        objects: Iterable[LedgerObject],
        *,
        ledger_index: int,
        ledger_hash: Hash256 | None = None,
        validated: bool = False,
    ) -> None:
        """Index the objects by key; duplicate keys are rejected."""
        by_key: dict[Hash256, LedgerObject] = {}
        for obj in objects:
            if obj.key in by_key:
                raise ValueError(f"Duplicate ledger object key: {obj.key}")
            by_key[obj.key] = obj
        self._objects: Mapping[Hash256, LedgerObject] = MappingProxyType(by_key)
        self._ledger_index = ledger_index
        self._ledger_hash = ledger_hash
        self._validated = validated

    @property
    def ledger_index(self) -> int:
        return self._ledger_index

    @property
    def ledger_hash(self) -> Hash256 | None:
        return self._ledger_hash

    @property
    def validated(self) -> bool:
        return self._validated

    def read(self, key: Hash256) -> LedgerObject | None:
        return self._objects.get(key)

    def __len__(self) -> int:
        return len(self._objects)

    def __repr__(self) -> str:
        return (
            f"LedgerSnapshot(ledger_index={self._ledger_index!r}, "
            f"objects={len(self._objects)}, validated={self._validated!r})"
        )

    @classmethod
    def from_objects(
        cls,
        objects: Iterable[tuple[Hash256, LedgerEntryType, Mapping[str, typing.Any]]],
        *,
        ledger_index: int,
        ledger_hash: Hash256 | None = None,
        validated: bool = False,
    ) -> LedgerSnapshot:
        """Build a snapshot from ``(key, type, fields)`` triples.

        The canonical bytes of each object are a stand-in: the JSON encoding
        of its fields with sorted keys.
        """
        return cls(
            (
                LedgerObject(
                    key,
                    entry_type,
                    body,
                    json.dumps(dict(body), sort_keys=True).encode(),
                )
                for key, entry_type, body in objects
            ),
            ledger_index=ledger_index,
            ledger_hash=ledger_hash,
            validated=validated,
        )

    @classmethod
    def from_json(cls, document: Mapping[str, typing.Any]) -> LedgerSnapshot:
        """Build a snapshot from its JSON description.

        Expected shape::

            {
              "ledger_index": 7,
              "ledger_hash": "<64 hex>",          # optional
              "validated": true,                  # optional
              "objects": [
                {"index": "<64 hex>", "LedgerEntryType": "AccountRoot",
                 "data": "<hex>", ...other fields...}
              ]
            }

        Raises:
            ValueError: If the document or any object in it is malformed.
        """
        if not isinstance(document, Mapping):
            raise ValueError("snapshot document must be a JSON object")

        ledger_index = document.get("ledger_index")
        if not fields.is_integral(ledger_index) or ledger_index < 0:
            raise ValueError("ledger_index must be a non-negative integer")

        ledger_hash = None
        if document.get("ledger_hash") is not None:
            ledger_hash = Hash256.from_hex(document["ledger_hash"])
            if ledger_hash is None:
                raise ValueError("ledger_hash must be 64 hex digits")

        raw_objects = document.get("objects", [])
        if not isinstance(raw_objects, list):
            raise ValueError("objects must be a JSON array")

        objects = []
        for position, raw in enumerate(raw_objects):
            if not isinstance(raw, Mapping):
                raise ValueError(f"objects[{position}]: must be a JSON object")
            body = dict(raw)
            key = Hash256.from_hex(body.pop("index", ""))
            if key is None:
                raise ValueError(f"objects[{position}]: index must be 64 hex digits")
            type_name = body.pop("LedgerEntryType", "")
            if not isinstance(type_name, str):
                raise ValueError(
                    f"objects[{position}]: LedgerEntryType must be a string"
                )
            try:
                entry_type = LedgerEntryType.from_json_name(type_name)
                data = bytes.fromhex(body.pop("data", ""))
            except (TypeError, ValueError) as e:
                raise ValueError(f"objects[{position}]: {e}") from e
            objects.append(LedgerObject(key, entry_type, body, data))

        return cls(
            objects,
            ledger_index=ledger_index,
            ledger_hash=ledger_hash,
            validated=bool(document.get("validated", False)),
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> LedgerSnapshot:
        with Path(path).open(encoding="utf-8") as f:
            return cls.from_json(json.load(f))


# --- Ledger selection ---


@dataclasses.dataclass(frozen=True, slots=True)
class LedgerSpecifier:
    """Which ledger version a request is about. At most one field is set."""

    sequence: int | None = None
    hash: bytes | None = None
    shortcut: LedgerShortcut | None = None

    def __post_init__(self) -> None:
        chosen = [
            f for f in (self.sequence, self.hash, self.shortcut) if f is not None
        ]
        if len(chosen) > 1:
            raise ValueError("LedgerSpecifier accepts only one of sequence/hash/shortcut")


def specifier_from_params(
    params: Mapping[str, typing.Any], default: LedgerShortcut = "current"
) -> Result[LedgerSpecifier, EntryLookupError]:
    """Read ``ledger_hash`` / ``ledger_index`` from a structured request."""
    if params.get("ledger_hash") is not None:
        text = params["ledger_hash"]
        parsed = Hash256.from_hex(text) if fields.is_string(text) else None
        if parsed is None:
            return Failure(
                EntryLookupError(ErrorKind.INVALID_PARAMS, "ledgerHashMalformed")
            )
        return Success(LedgerSpecifier(hash=parsed.value))

    index = params.get("ledger_index")
    if index is None:
        return Success(LedgerSpecifier(shortcut=default))
    if fields.is_integral(index) and index >= 0:
        return Success(LedgerSpecifier(sequence=index))
    if fields.is_string(index):
        if index in SHORTCUTS:
            return Success(LedgerSpecifier(shortcut=typing.cast(LedgerShortcut, index)))
        number = fields.parse_uint32(index)
        if number is not None:
            return Success(LedgerSpecifier(sequence=number))
    return Failure(EntryLookupError(ErrorKind.INVALID_PARAMS, "ledgerIndexMalformed"))


class LedgerSource(typing.Protocol):
    """Anything that can turn a `LedgerSpecifier` into a snapshot."""

    def resolve(  # noqa: D102
        self, spec: LedgerSpecifier
    ) -> Result[SnapshotStore, EntryLookupError]: ...


class LedgerHistory:
    """A set of snapshots addressable by sequence, hash, or shortcut.

    ``current`` and ``closed`` name the newest snapshot; ``validated`` names
    the newest snapshot flagged as validated.
    """

    def __init__(self, snapshots: Iterable[SnapshotStore] = ()) -> None:
        """Register the initial snapshots."""
        self._by_index: dict[int, SnapshotStore] = {}
        self._by_hash: dict[bytes, SnapshotStore] = {}
        for snapshot in snapshots:
            self.add(snapshot)

    def add(self, snapshot: SnapshotStore) -> None:
        self._by_index[snapshot.ledger_index] = snapshot
        if snapshot.ledger_hash is not None:
            self._by_hash[snapshot.ledger_hash.value] = snapshot
        logger.debug("Registered ledger %d", snapshot.ledger_index)

    def resolve(self, spec: LedgerSpecifier) -> Result[SnapshotStore, EntryLookupError]:
        """Find the snapshot a specifier names.

        Returns `Failure` with ``invalidParams`` for a malformed specifier and
        ``lgrNotFound`` when no matching snapshot is held.
        """
        snapshot: SnapshotStore | None
        if spec.hash is not None:
            if len(spec.hash) != 32:
                return Failure(
                    EntryLookupError(ErrorKind.INVALID_PARAMS, "ledgerHashMalformed")
                )
            snapshot = self._by_hash.get(spec.hash)
        elif spec.sequence is not None:
            snapshot = self._by_index.get(spec.sequence)
        elif spec.shortcut == "validated":
            candidates = [s for s in self._by_index.values() if s.validated]
            snapshot = max(candidates, key=lambda s: s.ledger_index, default=None)
        elif spec.shortcut in (None, "current", "closed"):
            snapshot = self._by_index[max(self._by_index)] if self._by_index else None
        else:
            return Failure(
                EntryLookupError(ErrorKind.INVALID_PARAMS, "ledgerIndexMalformed")
            )

        if snapshot is None:
            return Failure(EntryLookupError(ErrorKind.LGR_NOT_FOUND, "ledgerNotFound"))
        return Success(snapshot)
