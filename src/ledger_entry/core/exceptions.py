"""Exceptions for ledger entry resolution"""  # noqa: D415

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from ledger_entry.core.types import ErrorKind


class LedgerEntryError(Exception):
    """Base exception for ledger entry resolution errors"""  # noqa: D415


class ConfigurationError(LedgerEntryError):
    """Raised when configuration cannot be resolved or is inconsistent"""  # noqa: D415


class RequestParseError(LedgerEntryError):
    """Raised when a request value cannot be converted to the type being read.

    Reading an object as a string, or a negative number as an unsigned
    integer, are structural faults of the request document rather than
    validation outcomes. Whether they surface as ``invalidParams`` or
    propagate to the transport depends on the negotiated API version.
    """


class DescriptorParseError(LedgerEntryError):
    """Carried by a `Failure` when a nested descriptor (issue, bridge) is invalid"""  # noqa: D415


class EntryLookupError(LedgerEntryError):
    """A request-level error with a stable, client-visible error kind.

    These are expected outcomes (bad input, missing entry) and travel through
    the pipeline as `Failure` values rather than being raised.
    """

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        """Initialize with the error kind and an optional detail message."""
        self.kind = kind
        super().__init__(message or str(kind))


class PipelineError(LedgerEntryError):
    """Raised when a pipeline stage fails unexpectedly."""

    def __init__(
        self, message: str, stage_name: str | None, underlying_error: Exception
    ) -> None:
        """Initialize with the failing stage and the original error."""
        self.stage_name = stage_name
        self.underlying_error = underlying_error
        super().__init__(f"{stage_name or 'unknown stage'}: {message}")


class InvariantViolationError(LedgerEntryError):
    """Raised when the executor detects a broken pipeline contract."""

    def __init__(self, message: str, *, stage_name: str | None = None) -> None:
        """Initialize with a message and the stage that broke the contract."""
        self.stage_name = stage_name
        super().__init__(message)
