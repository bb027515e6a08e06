"""Resolve ledger entry lookup requests against immutable ledger snapshots."""

import importlib.metadata
import logging

from ledger_entry.binary_path import (
    GetLedgerEntryRequest,
    GetLedgerEntryResponse,
    Status,
    StatusCode,
    get_ledger_entry,
)
from ledger_entry.config import FrozenConfig, resolve_config
from ledger_entry.core.exceptions import (
    ConfigurationError,
    EntryLookupError,
    InvariantViolationError,
    LedgerEntryError,
    PipelineError,
    RequestParseError,
)
from ledger_entry.core.types import (
    ErrorKind,
    Failure,
    RequestVariant,
    ResponseEnvelope,
    Result,
    Success,
)
from ledger_entry.executor import LedgerEntryExecutor, create_executor
from ledger_entry.protocol import Hash256, LedgerEntryType
from ledger_entry.snapshot import (
    LedgerHistory,
    LedgerObject,
    LedgerSnapshot,
    LedgerSpecifier,
    SnapshotStore,
)
from ledger_entry.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("ledger-entry")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Core Executor
    "LedgerEntryExecutor",
    "create_executor",
    # Binary path
    "get_ledger_entry",
    "GetLedgerEntryRequest",
    "GetLedgerEntryResponse",
    "Status",
    "StatusCode",
    # Snapshots
    "SnapshotStore",
    "LedgerSnapshot",
    "LedgerObject",
    "LedgerHistory",
    "LedgerSpecifier",
    # Types
    "ErrorKind",
    "RequestVariant",
    "ResponseEnvelope",
    "Result",
    "Success",
    "Failure",
    "Hash256",
    "LedgerEntryType",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    # Exceptions
    "LedgerEntryError",
    "ConfigurationError",
    "EntryLookupError",
    "InvariantViolationError",
    "PipelineError",
    "RequestParseError",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
]
