"""The primary user-facing entry point for ledger entry lookups.

The executor selects the snapshot a request names, then runs the request
through classify → derive key → resolve → build result, stopping at the first
`Failure`. Request-level failures become ``{"error": kind}`` envelopes; any
other failure is an implementation fault and is raised as `PipelineError`.
The executor enforces that every stage returns `Success | Failure` and that
the final value is a response envelope.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from ledger_entry.config import FrozenConfig, resolve_config
from ledger_entry.core.exceptions import (
    EntryLookupError,
    InvariantViolationError,
    LedgerEntryError,
    PipelineError,
)
from ledger_entry.core.types import (
    ErrorKind,
    Failure,
    LookupCommand,
    ResponseEnvelope,
    Result,
    Success,
    is_response_envelope,
)
from ledger_entry.pipeline.base import BaseHandler
from ledger_entry.pipeline.classifier import VariantClassifier
from ledger_entry.pipeline.key_deriver import KeyDeriver
from ledger_entry.pipeline.resolver import KeyResolver
from ledger_entry.pipeline.result_builder import ResultBuilder, error_envelope
from ledger_entry.snapshot import LedgerSource, specifier_from_params
from ledger_entry.telemetry import TelemetryContext, TelemetryReporter

logger = logging.getLogger(__name__)


class LedgerEntryExecutor:
    """Executes lookup requests through a pipeline of handlers.

    The executor holds only read-only state (its configuration, the ledger
    source and the handlers), so one instance may serve concurrent callers.
    """

    def __init__(
        self,
        config: FrozenConfig,
        ledgers: LedgerSource,
        pipeline_handlers: Iterable[BaseHandler[Any, Any, LedgerEntryError]]
        | None = None,
        *,
        reporters: Iterable[TelemetryReporter] = (),
    ):
        """Initialize the executor.

        Args:
            config: Configuration for the executor (FrozenConfig).
            ledgers: Where snapshots are looked up by sequence, hash or shortcut.
            pipeline_handlers: Optional handlers replacing the default pipeline.
            reporters: Telemetry reporters; ignored unless telemetry is enabled.
        """
        self.config = config
        self.ledgers = ledgers
        handlers = list(
            self._build_default_pipeline(config)
            if pipeline_handlers is None
            else pipeline_handlers
        )
        if not handlers:
            raise ValueError("Pipeline may not be empty; provide at least one handler.")
        self._pipeline = tuple(handlers)
        self._telemetry = TelemetryContext(*reporters)

    @staticmethod
    def _build_default_pipeline(config: FrozenConfig) -> list[Any]:
        return [
            VariantClassifier(),
            KeyDeriver(),
            KeyResolver(),
            ResultBuilder(binary_default=config.binary_default),
        ]

    def execute(
        self, params: Mapping[str, Any], *, api_version: int | None = None
    ) -> ResponseEnvelope:
        """Look up the ledger object a structured request identifies.

        Args:
            params: The request document.
            api_version: Negotiated API version; defaults to the configured one.

        Returns:
            A success envelope (``node`` or ``node_binary``) or ``{"error": kind}``.

        Raises:
            RequestParseError: If the request is structurally unreadable and the
                API version is 1 or lower.
            PipelineError: If a stage fails with anything but a request error.
        """
        version = self.config.api_version if api_version is None else api_version
        if not self.config.supports(version):
            return self._reject(EntryLookupError(ErrorKind.INVALID_API_VERSION))
        if not isinstance(params, Mapping):
            raise TypeError("params must be a mapping")

        spec = specifier_from_params(params, self.config.default_ledger)
        if isinstance(spec, Failure):
            return self._reject(spec.error)
        snapshot = self.ledgers.resolve(spec.value)
        if isinstance(snapshot, Failure):
            return self._reject(snapshot.error)

        return self.run(LookupCommand(params, version, snapshot.value))

    def run(self, command: LookupCommand) -> ResponseEnvelope:
        """Run an already bound command through the pipeline."""
        ctx = self._telemetry
        current: Any = command
        stage_name: str | None = None

        for handler in self._pipeline:
            stage_name = handler.stage_name
            with ctx("ledger_entry.stage", stage=stage_name):
                result: Result[Any, LedgerEntryError] = handler.handle(current)

            # Guard: handlers must return Success|Failure
            if not isinstance(result, Success | Failure):
                raise InvariantViolationError(
                    "Handler returned a non-Result value; expected Success|Failure.",
                    stage_name=stage_name,
                )

            if isinstance(result, Failure):
                if isinstance(result.error, EntryLookupError):
                    return self._reject(result.error, stage=stage_name)
                raise PipelineError(str(result.error), stage_name, result.error)
            current = result.value

        if not is_response_envelope(current):
            raise InvariantViolationError(
                "Executor ended without a response envelope; ensure the final "
                "stage produces one (e.g., ResultBuilder).",
                stage_name=stage_name,
            )
        return current

    def _reject(
        self, error: EntryLookupError, *, stage: str | None = None
    ) -> ResponseEnvelope:
        self._telemetry.count(
            "ledger_entry.error", kind=str(error.kind), stage=stage or "select_ledger"
        )
        logger.debug("Lookup failed: %s", error.kind)
        return error_envelope(error)

    @property
    def stage_names(self) -> tuple[str, ...]:
        """Return the current pipeline's stage names in execution order."""
        return tuple(h.stage_name for h in self._pipeline)


def create_executor(
    ledgers: LedgerSource,
    config: FrozenConfig | None = None,
    *,
    reporters: Iterable[TelemetryReporter] = (),
) -> LedgerEntryExecutor:
    """Create an executor, resolving configuration when none is given.

    This is the only place where ambient configuration is resolved.
    """
    final_config = config if config is not None else resolve_config().to_frozen()
    return LedgerEntryExecutor(final_config, ledgers, reporters=reporters)
