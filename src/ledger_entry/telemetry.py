"""Stage timings and error counters for the lookup pipeline.

Telemetry is off unless ``LEDGER_ENTRY_TELEMETRY=1`` is set when this module
is imported. While off, or when no reporter is attached, `TelemetryContext`
hands back one shared object whose methods do nothing, so an idle executor
pays a single attribute lookup per stage.

Scopes nest per execution context: a timing recorded inside
``ctx("ledger_entry")`` and ``ctx("stage")`` is reported as
``ledger_entry.stage``.
"""

from collections import defaultdict, deque
from contextvars import ContextVar, Token
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, TypeAlias, runtime_checkable

log = logging.getLogger(__name__)

_active_scopes: ContextVar[tuple[str, ...]] = ContextVar(
    "ledger_entry_telemetry_scopes", default=()
)

# Read once; flipping the variable later has no effect
_TELEMETRY_ENABLED = os.getenv("LEDGER_ENTRY_TELEMETRY") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Receives timings and metrics. Implementations must be thread-safe."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


class _Disabled:
    __slots__ = ()

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _Scope:
    """One timed region; created per ``with`` block."""

    __slots__ = ("_metadata", "_name", "_owner", "_started", "_token")

    def __init__(self, owner: "_Enabled", name: str, metadata: dict[str, Any]):
        if not isinstance(name, str) or not name:
            raise ValueError("Scope name must be a non-empty string")
        self._owner = owner
        self._name = name
        self._metadata = metadata
        self._started = 0.0
        self._token: Token[tuple[str, ...]] | None = None

    def __enter__(self) -> "_Enabled":
        self._token = _active_scopes.set((*_active_scopes.get(), self._name))
        self._started = time.perf_counter()
        return self._owner

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        elapsed = time.perf_counter() - self._started
        path = ".".join(_active_scopes.get())
        if self._token is not None:
            _active_scopes.reset(self._token)
        self._owner._emit("record_timing", path, elapsed, self._metadata)


class _Enabled:
    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(self, name: str, **metadata: Any) -> _Scope:
        return _Scope(self, name, metadata)

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record ``value`` under ``name`` inside the current scope."""
        path = ".".join((*_active_scopes.get(), name))
        self._emit("record_metric", path, value, metadata)

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        self.metric(name, increment, metric_type="counter", **metadata)

    def _emit(
        self, method: str, path: str, value: Any, metadata: dict[str, Any]
    ) -> None:
        parents = _active_scopes.get()
        payload = {
            "depth": len(parents),
            "parent_scope": ".".join(parents) or None,
            **metadata,
        }
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(path, value, **payload)
            except Exception:
                # A broken reporter must never fail a lookup
                log.exception("Telemetry reporter %s failed", type(reporter).__name__)


_DISABLED = _Disabled()

TelemetryContextProtocol: TypeAlias = _Enabled | _Disabled


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return a context that forwards to ``reporters``, or the shared no-op."""
    if _TELEMETRY_ENABLED and reporters:
        return _Enabled(*reporters)
    return _DISABLED


class MemoryReporter:
    """Keeps the most recent samples per scope in memory.

    Intended for the command line and for tests; `get_report()` renders a
    plain-text summary.
    """

    def __init__(self, max_samples: int = 1000):
        self.max_samples = max_samples
        self.timings: defaultdict[str, deque[tuple[float, dict[str, Any]]]] = (
            defaultdict(self._new_buffer)
        )
        self.metrics: defaultdict[str, deque[tuple[Any, dict[str, Any]]]] = (
            defaultdict(self._new_buffer)
        )

    def _new_buffer(self) -> deque[Any]:
        return deque(maxlen=self.max_samples)

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self.timings[scope].append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self.metrics[scope].append((value, metadata))

    def get_report(self) -> str:
        lines = ["Timings:"]
        for scope in sorted(self.timings):
            samples = [duration for duration, _ in self.timings[scope]]
            lines.append(
                f"  {scope}: n={len(samples)} "
                f"mean={sum(samples) / len(samples) * 1000:.3f}ms "
                f"max={max(samples) * 1000:.3f}ms"
            )
        lines.append("Metrics:")
        for scope in sorted(self.metrics):
            values = [v for v, _ in self.metrics[scope] if isinstance(v, int | float)]
            lines.append(f"  {scope}: n={len(self.metrics[scope])} total={sum(values)}")
        return "\n".join(lines)
