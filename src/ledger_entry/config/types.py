"""Configuration values before and after freezing, with their origins."""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "api_version",
    "min_api_version",
    "max_api_version",
    "default_ledger",
    "binary_default",
)


def generate_origin_summary(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin, e.g. ``{"env": 1, "default": 4}``."""
    return dict(Counter(source_map.values()))


class ResolvedConfig(NamedTuple):
    """Validated configuration plus the origin of every field."""

    api_version: int
    min_api_version: int
    max_api_version: int
    default_ledger: Literal["current", "closed", "validated"]
    binary_default: bool

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used by the executor."""
        return FrozenConfig(
            api_version=self.api_version,
            min_api_version=self.min_api_version,
            max_api_version=self.max_api_version,
            default_ledger=self.default_ledger,
            binary_default=self.binary_default,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Create a new ResolvedConfig with programmatic overrides applied.

        Args:
            **overrides: Field values to override. Unknown fields are ignored.

        Returns:
            New ResolvedConfig with overrides applied and origin updated.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Human-readable report of each field's value and origin."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if origin == "env":
                lines.append(f"{field}: env:LEDGER_ENTRY_{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration attached to the executor.

    Handlers receive this object and access fields as attributes. Any attempt
    to modify it raises.
    """

    api_version: int = 1
    min_api_version: int = 1
    max_api_version: int = 2
    default_ledger: Literal["current", "closed", "validated"] = "current"
    binary_default: bool = False

    def supports(self, api_version: int) -> bool:
        """Return True when ``api_version`` is within the accepted range."""
        return self.min_api_version <= api_version <= self.max_api_version
