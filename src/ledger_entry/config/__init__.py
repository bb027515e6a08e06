"""Configuration for the ledger entry service.

Resolve once, freeze, then pass the frozen value along:
- `resolve_config()` merges defaults, files, environment and overrides
- `ResolvedConfig` carries the merged values and where each came from
- `FrozenConfig` is the immutable form an executor holds
"""

from .api import config_scope, resolve_config
from .resolver import ConfigResolver
from .schema import LedgerEntrySettings
from .sources import ConfigFileError
from .types import (
    ConfigOrigin,
    FrozenConfig,
    ResolvedConfig,
    SourceMap,
    generate_origin_summary,
)

__all__ = [  # noqa: RUF022
    # Main API
    "resolve_config",
    "config_scope",
    # Core types
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    "generate_origin_summary",
    # Advanced usage
    "LedgerEntrySettings",
    "ConfigResolver",
    "ConfigFileError",
]
