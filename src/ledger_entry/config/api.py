"""Public entry points for configuration resolution and scoping."""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import ResolvedConfig

_resolver = ConfigResolver()

_scoped: contextvars.ContextVar[ResolvedConfig | None] = contextvars.ContextVar(
    "ledger_entry_resolved_config", default=None
)


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment > Project file > Home file > Defaults.
    Inside a `config_scope`, the scoped configuration replaces the environment
    and files, with ``programmatic`` applied on top.

    Args:
        programmatic: Overrides with the highest precedence. Unknown fields
            are ignored.
        profile: Profile name to load from configuration files. If None,
            LEDGER_ENTRY_PROFILE is used when set.
        project_root: Where to start searching for pyproject.toml.

    Raises:
        ValueError: If configuration validation fails.
        ConfigFileError: If the project configuration file is malformed.

    Example:
        config = resolve_config({"api_version": 2})
        print(config.audit())
    """
    scoped = _scoped.get()
    if scoped is not None:
        return scoped.with_overrides(**programmatic) if programmatic else scoped
    return _resolver.resolve(
        programmatic, profile=profile, project_root=project_root
    )


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Make `resolve_config()` return ``config`` inside the block.

    Executors created earlier keep the FrozenConfig they were built with.

    Example:
        with config_scope(resolve_config().with_overrides(api_version=2)):
            executor = create_executor(ledgers)
    """
    token = _scoped.set(config)
    try:
        yield
    finally:
        _scoped.reset(token)
