"""Raw configuration sources: TOML files and LEDGER_ENTRY_* variables.

Each reader returns only the values its source sets. Merging, precedence and
validation of the combined result belong to `ConfigResolver`.

File locations:

- project: ``[tool.ledger_entry]`` in the nearest pyproject.toml
- home: ``~/.config/ledger_entry.toml``, or the path in LEDGER_ENTRY_CONFIG_HOME

Both files may hold named profiles under a ``profiles`` table.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ledger_entry.core.exceptions import ConfigurationError

from .schema import LedgerEntrySettings

ENV_PREFIX = "LEDGER_ENTRY_"
HOME_CONFIG_ENV = f"{ENV_PREFIX}CONFIG_HOME"


class ConfigFileError(ConfigurationError):
    """A configuration file exists but cannot be used."""

    def __init__(self, file_path: Path, message: str) -> None:
        """Record which file failed and why."""
        self.file_path = file_path
        super().__init__(f"Config file error in {file_path}: {message}")


def read_env_config() -> dict[str, Any]:
    """Values set through LEDGER_ENTRY_<FIELD> variables, coerced to field types.

    Raises:
        ValueError: If a variable cannot be coerced.
    """
    values: dict[str, Any] = {}
    for name, info in LedgerEntrySettings.model_fields.items():
        var = f"{ENV_PREFIX}{name.upper()}"
        raw = os.environ.get(var)
        if raw is None:
            continue
        try:
            values[name] = TypeAdapter(info.annotation).validate_python(
                raw, strict=False
            )
        except ValidationError as e:
            raise ValueError(f"Invalid environment variable value: {var}={raw}") from e
    return values


def home_config_path() -> Path:
    override = os.getenv(HOME_CONFIG_ENV)
    return Path(override) if override else Path.home() / ".config" / "ledger_entry.toml"


def read_home_config(profile: str | None = None) -> dict[str, Any]:
    path = home_config_path()
    if not path.exists():
        return {}
    return _select_profile(path, _load_toml(path), profile)


def read_project_config(
    project_root: Path | None = None, profile: str | None = None
) -> dict[str, Any]:
    """The ``[tool.ledger_entry]`` table of the nearest pyproject.toml.

    The search starts at ``project_root`` (default: the working directory)
    and walks up to the filesystem root.
    """
    path = _find_pyproject(project_root or Path.cwd())
    if path is None:
        return {}
    section = _load_toml(path).get("tool", {}).get("ledger_entry", {})
    if not section:
        return {}
    return _select_profile(path, section, profile)


def _find_pyproject(start: Path) -> Path | None:
    directory = start.resolve()
    for candidate in (directory, *directory.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate / "pyproject.toml"
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}") from e


def _select_profile(
    path: Path, table: dict[str, Any], profile: str | None
) -> dict[str, Any]:
    profiles = table.get("profiles", {})
    if profile is None:
        return {k: v for k, v in table.items() if k != "profiles"}
    if profile not in profiles:
        raise ConfigFileError(
            path, f"Profile '{profile}' not found. Available profiles: {list(profiles)}"
        )
    return dict(profiles[profile])
