"""Merges configuration sources in precedence order.

Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from . import sources
from .schema import LedgerEntrySettings
from .types import ConfigOrigin, ResolvedConfig

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Resolves configuration and records which source supplied each field."""

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Merge every source, then validate the result as a whole.

        Raises:
            ValueError: If a value or a cross-field rule is invalid.
            ConfigFileError: If the project file is malformed, or names no
                such profile when no profile was requested.
        """
        if profile is None:
            profile = os.getenv(f"{sources.ENV_PREFIX}PROFILE")

        merged = LedgerEntrySettings.model_construct().to_dict()
        origin: dict[str, ConfigOrigin] = dict.fromkeys(merged, "default")

        def layer(values: dict[str, Any], source: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:
                    merged[field] = value
                    origin[field] = source

        try:
            layer(sources.read_home_config(profile), "file")
        except sources.ConfigFileError as e:
            logger.warning("Ignoring home configuration: %s", e)

        try:
            layer(sources.read_project_config(project_root, profile), "file")
        except sources.ConfigFileError:
            # A profile missing from the project file is not fatal
            if profile is None:
                raise
            logger.debug("Profile %r not applied from project file", profile)

        layer(sources.read_env_config(), "env")
        if programmatic:
            layer(programmatic, "programmatic")

        try:
            final = LedgerEntrySettings.model_validate(merged).to_dict()
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e
        return ResolvedConfig(**final, origin=origin)
