"""Configuration resolution: precedence, validation, profiles and scoping.

These tests verify the core behaviors of the configuration module:
- Each source overrides the ones below it, and the winner is recorded.
- Cross-field rules are checked on the merged result.
- `config_scope` replaces ambient resolution inside its block.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from ledger_entry.config import (
    ConfigFileError,
    FrozenConfig,
    config_scope,
    generate_origin_summary,
    resolve_config,
)
from ledger_entry.core.exceptions import ConfigurationError

pytestmark = pytest.mark.unit


@pytest.fixture
def project(tmp_path):
    """A project directory whose pyproject.toml content the test supplies."""
    root = tmp_path / "project"
    root.mkdir()

    def _write(content: str):
        (root / "pyproject.toml").write_text(content)
        return root

    return _write


@pytest.fixture
def home_file():
    """Path of the isolated home configuration file."""
    return Path(os.environ["LEDGER_ENTRY_CONFIG_HOME"])


class TestPrecedence:
    def test_defaults(self, tmp_path):
        resolved = resolve_config(project_root=tmp_path)
        assert resolved.api_version == 1
        assert resolved.min_api_version == 1
        assert resolved.max_api_version == 2
        assert resolved.default_ledger == "current"
        assert resolved.binary_default is False
        assert set(resolved.origin.values()) == {"default"}

    def test_home_file(self, tmp_path, home_file):
        home_file.write_text('default_ledger = "validated"\n')
        resolved = resolve_config(project_root=tmp_path)
        assert resolved.default_ledger == "validated"
        assert resolved.origin["default_ledger"] == "file"

    def test_project_file_overrides_home_file(self, project, home_file):
        home_file.write_text("api_version = 1\n")
        root = project("[tool.ledger_entry]\napi_version = 2\n")
        resolved = resolve_config(project_root=root)
        assert resolved.api_version == 2

    def test_environment_overrides_files(self, project):
        root = project("[tool.ledger_entry]\napi_version = 2\n")
        with patch.dict(os.environ, {"LEDGER_ENTRY_API_VERSION": "1"}):
            resolved = resolve_config(project_root=root)
        assert resolved.api_version == 1
        assert resolved.origin["api_version"] == "env"

    def test_programmatic_overrides_everything(self, tmp_path):
        with patch.dict(os.environ, {"LEDGER_ENTRY_BINARY_DEFAULT": "false"}):
            resolved = resolve_config({"binary_default": True}, project_root=tmp_path)
        assert resolved.binary_default is True
        assert resolved.origin["binary_default"] == "programmatic"

    def test_unknown_fields_are_ignored(self, tmp_path):
        resolved = resolve_config({"colour": "blue"}, project_root=tmp_path)
        assert not hasattr(resolved, "colour")

    def test_audit_and_summary(self, tmp_path):
        with patch.dict(os.environ, {"LEDGER_ENTRY_API_VERSION": "2"}):
            resolved = resolve_config(project_root=tmp_path)
        assert "api_version: env:LEDGER_ENTRY_API_VERSION=2" in resolved.audit()
        assert "default_ledger: default:current" in resolved.audit()
        assert generate_origin_summary(resolved.origin) == {"env": 1, "default": 4}


class TestValidation:
    def test_api_version_outside_range(self, tmp_path):
        with pytest.raises(ValueError, match="validation failed"):
            resolve_config({"api_version": 3}, project_root=tmp_path)

    def test_min_above_max(self, tmp_path):
        with pytest.raises(ValueError, match="validation failed"):
            resolve_config(
                {"min_api_version": 2, "max_api_version": 1, "api_version": 1},
                project_root=tmp_path,
            )

    def test_bad_environment_value(self, tmp_path):
        with (
            patch.dict(os.environ, {"LEDGER_ENTRY_API_VERSION": "two"}),
            pytest.raises(ValueError, match="LEDGER_ENTRY_API_VERSION"),
        ):
            resolve_config(project_root=tmp_path)

    def test_unknown_default_ledger(self, tmp_path):
        with pytest.raises(ValueError):
            resolve_config({"default_ledger": "latest"}, project_root=tmp_path)


class TestFiles:
    def test_profiles(self, project):
        root = project(
            "[tool.ledger_entry]\n"
            "api_version = 1\n"
            "[tool.ledger_entry.profiles.strict]\n"
            "api_version = 2\n"
            'default_ledger = "validated"\n'
        )
        resolved = resolve_config(profile="strict", project_root=root)
        assert resolved.api_version == 2
        assert resolved.default_ledger == "validated"

    def test_profile_from_environment(self, project):
        root = project('[tool.ledger_entry.profiles.strict]\ndefault_ledger = "closed"\n')
        with patch.dict(os.environ, {"LEDGER_ENTRY_PROFILE": "strict"}):
            resolved = resolve_config(project_root=root)
        assert resolved.default_ledger == "closed"

    def test_malformed_project_file_raises(self, project):
        root = project("[tool.ledger_entry\napi_version = ")
        with pytest.raises(ConfigFileError) as ei:
            resolve_config(project_root=root)
        assert isinstance(ei.value, ConfigurationError)

    def test_malformed_home_file_is_ignored(self, tmp_path, home_file):
        home_file.write_text("not = [valid")
        resolved = resolve_config(project_root=tmp_path)
        assert resolved.api_version == 1

    def test_missing_profile_in_project_is_skipped(self, project):
        root = project("[tool.ledger_entry]\napi_version = 2\n")
        resolved = resolve_config(profile="absent", project_root=root)
        assert resolved.api_version == 1


class TestFreezing:
    def test_frozen_config_is_immutable(self, tmp_path):
        frozen = resolve_config(project_root=tmp_path).to_frozen()
        assert isinstance(frozen, FrozenConfig)
        with pytest.raises(AttributeError):
            frozen.api_version = 2  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("version", "ok"), [(0, False), (1, True), (2, True), (3, False)]
    )
    def test_supports(self, version, ok):
        assert FrozenConfig().supports(version) is ok

    def test_with_overrides_updates_origin(self, tmp_path):
        resolved = resolve_config(project_root=tmp_path).with_overrides(api_version=2)
        assert resolved.api_version == 2
        assert resolved.origin["api_version"] == "programmatic"


class TestScope:
    def test_scope_replaces_ambient_resolution(self, tmp_path):
        scoped = resolve_config(project_root=tmp_path).with_overrides(
            default_ledger="validated"
        )
        with config_scope(scoped):
            assert resolve_config() is scoped
            assert resolve_config({"api_version": 2}).api_version == 2
        assert resolve_config(project_root=tmp_path).default_ledger == "current"
