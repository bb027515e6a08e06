"""Settings schema: field types, defaults and the API version range rule."""

from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerEntrySettings(BaseSettings):
    """Every configurable field of the ledger entry service."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_ENTRY_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    api_version: int = Field(
        default=1,
        description="API version assumed when the transport does not negotiate one",
    )

    min_api_version: int = Field(
        default=1,
        description="Lowest API version accepted",
        ge=1,
    )

    max_api_version: int = Field(
        default=2,
        description="Highest API version accepted",
        ge=1,
    )

    default_ledger: Literal["current", "closed", "validated"] = Field(
        default="current",
        description="Ledger used when a request names no ledger_index or ledger_hash",
    )

    binary_default: bool = Field(
        default=False,
        description="Return node_binary when a request does not set the binary flag",
    )

    @model_validator(mode="after")
    def validate_version_range(self) -> "LedgerEntrySettings":
        """Ensure the default API version lies within the supported range."""
        if self.min_api_version > self.max_api_version:
            raise ValueError(
                f"min_api_version ({self.min_api_version}) exceeds "
                f"max_api_version ({self.max_api_version})"
            )
        if not self.min_api_version <= self.api_version <= self.max_api_version:
            raise ValueError(
                f"api_version {self.api_version} is outside the supported range "
                f"[{self.min_api_version}, {self.max_api_version}]"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Field values keyed by name, in declaration order."""
        return {
            "api_version": self.api_version,
            "min_api_version": self.min_api_version,
            "max_api_version": self.max_api_version,
            "default_ledger": self.default_ledger,
            "binary_default": self.binary_default,
        }
