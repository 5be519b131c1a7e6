"""Configuration management for the ROSA CLI."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from rosa.core.exceptions import ConfigurationError
from rosa.core.models import IdentityProviderType

DEFAULT_CONFIG_PATH = "~/.rosa/config.yaml"
DEFAULT_TOKEN_URL = (
    "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
)


class OCMConfig(BaseModel):
    """OpenShift Cluster Manager API configuration."""

    url: str = "https://api.openshift.com"
    token_url: str = DEFAULT_TOKEN_URL
    client_id: str = "cloud-services"
    token: str | None = None  # offline (refresh) token
    access_token: str | None = None
    timeout: float = 30.0


class AWSConfig(BaseModel):
    """AWS configuration."""

    region: str = "us-east-1"
    profile: str | None = None


class IdpConfig(BaseModel):
    """Identity provider display configuration."""

    # Types rendered without an auth URL (and as a two column table when alone)
    password_types: list[IdentityProviderType] = Field(
        default_factory=lambda: [IdentityProviderType.HTPASSWD]
    )

    @field_validator("password_types", mode="before")
    @classmethod
    def _parse_types(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [
            IdentityProviderType.from_key(item) if isinstance(item, str) else item
            for item in value
        ]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    # Diagnostics only; user-facing messages go through the reporter
    level: str = "CRITICAL"
    format: str = "console"
    output: str = "stderr"


class RosaConfig(BaseModel):
    """Main ROSA CLI configuration."""

    ocm: OCMConfig = Field(default_factory=OCMConfig)
    aws: AWSConfig = Field(default_factory=AWSConfig)
    idp: IdpConfig = Field(default_factory=IdpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "RosaConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            RosaConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "RosaConfig":
        """Load configuration and apply environment overrides.

        A missing file is only an error when the path was given explicitly.

        Args:
            path: Path to configuration file (defaults to ~/.rosa/config.yaml)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            RosaConfig instance
        """
        if path is not None:
            config = cls.from_file(path)
        elif Path(DEFAULT_CONFIG_PATH).expanduser().exists():
            config = cls.from_file(DEFAULT_CONFIG_PATH)
        else:
            config = cls()

        return config.with_env(os.environ if environ is None else environ)

    def with_env(self, environ: Mapping[str, str]) -> "RosaConfig":
        """Return a copy with OCM_* and AWS_* environment variables applied."""
        config = self.model_copy(deep=True)
        if environ.get("OCM_TOKEN"):
            config.ocm.token = environ["OCM_TOKEN"]
        if environ.get("OCM_URL"):
            config.ocm.url = environ["OCM_URL"]
        if environ.get("AWS_REGION"):
            config.aws.region = environ["AWS_REGION"]
        if environ.get("AWS_PROFILE"):
            config.aws.profile = environ["AWS_PROFILE"]
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
