"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from rosa.core.config import (
    DEFAULT_TOKEN_URL,
    AWSConfig,
    IdpConfig,
    LoggingConfig,
    OCMConfig,
    RosaConfig,
)
from rosa.core.exceptions import ConfigurationError
from rosa.core.models import IdentityProviderType


def test_ocm_config_defaults():
    """Test OCM config defaults."""
    config = OCMConfig()
    assert config.url == "https://api.openshift.com"
    assert config.token_url == DEFAULT_TOKEN_URL
    assert config.client_id == "cloud-services"
    assert config.token is None


def test_aws_config_defaults():
    """Test AWS config defaults."""
    config = AWSConfig()
    assert config.region == "us-east-1"
    assert config.profile is None


def test_logging_config_defaults():
    """Test logging config stays quiet by default."""
    config = LoggingConfig()
    assert config.level == "CRITICAL"
    assert config.output == "stderr"


def test_idp_config_defaults_to_htpasswd():
    """Test only HTPasswd is a password type by default."""
    assert IdpConfig().password_types == [IdentityProviderType.HTPASSWD]


def test_idp_config_accepts_short_names():
    """Test password types can be given by short name or API tag."""
    config = IdpConfig(password_types=["htpasswd", "LDAPIdentityProvider"])
    assert config.password_types == [IdentityProviderType.HTPASSWD, IdentityProviderType.LDAP]


def test_idp_config_rejects_unknown_type():
    """Test unknown provider types are rejected."""
    with pytest.raises(ValueError, match="Unknown identity provider type 'kerberos'"):
        IdpConfig(password_types=["kerberos"])


def test_rosa_config_from_file(tmp_path: Path):
    """Test loading config from YAML file."""
    config_data = {
        "ocm": {"url": "https://api.stage.openshift.com", "token": "offline-token"},
        "aws": {"region": "eu-west-1"},
        "idp": {"password_types": ["htpasswd", "ldap"]},
        "logging": {"level": "DEBUG"},
    }
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump(config_data))

    config = RosaConfig.from_file(config_file)

    assert config.ocm.url == "https://api.stage.openshift.com"
    assert config.ocm.token == "offline-token"
    assert config.aws.region == "eu-west-1"
    assert IdentityProviderType.LDAP in config.idp.password_types
    assert config.logging.level == "DEBUG"


def test_rosa_config_from_empty_file(tmp_path: Path):
    """Test an empty file yields defaults."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    config = RosaConfig.from_file(config_file)

    assert config.aws.region == "us-east-1"


def test_rosa_config_file_not_found():
    """Test error when config file doesn't exist."""
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        RosaConfig.from_file("/nonexistent/config.yaml")


def test_rosa_config_invalid_yaml(tmp_path: Path):
    """Test error on malformed YAML."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("aws: [region\n")

    with pytest.raises(ConfigurationError, match="Failed to load configuration"):
        RosaConfig.from_file(config_file)


def test_rosa_config_invalid_schema(tmp_path: Path):
    """Test error on values that do not fit the schema."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump({"ocm": {"timeout": "soon"}}))

    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        RosaConfig.from_file(config_file)


def test_rosa_config_load_applies_environment(tmp_path: Path):
    """Test environment variables override file values."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump({"aws": {"region": "eu-west-1"}}))

    config = RosaConfig.load(
        config_file,
        environ={"OCM_TOKEN": "env-token", "AWS_REGION": "us-west-2", "AWS_PROFILE": "dev"},
    )

    assert config.ocm.token == "env-token"
    assert config.aws.region == "us-west-2"
    assert config.aws.profile == "dev"


def test_rosa_config_load_without_default_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test a missing default file is not an error."""
    monkeypatch.setenv("HOME", str(tmp_path))

    config = RosaConfig.load(environ={})

    assert config == RosaConfig()


def test_rosa_config_load_explicit_missing_file():
    """Test an explicitly given missing file is an error."""
    with pytest.raises(ConfigurationError):
        RosaConfig.load("/nonexistent/config.yaml", environ={})


def test_with_env_does_not_modify_original():
    """Test environment overrides return a copy."""
    config = RosaConfig()

    updated = config.with_env({"OCM_URL": "https://api.integration.openshift.com"})

    assert updated.ocm.url == "https://api.integration.openshift.com"
    assert config.ocm.url == "https://api.openshift.com"


def test_to_dict():
    """Test converting configuration to a dictionary."""
    data = RosaConfig().to_dict()

    assert data["aws"]["region"] == "us-east-1"
    assert set(data) == {"ocm", "aws", "idp", "logging"}
