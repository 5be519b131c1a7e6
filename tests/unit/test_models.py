"""Unit tests for core data models."""

from typing import Any

import pytest

from rosa.core.models import (
    AccountRole,
    Cluster,
    ClusterState,
    IdentityProvider,
    IdentityProviderType,
    OIDCConfig,
)


class TestIdentityProviderType:
    """Tests for identity provider type names."""

    @pytest.mark.parametrize(
        ("idp_type", "display_name"),
        [
            (IdentityProviderType.GITHUB, "GitHub"),
            (IdentityProviderType.GITLAB, "GitLab"),
            (IdentityProviderType.GOOGLE, "Google"),
            (IdentityProviderType.HTPASSWD, "HTPasswd"),
            (IdentityProviderType.LDAP, "LDAP"),
            (IdentityProviderType.OPENID, "OpenID"),
        ],
    )
    def test_display_name(self, idp_type: IdentityProviderType, display_name: str) -> None:
        assert idp_type.display_name == display_name

    def test_from_key_accepts_key_and_api_tag(self) -> None:
        assert IdentityProviderType.from_key("github") is IdentityProviderType.GITHUB
        assert IdentityProviderType.from_key("OpenIDIdentityProvider") is IdentityProviderType.OPENID

    def test_from_key_unknown(self) -> None:
        with pytest.raises(ValueError, match="Allowed values are"):
            IdentityProviderType.from_key("saml")


class TestCluster:
    """Tests for the cluster model."""

    def test_from_api(self, sample_cluster_json: dict[str, Any]) -> None:
        cluster = Cluster.from_api(sample_cluster_json)

        assert cluster.id == "1a2b3c4d5e6f7g8h9i0j"
        assert cluster.name == "mycluster"
        assert cluster.state == ClusterState.READY
        assert cluster.console_url.startswith("https://console-openshift-console.")
        assert cluster.oidc_config_id == "oidc-in-use"
        assert cluster.is_ready

    def test_from_api_minimal(self) -> None:
        cluster = Cluster.from_api({"id": "abc"})

        assert cluster.state == ClusterState.UNKNOWN
        assert cluster.console_url == ""
        assert cluster.oidc_config_id == ""
        assert not cluster.is_ready

    def test_from_api_unknown_state(self) -> None:
        cluster = Cluster.from_api({"id": "abc", "state": "exploding"})

        assert cluster.state == ClusterState.UNKNOWN

    @pytest.mark.parametrize("state", ["installing", "pending", "error", "uninstalling"])
    def test_not_ready_states(self, state: str) -> None:
        assert not Cluster.from_api({"id": "abc", "state": state}).is_ready


class TestIdentityProvider:
    """Tests for the identity provider model."""

    def test_to_api_keeps_unknown_fields(self, github_idp: IdentityProvider) -> None:
        data = github_idp.to_api()

        assert data["type"] == "GithubIdentityProvider"
        assert data["github"] == {"client_id": "abc", "organizations": ["my-org"]}
        assert data["mapping_method"] == "claim"

    def test_to_api_round_trips_api_payload(self) -> None:
        payload = {
            "kind": "IdentityProvider",
            "id": "x1",
            "name": "ldap",
            "type": "LDAPIdentityProvider",
            "ldap": {"url": "ldap://ldap.example.com/ou=users"},
        }

        assert IdentityProvider.model_validate(payload).to_api() == payload

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            IdentityProvider(name="x", type="SAMLIdentityProvider")


class TestOIDCConfig:
    """Tests for the OIDC config model."""

    def test_issuer_host(self) -> None:
        config = OIDCConfig(id="abc", issuer_url="https://oidc.os1.devshift.org/abc/")

        assert config.issuer_host == "oidc.os1.devshift.org/abc"

    def test_to_api_omits_missing_timestamps(self) -> None:
        data = OIDCConfig(id="abc", managed=True).to_api()

        assert data["managed"] is True
        assert "creation_timestamp" not in data


class TestAccountRole:
    """Tests for the account role model."""

    def test_hosted_cp(self) -> None:
        classic = AccountRole(
            role_name="op-Installer-Role",
            role_arn="arn:aws:iam::123456789012:role/op-Installer-Role",
            role_type="Installer",
        )
        hosted = AccountRole(
            role_name="op-HCP-ROSA-Installer-Role",
            role_arn="arn:aws:iam::123456789012:role/op-HCP-ROSA-Installer-Role",
            role_type="Installer",
        )

        assert not classic.is_hosted_cp
        assert hosted.is_hosted_cp
