"""Core data models for the ROSA CLI."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClusterState(str, Enum):
    """Cluster state as reported by the clusters management API."""

    ERROR = "error"
    HIBERNATING = "hibernating"
    INSTALLING = "installing"
    PENDING = "pending"
    POWERING_DOWN = "powering_down"
    READY = "ready"
    RESUMING = "resuming"
    UNINSTALLING = "uninstalling"
    UNKNOWN = "unknown"
    VALIDATING = "validating"
    WAITING = "waiting"


class IdentityProviderType(str, Enum):
    """Identity provider type tag as sent by the API."""

    GITHUB = "GithubIdentityProvider"
    GITLAB = "GitlabIdentityProvider"
    GOOGLE = "GoogleIdentityProvider"
    HTPASSWD = "HTPasswdIdentityProvider"
    LDAP = "LDAPIdentityProvider"
    OPENID = "OpenIDIdentityProvider"

    @property
    def display_name(self) -> str:
        """Name shown to users in tables."""
        return _IDP_DISPLAY_NAMES[self]

    @property
    def key(self) -> str:
        """Short lowercase name used in configuration files."""
        return self.display_name.lower()

    @classmethod
    def from_key(cls, value: str) -> "IdentityProviderType":
        """Resolve a short key, display name or API tag to a type.

        Raises:
            ValueError: If the value names no known type
        """
        lowered = value.lower()
        for idp_type in cls:
            if lowered in (idp_type.key, idp_type.value.lower()):
                return idp_type
        allowed = ", ".join(t.key for t in cls)
        raise ValueError(f"Unknown identity provider type '{value}'. Allowed values are [{allowed}]")


_IDP_DISPLAY_NAMES = {
    IdentityProviderType.GITHUB: "GitHub",
    IdentityProviderType.GITLAB: "GitLab",
    IdentityProviderType.GOOGLE: "Google",
    IdentityProviderType.HTPASSWD: "HTPasswd",
    IdentityProviderType.LDAP: "LDAP",
    IdentityProviderType.OPENID: "OpenID",
}


class Cluster(BaseModel):
    """Cluster as returned by the clusters management API."""

    id: str
    name: str = ""
    external_id: str = ""
    state: ClusterState = ClusterState.UNKNOWN
    console_url: str = ""
    oidc_config_id: str = ""

    @property
    def is_ready(self) -> bool:
        return self.state == ClusterState.READY

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Cluster":
        """Build a cluster from its API JSON representation."""
        state = data.get("state", ClusterState.UNKNOWN.value)
        try:
            cluster_state = ClusterState(state)
        except ValueError:
            cluster_state = ClusterState.UNKNOWN

        oidc_config = data.get("aws", {}).get("sts", {}).get("oidc_config", {})
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            external_id=data.get("external_id", ""),
            state=cluster_state,
            console_url=data.get("console", {}).get("url", ""),
            oidc_config_id=oidc_config.get("id", ""),
        )


class IdentityProvider(BaseModel):
    """Identity provider configured on a cluster.

    Fields the CLI does not use are kept so structured output matches the API.
    """

    model_config = ConfigDict(extra="allow", use_enum_values=False)

    id: str = ""
    name: str
    type: IdentityProviderType
    mapping_method: str | None = None

    def to_api(self) -> dict[str, Any]:
        """Return the record in its API shape."""
        return self.model_dump(mode="json", exclude_none=True)


class OIDCConfig(BaseModel):
    """OIDC configuration used for cluster workload identity."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    href: str = ""
    issuer_url: str = ""
    managed: bool = False
    reusable: bool = True
    secret_arn: str = ""
    installer_role_arn: str = ""
    creation_timestamp: str | None = None
    last_used_timestamp: str | None = None

    @property
    def issuer_host(self) -> str:
        """Issuer URL without scheme, as used in IAM OIDC provider ARNs."""
        return self.issuer_url.removeprefix("https://").rstrip("/")

    def to_api(self) -> dict[str, Any]:
        """Return the record in its API shape."""
        return self.model_dump(mode="json", exclude_none=True)


class AccountRole(BaseModel):
    """ROSA account-wide IAM role."""

    role_name: str
    role_arn: str
    role_type: str
    version: str = ""
    managed_policy: bool = False

    @property
    def is_hosted_cp(self) -> bool:
        return "HCP-ROSA" in self.role_name


class CreatedOIDCConfig(BaseModel):
    """Outcome of an OIDC config creation."""

    config: OIDCConfig | None = None
    provider_arn: str = ""
    commands: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)


class DeletedOIDCConfig(BaseModel):
    """Outcome of an OIDC config deletion."""

    config: OIDCConfig
    provider_arn: str = ""
    commands: list[str] = Field(default_factory=list)
