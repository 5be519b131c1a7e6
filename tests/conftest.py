"""Pytest configuration and shared fixtures."""

import uuid
from typing import Any
from unittest.mock import patch

import pytest

from rosa.cli.context import RosaContext
from rosa.core.config import RosaConfig
from rosa.core.exceptions import ClusterNotFoundError, OIDCConfigNotFoundError
from rosa.core.models import Cluster, IdentityProvider, OIDCConfig
from rosa.oidc.keys import KeyPair, generate_key_pair

TEST_ACCOUNT = "123456789012"
TEST_THUMBPRINT = "9e99a48a9960b14926bb7f3b02e22da2b0ab7280"
MANAGED_ISSUER_BASE = "https://oidc.os1.devshift.org"


# ==============================================================================
# In-memory Clients
# ==============================================================================


class FakeOCMClient:
    """Clusters management client backed by dictionaries."""

    def __init__(
        self,
        clusters: list[Cluster] | None = None,
        idps: dict[str, list[IdentityProvider]] | None = None,
    ):
        self.clusters = {cluster.id: cluster for cluster in clusters or []}
        self.idps = idps or {}
        self.oidc_configs: dict[str, OIDCConfig] = {}
        self.calls: list[str] = []
        self.closed = False

    def get_cluster(self, cluster_key: str) -> Cluster:
        self.calls.append("get_cluster")
        for cluster in self.clusters.values():
            if cluster_key in (cluster.id, cluster.name, cluster.external_id):
                return cluster
        raise ClusterNotFoundError(f"There is no cluster with identifier or name '{cluster_key}'")

    def get_identity_providers(self, cluster_id: str) -> list[IdentityProvider]:
        self.calls.append("get_identity_providers")
        return list(self.idps.get(cluster_id, []))

    def list_oidc_configs(self) -> list[OIDCConfig]:
        self.calls.append("list_oidc_configs")
        return list(self.oidc_configs.values())

    def get_oidc_config(self, oidc_config_id: str) -> OIDCConfig:
        self.calls.append("get_oidc_config")
        if oidc_config_id not in self.oidc_configs:
            raise OIDCConfigNotFoundError(f"OIDC config '{oidc_config_id}' not found")
        return self.oidc_configs[oidc_config_id]

    def create_oidc_config(
        self,
        managed: bool,
        issuer_url: str | None = None,
        secret_arn: str | None = None,
        installer_role_arn: str | None = None,
    ) -> OIDCConfig:
        self.calls.append("create_oidc_config")
        config_id = uuid.uuid4().hex
        config = OIDCConfig(
            id=config_id,
            href=f"/api/clusters_mgmt/v1/oidc_configs/{config_id}",
            managed=managed,
            issuer_url=f"{MANAGED_ISSUER_BASE}/{config_id}" if managed else issuer_url or "",
            secret_arn="" if managed else secret_arn or "",
            installer_role_arn="" if managed else installer_role_arn or "",
        )
        self.oidc_configs[config_id] = config
        return config

    def delete_oidc_config(self, oidc_config_id: str) -> None:
        self.calls.append("delete_oidc_config")
        if self.oidc_configs.pop(oidc_config_id, None) is None:
            raise OIDCConfigNotFoundError(f"OIDC config '{oidc_config_id}' not found")

    def has_clusters_using_oidc_config(self, oidc_config_id: str) -> bool:
        self.calls.append("has_clusters_using_oidc_config")
        return any(c.oidc_config_id == oidc_config_id for c in self.clusters.values())

    def close(self) -> None:
        self.closed = True


class FakeAWSClient:
    """AWS client keeping providers, buckets, secrets and roles in memory."""

    def __init__(self, region: str = "us-east-1", account: str = TEST_ACCOUNT):
        self.region = region
        self.account = account
        self.providers: dict[str, str] = {}
        self.buckets: dict[str, dict[str, str]] = {}
        self.secrets: dict[str, str] = {}
        self.roles: list[dict[str, Any]] = []
        self.role_tags: dict[str, dict[str, str]] = {}
        self.calls: list[str] = []

    def get_caller_identity(self) -> dict[str, str]:
        return {"account": self.account, "arn": f"arn:aws:iam::{self.account}:user/tester"}

    def create_oidc_provider(self, issuer_url: str, thumbprint: str, client_ids: tuple = ()) -> str:
        self.calls.append("create_oidc_provider")
        host = issuer_url.removeprefix("https://").rstrip("/")
        arn = f"arn:aws:iam::{self.account}:oidc-provider/{host}"
        self.providers[arn] = issuer_url
        return arn

    def find_oidc_provider_arn(self, issuer_url: str) -> str | None:
        for arn, url in self.providers.items():
            if url == issuer_url:
                return arn
        return None

    def delete_oidc_provider(self, provider_arn: str) -> None:
        self.calls.append("delete_oidc_provider")
        del self.providers[provider_arn]

    def create_public_bucket(self, bucket_name: str) -> None:
        self.calls.append("create_public_bucket")
        self.buckets[bucket_name] = {}

    def put_object(
        self, bucket_name: str, key: str, body: str, content_type: str = "application/json"
    ) -> None:
        self.calls.append("put_object")
        self.buckets[bucket_name][key] = body

    def delete_bucket(self, bucket_name: str) -> None:
        self.calls.append("delete_bucket")
        self.buckets.pop(bucket_name, None)

    def create_secret(self, secret_name: str, secret_value: str, description: str = "") -> str:
        self.calls.append("create_secret")
        arn = f"arn:aws:secretsmanager:{self.region}:{self.account}:secret:{secret_name}-AbCdEf"
        self.secrets[arn] = secret_value
        return arn

    def delete_secret(self, secret_id: str, force_delete: bool = True) -> None:
        self.calls.append("delete_secret")
        self.secrets.pop(secret_id, None)

    def list_roles(self) -> list[dict[str, Any]]:
        return list(self.roles)

    def get_role_tags(self, role_name: str) -> dict[str, str]:
        return dict(self.role_tags.get(role_name, {}))

    def add_role(self, role_name: str, tags: dict[str, str]) -> None:
        self.roles.append(
            {"RoleName": role_name, "Arn": f"arn:aws:iam::{self.account}:role/{role_name}"}
        )
        self.role_tags[role_name] = tags


# ==============================================================================
# Test Data Fixtures
# ==============================================================================


@pytest.fixture
def sample_cluster_json() -> dict[str, Any]:
    """Cluster as returned by the clusters management API."""
    return {
        "kind": "Cluster",
        "id": "1a2b3c4d5e6f7g8h9i0j",
        "name": "mycluster",
        "external_id": "3f1e0a1c-4b0e-4d7a-9f5c-2f8c0c6c7b1a",
        "state": "ready",
        "console": {"url": "https://console-openshift-console.apps.mycluster.abcd.p1.openshiftapps.com"},
        "aws": {"sts": {"oidc_config": {"id": "oidc-in-use"}}},
    }


@pytest.fixture
def sample_cluster(sample_cluster_json: dict[str, Any]) -> Cluster:
    return Cluster.from_api(sample_cluster_json)


@pytest.fixture
def github_idp() -> IdentityProvider:
    return IdentityProvider(
        id="idp-github",
        name="github-1",
        type="GithubIdentityProvider",
        mapping_method="claim",
        github={"client_id": "abc", "organizations": ["my-org"]},
    )


@pytest.fixture
def htpasswd_idp() -> IdentityProvider:
    return IdentityProvider(
        id="idp-htpasswd",
        name="htpasswd-1",
        type="HTPasswdIdentityProvider",
        mapping_method="claim",
    )


@pytest.fixture(scope="session")
def test_key_pair() -> KeyPair:
    """Key pair shared by tests; smaller than production keys to stay fast."""
    return generate_key_pair(key_size=2048)


# ==============================================================================
# Client Fixtures
# ==============================================================================


@pytest.fixture
def fake_ocm(sample_cluster: Cluster, github_idp: IdentityProvider) -> FakeOCMClient:
    return FakeOCMClient(clusters=[sample_cluster], idps={sample_cluster.id: [github_idp]})


@pytest.fixture
def fake_aws() -> FakeAWSClient:
    return FakeAWSClient()


@pytest.fixture
def fast_oidc(test_key_pair: KeyPair):
    """Skip the issuer TLS handshake and the 4096 bit key generation."""
    with (
        patch("rosa.services.oidc_config.fetch_thumbprint", return_value=TEST_THUMBPRINT) as thumbprint,
        patch("rosa.services.oidc_config.generate_key_pair", return_value=test_key_pair),
    ):
        yield thumbprint


@pytest.fixture
def rosa_context(fake_ocm: FakeOCMClient, fake_aws: FakeAWSClient) -> RosaContext:
    """CLI context wired to the in-memory clients."""
    return RosaContext(config=RosaConfig(), ocm_client=fake_ocm, aws_client=fake_aws)


# ==============================================================================
# Pytest Markers
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
