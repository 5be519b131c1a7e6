"""Integration test fixtures and configuration."""

import os
import shutil

import boto3
import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from rosa.e2e.client import RosaClient


@pytest.fixture(scope="session", autouse=True)
def skip_unless_enabled():
    """Skip every end-to-end test unless explicitly enabled."""
    if os.getenv("ROSA_E2E") != "1":
        pytest.skip("End-to-end tests disabled. Set ROSA_E2E=1 to run them.")
    if not os.getenv("OCM_TOKEN"):
        pytest.skip("OCM token not available. Set OCM_TOKEN environment variable.")


@pytest.fixture(scope="session")
def skip_if_no_aws_credentials():
    """Skip test if AWS credentials are not available."""
    try:
        boto3.client("sts").get_caller_identity()
    except (NoCredentialsError, ClientError) as e:
        pytest.skip(f"AWS credentials not available: {e}")


@pytest.fixture(scope="session")
def rosa_binary() -> str:
    """Path of the CLI under test (ROSA_BINARY, default `rosa` on PATH)."""
    binary = os.getenv("ROSA_BINARY", "rosa")
    if shutil.which(binary) is None:
        pytest.skip(f"'{binary}' not found. Install the package or set ROSA_BINARY.")
    return binary


@pytest.fixture
def rosa_client(rosa_binary: str, skip_if_no_aws_credentials) -> RosaClient:
    return RosaClient(binary=rosa_binary)


@pytest.fixture
def account_role_prefix() -> str:
    """Prefix of existing account roles (ROSA_E2E_ACCOUNT_ROLE_PREFIX)."""
    prefix = os.getenv("ROSA_E2E_ACCOUNT_ROLE_PREFIX")
    if not prefix:
        pytest.skip("Account roles not available. Set ROSA_E2E_ACCOUNT_ROLE_PREFIX.")
    return prefix


@pytest.fixture
def hosted_cp() -> bool:
    """Whether to use hosted control plane account roles (ROSA_E2E_HOSTED_CP=1)."""
    return os.getenv("ROSA_E2E_HOSTED_CP") == "1"


@pytest.fixture
def cluster_id() -> str:
    """Ready cluster to inspect (CLUSTER_ID)."""
    cluster = os.getenv("CLUSTER_ID")
    if not cluster:
        pytest.skip("Cluster not available. Set CLUSTER_ID environment variable.")
    return cluster
