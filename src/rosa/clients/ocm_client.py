"""OpenShift Cluster Manager (OCM) API client."""

import re
from collections.abc import Generator
from typing import Any

import httpx

from rosa import __version__
from rosa.core.config import DEFAULT_TOKEN_URL, OCMConfig
from rosa.core.exceptions import (
    ClusterNotFoundError,
    ConfigurationError,
    OCMError,
    OIDCConfigNotFoundError,
    ValidationError,
)
from rosa.core.models import Cluster, IdentityProvider, OIDCConfig
from rosa.utils.logging import get_logger

logger = get_logger(__name__)

CS_API_BASE = "/api/clusters_mgmt/v1"
PAGE_SIZE = 100

CLUSTER_KEY_RE = re.compile(r"^[\w-]+$")


class OCMTokenAuth(httpx.Auth):
    """Bearer authentication backed by an SSO offline token.

    The offline token is exchanged for an access token on first use and again
    whenever the API answers 401.
    """

    requires_response_body = True

    def __init__(
        self,
        token_url: str,
        client_id: str,
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.refresh_token = refresh_token
        self.access_token = access_token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.access_token is None:
            yield from self._refresh()

        request.headers["Authorization"] = f"Bearer {self.access_token}"
        response = yield request

        if response.status_code == httpx.codes.UNAUTHORIZED and self.refresh_token:
            logger.debug("ocm_access_token_expired")
            yield from self._refresh()
            request.headers["Authorization"] = f"Bearer {self.access_token}"
            yield request

    def _refresh(self) -> Generator[httpx.Request, httpx.Response, None]:
        if not self.refresh_token:
            raise ConfigurationError("No OCM token configured, set OCM_TOKEN or ocm.token")

        response = yield httpx.Request(
            "POST",
            self.token_url,
            data={
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "refresh_token": self.refresh_token,
            },
        )
        if response.status_code != httpx.codes.OK:
            logger.error("ocm_token_refresh_failed", status_code=response.status_code)
            raise OCMError(
                f"Failed to refresh OCM access token: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        payload = response.json()
        self.access_token = payload["access_token"]
        if payload.get("refresh_token"):
            self.refresh_token = payload["refresh_token"]
        logger.debug("ocm_access_token_refreshed")


def _error_reason(response: httpx.Response) -> str:
    """Extract the human readable reason from an OCM error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    return f"HTTP {response.status_code}"


class OCMClient:
    """Synchronous client for the clusters management API."""

    def __init__(
        self,
        url: str = "https://api.openshift.com",
        token: str | None = None,
        access_token: str | None = None,
        token_url: str = DEFAULT_TOKEN_URL,
        client_id: str = "cloud-services",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize OCM client.

        Args:
            url: API base URL
            token: SSO offline token
            access_token: Ready-to-use access token (optional)
            token_url: SSO token endpoint
            client_id: SSO client identifier
            timeout: Request timeout in seconds
            transport: Custom httpx transport (optional)

        Raises:
            ConfigurationError: If no credentials are provided
        """
        if not token and not access_token:
            raise ConfigurationError(
                "Not logged in to OCM, set OCM_TOKEN or ocm.token in the configuration file"
            )

        self.url = url
        self.client = httpx.Client(
            base_url=url,
            auth=OCMTokenAuth(
                token_url=token_url,
                client_id=client_id,
                refresh_token=token,
                access_token=access_token,
            ),
            headers={"User-Agent": f"rosa-cli/{__version__}"},
            timeout=timeout,
            transport=transport,
        )
        logger.debug("ocm_client_initialized", url=url)

    @classmethod
    def from_config(cls, config: OCMConfig) -> "OCMClient":
        return cls(
            url=config.url,
            token=config.token,
            access_token=config.access_token,
            token_url=config.token_url,
            client_id=config.client_id,
            timeout=config.timeout,
        )

    def close(self) -> None:
        self.client.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            OCMError: On transport failures, non-2xx responses and non-JSON bodies
        """
        logger.debug("ocm_request", method=method, path=path, params=params)
        try:
            response = self.client.request(method, f"{CS_API_BASE}{path}", params=params, json=json)
        except httpx.HTTPError as e:
            logger.error("ocm_request_failed", method=method, path=path, error=str(e))
            raise OCMError(f"Can't send request to {self.url}: {e}") from e

        if response.is_error:
            reason = _error_reason(response)
            logger.debug(
                "ocm_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                reason=reason,
            )
            raise OCMError(reason, status_code=response.status_code, reason=reason)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.debug("ocm_invalid_body", method=method, path=path, status_code=response.status_code)
            raise OCMError(
                f"Invalid response from {self.url} to {method} {path}: expected JSON",
                status_code=response.status_code,
            ) from e

    def _list(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Fetch every page of a collection."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            body = self._request("GET", path, params={**(params or {}), "page": page, "size": PAGE_SIZE})
            page_items = body.get("items", [])
            items.extend(page_items)

            total = body.get("total")
            if len(page_items) < PAGE_SIZE or (total is not None and len(items) >= total):
                return items
            page += 1

    def get_cluster(self, cluster_key: str) -> Cluster:
        """Find a cluster by identifier, name or external identifier.

        Raises:
            ValidationError: If the key has invalid characters
            ClusterNotFoundError: If no cluster matches
            OCMError: If the lookup fails or is ambiguous
        """
        if not CLUSTER_KEY_RE.match(cluster_key):
            raise ValidationError(
                f"Cluster name, identifier or external identifier '{cluster_key}' isn't valid: "
                "it must contain only letters, digits, dashes and underscores"
            )

        query = (
            f"id = '{cluster_key}' or name = '{cluster_key}' or external_id = '{cluster_key}'"
        )
        body = self._request("GET", "/clusters", params={"search": query, "size": 1})

        total = body.get("total", len(body.get("items", [])))
        if total == 0:
            raise ClusterNotFoundError(
                f"There is no cluster with identifier or name '{cluster_key}'"
            )
        if total > 1:
            raise OCMError(f"There are {total} clusters with identifier or name '{cluster_key}'")

        cluster = Cluster.from_api(body["items"][0])
        logger.debug("cluster_fetched", cluster_key=cluster_key, cluster_id=cluster.id)
        return cluster

    def get_identity_providers(self, cluster_id: str) -> list[IdentityProvider]:
        """List the identity providers configured on a cluster."""
        items = self._list(f"/clusters/{cluster_id}/identity_providers")
        return [IdentityProvider.model_validate(item) for item in items]

    def list_oidc_configs(self) -> list[OIDCConfig]:
        """List the OIDC configs visible to the current account."""
        return [OIDCConfig.model_validate(item) for item in self._list("/oidc_configs")]

    def get_oidc_config(self, oidc_config_id: str) -> OIDCConfig:
        """Get an OIDC config by identifier.

        Raises:
            OIDCConfigNotFoundError: If the config does not exist
        """
        try:
            body = self._request("GET", f"/oidc_configs/{oidc_config_id}")
        except OCMError as e:
            if e.status_code == httpx.codes.NOT_FOUND:
                raise OIDCConfigNotFoundError(f"OIDC config '{oidc_config_id}' not found") from e
            raise
        return OIDCConfig.model_validate(body)

    def create_oidc_config(
        self,
        managed: bool,
        issuer_url: str | None = None,
        secret_arn: str | None = None,
        installer_role_arn: str | None = None,
    ) -> OIDCConfig:
        """Register an OIDC config.

        Managed configs only carry the flag; unmanaged configs need the issuer
        URL, the private key secret and the installer role.
        """
        payload: dict[str, Any] = {"managed": managed}
        if not managed:
            payload.update(
                issuer_url=issuer_url,
                secret_arn=secret_arn,
                installer_role_arn=installer_role_arn,
            )

        body = self._request("POST", "/oidc_configs", json=payload)
        config = OIDCConfig.model_validate(body)
        logger.info("oidc_config_created", oidc_config_id=config.id, managed=managed)
        return config

    def delete_oidc_config(self, oidc_config_id: str) -> None:
        try:
            self._request("DELETE", f"/oidc_configs/{oidc_config_id}")
        except OCMError as e:
            if e.status_code == httpx.codes.NOT_FOUND:
                raise OIDCConfigNotFoundError(f"OIDC config '{oidc_config_id}' not found") from e
            raise
        logger.info("oidc_config_deleted", oidc_config_id=oidc_config_id)

    def has_clusters_using_oidc_config(self, oidc_config_id: str) -> bool:
        body = self._request(
            "GET",
            "/clusters",
            params={"search": f"aws.sts.oidc_config.id = '{oidc_config_id}'", "size": 1},
        )
        return body.get("total", len(body.get("items", []))) > 0
