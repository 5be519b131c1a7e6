"""Identity provider operations."""

from rosa.clients.ocm_client import OCMClient
from rosa.core.exceptions import ClusterNotReadyError, OCMError
from rosa.core.models import Cluster, IdentityProvider
from rosa.utils.logging import get_logger

logger = get_logger(__name__)


def list_identity_providers(
    ocm: OCMClient, cluster_key: str
) -> tuple[Cluster, list[IdentityProvider]]:
    """Fetch a ready cluster and the identity providers configured on it.

    Args:
        ocm: Clusters management client
        cluster_key: Cluster identifier, name or external identifier

    Returns:
        The cluster and its identity providers, in API order

    Raises:
        ClusterNotFoundError: If no cluster matches the key
        ClusterNotReadyError: If the cluster is not ready; providers are not fetched
        OCMError: If the cluster or the providers cannot be fetched
    """
    try:
        cluster = ocm.get_cluster(cluster_key)
    except OCMError as e:
        raise OCMError(
            f"Failed to get cluster '{cluster_key}': {e}", e.status_code, e.reason
        ) from e

    if not cluster.is_ready:
        raise ClusterNotReadyError(f"Cluster '{cluster_key}' is not yet ready")

    logger.debug("loading_identity_providers", cluster_key=cluster_key, cluster_id=cluster.id)
    try:
        idps = ocm.get_identity_providers(cluster.id)
    except OCMError as e:
        raise OCMError(
            f"Failed to get identity providers for cluster '{cluster_key}': {e}",
            e.status_code,
            e.reason,
        ) from e

    return cluster, idps
