"""TLS thumbprint of an OIDC issuer, as required by IAM OIDC providers.

IAM expects the SHA-1 fingerprint of the top intermediate CA of the chain the
issuer serves, which is the last certificate the server sends.
"""

import socket
import ssl
from urllib.parse import urlparse

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from rosa.core.exceptions import RosaError
from rosa.utils.logging import get_logger
from rosa.utils.retry import retry_on_exception

logger = get_logger(__name__)

CONNECT_TIMEOUT = 10


@retry_on_exception(
    exceptions=(OSError,), max_attempts=5, min_wait=2, max_wait=30, event="waiting_for_issuer"
)
def _peer_certificate_chain(host: str, port: int) -> list[bytes]:
    """DER certificates sent by the server, leaf first."""
    context = ssl.create_default_context()
    with socket.create_connection((host, port), timeout=CONNECT_TIMEOUT) as sock:
        with context.wrap_socket(sock, server_hostname=host) as tls:
            chain = tls.get_unverified_chain()
    if not chain:
        raise ssl.SSLError(f"No certificate presented by {host}")
    return list(chain)


def certificate_thumbprint(der: bytes) -> str:
    """Lowercase hex SHA-1 fingerprint of a DER certificate."""
    return x509.load_der_x509_certificate(der).fingerprint(hashes.SHA1()).hex()


def fetch_thumbprint(issuer_url: str) -> str:
    """Return the thumbprint of the top CA certificate served by the issuer.

    New issuers can take a while to answer, so connection failures are retried
    with exponential backoff before giving up.

    Raises:
        RosaError: If the issuer cannot be reached or serves an unreadable certificate
    """
    parsed = urlparse(issuer_url)
    host = parsed.hostname
    if parsed.scheme != "https" or not host:
        raise RosaError(f"Issuer URL '{issuer_url}' must be an https URL")

    try:
        chain = _peer_certificate_chain(host, parsed.port or 443)
    except OSError as e:
        logger.error("thumbprint_fetch_failed", issuer_url=issuer_url, error=str(e))
        raise RosaError(f"Failed to get thumbprint for '{issuer_url}': {e}") from e

    try:
        thumbprint = certificate_thumbprint(chain[-1])
    except ValueError as e:
        raise RosaError(f"Invalid certificate served by '{issuer_url}': {e}") from e

    logger.debug(
        "thumbprint_fetched", issuer_url=issuer_url, thumbprint=thumbprint, chain_length=len(chain)
    )
    return thumbprint
