"""Key material and documents served by an OIDC issuer."""

import base64
import hashlib
import json
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

DISCOVERY_DOCUMENT_KEY = ".well-known/openid-configuration"
JWKS_KEY = "keys.json"
KEY_SIZE = 4096


@dataclass
class KeyPair:
    """PEM encoded RSA key pair."""

    private_pem: bytes
    public_pem: bytes


def generate_key_pair(key_size: int = KEY_SIZE) -> KeyPair:
    """Generate the RSA key pair used to sign service account tokens."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return KeyPair(private_pem=private_pem, public_pem=public_pem)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _int_to_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def key_id(public_pem: bytes) -> str:
    """Key identifier: URL-safe SHA-256 of the DER encoded public key."""
    public_key = serialization.load_pem_public_key(public_pem)
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return _b64url(hashlib.sha256(der).digest())


def build_jwks(public_pem: bytes) -> dict[str, Any]:
    """Build the JSON Web Key Set for a public key."""
    public_key = serialization.load_pem_public_key(public_pem)
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise ValueError("Only RSA public keys are supported")

    numbers = public_key.public_numbers()
    return {
        "keys": [
            {
                "use": "sig",
                "kty": "RSA",
                "kid": key_id(public_pem),
                "alg": "RS256",
                "n": _b64url(_int_to_bytes(numbers.n)),
                "e": _b64url(_int_to_bytes(numbers.e)),
            }
        ]
    }


def build_discovery_document(issuer_url: str) -> dict[str, Any]:
    """Build the OpenID discovery document for an issuer."""
    issuer_url = issuer_url.rstrip("/")
    return {
        "issuer": issuer_url,
        "jwks_uri": f"{issuer_url}/{JWKS_KEY}",
        "response_types_supported": ["id_token"],
        "subject_types_supported": ["public"],
        "id_token_signing_alg_values_supported": ["RS256"],
        "claims_supported": ["aud", "exp", "sub", "iat", "iss", "sub"],
    }


def to_json(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2)
