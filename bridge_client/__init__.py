"""
Bridge Client Library

A Python client for the Bridge storage-coordination API. Requests are
authenticated with secp256k1 ECDSA signatures or with HTTP basic auth.

Example usage:
    from bridge_client import BridgeClient, KeyPair

    client = BridgeClient("https://api.storj.io", key_pair=KeyPair())
    buckets = client.get_buckets()
"""

from .client import BridgeClient
from .keypair import KeyPair, Signer
from .config import BasicAuthCredential, ClientConfig, KeyPairCredential
from .auth import AuthenticatedRequest, OutgoingRequest, authenticate
from .exceptions import (
    BridgeClientError,
    InvalidInputEncodingError,
    InvalidArgumentError,
    UnsupportedDigestError,
    SigningFailedError,
    UnsupportedMethodError,
    ConfigurationError,
    TransportError,
    APIError
)
from .constants import (
    HEADER_PUBKEY,
    HEADER_SIGNATURE,
    BRIDGE_ENV_VAR,
    DEFAULT_BASE_URI,
    DEFAULT_CONFIG
)

__version__ = "1.0.0"
__all__ = [
    "BridgeClient",
    "KeyPair",
    "Signer",
    "BasicAuthCredential",
    "ClientConfig",
    "KeyPairCredential",
    "AuthenticatedRequest",
    "OutgoingRequest",
    "authenticate",
    "BridgeClientError",
    "InvalidInputEncodingError",
    "InvalidArgumentError",
    "UnsupportedDigestError",
    "SigningFailedError",
    "UnsupportedMethodError",
    "ConfigurationError",
    "TransportError",
    "APIError",
    "HEADER_PUBKEY",
    "HEADER_SIGNATURE",
    "BRIDGE_ENV_VAR",
    "DEFAULT_BASE_URI",
    "DEFAULT_CONFIG"
]
