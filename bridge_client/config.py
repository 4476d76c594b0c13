"""
Client configuration and credentials.

A ClientConfig is resolved once when a client is constructed and is
read-only afterwards, so it may be shared by any number of in-flight
requests.
"""

import logging
import numbers
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .constants import BRIDGE_ENV_VAR, DEFAULT_BASE_URI, DEFAULT_CONFIG
from .exceptions import ConfigurationError
from .keypair import Signer
from .utils import sha256

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPairCredential:
    """Authenticates requests with ECDSA signatures from a Signer."""
    signer: Signer

    @property
    def public_key(self) -> str:
        return self.signer.get_public_key()

    def sign(self, message: bytes) -> str:
        return self.signer.sign(message)


@dataclass(frozen=True)
class BasicAuthCredential:
    """
    Authenticates requests with HTTP basic auth.

    Only the SHA-256 digest of the password is kept; use from_password()
    to build one from a plaintext password.
    """
    email: str
    password_digest: str = field(repr=False)

    @classmethod
    def from_password(cls, email: str, password: str) -> "BasicAuthCredential":
        return cls(email=email, password_digest=sha256(password, 'utf8'))


Credential = Union[KeyPairCredential, BasicAuthCredential]


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client configuration.

    Attributes:
        base_uri: Bridge API root, without trailing slash
        credential: Configured credential, or None for anonymous requests
        timeout: HTTP timeout in seconds
    """
    base_uri: str
    credential: Optional[Credential] = None
    timeout: float = DEFAULT_CONFIG['timeout']

    def __post_init__(self):
        if not isinstance(self.base_uri, str) or not self.base_uri:
            raise ConfigurationError("base_uri cannot be empty")

        if self.credential is not None and not isinstance(
                self.credential, (KeyPairCredential, BasicAuthCredential)):
            raise ConfigurationError(
                f"Unsupported credential type {type(self.credential).__name__}"
            )

        if (isinstance(self.timeout, bool) or not isinstance(self.timeout, numbers.Real)
                or self.timeout <= 0):
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def resolve(cls, uri: Optional[str] = None, key_pair: Any = None,
                basic_auth: Any = None, **options) -> "ClientConfig":
        """
        Build a configuration from caller options merged over the defaults.

        The base URI is taken from, in order: the ``base_uri`` option, the
        ``uri`` argument, the STORJ_BRIDGE environment variable, and
        finally the hardcoded default.

        Args:
            uri: Bridge API root
            key_pair: Signer (e.g. a KeyPair) or KeyPairCredential
            basic_auth: {'email': ..., 'password': ...} or BasicAuthCredential
            **options: Configuration options (base_uri, timeout)

        Raises:
            ConfigurationError: If any option is invalid
        """
        unknown = set(options) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown options: {', '.join(sorted(unknown))}")

        # Merge default config with user overrides
        config = {**DEFAULT_CONFIG, **options}

        base_uri = (config['base_uri'] or uri
                    or os.environ.get(BRIDGE_ENV_VAR) or DEFAULT_BASE_URI)
        if not isinstance(base_uri, str):
            raise ConfigurationError("base_uri must be a string")

        return cls(
            base_uri=base_uri.rstrip('/'),
            credential=_resolve_credential(key_pair, basic_auth),
            timeout=config['timeout'],
        )


def _resolve_credential(key_pair: Any, basic_auth: Any) -> Optional[Credential]:
    # A key pair always wins over basic auth
    if key_pair is not None:
        if basic_auth is not None:
            logger.debug("Both key pair and basic auth configured, using key pair")
        if isinstance(key_pair, KeyPairCredential):
            return key_pair
        if not isinstance(key_pair, Signer):
            raise ConfigurationError("key_pair must provide get_public_key() and sign()")
        return KeyPairCredential(signer=key_pair)

    if basic_auth is None:
        return None
    if isinstance(basic_auth, BasicAuthCredential):
        return basic_auth
    if not isinstance(basic_auth, Mapping):
        raise ConfigurationError("basic_auth must be a mapping with email and password")

    email = basic_auth.get('email')
    password = basic_auth.get('password')
    if not email or password is None:
        raise ConfigurationError("basic_auth requires email and password")
    return BasicAuthCredential.from_password(email, password)
