"""
Request authentication for the Bridge API.

Every outgoing request passes through authenticate(), which attaches either
an ECDSA signature (x-pubkey / x-signature headers) or HTTP basic auth,
depending on the configured credential, and never both.

Signature contract format:
    {method}\\n{uri}\\n{payload}

Where:
    - method: GET, POST, PATCH or DELETE
    - uri: absolute request URL without query string
    - payload: canonical query string for GET/DELETE, compact JSON body
      for POST/PATCH
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from .config import BasicAuthCredential, ClientConfig, KeyPairCredential
from .constants import (
    BODY_METHODS,
    HEADER_PUBKEY,
    HEADER_SIGNATURE,
    QUERY_METHODS,
    SUPPORTED_METHODS
)
from .exceptions import SigningFailedError, UnsupportedMethodError

logger = logging.getLogger(__name__)

# Characters left unescaped by JavaScript's encodeURIComponent, on top of
# the ones quote() never escapes
_QUERY_SAFE = "!'()*"


@dataclass(frozen=True)
class OutgoingRequest:
    """
    Plain description of a Bridge API call.

    ``query`` is used by GET and DELETE, ``body`` by POST and PATCH.
    """
    method: str
    path: str
    query: Dict[str, Any] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class AuthenticatedRequest:
    """Request ready for dispatch, carrying its authentication."""
    method: str
    uri: str
    query: Dict[str, Any] = field(default_factory=dict)
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    auth: Optional[Tuple[str, str]] = field(default=None, repr=False)

    @property
    def query_string(self) -> str:
        if self.method not in QUERY_METHODS:
            return ''
        return serialize_query(self.query)

    @property
    def url(self) -> str:
        qs = self.query_string
        return f"{self.uri}?{qs}" if qs else self.uri

    @property
    def data(self) -> Optional[bytes]:
        if self.method not in BODY_METHODS or self.body is None:
            return None
        return serialize_body(self.body)


def _query_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def serialize_query(query: Optional[Dict[str, Any]]) -> str:
    """
    Serialize query parameters canonically.

    Keys are sorted, values are percent-encoded like encodeURIComponent
    does it, and list values repeat their key.
    """
    if not query:
        return ''

    pairs = []
    for key in sorted(query, key=str):
        value = query[key]
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            pairs.append(
                f"{quote(str(key), safe=_QUERY_SAFE)}="
                f"{quote(_query_value(item), safe=_QUERY_SAFE)}"
            )
    return '&'.join(pairs)


def serialize_body(body: Any) -> bytes:
    """Serialize a JSON body compactly, keeping key order."""
    if body is None:
        return b''
    return json.dumps(body, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def build_uri(base_uri: str, path: str) -> str:
    """Join the API root and an API-relative path."""
    if not path.startswith('/'):
        path = '/' + path
    return base_uri.rstrip('/') + path


def signing_payload(method: str, query: Optional[Dict[str, Any]], body: Any) -> str:
    """Return the part of the request covered by the signature."""
    if method in QUERY_METHODS:
        return serialize_query(query)
    return serialize_body(body).decode('utf-8')


def build_contract(method: str, uri: str, payload: str) -> str:
    """Build the exact string that is signed for a request."""
    return '\n'.join([method, uri, payload])


def authenticate(request: OutgoingRequest, config: ClientConfig) -> AuthenticatedRequest:
    """
    Attach authentication to an outgoing request.

    The input request is left untouched; a new AuthenticatedRequest is
    returned.

    Args:
        request: Request to authenticate
        config: Client configuration holding the credential

    Returns:
        AuthenticatedRequest ready for dispatch

    Raises:
        UnsupportedMethodError: If the method is not GET, POST, PATCH or DELETE
        SigningFailedError: If the signer raises
    """
    method = request.method.upper() if isinstance(request.method, str) else request.method
    if method not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(f"Unsupported HTTP method: {request.method!r}")

    uri = build_uri(config.base_uri, request.path)
    credential = config.credential
    headers = {}
    auth = None

    if isinstance(credential, KeyPairCredential):
        payload = signing_payload(method, request.query, request.body)
        contract = build_contract(method, uri, payload)

        logger.debug("Parameter for ECDSA signature: %s\n%s\n%s", method, uri, payload)

        try:
            public_key = credential.public_key
            signature = credential.sign(contract.encode('utf-8'))
        except Exception as e:
            raise SigningFailedError(f"Failed to sign {method} {uri}: {e}") from e

        headers = {
            HEADER_PUBKEY: public_key,
            HEADER_SIGNATURE: signature,
        }
    elif isinstance(credential, BasicAuthCredential):
        auth = (credential.email, credential.password_digest)

    return AuthenticatedRequest(
        method=method,
        uri=uri,
        query=dict(request.query or {}),
        body=request.body,
        headers=headers,
        auth=auth,
    )
