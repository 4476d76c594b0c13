"""
Bridge API client.

Maps Bridge REST endpoints to methods. Every request is authenticated by
bridge_client.auth before dispatch.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from .auth import OutgoingRequest, authenticate
from .config import ClientConfig
from .constants import BODY_METHODS, QUERY_METHODS, TOKEN_OPERATIONS
from .exceptions import APIError, InvalidArgumentError, TransportError
from .utils import sha256

logger = logging.getLogger(__name__)


def _segment(value: Any) -> str:
    """Percent-encode a value for use as a single path segment."""
    return quote(str(value), safe='@')


def _compact(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop optional parameters that were not supplied."""
    return {key: value for key, value in params.items() if value is not None}


class BridgeClient:
    """
    Client for the Bridge storage-coordination API.

    Requests are signed with an ECDSA key pair when one is configured,
    otherwise sent with HTTP basic auth when an email/password pair is
    configured, otherwise sent anonymously.
    """

    def __init__(self, uri: Optional[str] = None, key_pair=None, basic_auth=None, **config):
        """
        Initialize Bridge client.

        Args:
            uri: Bridge API root (defaults to $STORJ_BRIDGE, then https://api.storj.io)
            key_pair: Signer used for ECDSA authentication (e.g. KeyPair)
            basic_auth: {'email': ..., 'password': ...} for basic authentication
            **config: Configuration options (base_uri, timeout)
        """
        self.config = ClientConfig.resolve(uri, key_pair=key_pair, basic_auth=basic_auth, **config)

        # Create HTTP session
        self.session = requests.Session()

    @property
    def base_uri(self) -> str:
        return self.config.base_uri

    def _parse_body(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _request(self, method: str, path: str, params: Optional[Any] = None) -> Any:
        """
        Make an authenticated request to the Bridge.

        Args:
            method: HTTP method
            path: URL path (relative to the base URI)
            params: Query parameters (GET/DELETE) or JSON body (POST/PATCH)

        Returns:
            Parsed JSON response body, raw text for non-JSON bodies, or None

        Raises:
            UnsupportedMethodError: If method is not supported by the Bridge
            SigningFailedError: If the request could not be signed
            TransportError: If the HTTP request fails
            APIError: If the Bridge answers with a non-2xx status
        """
        request = OutgoingRequest(
            method=method,
            path=path,
            query=(params or {}) if method in QUERY_METHODS else {},
            body=params if method in BODY_METHODS else None,
        )
        prepared = authenticate(request, self.config)

        headers = dict(prepared.headers)
        data = prepared.data
        if data is not None:
            headers['Content-Type'] = 'application/json'

        logger.debug("%s %s", prepared.method, prepared.url)

        try:
            response = self.session.request(
                prepared.method,
                prepared.url,
                headers=headers,
                auth=prepared.auth,
                data=data,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        logger.debug("%s %s -> %s", prepared.method, prepared.url, response.status_code)

        body = self._parse_body(response)
        if not 200 <= response.status_code < 300:
            detail = body.get('error') if isinstance(body, dict) else body
            raise APIError(
                f"Bridge returned {response.status_code}: {detail or response.reason}",
                response.status_code,
                body
            )
        return body

    def get_info(self) -> Any:
        """Get the remote Bridge API documentation and version."""
        return self._request('GET', '/', {})

    def create_user(self, email: str, password: str, redirect: Optional[str] = None,
                    pubkey: Optional[str] = None) -> Any:
        """
        Register a user account.

        Args:
            email: Email address for the verification email
            password: Cleartext password (hashed before it is sent)
            redirect: URL to redirect to after verification
            pubkey: Optional hex-encoded ECDSA public key to register
        """
        return self._request('POST', '/users', _compact({
            'email': email,
            'password': sha256(password, 'utf8'),
            'redirect': redirect,
            'pubkey': pubkey,
        }))

    def destroy_user(self, email: str, redirect: Optional[str] = None) -> Any:
        """Deactivate a user account."""
        return self._request('DELETE', f"/users/{_segment(email)}", _compact({
            'redirect': redirect,
        }))

    def reset_password(self, email: str, password: str, redirect: Optional[str] = None) -> Any:
        """
        Request a password reset.

        Args:
            email: Email address of the user
            password: Cleartext password to reset to (hashed before it is sent)
            redirect: URL to redirect to after confirmation
        """
        return self._request('PATCH', f"/users/{_segment(email)}", _compact({
            'password': sha256(password, 'utf8'),
            'redirect': redirect,
        }))

    def get_public_keys(self) -> Any:
        """List the public keys registered for the caller."""
        return self._request('GET', '/keys', {})

    def add_public_key(self, pubkey: str) -> Any:
        """Register a hex-encoded secp256k1 public key for the caller."""
        return self._request('POST', '/keys', {'key': pubkey})

    def destroy_public_key(self, pubkey: str) -> Any:
        """Unregister a public key from the caller."""
        return self._request('DELETE', f"/keys/{_segment(pubkey)}", {})

    def get_buckets(self) -> Any:
        """List the caller's buckets."""
        return self._request('GET', '/buckets', {})

    def get_bucket_by_id(self, bucket_id: str) -> Any:
        """Get a bucket by its ID."""
        return self._request('GET', f"/buckets/{_segment(bucket_id)}", {})

    def create_bucket(self, data: Optional[Dict[str, Any]] = None) -> Any:
        """Create a bucket from the given bucket parameters."""
        return self._request('POST', '/buckets', data if data is not None else {})

    def destroy_bucket_by_id(self, bucket_id: str) -> Any:
        """Remove a bucket."""
        return self._request('DELETE', f"/buckets/{_segment(bucket_id)}", {})

    def update_bucket_by_id(self, bucket_id: str, updates: Dict[str, Any]) -> Any:
        """Update a bucket with the given parameters."""
        return self._request('PATCH', f"/buckets/{_segment(bucket_id)}", updates)

    def list_files_in_bucket(self, bucket_id: str) -> Any:
        """List the files stored in a bucket."""
        return self._request('GET', f"/buckets/{_segment(bucket_id)}/files", {})

    def create_token(self, bucket_id: str, operation: str) -> Any:
        """
        Create a bucket token.

        Args:
            bucket_id: Unique bucket ID
            operation: PUSH or PULL

        Raises:
            InvalidArgumentError: If operation is not PUSH or PULL
        """
        if operation not in TOKEN_OPERATIONS:
            raise InvalidArgumentError(
                f"operation must be one of {', '.join(TOKEN_OPERATIONS)}, got {operation!r}"
            )
        return self._request('POST', f"/buckets/{_segment(bucket_id)}/tokens", {
            'operation': operation,
        })

    def remove_file_from_bucket(self, bucket_id: str, file_id: str) -> Any:
        """Remove a file from a bucket."""
        return self._request(
            'DELETE',
            f"/buckets/{_segment(bucket_id)}/files/{_segment(file_id)}",
            {}
        )

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
