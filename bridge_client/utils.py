"""
Hashing and helper utilities for the Bridge client library.

Digest functions accept ``str`` or ``bytes``. A ``str`` is converted to bytes
with the declared encoding (Node-style names such as ``utf8``, ``hex``,
``base64`` and ``binary`` are understood); ``bytes`` input is hashed as is.
Every digest is returned as a lowercase hex string.
"""

import base64
import hashlib
import math
import numbers
import re
import secrets
from typing import Any, Mapping, Union

import whirlpool as _whirlpool

from .constants import DEFAULT_ENCODING, TOKEN_ENTROPY_BYTES
from .exceptions import (
    InvalidArgumentError,
    InvalidInputEncodingError,
    UnsupportedDigestError
)

Data = Union[str, bytes, bytearray, memoryview]

# Node encoding names mapped to Python codecs
_CODECS = {
    'utf8': 'utf-8',
    'binary': 'latin-1',
    'latin1': 'latin-1',
    'ucs2': 'utf-16-le',
    'ucs-2': 'utf-16-le',
    'utf16le': 'utf-16-le',
    'utf-16le': 'utf-16-le',
}

_HEXA_RE = re.compile(r'[0-9a-fA-F]+')


def _to_bytes(data: Data, encoding: str) -> bytes:
    """Convert hash input to bytes according to ``encoding``."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if not isinstance(data, str):
        raise InvalidInputEncodingError(
            f"Cannot hash value of type {type(data).__name__}"
        )

    name = (encoding or DEFAULT_ENCODING).lower()
    try:
        if name == 'hex':
            return bytes.fromhex(data)
        if name == 'base64':
            return base64.b64decode(data, validate=True)
        return data.encode(_CODECS.get(name, name))
    except (ValueError, LookupError) as e:
        raise InvalidInputEncodingError(
            f"Input cannot be decoded as {encoding!r}: {e}"
        ) from e


def _digest(algorithm: str, data: Data, encoding: str) -> str:
    payload = _to_bytes(data, encoding)
    try:
        h = hashlib.new(algorithm)
    except ValueError as e:
        raise UnsupportedDigestError(
            f"Hash backend does not provide {algorithm}"
        ) from e
    h.update(payload)
    return h.hexdigest()


def sha1(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """Return the SHA-1 hex digest of the input."""
    return _digest('sha1', data, encoding)


def sha256(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """Return the SHA-256 hex digest of the input."""
    return _digest('sha256', data, encoding)


def sha512(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """Return the SHA-512 hex digest of the input."""
    return _digest('sha512', data, encoding)


def rmd160(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """Return the RIPEMD-160 hex digest of the input."""
    return _digest('ripemd160', data, encoding)


def whirlpool(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Return the Whirlpool hex digest of the input.

    Computed with the whirlpool package, since hashlib only offers it
    when OpenSSL's legacy provider is loaded.
    """
    return _whirlpool.new(_to_bytes(data, encoding)).hexdigest()


def rmd160sha256(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Return RIPEMD-160 of the raw SHA-256 digest of the input.

    Used to derive compact identifiers such as node IDs and tokens.
    """
    return rmd160(bytes.fromhex(sha256(data, encoding)))


def sha1whirlpool(data: Data, encoding: str = DEFAULT_ENCODING) -> str:
    """Return SHA-1 of the raw Whirlpool digest of the input."""
    return sha1(bytes.fromhex(whirlpool(data, encoding)))


def generate_token() -> str:
    """Generate a random 160-bit token as 40 lowercase hex characters."""
    return rmd160sha256(secrets.token_bytes(TOKEN_ENTROPY_BYTES))


def is_hexa_string(value: Any) -> bool:
    """Return True if value is a non-empty string of hexadecimal digits."""
    if not isinstance(value, str):
        return False
    return _HEXA_RE.fullmatch(value) is not None


def get_next_power_of_two(n: Union[int, float]) -> Union[int, float]:
    """
    Return the smallest power of two greater than or equal to n.

    Raises:
        InvalidArgumentError: If n is not a finite number greater than zero
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Real):
        raise InvalidArgumentError(f"Expected a number, got {type(n).__name__}")
    if isinstance(n, int):
        if n <= 0:
            raise InvalidArgumentError(f"Expected a positive number, got {n}")
        return 1 << (n - 1).bit_length()
    if not math.isfinite(n) or n <= 0:
        raise InvalidArgumentError(f"Expected a finite positive number, got {n}")
    return 2 ** math.ceil(math.log2(n))


def get_contact_url(contact: Mapping[str, Any]) -> str:
    """Return the storj:// URL of a contact with address, port and nodeID."""
    try:
        return f"storj://{contact['address']}:{contact['port']}/{contact['nodeID']}"
    except KeyError as e:
        raise InvalidArgumentError(f"Contact is missing {e.args[0]!r}") from e
