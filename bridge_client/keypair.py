"""
ECDSA key pairs for Bridge request signing.

Requests are signed with secp256k1 ECDSA over SHA-256. Signatures are
DER-encoded and sent as hex; public keys are sent as compressed SEC1 points.
"""

from typing import Optional, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .exceptions import InvalidArgumentError
from .utils import is_hexa_string, rmd160sha256

CURVE = ec.SECP256K1()


@runtime_checkable
class Signer(Protocol):
    """
    Signing capability used to authenticate requests.

    Any object with these two methods can back a KeyPairCredential, so the
    signature backend can be swapped without touching request building.
    """

    def get_public_key(self) -> str:
        ...

    def sign(self, message: bytes) -> str:
        ...


class KeyPair:
    """
    secp256k1 key pair.

    Generates a fresh key when no private key is supplied.
    """

    def __init__(self, private_key: Optional[str] = None):
        """
        Initialize key pair.

        Args:
            private_key: 64 character hex-encoded private key (optional)

        Raises:
            InvalidArgumentError: If the private key is malformed or out of range
        """
        if private_key is None:
            self._private_key = ec.generate_private_key(CURVE)
            return

        if not is_hexa_string(private_key) or len(private_key) != 64:
            raise InvalidArgumentError("private_key must be 64 hex characters")
        try:
            self._private_key = ec.derive_private_key(int(private_key, 16), CURVE)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid private key: {e}") from e

    def get_private_key(self) -> str:
        """Return the hex-encoded private key."""
        return format(self._private_key.private_numbers().private_value, '064x')

    def get_public_key(self) -> str:
        """Return the hex-encoded compressed public key."""
        point = self._private_key.public_key().public_bytes(
            Encoding.X962, PublicFormat.CompressedPoint
        )
        return point.hex()

    def get_node_id(self) -> str:
        """Return the node ID derived from the public key."""
        return rmd160sha256(self.get_public_key(), 'hex')

    def sign(self, message: bytes) -> str:
        """
        Sign a message.

        Args:
            message: Bytes to sign (str is encoded as UTF-8)

        Returns:
            Hex-encoded DER signature
        """
        if isinstance(message, str):
            message = message.encode('utf-8')
        signature = self._private_key.sign(message, ec.ECDSA(hashes.SHA256()))
        return signature.hex()

    def verify(self, message: bytes, signature: str) -> bool:
        """Verify a hex-encoded DER signature made by this key pair."""
        if isinstance(message, str):
            message = message.encode('utf-8')
        try:
            self._private_key.public_key().verify(
                bytes.fromhex(signature), message, ec.ECDSA(hashes.SHA256())
            )
            return True
        except (InvalidSignature, ValueError):
            return False

    def __repr__(self):
        return f"KeyPair(public_key={self.get_public_key()!r})"
