#!/usr/bin/env python3
"""
Basic usage examples for the Bridge Python client library.

This script demonstrates how to use the client to make authenticated
requests to a Bridge server. Set STORJ_BRIDGE to point it at a server other
than the public one.
"""

import logging
import sys

from bridge_client import BridgeClient, BridgeClientError, KeyPair
from bridge_client.utils import generate_token


def main():
    """Run basic usage examples."""

    print("=== Bridge Python Client Basic Usage Examples ===\n")

    # Create signing key pair
    print("1. Creating ECDSA key pair...")
    key_pair = KeyPair()
    print(f"   Public key: {key_pair.get_public_key()}")
    print(f"   Node ID: {key_pair.get_node_id()}\n")

    print("2. Generating a random token...")
    print(f"   Token: {generate_token()}\n")

    client = BridgeClient(key_pair=key_pair)
    print(f"3. Client created for: {client.base_uri}\n")

    try:
        # Public endpoint (no authentication)
        print("4. Fetching API info (no authentication required)...")
        info = client.get_info()
        print(f"   ✓ {info.get('info', {}).get('title', 'Unknown')}"
              f" {info.get('info', {}).get('version', '')}\n")

        # Signed GET request
        print("5. Listing buckets with a signed request...")
        try:
            buckets = client.get_buckets()
            print(f"   ✓ {len(buckets)} bucket(s)")
        except BridgeClientError as e:
            # An unregistered key pair is expected to be rejected
            print(f"   ✗ Request rejected: {e}")
        print()

        print("=== All Examples Completed ===")

    except BridgeClientError as e:
        print(f"Bridge Client Error: {e}")
        sys.exit(1)
    finally:
        # Clean up
        client.close()


def demonstrate_basic_auth(email, password):
    """Demonstrate basic authentication with an email/password pair."""

    print("\n=== Basic Auth Usage Example ===")

    # The password is hashed once here and never sent in plaintext
    with BridgeClient(basic_auth={'email': email, 'password': password}) as client:
        try:
            keys = client.get_public_keys()
            print(f"✓ {len(keys)} registered public key(s)")
        except BridgeClientError as e:
            print(f"✗ Request rejected: {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if "-v" in sys.argv else logging.WARNING)

    main()
    if len(sys.argv) >= 3 and not sys.argv[1].startswith("-"):
        demonstrate_basic_auth(sys.argv[1], sys.argv[2])
