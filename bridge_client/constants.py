"""
Constants for the Bridge client library.
"""

# HTTP headers carrying ECDSA request authentication
HEADER_PUBKEY = "x-pubkey"
HEADER_SIGNATURE = "x-signature"

# Base URI resolution
BRIDGE_ENV_VAR = "STORJ_BRIDGE"
DEFAULT_BASE_URI = "https://api.storj.io"

# Default configuration values
DEFAULT_CONFIG = {
    'base_uri': None,   # resolved from uri / environment / DEFAULT_BASE_URI
    'timeout': 30,      # HTTP timeout in seconds
}

# Methods whose signing payload is the query string vs. the JSON body
QUERY_METHODS = ('GET', 'DELETE')
BODY_METHODS = ('POST', 'PATCH')
SUPPORTED_METHODS = QUERY_METHODS + BODY_METHODS

# Bucket token operations
TOKEN_OPERATIONS = ('PUSH', 'PULL')

# Other constants
TOKEN_ENTROPY_BYTES = 512
DEFAULT_ENCODING = 'utf8'
