"""
Integration tests for the Bridge client against a local verifying server.

The server checks ECDSA signatures and basic auth credentials the way the
Bridge does, independently of the client's own code.
"""

import base64
import hashlib
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from bridge_client import APIError, BridgeClient, KeyPair

EMAIL = "tester@example.com"
PASSWORD = "python-client-demo-secret"


def _verify_signature(pubkey: str, signature: str, contract: bytes) -> bool:
    try:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(
            ec.SECP256K1(), bytes.fromhex(pubkey)
        )
        public_key.verify(bytes.fromhex(signature), contract, ec.ECDSA(hashes.SHA256()))
        return True
    except (InvalidSignature, ValueError):
        return False


class BridgeHandler(BaseHTTPRequestHandler):
    """Minimal Bridge that authenticates and echoes requests."""

    def log_message(self, format, *args):
        pass

    def _send(self, status, payload):
        body = json.dumps(payload).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _authenticate(self, raw_body):
        parts = urlsplit(self.path)
        pubkey = self.headers.get('x-pubkey')
        signature = self.headers.get('x-signature')

        if pubkey and signature:
            uri = f"http://{self.headers['Host']}{parts.path}"
            payload = parts.query if self.command in ('GET', 'DELETE') else raw_body.decode('utf-8')
            contract = '\n'.join([self.command, uri, payload]).encode('utf-8')
            return 'ecdsa' if _verify_signature(pubkey, signature, contract) else None

        authorization = self.headers.get('Authorization', '')
        if authorization.startswith('Basic '):
            user, _, password = base64.b64decode(authorization[6:]).decode('utf-8').partition(':')
            expected = hashlib.sha256(PASSWORD.encode('utf-8')).hexdigest()
            return 'basic' if (user, password) == (EMAIL, expected) else None

        return 'anonymous'

    def _handle(self):
        length = int(self.headers.get('Content-Length') or 0)
        raw_body = self.rfile.read(length) if length else b''
        parts = urlsplit(self.path)

        if parts.path == '/':
            return self._send(200, {'info': {'title': 'Bridge', 'version': '1.0.0'}})

        scheme = self._authenticate(raw_body)
        if scheme in (None, 'anonymous'):
            return self._send(401, {'error': 'Not authorized'})

        if parts.path.startswith('/buckets/missing'):
            return self._send(404, {'error': 'Bucket not found'})

        if self.command == 'DELETE':
            self.send_response(204)
            self.end_headers()
            return

        self._send(200, {
            'method': self.command,
            'path': parts.path,
            'query': {k: v[0] for k, v in parse_qs(parts.query).items()},
            'body': json.loads(raw_body) if raw_body else None,
            'auth': scheme,
        })

    do_GET = _handle
    do_POST = _handle
    do_PATCH = _handle
    do_DELETE = _handle


class TestIntegration:
    """Integration tests with a local Bridge."""

    @pytest.fixture(scope="class")
    def server_url(self):
        """Start local Bridge server for integration tests."""
        server = ThreadingHTTPServer(('127.0.0.1', 0), BridgeHandler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()

        yield f"http://127.0.0.1:{server.server_address[1]}"

        # Cleanup: stop the server
        server.shutdown()
        server.server_close()

    @pytest.fixture
    def client(self, server_url):
        """Create ECDSA authenticated client."""
        with BridgeClient(server_url, key_pair=KeyPair()) as client:
            yield client

    @pytest.fixture
    def basic_client(self, server_url):
        with BridgeClient(server_url, basic_auth={'email': EMAIL, 'password': PASSWORD}) as client:
            yield client

    def test_public_info_endpoint(self, server_url):
        """Test public info endpoint (no auth required)."""
        with BridgeClient(server_url) as client:
            info = client.get_info()

        assert info['info']['title'] == 'Bridge'

    def test_protected_endpoint_without_auth(self, server_url):
        with BridgeClient(server_url) as client:
            with pytest.raises(APIError) as exc_info:
                client.get_buckets()

        assert exc_info.value.status_code == 401

    def test_signed_get(self, client):
        data = client.list_files_in_bucket('bucket1')

        assert data['auth'] == 'ecdsa'
        assert data['path'] == '/buckets/bucket1/files'

    def test_signed_post(self, client):
        """Test authenticated POST request."""
        data = client.create_bucket({'name': 'photos', 'storage': 10, 'transfer': 30})

        assert data['auth'] == 'ecdsa'
        assert data['body'] == {'name': 'photos', 'storage': 10, 'transfer': 30}

    def test_signed_post_unicode(self, client):
        data = client.create_bucket({'name': 'fotograf\xeda'})

        assert data['auth'] == 'ecdsa'
        assert data['body'] == {'name': 'fotograf\xeda'}

    def test_signed_patch(self, client):
        data = client.update_bucket_by_id('bucket1', {'name': 'renamed'})

        assert data['auth'] == 'ecdsa'
        assert data['method'] == 'PATCH'

    def test_signed_delete_with_query(self, client):
        """Test DELETE signs the query string actually sent."""
        assert client.destroy_user(EMAIL, redirect='https://example.com/bye?x=1 2') is None

    def test_signed_create_token(self, client):
        data = client.create_token('bucket1', 'PULL')

        assert data['body'] == {'operation': 'PULL'}

    def test_basic_auth(self, basic_client):
        data = basic_client.get_public_keys()

        assert data['auth'] == 'basic'

    def test_wrong_password(self, server_url):
        """Test that a wrong password results in authentication failure."""
        with BridgeClient(server_url, basic_auth={'email': EMAIL, 'password': 'wrong'}) as client:
            with pytest.raises(APIError) as exc_info:
                client.get_buckets()

        assert exc_info.value.status_code == 401

    def test_mismatched_public_key(self, server_url):
        """Test that a signature from another key is rejected."""
        signer = KeyPair()
        impostor = KeyPair()
        signer.get_public_key = impostor.get_public_key

        with BridgeClient(server_url, key_pair=signer) as client:
            with pytest.raises(APIError) as exc_info:
                client.get_buckets()

        assert exc_info.value.status_code == 401

    def test_key_pair_precedence(self, server_url):
        with BridgeClient(
            server_url,
            key_pair=KeyPair(),
            basic_auth={'email': EMAIL, 'password': PASSWORD}
        ) as client:
            data = client.get_buckets()

        assert data['auth'] == 'ecdsa'

    def test_not_found(self, client):
        with pytest.raises(APIError) as exc_info:
            client.get_bucket_by_id('missing')

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {'error': 'Bucket not found'}

    def test_concurrent_requests(self, client):
        """Test concurrent authenticated requests."""
        results = []

        def make_request(i):
            data = client.create_bucket({'name': f"bucket-{i}"})
            results.append(data['auth'] == 'ecdsa')

        threads = [threading.Thread(target=make_request, args=(i,)) for i in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [True] * 5
