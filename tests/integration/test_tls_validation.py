"""
Проверка remote_certificate_validator против настоящего TLS сервера
с одноразовым самоподписанным сертификатом.
"""

import datetime
import ipaddress
import ssl
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

pytest.importorskip("cryptography")

from cryptography import x509  # noqa: E402
from cryptography.hazmat.primitives import hashes, serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import ec  # noqa: E402
from cryptography.x509.oid import NameOID  # noqa: E402

from rest_client import ClientOptions, JsonDeserializer, JwtAuthenticator, ResponseStatus, RestClient  # noqa: E402
from rest_client.core.exceptions import CertificateValidationError, SSLError  # noqa: E402
from rest_client.core.options import SslPolicyErrors  # noqa: E402


def _self_signed(tmp_path):
    """Сертификат на 127.0.0.1; возвращает (cert_file, key_file, der)."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=7))
        .add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName("localhost"),
                x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
            ]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )

    cert_file = tmp_path / "server.pem"
    key_file = tmp_path / "server.key"
    cert_file.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_file.write_bytes(key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ))
    return str(cert_file), str(key_file), cert.public_bytes(serialization.Encoding.DER)


class RecordingHandler(BaseHTTPRequestHandler):
    """Запоминает заголовок Authorization каждого дошедшего запроса."""

    def do_GET(self):
        self.server.seen_authorization.append(self.headers.get("Authorization"))
        body = b'{"ok": true}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def tls_server(tmp_path):
    cert_file, key_file, der = _self_signed(tmp_path)
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_file, key_file)

    server = ThreadingHTTPServer(("127.0.0.1", 0), RecordingHandler)
    server.socket = context.wrap_socket(server.socket, server_side=True)
    server.seen_authorization = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server, f"https://127.0.0.1:{server.server_address[1]}", der

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.mark.integration
class TestCertificateValidation:

    def test_pinned_certificate_accepted(self, tls_server):
        server, url, der = tls_server
        seen = []

        def pin(certificate, chain, errors):
            seen.append((certificate, chain, errors))
            return certificate == der

        options = ClientOptions(
            base_url=url,
            authenticator=JwtAuthenticator("secret-token"),
            remote_certificate_validator=pin,
            max_timeout_ms=5000,
        )
        with RestClient(options) as client:
            response = client.get("x", deserializer=JsonDeserializer())

        assert response.status == ResponseStatus.COMPLETED
        assert response.data == {"ok": True}
        assert server.seen_authorization == ["Bearer secret-token"]

        certificate, chain, errors = seen[0]
        assert certificate == der
        assert errors == SslPolicyErrors.REMOTE_CERTIFICATE_CHAIN_ERRORS
        assert all(isinstance(item, bytes) for item in chain)

    def test_rejected_server_never_sees_request(self, tls_server):
        server, url, _ = tls_server
        options = ClientOptions(
            base_url=url,
            authenticator=JwtAuthenticator("secret-token"),
            remote_certificate_validator=lambda certificate, chain, errors: False,
            max_timeout_ms=5000,
        )

        with RestClient(options) as client:
            response = client.get("x")

        assert response.status == ResponseStatus.ERROR
        assert isinstance(response.error_exception, CertificateValidationError)
        assert server.seen_authorization == []

    def test_rejection_raised_with_throw_on_any_error(self, tls_server):
        server, url, _ = tls_server
        options = ClientOptions(
            base_url=url,
            remote_certificate_validator=lambda certificate, chain, errors: False,
            throw_on_any_error=True,
            max_timeout_ms=5000,
        )

        with RestClient(options) as client:
            with pytest.raises(CertificateValidationError):
                client.get("x")

        assert server.seen_authorization == []

    def test_without_validator_self_signed_fails(self, tls_server):
        server, url, _ = tls_server

        with RestClient(ClientOptions(base_url=url, max_timeout_ms=5000)) as client:
            response = client.get("x")

        assert response.status == ResponseStatus.ERROR
        assert isinstance(response.error_exception, SSLError)
        assert server.seen_authorization == []
