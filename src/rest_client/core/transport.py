# src/rest_client/core/transport.py
"""
Transport adapters for RestClient sessions.

The adapter is the seam between ClientOptions and the network: TLS
verification policy is applied here, and ``configure_transport`` receives
the adapter built here so callers can wrap or replace it.

With ``remote_certificate_validator`` set, the decision is made inside
``HTTPSConnection.connect()``, after the handshake and before any request
bytes are written. A rejected server never sees headers or body.
"""
import ssl
from typing import Optional, Tuple

from requests.adapters import BaseAdapter, HTTPAdapter
from urllib3.connection import HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool
from urllib3.util.ssl_match_hostname import CertificateError

from .exceptions import CertificateValidationError
from .options import CertificateValidator, ClientOptions, SslPolicyErrors

# OpenSSL X509_V_ERR_HOSTNAME_MISMATCH / X509_V_ERR_IP_ADDRESS_MISMATCH
_NAME_MISMATCH_CODES = (62, 64)


def policy_errors_from(error: Exception) -> SslPolicyErrors:
    """Map a failed verification to SslPolicyErrors flags."""
    if isinstance(error, CertificateError):
        return SslPolicyErrors.REMOTE_CERTIFICATE_NAME_MISMATCH
    if getattr(error, "verify_code", None) in _NAME_MISMATCH_CODES:
        return SslPolicyErrors.REMOTE_CERTIFICATE_NAME_MISMATCH
    return SslPolicyErrors.REMOTE_CERTIFICATE_CHAIN_ERRORS


def peer_certificate(sock) -> Tuple[Optional[bytes], Tuple[bytes, ...]]:
    """
    Server certificate (DER) and chain of a connected TLS socket.

    The chain is available on Python 3.13+; older interpreters
    get an empty tuple.
    """
    if sock is None or not hasattr(sock, "getpeercert"):
        return None, ()

    certificate = sock.getpeercert(binary_form=True)
    chain: Tuple[bytes, ...] = ()
    get_chain = getattr(sock, "get_unverified_chain", None)
    if get_chain is not None:
        chain = tuple(bytes(item) for item in (get_chain() or ()) if isinstance(item, (bytes, bytearray)))
    return certificate, chain


def _unverified_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class CertificateValidatingConnection(HTTPSConnection):
    """
    HTTPSConnection that makes ``certificate_validator`` the sole authority
    on the server certificate.

    Flow per new connection:
        1. Handshake with normal verification.
        2. If verification fails, derive SslPolicyErrors and redo the
           handshake without verification.
        3. Call certificate_validator(certificate, chain, policy_errors);
           a False result closes the socket and raises
           CertificateValidationError.

    Reused keep-alive connections are not validated again.
    """

    certificate_validator: Optional[CertificateValidator] = None

    def connect(self):
        policy_errors = SslPolicyErrors.NONE
        try:
            super().connect()
        except (ssl.SSLCertVerificationError, CertificateError) as e:
            policy_errors = policy_errors_from(e)
            self._drop_socket()
            self._connect_unverified()

        certificate, chain = peer_certificate(self.sock)
        if certificate is None:
            policy_errors |= SslPolicyErrors.REMOTE_CERTIFICATE_NOT_AVAILABLE

        if not self.certificate_validator(certificate, chain, policy_errors):
            self._drop_socket()
            host = self._tunnel_host or self.host
            raise CertificateValidationError(f"https://{host}:{self.port}", policy_errors)

        # the validator accepted the certificate
        self.is_verified = True

    def _connect_unverified(self):
        saved = (self.ssl_context, self.cert_reqs, self.assert_hostname)
        self.ssl_context = _unverified_context()
        self.cert_reqs = "CERT_NONE"
        self.assert_hostname = False
        try:
            super().connect()
        finally:
            self.ssl_context, self.cert_reqs, self.assert_hostname = saved

    def _drop_socket(self):
        # close() would also reset tunnel state needed by the retry
        if self.sock is not None:
            self.sock.close()
            self.sock = None


def _validating_pool_class(validator: CertificateValidator):
    class ValidatingConnection(CertificateValidatingConnection):
        certificate_validator = staticmethod(validator)

    class ValidatingPool(HTTPSConnectionPool):
        ConnectionCls = ValidatingConnection

    return ValidatingPool


class CertificateValidatingAdapter(HTTPAdapter):
    """
    HTTPAdapter whose HTTPS pools use CertificateValidatingConnection.

    Example:
        >>> pinned = {"ab12..."}
        >>> adapter = CertificateValidatingAdapter(
        ...     lambda cert, chain, errors: sha256(cert).hexdigest() in pinned
        ... )
    """

    def __init__(self, validator: CertificateValidator, **kwargs):
        self.validator = validator
        self.pool_classes = {
            "http": HTTPConnectionPool,
            "https": _validating_pool_class(validator),
        }
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = self.pool_classes

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        if not proxy.lower().startswith("socks"):
            manager.pool_classes_by_scheme = self.pool_classes
        return manager

    def send(self, request, **kwargs):
        # first handshake always verifies, so policy errors are meaningful
        if kwargs.get("verify") is False:
            kwargs["verify"] = True
        return super().send(request, **kwargs)


def create_adapter(options: ClientOptions) -> BaseAdapter:
    """
    Build the adapter mounted on every session of a client.

    ``options.configure_transport`` (if set) receives the default adapter and
    returns the one actually mounted.
    """
    if options.remote_certificate_validator is not None:
        adapter: BaseAdapter = CertificateValidatingAdapter(
            options.remote_certificate_validator, max_retries=0
        )
    else:
        adapter = HTTPAdapter(max_retries=0)  # no transport-level retries

    if options.configure_transport is not None:
        adapter = options.configure_transport(adapter)
    return adapter
