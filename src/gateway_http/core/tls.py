# src/gateway_http/core/tls.py
"""
TLS trust provider.

Builds an ``ssl.SSLContext`` trusting either the system trust store or a set
of pinned certificates, restricted to a single protocol version (TLS 1.2).
The context is wrapped into a ``requests`` transport adapter so every HTTPS
connection made by a client goes through it.
"""

import logging
import ssl
import threading
from typing import IO, Iterable, List, Optional, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding
from requests.adapters import HTTPAdapter, DEFAULT_POOLBLOCK

from .exceptions import TLSSetupError

logger = logging.getLogger(__name__)

# Единственная разрешённая версия протокола
PINNED_PROTOCOL = ssl.TLSVersion.TLSv1_2


def enabled_protocols(supported: Iterable[ssl.TLSVersion]) -> List[ssl.TLSVersion]:
    """
    Пересечение поддерживаемых версий с единственной разрешённой.

    Examples:
        >>> enabled_protocols([ssl.TLSVersion.TLSv1_1, ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.TLSv1_3])
        [<TLSVersion.TLSv1_2: 771>]
        >>> enabled_protocols([ssl.TLSVersion.TLSv1_3])
        []
    """
    return [protocol for protocol in supported if protocol == PINNED_PROTOCOL]


class TLSAdapter(HTTPAdapter):
    """
    HTTPAdapter that hands a fixed SSLContext to every urllib3 pool.

    Example:
        >>> session = requests.Session()
        >>> session.mount("https://", TLSAdapter(provider.ssl_context))
    """

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs):
        # init_poolmanager() is called from HTTPAdapter.__init__
        self.ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, connections, maxsize, block=DEFAULT_POOLBLOCK, **pool_kwargs):
        pool_kwargs['ssl_context'] = self.ssl_context
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        proxy_kwargs['ssl_context'] = self.ssl_context
        return super().proxy_manager_for(proxy, **proxy_kwargs)


class TLSTrustProvider:
    """
    Immutable trust material shared by all connections of one client.

    Two modes:
        - ``TLSTrustProvider.system()`` - системное хранилище сертификатов
        - ``TLSTrustProvider.pinned(stream)`` - только сертификаты из потока

    Both restrict the negotiated protocol to TLS 1.2.

    Example:
        >>> with open("gateway.pem", "rb") as f:
        ...     provider = TLSTrustProvider.pinned(f)
        >>> provider.protocol
        <TLSVersion.TLSv1_2: 771>
        >>> len(provider.certificates) > 0
        True
    """

    def __init__(
        self,
        ssl_context: ssl.SSLContext,
        certificates: Tuple[x509.Certificate, ...] = (),
        mode: str = "system"
    ):
        self._ssl_context = ssl_context
        self._certificates = tuple(certificates)
        self._mode = mode
        self._adapter: Optional[TLSAdapter] = None
        self._adapter_lock = threading.Lock()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # CONSTRUCTORS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @classmethod
    def system(cls) -> 'TLSTrustProvider':
        """
        Trust provider over the platform's default trust store.

        Raises:
            TLSSetupError: Платформа не поддерживает TLS 1.2 или не удалось
                загрузить системные сертификаты
        """
        try:
            context = ssl.create_default_context()
        except (ssl.SSLError, OSError) as e:
            raise TLSSetupError(f"Failed to load system trust store: {e}") from e

        _pin_protocol(context)
        return cls(context, mode="system")

    @classmethod
    def pinned(cls, stream: IO) -> 'TLSTrustProvider':
        """
        Trust provider over the certificates read from ``stream``.

        The stream may hold one or more PEM certificates or a single DER
        certificate. It is consumed once and closed whether or not parsing
        succeeds.

        Args:
            stream: Binary (or text) file-like object with certificate data

        Raises:
            TLSSetupError: Поток пустой, не читается или не содержит ни
                одного X.509 сертификата
        """
        try:
            data = stream.read()
        except (OSError, ValueError) as e:
            raise TLSSetupError(f"Unable to read certificate stream: {e}") from e
        finally:
            stream.close()

        certificates = _parse_certificates(data)

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.verify_mode = ssl.CERT_REQUIRED
        context.check_hostname = True

        cadata = "".join(cert.public_bytes(Encoding.PEM).decode("ascii") for cert in certificates)
        try:
            context.load_verify_locations(cadata=cadata)
        except ssl.SSLError as e:
            raise TLSSetupError(f"Unable to build pinned trust store: {e}") from e

        _pin_protocol(context)
        return cls(context, certificates=certificates, mode="pinned")

    @classmethod
    def system_or_none(cls) -> Optional['TLSTrustProvider']:
        """``system()`` that returns None instead of raising."""
        try:
            return cls.system()
        except TLSSetupError as e:
            logger.warning("System trust provider unavailable, HTTPS requests will fail: %s", e)
            return None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ACCESSORS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def ssl_context(self) -> ssl.SSLContext:
        return self._ssl_context

    @property
    def certificates(self) -> Tuple[x509.Certificate, ...]:
        """Pinned certificates (empty in system mode)."""
        return self._certificates

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def is_pinned(self) -> bool:
        return self._mode == "pinned"

    @property
    def protocol(self) -> ssl.TLSVersion:
        return PINNED_PROTOCOL

    def wrap_socket(self, sock, server_hostname: Optional[str] = None) -> ssl.SSLSocket:
        """Wrap a plain socket; the handshake only offers TLS 1.2."""
        return self._ssl_context.wrap_socket(sock, server_hostname=server_hostname)

    def http_adapter(self) -> TLSAdapter:
        """Transport adapter bound to this provider (created once, shared)."""
        with self._adapter_lock:
            if self._adapter is None:
                self._adapter = TLSAdapter(self._ssl_context)
            return self._adapter

    def __repr__(self) -> str:
        return f"TLSTrustProvider(mode={self._mode!r}, certificates={len(self._certificates)})"


def supported_protocols() -> List[ssl.TLSVersion]:
    """Версии протокола, которые поддерживает OpenSSL этой платформы."""
    return [
        protocol for protocol in ssl.TLSVersion
        if getattr(ssl, f"HAS_{protocol.name}", False)
    ]


def _pin_protocol(context: ssl.SSLContext) -> None:
    protocols = enabled_protocols(supported_protocols())
    if not protocols:
        raise TLSSetupError("TLSv1.2 is not supported on this platform")

    try:
        context.minimum_version = min(protocols)
        context.maximum_version = max(protocols)
    except (ValueError, ssl.SSLError) as e:
        raise TLSSetupError(f"Unable to restrict protocol to TLSv1.2: {e}") from e


def _parse_certificates(data: Union[bytes, str, None]) -> Tuple[x509.Certificate, ...]:
    if isinstance(data, str):
        data = data.encode("ascii", errors="replace")
    if not data or not data.strip():
        raise TLSSetupError("Certificate stream is empty")

    try:
        certificates = tuple(x509.load_pem_x509_certificates(data))
    except ValueError:
        try:
            certificates = (x509.load_der_x509_certificate(data),)
        except ValueError as e:
            raise TLSSetupError("Certificate stream does not contain a valid X.509 certificate") from e

    if not certificates:
        raise TLSSetupError("No X.509 certificates found in certificate stream")
    return certificates
