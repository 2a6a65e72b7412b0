"""
Bundled trust material for certificate pinning.
"""

from importlib import resources
from typing import BinaryIO

_CERTS_DIR = "certs"

GATEWAY_BUNDLE = "gateway.pem"
PAYPAL_BUNDLE = "paypal.pem"


def _open(name: str) -> BinaryIO:
    return resources.files(__package__).joinpath(_CERTS_DIR).joinpath(name).open("rb")


def gateway_certificate_stream() -> BinaryIO:
    """Fresh stream over the root certificates pinned by GatewayHTTPClient."""
    return _open(GATEWAY_BUNDLE)


def paypal_certificate_stream() -> BinaryIO:
    """Fresh stream over the root certificates pinned by PayPalHTTPClient."""
    return _open(PAYPAL_BUNDLE)
