# src/gateway_http/utils/user_agents.py
"""
Version-stamped User-Agent strings for every client flavour.
"""

import platform
from importlib.metadata import version, PackageNotFoundError


def sdk_version() -> str:
    """Installed package version ("0.0.0-dev" when running from a checkout)."""
    try:
        return version("gateway-http-core")
    except PackageNotFoundError:
        return "0.0.0-dev"


def core_user_agent() -> str:
    """User agent of a bare transport client: ``gateway-http/core/<version>``."""
    return f"gateway-http/core/{sdk_version()}"


def gateway_user_agent() -> str:
    """User agent of the authenticated gateway client: ``gateway-http/python/<version>``."""
    return f"gateway-http/python/{sdk_version()}"


def paypal_user_agent(debug: bool = False) -> str:
    """
    User agent of the PayPal client.

    Format: ``PayPalSDK/PayPalOneTouch-Python <version> (<os>; <machine>; <debug;>)``

    Example:
        >>> paypal_user_agent()
        'PayPalSDK/PayPalOneTouch-Python 1.0.0 (Linux 6.1.0; x86_64; )'
    """
    os_name = f"{platform.system()} {platform.release()}".strip()
    machine = platform.machine() or "unknown"
    return (
        f"PayPalSDK/PayPalOneTouch-Python {sdk_version()} "
        f"({os_name}; {machine}; {'debug;' if debug else ''})"
    )
