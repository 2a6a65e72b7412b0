"""Tests for User-Agent strings."""

import platform

from importlib.metadata import PackageNotFoundError

from src.gateway_http.utils import user_agents
from src.gateway_http.utils.user_agents import (
    core_user_agent,
    gateway_user_agent,
    paypal_user_agent,
    sdk_version,
)


class TestVersion:
    def test_installed_version(self, monkeypatch):
        monkeypatch.setattr(user_agents, "version", lambda name: "2.4.1")

        assert sdk_version() == "2.4.1"
        assert core_user_agent() == "gateway-http/core/2.4.1"
        assert gateway_user_agent() == "gateway-http/python/2.4.1"

    def test_checkout_fallback(self, monkeypatch):
        def missing(name):
            raise PackageNotFoundError(name)

        monkeypatch.setattr(user_agents, "version", missing)

        assert sdk_version() == "0.0.0-dev"


class TestPayPalUserAgent:
    def test_format(self, monkeypatch):
        monkeypatch.setattr(user_agents, "version", lambda name: "1.0.0")
        monkeypatch.setattr(platform, "system", lambda: "Linux")
        monkeypatch.setattr(platform, "release", lambda: "6.1.0")
        monkeypatch.setattr(platform, "machine", lambda: "x86_64")

        assert paypal_user_agent() == "PayPalSDK/PayPalOneTouch-Python 1.0.0 (Linux 6.1.0; x86_64; )"
        assert paypal_user_agent(debug=True) == (
            "PayPalSDK/PayPalOneTouch-Python 1.0.0 (Linux 6.1.0; x86_64; debug;)"
        )

    def test_unknown_machine(self, monkeypatch):
        monkeypatch.setattr(platform, "machine", lambda: "")

        assert "; unknown; " in paypal_user_agent()
