"""
Pytest configuration and fixtures for gateway-http-core tests.
"""

import threading

import pytest
import responses as responses_lib

from src.gateway_http.certificates import gateway_certificate_stream
from src.gateway_http.core.config import ClientConfig
from src.gateway_http.core.dispatcher import HttpResponseCallback
from src.gateway_http.core.http_client import HTTPClient
from src.gateway_http.core.logging.config import LoggingConfig
from src.gateway_http.core.tls import TLSTrustProvider

RESULT_TIMEOUT = 5


class RecordingCallback(HttpResponseCallback):
    """Callback that records every invocation and the thread it ran on."""

    def __init__(self):
        self.calls = []
        self.done = threading.Event()

    def success(self, body):
        self.calls.append(("success", body, threading.current_thread().name))
        self.done.set()

    def failure(self, exception):
        self.calls.append(("failure", exception, threading.current_thread().name))
        self.done.set()

    def wait(self, timeout=RESULT_TIMEOUT):
        assert self.done.wait(timeout), "callback was not invoked"
        return self.calls[0]


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def trust_provider():
    """Pinned trust provider over the bundled gateway certificates."""
    return TLSTrustProvider.pinned(gateway_certificate_stream())


@pytest.fixture
def client(base_url, trust_provider):
    """HTTP client instance for testing."""
    client = HTTPClient(ClientConfig.create(base_url=base_url, trust_provider=trust_provider))
    yield client
    client.close()


@pytest.fixture
def callback():
    return RecordingCallback()


@pytest.fixture
def logging_config():
    """LoggingConfig with console output at DEBUG level."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
