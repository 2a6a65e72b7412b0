"""
Integration tests: authenticated client over a logging transport.
"""

import json

import responses

from src.gateway_http.authorization import ClientToken
from src.gateway_http.core.config import ClientConfig
from src.gateway_http.core.dispatcher import FunctionCallback, QueueDispatcher
from src.gateway_http.core.env_config import load_from_env
from src.gateway_http.core.exceptions import ErrorWithResponse
from src.gateway_http.core.http_client import HTTPClient
from src.gateway_http.gateway_client import GatewayHTTPClient

BASE_URL = "https://api.example.com/merchants/m1/client_api"
FINGERPRINT = "fp_secret_42"


class TestGatewayLoggingIntegration:

    @responses.activate
    def test_fingerprint_never_logged(self, logging_config_with_file):
        responses.add(responses.GET, f"{BASE_URL}/v1/configuration", body='{"ok": true}', status=200)
        responses.add(
            responses.POST,
            f"{BASE_URL}/v1/payment_methods/credit_cards",
            body='{"error": {"message": "Credit card is invalid"}}',
            status=422,
        )

        transport = HTTPClient(ClientConfig.create(base_url=BASE_URL, logging=logging_config_with_file))
        client = GatewayHTTPClient(ClientToken(FINGERPRINT), transport)
        try:
            assert client.get("/v1/configuration").result(timeout=5) == '{"ok": true}'
            error = client.post("/v1/payment_methods/credit_cards", "{}").exception(timeout=5)
        finally:
            transport.close()

        assert isinstance(error, ErrorWithResponse)
        assert error.message == "Credit card is invalid"
        assert FINGERPRINT in responses.calls[0].request.url
        assert FINGERPRINT.encode() in responses.calls[1].request.body

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            text = f.read()
        logs = [json.loads(line) for line in text.splitlines()]

        assert FINGERPRINT not in text
        assert [log["message"] for log in logs] == [
            "Request started", "Request completed", "Request started", "Request completed", "Request failed",
        ]
        failed = [log for log in logs if log["message"] == "Request failed"]
        assert failed[0]["error_type"] == "ErrorWithResponse"
        assert failed[0]["level"] == "WARNING"


class TestCallerThreadDelivery:

    @responses.activate
    def test_queue_dispatcher_round_trip(self, trust_provider):
        responses.add(responses.GET, f"{BASE_URL}/v1/configuration", body="{}", status=200)
        dispatcher = QueueDispatcher()
        received = []

        with HTTPClient(ClientConfig(trust_provider=trust_provider), dispatcher=dispatcher) as transport:
            client = GatewayHTTPClient(ClientToken(FINGERPRINT), transport).set_base_url(BASE_URL)
            future = client.get("/v1/configuration", FunctionCallback(received.append, received.append))

            assert dispatcher.run_once(timeout=5)

        assert received == ["{}"]
        assert future.result(timeout=0) == "{}"


class TestEnvironmentToClient:

    @responses.activate
    def test_env_config_drives_requests(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GATEWAY_HTTP_BASE_URL", BASE_URL)
        monkeypatch.setenv("GATEWAY_HTTP_USER_AGENT", "merchant-app/2.0")
        monkeypatch.setenv("GATEWAY_HTTP_ACCEPT_LANGUAGE", "fr_FR")
        responses.add(responses.POST, f"{BASE_URL}/v1/ping", body="pong", status=200)

        with HTTPClient(load_from_env()) as transport:
            assert transport.trust_provider is None
            client = GatewayHTTPClient(ClientToken(FINGERPRINT), transport)

            assert client.post_sync("/v1/ping", "{}") == "pong"

        headers = responses.calls[0].request.headers
        assert headers["User-Agent"].startswith("gateway-http/python/")
        assert headers["Accept-Language"] == "fr_FR"
