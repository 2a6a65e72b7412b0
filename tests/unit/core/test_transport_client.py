"""
Tests for HTTPClient (transport client).
Uses mocked HTTP responses to avoid network dependencies.
"""

import asyncio
import json
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
import requests
import responses

from src.gateway_http.core.config import ClientConfig, TimeoutConfig
from src.gateway_http.core.context import PendingRequest
from src.gateway_http.core.dispatcher import (
    AsyncioDispatcher,
    FunctionCallback,
    InlineDispatcher,
    QueueDispatcher,
)
from src.gateway_http.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ClientClosedError,
    DownForMaintenanceError,
    GatewayHTTPError,
    InvalidArgumentError,
    RateLimitError,
    ServerError,
    TLSNotConfiguredError,
    UnexpectedError,
    UnprocessableEntityError,
    UpgradeRequiredError,
)
from src.gateway_http.core.http_client import MAX_WORKERS, HTTPClient, running_future


class TestHTTPClientInitialization:
    """Default configuration and lifecycle."""

    def test_default_config(self):
        with HTTPClient() as client:
            assert client.base_url == ""
            assert client.user_agent.startswith("gateway-http/core/")
            assert client.config.timeout == TimeoutConfig(connect=30.0, read=30.0)
            assert client.trust_provider is not None

    def test_default_trust_provider_is_best_effort(self):
        with patch("src.gateway_http.core.http_client.TLSTrustProvider.system_or_none", return_value=None):
            with HTTPClient() as client:
                assert client.trust_provider is None

    def test_close_is_idempotent(self):
        client = HTTPClient()
        client.close()
        client.close()

        assert client.closed

    def test_injected_executor_not_shut_down(self):
        executor = ThreadPoolExecutor(max_workers=1)
        client = HTTPClient(executor=executor)
        client.close()

        assert executor.submit(lambda: 42).result(timeout=5) == 42
        executor.shutdown()

    def test_get_after_close_raises_client_closed(self):
        client = HTTPClient(ClientConfig.create(base_url="https://api.example.com"))
        client.close()

        with pytest.raises(ClientClosedError, match="Client is closed"):
            client.get("/resource")
        with pytest.raises(ClientClosedError):
            client.post("/resource", "{}")

    def test_null_path_after_close_raises_client_closed(self):
        client = HTTPClient()
        client.close()

        with pytest.raises(ClientClosedError):
            client.get(None)

    def test_client_closed_is_gateway_error(self):
        assert issubclass(ClientClosedError, GatewayHTTPError)

    def test_shut_down_injected_executor_raises_client_closed(self):
        executor = ThreadPoolExecutor(max_workers=1)
        executor.shutdown()
        client = HTTPClient(ClientConfig.create(base_url="https://api.example.com"), executor=executor)

        with pytest.raises(ClientClosedError, match="Executor rejected"):
            client.get("/resource")
        client.close()

    def test_owned_pool_is_not_capped_at_cpu_count(self):
        with HTTPClient() as client:
            assert client._executor._max_workers == MAX_WORKERS
        assert MAX_WORKERS > (os.cpu_count() or 1) + 4


class TestConfiguration:
    """Builder-style mutators replace immutable snapshots."""

    def test_setters_chain_and_return_self(self, trust_provider):
        client = HTTPClient(ClientConfig())

        result = (
            client
            .set_base_url("https://api.example.com")
            .set_user_agent("custom/1.0")
            .set_connect_timeout(10)
            .set_read_timeout(20)
            .set_trust_provider(trust_provider)
        )

        assert result is client
        assert client.base_url == "https://api.example.com"
        assert client.user_agent == "custom/1.0"
        assert client.config.timeout == TimeoutConfig(connect=10, read=20)
        assert client.trust_provider is trust_provider
        client.close()

    def test_configure_partial(self):
        client = HTTPClient(ClientConfig.create(base_url="https://a.example.com", user_agent="ua/1"))

        assert client.configure(read_timeout=5) is client
        assert client.base_url == "https://a.example.com"
        assert client.user_agent == "ua/1"
        assert client.config.timeout == TimeoutConfig(connect=30, read=5)

        client.configure(base_url=None, trust_provider=None)
        assert client.base_url == ""
        assert client.trust_provider is None
        client.close()

    def test_configure_is_idempotent(self, trust_provider):
        once = HTTPClient(ClientConfig())
        many = HTTPClient(ClientConfig())

        once.configure("https://final.example.com", "ua/final", 7, 8, trust_provider)
        for i in range(5):
            many.configure(f"https://step{i}.example.com", f"ua/{i}", i + 1, i + 2, None)
        many.configure("https://final.example.com", "ua/final", 7, 8, trust_provider)

        assert once.config == many.config
        once.close()
        many.close()

    def test_rejects_invalid_timeout(self):
        client = HTTPClient(ClientConfig())

        with pytest.raises(ValueError):
            client.set_connect_timeout(0)
        client.close()


class TestRequestConstruction:
    """init_request builds the request the worker sends."""

    def test_base_headers(self, client):
        request = client.init_request(PendingRequest("GET", "/v1/configuration"))

        assert request.url == "https://api.example.com/v1/configuration"
        assert request.headers["User-Agent"] == client.user_agent
        assert request.headers["Accept-Language"] == client.config.accept_language
        assert "Content-Type" not in request.headers
        assert request.data is None

    def test_post_body_is_json_utf8(self, client):
        request = client.init_request(PendingRequest("POST", "v1/payment_methods", body='{"name": "Ωmega"}'))

        assert request.headers["Content-Type"] == "application/json"
        assert request.data == '{"name": "Ωmega"}'.encode("utf-8")

    def test_request_headers_are_added(self, client):
        request = client.init_request(PendingRequest("GET", "/x", headers={"Client-Key": "k"}))

        assert request.headers["Client-Key"] == "k"

    def test_absolute_url_used_verbatim(self, client):
        request = client.init_request(PendingRequest("GET", "https://other.example.com/ping?a=1"))

        assert request.url == "https://other.example.com/ping?a=1"

    def test_https_without_trust_provider(self, client):
        client.set_trust_provider(None)

        with pytest.raises(TLSNotConfiguredError, match="Trust provider was not set or failed to initialize"):
            client.init_request(PendingRequest("GET", "/v1/configuration"))

    def test_http_without_trust_provider_allowed(self):
        client = HTTPClient(ClientConfig.create(base_url="http://localhost:8080"))

        request = client.init_request(PendingRequest("GET", "/health"))

        assert request.url == "http://localhost:8080/health"
        client.close()


class TestNullPath:
    """Null path fails fast without network activity."""

    def test_get_null_path(self, client, callback, mock_responses):
        future = client.get(None, callback)

        with pytest.raises(InvalidArgumentError, match="Path cannot be null"):
            future.result(timeout=5)
        assert callback.calls[0][0] == "failure"
        assert isinstance(callback.calls[0][1], InvalidArgumentError)
        assert len(mock_responses.calls) == 0

    def test_post_null_path(self, client, callback, mock_responses):
        future = client.post(None, "{}", callback)

        with pytest.raises(InvalidArgumentError):
            future.result(timeout=5)
        assert len(callback.calls) == 1
        assert len(mock_responses.calls) == 0

    def test_post_sync_null_path_raises(self, client, mock_responses):
        with pytest.raises(InvalidArgumentError, match="Path cannot be null"):
            client.post_sync(None, "{}")

    def test_null_path_does_not_touch_worker_pool(self, trust_provider):
        executor = ThreadPoolExecutor(max_workers=1)
        client = HTTPClient(ClientConfig(trust_provider=trust_provider), executor=executor)

        with patch.object(executor, "submit") as submit:
            client.get(None).exception(timeout=5)

        submit.assert_not_called()
        client.close()
        executor.shutdown()


class TestResponses:
    """Status mapping and delivery through the dispatcher."""

    @pytest.mark.parametrize("status", [200, 201, 202])
    def test_success_body_verbatim(self, client, callback, mock_responses, status):
        body = '{"clientApiUrl": "https://api.example.com",  "x": [1]}'
        mock_responses.add(responses.GET, "https://api.example.com/v1/configuration", body=body, status=status)

        future = client.get("/v1/configuration", callback)

        assert future.result(timeout=5) == body
        assert callback.calls[0][:2] == ("success", body)

    @pytest.mark.parametrize("status,error_class", [
        (401, AuthenticationError),
        (403, AuthorizationError),
        (422, UnprocessableEntityError),
        (426, UpgradeRequiredError),
        (429, RateLimitError),
        (500, ServerError),
        (503, DownForMaintenanceError),
        (404, UnexpectedError),
        (418, UnexpectedError),
    ])
    def test_error_mapping(self, client, callback, mock_responses, status, error_class):
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="error body", status=status)

        future = client.get("/resource", callback)

        error = future.exception(timeout=5)
        assert isinstance(error, error_class)
        assert error.status_code == status
        assert callback.calls == [("failure", error, callback.calls[0][2])]

    def test_rate_limit_message_fixed(self, client, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="slow", status=429)

        error = client.get("/resource").exception(timeout=5)

        assert str(error) == "You are being rate-limited. Please try again in a few minutes."

    def test_post_sends_json_body(self, client, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/v1/payment_methods", body="{}", status=201)

        assert client.post("/v1/payment_methods", '{"a": 1}').result(timeout=5) == "{}"

        sent = mock_responses.calls[0].request
        assert json.loads(sent.body) == {"a": 1}
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["User-Agent"] == client.user_agent
        assert sent.headers["Accept-Language"] == client.config.accept_language

    def test_post_sync_returns_body(self, client, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/sync", body='{"ok": true}', status=200)

        assert client.post_sync("/sync", "{}") == '{"ok": true}'

    def test_post_sync_raises_taxonomy_error(self, client, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/sync", body="down", status=503)

        with pytest.raises(DownForMaintenanceError):
            client.post_sync("/sync", "{}")

    def test_tls_not_configured_delivered_as_failure(self, client, callback, mock_responses):
        client.set_trust_provider(None)

        future = client.get("/resource", callback)

        assert isinstance(future.exception(timeout=5), TLSNotConfiguredError)
        assert callback.calls[0][0] == "failure"
        assert len(mock_responses.calls) == 0


class TestTransportFaults:
    """Transport faults keep their native requests types."""

    def test_empty_base_url_is_malformed_url(self, callback):
        client = HTTPClient(ClientConfig())

        error = client.get("/resource", callback).exception(timeout=5)

        assert isinstance(error, requests.exceptions.MissingSchema)
        assert callback.calls[0][:2] == ("failure", error)
        client.close()

    def test_connection_error_passes_through(self, client, mock_responses):
        mock_responses.add(
            responses.GET,
            "https://api.example.com/resource",
            body=requests.exceptions.ConnectionError("DNS failure"),
        )

        error = client.get("/resource").exception(timeout=5)

        assert isinstance(error, requests.exceptions.ConnectionError)

    def test_timeout_passes_through(self, client, mock_responses):
        mock_responses.add(
            responses.POST,
            "https://api.example.com/resource",
            body=requests.exceptions.ReadTimeout("read timed out"),
        )

        with pytest.raises(requests.exceptions.ReadTimeout):
            client.post_sync("/resource", "{}")


class TestConcurrency:
    """Threading model: worker pool, dispatcher context, snapshots."""

    def test_callback_runs_on_dispatcher_thread(self, client, callback, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="ok")

        client.get("/resource", callback).result(timeout=5)

        assert callback.calls[0][2].startswith("gateway-callbacks")

    def test_request_runs_on_worker_pool(self, client, mock_responses):
        seen = []

        def handler(request):
            seen.append(threading.current_thread().name)
            return (200, {}, "ok")

        mock_responses.add_callback(responses.GET, "https://api.example.com/resource", callback=handler)

        client.get("/resource").result(timeout=5)

        assert seen[0].startswith("gateway-http")

    def test_exactly_one_delivery_per_request(self, client, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/ok", body="ok")
        mock_responses.add(responses.GET, "https://api.example.com/bad", body="no", status=500)

        callbacks = []
        futures = []
        for i in range(10):
            seen = []
            callbacks.append(seen)
            futures.append(client.get(
                "/ok" if i % 2 == 0 else "/bad",
                FunctionCallback(on_success=seen.append, on_failure=seen.append),
            ))

        for future in futures:
            future.exception(timeout=5)

        assert all(len(seen) == 1 for seen in callbacks)

    def test_close_delivers_requests_in_flight_on_injected_executor(
        self, trust_provider, callback, mock_responses
    ):
        executor = ThreadPoolExecutor(max_workers=1)
        client = HTTPClient(
            ClientConfig.create(base_url="https://api.example.com", trust_provider=trust_provider),
            executor=executor,
        )
        started = threading.Event()
        release = threading.Event()

        def handler(request):
            started.set()
            release.wait(5)
            return (200, {}, "late")

        mock_responses.add_callback(responses.GET, "https://api.example.com/slow", callback=handler)

        future = client.get("/slow", callback)
        assert started.wait(5)

        closer = threading.Thread(target=client.close)
        closer.start()
        closer.join(0.2)
        assert closer.is_alive()

        release.set()
        closer.join(5)

        assert not closer.is_alive()
        assert future.result(timeout=0) == "late"
        assert [(kind, body) for kind, body, _ in callback.calls] == [("success", "late")]
        executor.shutdown()

    def test_delivery_failure_resolves_future(self, trust_provider, mock_responses, caplog):
        loop = asyncio.new_event_loop()
        loop.close()
        client = HTTPClient(
            ClientConfig.create(base_url="https://api.example.com", trust_provider=trust_provider),
            dispatcher=AsyncioDispatcher(loop),
        )
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="ok")

        with caplog.at_level(logging.ERROR):
            error = client.get("/resource").exception(timeout=5)

        assert isinstance(error, RuntimeError)
        assert "Result delivery failed for GET /resource" in caplog.text
        client.close()

    def test_more_requests_in_flight_than_cpu_bound_pool(self, client, mock_responses):
        concurrent_requests = (os.cpu_count() or 1) + 8
        barrier = threading.Barrier(concurrent_requests, timeout=10)

        def handler(request):
            # Проходит только когда все запросы выполняются одновременно
            barrier.wait()
            return (200, {}, "ok")

        mock_responses.add_callback(responses.GET, "https://api.example.com/wide", callback=handler)

        futures = [client.get("/wide") for _ in range(concurrent_requests)]

        assert [future.result(timeout=15) for future in futures] == ["ok"] * concurrent_requests

    def test_config_snapshot_taken_at_submission(self, client, mock_responses):
        release = threading.Event()

        def handler(request):
            release.wait(5)
            return (200, {}, request.headers["User-Agent"])

        mock_responses.add_callback(responses.GET, "https://api.example.com/resource", callback=handler)

        future = client.get("/resource")
        client.set_user_agent("changed/2.0").set_base_url("https://elsewhere.example.com")
        release.set()

        assert future.result(timeout=5).startswith("gateway-http/core/")
        assert mock_responses.calls[0].request.url == "https://api.example.com/resource"

    def test_queue_dispatcher_delivers_on_owner_thread(self, trust_provider, callback, mock_responses):
        dispatcher = QueueDispatcher()
        client = HTTPClient(
            ClientConfig.create(base_url="https://api.example.com", trust_provider=trust_provider),
            dispatcher=dispatcher,
        )
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="ok")

        future = client.get("/resource", callback)
        assert dispatcher.run_once(timeout=5)

        assert future.result(timeout=0) == "ok"
        assert callback.calls[0][2] == threading.current_thread().name
        client.close()

    def test_future_cannot_be_cancelled(self, client, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="ok")

        future = client.get("/resource")

        assert future.cancel() is False
        assert future.result(timeout=5) == "ok"

    def test_running_future_state(self):
        future = running_future()

        assert future.running()
        assert not future.cancel()


class TestLogging:
    """Optional structured logging."""

    def test_request_logged_with_masked_url(self, trust_provider, logging_config_with_file, mock_responses):
        client = HTTPClient(
            ClientConfig.create(
                base_url="https://api.example.com",
                trust_provider=trust_provider,
                logging=logging_config_with_file,
            ),
            dispatcher=InlineDispatcher(),
        )
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="ok")

        client.get("/resource?authorizationFingerprint=secret-fp").result(timeout=5)
        client.close()

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]

        messages = [record["message"] for record in records]
        assert "Request started" in messages
        assert "Request completed" in messages
        completed = next(r for r in records if r["message"] == "Request completed")
        assert completed["status_code"] == 200
        assert "secret-fp" not in json.dumps(records)
        assert "correlation_id" in completed

    def test_failure_logged(self, trust_provider, logging_config_with_file, mock_responses):
        client = HTTPClient(
            ClientConfig.create(
                base_url="https://api.example.com",
                trust_provider=trust_provider,
                logging=logging_config_with_file,
            ),
        )
        mock_responses.add(responses.GET, "https://api.example.com/resource", body="x", status=500)

        client.get("/resource").exception(timeout=5)
        client.close()

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]

        failed = next(r for r in records if r["message"] == "Request failed")
        assert failed["error_type"] == "ServerError"
        assert failed["level"] == "WARNING"
