"""
Basic Transport Client Usage Examples

Demonstrates asynchronous GET/POST with callbacks and futures.
"""

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.gateway_http import FunctionCallback, HTTPClient, HTTPStatusError, QueueDispatcher


def get_with_callback():
    """GET delivered to a callback on the dispatcher thread."""
    print("\n=== GET with callback ===")

    with HTTPClient() as client:
        client.set_base_url("https://httpbin.org")
        future = client.get(
            "/get",
            FunctionCallback(
                on_success=lambda body: print(f"Body: {body[:80]}..."),
                on_failure=lambda error: print(f"Failed: {type(error).__name__}: {error}"),
            ),
        )
        future.exception(timeout=30)


def post_with_future():
    """POST without a callback: wait on the returned future."""
    print("\n=== POST with future ===")

    with HTTPClient() as client:
        client.set_base_url("https://httpbin.org")
        try:
            body = client.post("/post", '{"amount": "10.00"}').result(timeout=30)
            print(f"Body: {body[:80]}...")
        except HTTPStatusError as e:
            print(f"Status error {e.status_code}: {e.message}")


def error_mapping():
    """Non-2xx statuses arrive as typed exceptions."""
    print("\n=== Error mapping ===")

    with HTTPClient() as client:
        for status in (401, 429, 503):
            error = client.get(f"https://httpbin.org/status/{status}").exception(timeout=30)
            print(f"{status} -> {type(error).__name__}: {error}")


def caller_thread_delivery():
    """QueueDispatcher: callbacks run when the caller drains the queue."""
    print("\n=== Caller thread delivery ===")

    dispatcher = QueueDispatcher()
    with HTTPClient(dispatcher=dispatcher) as client:
        client.get(
            "https://httpbin.org/uuid",
            FunctionCallback(lambda body: print(f"Delivered: {body.strip()}"), print),
        )
        while not dispatcher.run_once(timeout=30):
            pass


def synchronous_post():
    """post_sync blocks the caller and raises instead of calling back."""
    print("\n=== Synchronous POST ===")

    with HTTPClient() as client:
        client.set_base_url("https://httpbin.org").set_read_timeout(10)
        print(client.post_sync("/post", '{"sync": true}')[:80])


if __name__ == "__main__":
    print("=" * 50)
    print("Gateway HTTP - Basic Usage Examples")
    print("=" * 50)

    try:
        get_with_callback()
        post_with_future()
        error_mapping()
        caller_thread_delivery()
        synchronous_post()

        print("\n" + "=" * 50)
        print("All examples completed successfully!")
        print("=" * 50)

    except Exception as e:
        print(f"\nError: {e}")
