"""
Authenticated Gateway Client Examples

Demonstrates tokenization keys, client tokens and gateway error bodies.
"""

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.gateway_http import (
    Authorization,
    ErrorWithResponse,
    FunctionCallback,
    GatewayHTTPClient,
    PayPalHTTPClient,
)

BASE_URL = "https://api.sandbox.example.com/merchants/abc/client_api"


def with_tokenization_key():
    """Tokenization key goes into the Client-Key header."""
    print("\n=== Tokenization key ===")

    authorization = Authorization.from_string("sandbox_k2y8w4hs_3t3qwz9fh8kn5t3b")
    print(f"Parsed: {authorization!r}")

    with GatewayHTTPClient(authorization) as client:
        client.set_base_url(BASE_URL)
        error = client.get("/v1/configuration").exception(timeout=30)
        print(f"Result: {type(error).__name__ if error else 'ok'}")


def with_client_token():
    """Client token fingerprint goes into the query (GET) or JSON body (POST)."""
    print("\n=== Client token ===")

    authorization = Authorization.from_string('{"authorizationFingerprint": "fingerprint_123"}')

    with GatewayHTTPClient(authorization) as client:
        client.set_base_url(BASE_URL)
        client.post(
            "/v1/payment_methods/credit_cards",
            '{"creditCard": {"number": "4111111111111111"}}',
            FunctionCallback(
                on_success=lambda body: print(f"Created: {body}"),
                on_failure=describe_failure,
            ),
        ).exception(timeout=30)


def describe_failure(error):
    if isinstance(error, ErrorWithResponse):
        print(f"Gateway rejected request ({error.status_code}): {error.message}")
        for field_error in error.field_errors:
            print(f"  - {field_error}")
    else:
        print(f"Failed: {type(error).__name__}: {error}")


def paypal_client():
    """PayPal preset: own User-Agent, 90s connect timeout, pinned PayPal roots."""
    print("\n=== PayPal client ===")

    with PayPalHTTPClient(debug=True) as client:
        print(f"User-Agent: {client.config.user_agent}")
        print(f"Timeout: {client.config.timeout}")
        print(f"Trust provider: {client.config.trust_provider!r}")


if __name__ == "__main__":
    with_tokenization_key()
    with_client_token()
    paypal_client()

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60 + "\n")
