"""
Environment Configuration Examples.

Demonstrates loading configuration from .env files and environment variables.
"""

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.gateway_http import HTTPClient, TLSTrustProvider
from src.gateway_http.core.env_config import ProfileConfig, config_summary, load_from_env


def example_1_load_from_default_env():
    """Example 1: Load from .env file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Load from .env")
    print("=" * 60 + "\n")

    with open('.env', 'w') as f:
        f.write("GATEWAY_HTTP_BASE_URL=https://httpbin.org\n")
        f.write("GATEWAY_HTTP_LOG_ENABLED=true\n")
        f.write("GATEWAY_HTTP_LOG_FORMAT=colored\n")

    try:
        config = load_from_env()
        print(config_summary(config))

        with HTTPClient(config).set_trust_provider(TLSTrustProvider.system()) as client:
            error = client.get("/get").exception(timeout=30)
            print(f"\nRequest: {type(error).__name__ if error else 'ok'}\n")
    finally:
        os.remove('.env')


def example_2_load_from_profile():
    """Example 2: Load from profile-specific .env file."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: Load from Profile")
    print("=" * 60 + "\n")

    with open('.env.sandbox', 'w') as f:
        f.write("GATEWAY_HTTP_BASE_URL=https://api.sandbox.example.com\n")
        f.write("GATEWAY_HTTP_TIMEOUT_CONNECT=90\n")

    try:
        print(ProfileConfig("sandbox"))
        print(config_summary(load_from_env(profile="sandbox")))
    finally:
        os.remove('.env.sandbox')


def example_3_explicit_overrides():
    """Example 3: Explicit overrides win over environment."""
    print("\n" + "=" * 60)
    print("EXAMPLE 3: Explicit Overrides")
    print("=" * 60 + "\n")

    os.environ["GATEWAY_HTTP_BASE_URL"] = "https://env.example.com"
    try:
        config = load_from_env(base_url="https://override.example.com", timeout_read=5)
        print(config_summary(config))
    finally:
        del os.environ["GATEWAY_HTTP_BASE_URL"]


if __name__ == "__main__":
    example_1_load_from_default_env()
    example_2_load_from_profile()
    example_3_explicit_overrides()

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60 + "\n")
