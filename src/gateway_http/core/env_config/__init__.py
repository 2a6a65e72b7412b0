"""
Environment configuration for Gateway HTTP.

Example:
    >>> from gateway_http.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()                      # .env
    >>> config = load_from_env(profile="sandbox")     # .env.sandbox
    >>> config = load_from_env(base_url="https://api.example.com")
"""

from .loader import load_from_env, config_summary
from .validator import GatewayClientSettings, LoggingSettings
from .profiles import ProfileType, ProfileConfig, detect_profile, get_env_file_path

__all__ = [
    # Main loader
    "load_from_env",
    "config_summary",
    # Validators
    "GatewayClientSettings",
    "LoggingSettings",
    # Profiles
    "ProfileType",
    "ProfileConfig",
    "detect_profile",
    "get_env_file_path",
]
