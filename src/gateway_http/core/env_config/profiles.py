"""
Profile management for different gateway environments.
"""

from typing import Optional, Literal
import os

ProfileType = Literal["development", "sandbox", "production"]

PROFILES = ("development", "sandbox", "production")
PROFILE_ENV_VAR = "GATEWAY_HTTP_ENV"


def get_env_file_path(profile: Optional[ProfileType] = None) -> str:
    """
    Get .env file path for profile.

    Example:
        >>> get_env_file_path("sandbox")
        '.env.sandbox'
        >>> get_env_file_path(None)   # GATEWAY_HTTP_ENV не задан
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)

    if not profile:
        return ".env"

    if profile not in PROFILES:
        raise ValueError(f"Unknown profile {profile!r}, expected one of {', '.join(PROFILES)}")

    return f".env.{profile}"


def detect_profile() -> Optional[ProfileType]:
    """
    Profile from GATEWAY_HTTP_ENV, None when unset or unknown.

    Example:
        >>> os.environ["GATEWAY_HTTP_ENV"] = "production"
        >>> detect_profile()
        'production'
    """
    env = os.getenv(PROFILE_ENV_VAR)
    if env in PROFILES:
        return env
    return None


class ProfileConfig:
    """
    Profile-based settings loader.

    Example:
        >>> settings = ProfileConfig(profile="sandbox").load()
    """

    def __init__(self, profile: Optional[ProfileType] = None):
        self.profile = profile or detect_profile()
        self.env_file = get_env_file_path(self.profile)

    def load(self) -> "GatewayClientSettings":
        from .validator import GatewayClientSettings

        return GatewayClientSettings(_env_file=self.env_file)

    def __repr__(self) -> str:
        return f"ProfileConfig(profile={self.profile!r}, env_file={self.env_file!r})"
